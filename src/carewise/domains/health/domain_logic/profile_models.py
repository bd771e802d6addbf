"""Health profile models, closed enums and risk-finding types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class PhysicalActivity(str, Enum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    HIGH = "high"


class SmokingStatus(str, Enum):
    NEVER = "never"
    FORMER = "former"
    CURRENT = "current"


class AlcoholConsumption(str, Enum):
    NONE = "none"
    OCCASIONAL = "occasional"
    MODERATE = "moderate"
    FREQUENT = "frequent"


class CaffeineConsumption(str, Enum):
    NONE = "none"
    LIGHT = "light"          # 1 cup/day
    MODERATE = "moderate"    # 2-4 cups/day
    HEAVY = "heavy"          # 5+ cups/day


class RiskLevel(str, Enum):
    """Qualitative severity of a finding, totally ordered low < moderate < high."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity >= other.severity


_SEVERITY = {RiskLevel.LOW: 0, RiskLevel.MODERATE: 1, RiskLevel.HIGH: 2}


# ---------------------------------------------------------------------------
# BMI category labels
# ---------------------------------------------------------------------------

BMI_UNDERWEIGHT = "Underweight"
BMI_NORMAL = "Normal"
BMI_OVERWEIGHT = "Overweight"
BMI_OBESE = "Obese"
BMI_UNKNOWN = "Unknown"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EatingHabits:
    """Dietary answers from the intake form. None of these feed risk rules."""

    diet_type: str = "balanced"
    meals_per_day: int = 3
    snacks_per_day: int = 2
    water_consumption: int = 8             # glasses per day
    alcohol_consumption: AlcoholConsumption = AlcoholConsumption.OCCASIONAL
    caffeine_consumption: CaffeineConsumption = CaffeineConsumption.MODERATE


@dataclass(frozen=True)
class HealthProfile:
    """A complete health self-assessment.

    Profiles are all-or-nothing: callers pass either a fully populated
    instance or ``None`` when no assessment has been completed.
    """

    age: int                               # years, 1-120
    height: float                          # cm, 50-250
    weight: float                          # kg, 1-300
    gender: Gender
    physical_activity: PhysicalActivity
    sleep_hours: float                     # 3-12
    smoking_status: SmokingStatus
    eating_habits: EatingHabits = field(default_factory=EatingHabits)
    pre_existing_conditions: tuple[str, ...] = ()
    family_history: tuple[str, ...] = ()


@dataclass(frozen=True)
class RiskFinding:
    """One identified condition with its risk level and preventive measures."""

    condition: str
    risk: RiskLevel
    preventive_measures: tuple[str, ...]
