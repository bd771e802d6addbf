"""Assessment intake: payload validation, form defaults and serialization.

The wire form is the camelCase JSON object produced by the assessment
form (``preExistingConditions``, ``eatingHabits.dietType`` and so on).
Validation happens here, at the boundary, so the evaluator can assume
in-range values. Out-of-range input is rejected, never clamped.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any

from carewise.domains.health.domain_logic.profile_models import (
    AlcoholConsumption,
    CaffeineConsumption,
    EatingHabits,
    Gender,
    HealthProfile,
    PhysicalActivity,
    RiskFinding,
    SmokingStatus,
)

# ---------------------------------------------------------------------------
# Form constants
# ---------------------------------------------------------------------------

DIET_TYPES = (
    "balanced",
    "vegetarian",
    "vegan",
    "pescatarian",
    "keto",
    "paleo",
    "low-carb",
    "high-protein",
    "other",
)

CONDITION_OPTIONS = (
    "diabetes",
    "hypertension",
    "heart disease",
    "asthma",
    "cancer",
    "thyroid disorder",
    "arthritis",
    "depression",
    "anxiety",
    "obesity",
    "high cholesterol",
    "kidney disease",
)

FAMILY_HISTORY_OPTIONS = (
    "diabetes",
    "hypertension",
    "heart disease",
    "stroke",
    "cancer",
    "alzheimer's",
    "dementia",
    "mental illness",
    "obesity",
    "high cholesterol",
    "thyroid disorder",
)

# (min, max) inclusive
AGE_RANGE = (1, 120)
HEIGHT_RANGE = (50, 250)
WEIGHT_RANGE = (1, 300)
SLEEP_RANGE = (3, 12)
MEALS_RANGE = (1, 6)
SNACKS_RANGE = (0, 10)
WATER_RANGE = (0, 20)

DEFAULT_HEALTH_PROFILE = HealthProfile(
    age=30,
    height=170,
    weight=70,
    gender=Gender.MALE,
    physical_activity=PhysicalActivity.MODERATE,
    sleep_hours=7,
    smoking_status=SmokingStatus.NEVER,
    eating_habits=EatingHabits(),
)


class ProfileValidationError(ValueError):
    """Raised when an assessment payload cannot become a HealthProfile.

    ``errors`` lists every problem found, one message per field.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


# ---------------------------------------------------------------------------
# Field readers (each appends to ``errors`` and returns None on failure)
# ---------------------------------------------------------------------------

_MISSING = object()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _read_number(
    data: dict, key: str, bounds: tuple[float, float], errors: list[str], label: str,
) -> float | None:
    value = data.get(key, _MISSING)
    if value is _MISSING or value is None:
        errors.append(f"{label} is required")
        return None
    if not _is_number(value) or not math.isfinite(value):
        errors.append(f"{label} must be a number")
        return None
    lo, hi = bounds
    if not lo <= value <= hi:
        errors.append(f"{label} must be between {lo} and {hi}")
        return None
    return value


def _read_int(
    data: dict, key: str, bounds: tuple[int, int], errors: list[str], label: str,
) -> int | None:
    value = _read_number(data, key, bounds, errors, label)
    if value is None:
        return None
    if isinstance(value, float) and not value.is_integer():
        errors.append(f"{label} must be a whole number")
        return None
    return int(value)


def _read_enum(data: dict, key: str, enum_cls: type[Enum], errors: list[str], label: str):
    value = data.get(key, _MISSING)
    if value is _MISSING or value is None:
        errors.append(f"{label} is required")
        return None
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        errors.append(f"{label} must be one of: {allowed}")
        return None


def _read_tags(data: dict, key: str, errors: list[str], label: str) -> tuple[str, ...] | None:
    value = data.get(key, _MISSING)
    if value is _MISSING or value is None:
        errors.append(f"{label} is required")
        return None
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
        errors.append(f"{label} must be a list of strings")
        return None
    tags: list[str] = []
    for item in value:
        if not isinstance(item, str):
            errors.append(f"{label} must be a list of strings")
            return None
        tag = item.strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tuple(tags)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_health_profile(
    payload: dict[str, Any], *, defaults: HealthProfile | None = None,
) -> HealthProfile:
    """Validate an assessment payload and build a HealthProfile.

    Args:
        payload: Wire-form assessment (camelCase keys).
        defaults: When given, keys absent from ``payload`` are taken from
            this profile, the way the form starts from saved answers.

    Raises:
        ProfileValidationError: If any field is missing, mistyped or out of range.
    """
    if not isinstance(payload, dict):
        raise ProfileValidationError(["assessment must be an object"])

    data = dict(payload)
    if defaults is not None:
        base = profile_to_dict(defaults)
        habits = dict(base["eatingHabits"])
        if isinstance(data.get("eatingHabits"), dict):
            habits.update(data["eatingHabits"])
            data["eatingHabits"] = habits
        base.update(data)
        data = base

    errors: list[str] = []

    age = _read_int(data, "age", AGE_RANGE, errors, "age")
    height = _read_number(data, "height", HEIGHT_RANGE, errors, "height")
    weight = _read_number(data, "weight", WEIGHT_RANGE, errors, "weight")
    gender = _read_enum(data, "gender", Gender, errors, "gender")
    activity = _read_enum(data, "physicalActivity", PhysicalActivity, errors, "physicalActivity")
    sleep_hours = _read_number(data, "sleepHours", SLEEP_RANGE, errors, "sleepHours")
    smoking = _read_enum(data, "smokingStatus", SmokingStatus, errors, "smokingStatus")
    conditions = _read_tags(data, "preExistingConditions", errors, "preExistingConditions")
    family = _read_tags(data, "familyHistory", errors, "familyHistory")
    habits = _parse_eating_habits(data.get("eatingHabits"), errors)

    if errors:
        raise ProfileValidationError(errors)

    return HealthProfile(
        age=age,
        height=height,
        weight=weight,
        gender=gender,
        physical_activity=activity,
        sleep_hours=sleep_hours,
        smoking_status=smoking,
        eating_habits=habits,
        pre_existing_conditions=conditions,
        family_history=family,
    )


def _parse_eating_habits(data: Any, errors: list[str]) -> EatingHabits | None:
    if not isinstance(data, dict):
        errors.append("eatingHabits is required")
        return None

    start = len(errors)
    diet_type = data.get("dietType")
    if not isinstance(diet_type, str) or not diet_type.strip():
        errors.append("eatingHabits.dietType is required")
    meals = _read_int(data, "mealsPerDay", MEALS_RANGE, errors, "eatingHabits.mealsPerDay")
    snacks = _read_int(data, "snacksPerDay", SNACKS_RANGE, errors, "eatingHabits.snacksPerDay")
    water = _read_int(data, "waterConsumption", WATER_RANGE, errors, "eatingHabits.waterConsumption")
    alcohol = _read_enum(
        data, "alcoholConsumption", AlcoholConsumption, errors, "eatingHabits.alcoholConsumption",
    )
    caffeine = _read_enum(
        data, "caffeineConsumption", CaffeineConsumption, errors, "eatingHabits.caffeineConsumption",
    )
    if len(errors) > start:
        return None

    return EatingHabits(
        diet_type=diet_type.strip().lower(),
        meals_per_day=meals,
        snacks_per_day=snacks,
        water_consumption=water,
        alcohol_consumption=alcohol,
        caffeine_consumption=caffeine,
    )


def profile_to_dict(profile: HealthProfile) -> dict[str, Any]:
    """Serialize a profile to its wire form."""
    habits = profile.eating_habits
    return {
        "age": profile.age,
        "height": profile.height,
        "weight": profile.weight,
        "gender": profile.gender.value,
        "preExistingConditions": list(profile.pre_existing_conditions),
        "eatingHabits": {
            "dietType": habits.diet_type,
            "mealsPerDay": habits.meals_per_day,
            "snacksPerDay": habits.snacks_per_day,
            "waterConsumption": habits.water_consumption,
            "alcoholConsumption": habits.alcohol_consumption.value,
            "caffeineConsumption": habits.caffeine_consumption.value,
        },
        "physicalActivity": profile.physical_activity.value,
        "sleepHours": profile.sleep_hours,
        "smokingStatus": profile.smoking_status.value,
        "familyHistory": list(profile.family_history),
    }


def finding_to_dict(finding: RiskFinding) -> dict[str, Any]:
    """Serialize a risk finding to its wire form."""
    return {
        "condition": finding.condition,
        "risk": finding.risk.value,
        "preventiveMeasures": list(finding.preventive_measures),
    }
