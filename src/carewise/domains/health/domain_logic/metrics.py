"""BMI computation and category classification.

Both functions accept ``None`` for "no assessment yet" and answer with a
neutral value instead of raising.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from carewise.domains.health.domain_logic.profile_models import (
    BMI_NORMAL,
    BMI_OBESE,
    BMI_OVERWEIGHT,
    BMI_UNDERWEIGHT,
    BMI_UNKNOWN,
    HealthProfile,
)

UNDERWEIGHT_BELOW = 18.5
NORMAL_BELOW = 25.0
OVERWEIGHT_BELOW = 30.0

_ONE_DECIMAL = Decimal("0.1")


def _round_half_up(value: float) -> float:
    """Round to one decimal place, ties away from zero.

    Non-finite values pass through unchanged.
    """
    if not math.isfinite(value):
        return value
    return float(Decimal(value).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def calculate_bmi(profile: HealthProfile | None) -> float | None:
    """Body Mass Index, ``weight / (height_m ** 2)`` rounded to 1 decimal.

    A zero height yields ``inf`` (or ``nan`` when the weight is also zero)
    rather than raising.
    """
    if profile is None:
        return None

    height_m = profile.height / 100
    denominator = height_m * height_m
    if denominator == 0:
        if profile.weight == 0:
            return math.nan
        return math.copysign(math.inf, profile.weight)

    return _round_half_up(profile.weight / denominator)


def classify_bmi(bmi: float | None) -> str:
    """Map a BMI value to its category label; boundaries go to the higher band."""
    if bmi is None or math.isnan(bmi):
        return BMI_UNKNOWN
    if bmi < UNDERWEIGHT_BELOW:
        return BMI_UNDERWEIGHT
    if bmi < NORMAL_BELOW:
        return BMI_NORMAL
    if bmi < OVERWEIGHT_BELOW:
        return BMI_OVERWEIGHT
    return BMI_OBESE


def get_bmi_category(profile: HealthProfile | None) -> str:
    """Category label for the profile's BMI, or ``"Unknown"`` without one."""
    return classify_bmi(calculate_bmi(profile))
