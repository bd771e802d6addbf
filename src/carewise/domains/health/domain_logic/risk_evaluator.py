"""Rule-based health risk evaluation.

The battery is an ordered table of independent rules. Each rule that
applies contributes its findings at its own position in the table; rules
never suppress one another, so several findings may come from the same
field (obesity yields two). Output follows table order, not severity.

All rules are deterministic and side-effect free.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from carewise.domains.health.domain_logic.metrics import get_bmi_category
from carewise.domains.health.domain_logic.profile_models import (
    BMI_OBESE,
    BMI_OVERWEIGHT,
    BMI_UNDERWEIGHT,
    HealthProfile,
    PhysicalActivity,
    RiskFinding,
    RiskLevel,
    SmokingStatus,
)

# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

HYPERTENSION_AGE_ABOVE = 45
HYPERTENSION_HIGH_AGE_ABOVE = 60
SHORT_SLEEP_BELOW = 6

# ---------------------------------------------------------------------------
# Preventive measures
# ---------------------------------------------------------------------------

TYPE_2_DIABETES_MEASURES = (
    "Maintain a healthy diet rich in fiber and low in processed sugars",
    "Regular physical activity (150+ minutes per week)",
    "Regular blood glucose screening",
    "Weight management through sustainable lifestyle changes",
)

CARDIOVASCULAR_MEASURES = (
    "Maintain a heart-healthy diet low in saturated fats",
    "Regular aerobic exercise",
    "Monitor blood pressure regularly",
    "Limit sodium intake",
    "Manage stress through mindfulness and relaxation techniques",
)

NUTRITIONAL_DEFICIENCY_MEASURES = (
    "Increase caloric intake with nutrient-dense foods",
    "Consider protein supplementation",
    "Regular health check-ups to monitor nutritional status",
    "Strength training to build muscle mass",
)

HYPERTENSION_MEASURES = (
    "Regular blood pressure monitoring",
    "Limit sodium intake to less than 2,300mg per day",
    "Regular physical activity",
    "Manage stress through mindfulness practices",
    "Maintain a healthy weight",
)

LUNG_CANCER_MEASURES = (
    "Quit smoking - consider nicotine replacement therapy or counseling",
    "Avoid secondhand smoke exposure",
    "Regular lung function testing",
    "Diet rich in antioxidants",
)

COPD_MEASURES = (
    "Quit smoking immediately",
    "Avoid air pollutants and irritants",
    "Regular pulmonary function tests",
    "Vaccinations for influenza and pneumonia",
)

METABOLIC_SYNDROME_MEASURES = (
    "Increase physical activity to at least 150 minutes per week",
    "Break up sitting time with short activity breaks",
    "Strength training twice weekly",
    "Balanced diet rich in fruits, vegetables and whole grains",
)

MENTAL_HEALTH_MEASURES = (
    "Improve sleep hygiene - consistent sleep schedule",
    "Limit screen time before bed",
    "Create a comfortable sleep environment",
    "Consider mindfulness or relaxation techniques before bed",
    "Limit caffeine consumption after noon",
)

DIABETIC_COMPLICATIONS_MEASURES = (
    "Strict blood glucose monitoring",
    "Regular eye examinations",
    "Foot care and regular checkups",
    "Kidney function monitoring",
    "Medication adherence",
)

STROKE_MEASURES = (
    "Blood pressure monitoring and management",
    "Low sodium diet",
    "Regular physical activity",
    "Limit alcohol consumption",
    "Medication adherence",
)

HEART_DISEASE_MEASURES = (
    "Regular cardiovascular check-ups",
    "Heart-healthy diet low in saturated fats",
    "Regular physical activity",
    "Stress management techniques",
    "Consider preventive aspirin therapy (consult doctor)",
)

CANCER_MEASURES = (
    "Regular cancer screenings appropriate for age and risk level",
    "Diet rich in antioxidants and low in processed foods",
    "Maintain healthy weight",
    "Limit alcohol consumption",
    "Sun protection",
)


# ---------------------------------------------------------------------------
# Rule type
# ---------------------------------------------------------------------------

Predicate = Callable[[HealthProfile, str], bool]
FindingProducer = Callable[[HealthProfile, str], list[RiskFinding]]


@dataclass(frozen=True)
class RiskRule:
    """A named (predicate, finding-producer) pair.

    Both callables receive the profile and its precomputed BMI category.
    """

    name: str
    predicate: Predicate
    produce: FindingProducer

    def applies(self, profile: HealthProfile, bmi_category: str) -> bool:
        return self.predicate(profile, bmi_category)

    def findings(self, profile: HealthProfile, bmi_category: str) -> list[RiskFinding]:
        return self.produce(profile, bmi_category)


# ---------------------------------------------------------------------------
# Finding producers
# ---------------------------------------------------------------------------

def _weight_related(profile: HealthProfile, bmi_category: str) -> list[RiskFinding]:
    level = RiskLevel.HIGH if bmi_category == BMI_OBESE else RiskLevel.MODERATE
    return [
        RiskFinding("Type 2 Diabetes", level, TYPE_2_DIABETES_MEASURES),
        RiskFinding("Cardiovascular Disease", level, CARDIOVASCULAR_MEASURES),
    ]


def _underweight(profile: HealthProfile, bmi_category: str) -> list[RiskFinding]:
    return [
        RiskFinding("Nutritional Deficiencies", RiskLevel.MODERATE, NUTRITIONAL_DEFICIENCY_MEASURES),
    ]


def _age_related(profile: HealthProfile, bmi_category: str) -> list[RiskFinding]:
    level = (
        RiskLevel.HIGH if profile.age > HYPERTENSION_HIGH_AGE_ABOVE else RiskLevel.MODERATE
    )
    return [RiskFinding("Hypertension", level, HYPERTENSION_MEASURES)]


def _smoking_related(profile: HealthProfile, bmi_category: str) -> list[RiskFinding]:
    return [
        RiskFinding("Lung Cancer", RiskLevel.HIGH, LUNG_CANCER_MEASURES),
        RiskFinding("COPD", RiskLevel.HIGH, COPD_MEASURES),
    ]


def _constant(condition: str, level: RiskLevel, measures: tuple[str, ...]) -> FindingProducer:
    def produce(profile: HealthProfile, bmi_category: str) -> list[RiskFinding]:
        return [RiskFinding(condition, level, measures)]

    return produce


# ---------------------------------------------------------------------------
# Rule table (evaluation order is significant)
# ---------------------------------------------------------------------------

RISK_RULES: tuple[RiskRule, ...] = (
    RiskRule(
        "excess_weight",
        lambda p, cat: cat in (BMI_OVERWEIGHT, BMI_OBESE),
        _weight_related,
    ),
    RiskRule(
        "underweight",
        lambda p, cat: cat == BMI_UNDERWEIGHT,
        _underweight,
    ),
    RiskRule(
        "age",
        lambda p, cat: p.age > HYPERTENSION_AGE_ABOVE,
        _age_related,
    ),
    RiskRule(
        "current_smoker",
        lambda p, cat: p.smoking_status == SmokingStatus.CURRENT,
        _smoking_related,
    ),
    RiskRule(
        "sedentary",
        lambda p, cat: p.physical_activity == PhysicalActivity.SEDENTARY,
        _constant("Metabolic Syndrome", RiskLevel.MODERATE, METABOLIC_SYNDROME_MEASURES),
    ),
    RiskRule(
        "short_sleep",
        lambda p, cat: p.sleep_hours < SHORT_SLEEP_BELOW,
        _constant("Mental Health Issues", RiskLevel.MODERATE, MENTAL_HEALTH_MEASURES),
    ),
    RiskRule(
        "diabetes",
        lambda p, cat: "diabetes" in p.pre_existing_conditions,
        _constant("Diabetic Complications", RiskLevel.HIGH, DIABETIC_COMPLICATIONS_MEASURES),
    ),
    RiskRule(
        "hypertension",
        lambda p, cat: "hypertension" in p.pre_existing_conditions,
        _constant("Stroke", RiskLevel.HIGH, STROKE_MEASURES),
    ),
    RiskRule(
        "family_heart_disease",
        lambda p, cat: "heart disease" in p.family_history,
        _constant("Heart Disease", RiskLevel.MODERATE, HEART_DISEASE_MEASURES),
    ),
    RiskRule(
        "family_cancer",
        lambda p, cat: "cancer" in p.family_history,
        _constant("Cancer", RiskLevel.MODERATE, CANCER_MEASURES),
    ),
)


def get_health_risks(profile: HealthProfile | None) -> list[RiskFinding]:
    """Evaluate every rule in order and collect the findings of those that apply.

    Returns an empty list when no profile is supplied or no rule applies.
    """
    risks: list[RiskFinding] = []
    if profile is None:
        return risks

    bmi_category = get_bmi_category(profile)
    for rule in RISK_RULES:
        if rule.applies(profile, bmi_category):
            risks.extend(rule.findings(profile, bmi_category))
    return risks
