"""Display-side analysis built on top of the evaluator.

Everything here is presentation: labels, guidance text and a
severity-ordered view of the findings. The evaluator's own output order
is left untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from carewise.domains.health.domain_logic.intake import finding_to_dict
from carewise.domains.health.domain_logic.metrics import calculate_bmi, classify_bmi
from carewise.domains.health.domain_logic.profile_models import (
    BMI_NORMAL,
    BMI_OBESE,
    BMI_OVERWEIGHT,
    BMI_UNDERWEIGHT,
    HealthProfile,
    PhysicalActivity,
    RiskFinding,
)
from carewise.domains.health.domain_logic.risk_evaluator import get_health_risks

HIGHLIGHT_COUNT = 3

BMI_GUIDANCE = {
    BMI_UNDERWEIGHT: "You may need to gain some weight. Consider consulting a nutritionist.",
    BMI_NORMAL: "Your weight is within the healthy range. Keep up the good habits!",
    BMI_OVERWEIGHT: (
        "You may benefit from losing some weight. "
        "Focus on a balanced diet and regular exercise."
    ),
    BMI_OBESE: (
        "Your BMI indicates obesity, which increases health risks. "
        "Consider consulting a healthcare provider."
    ),
}


def sleep_assessment(hours: float) -> str:
    """Label nightly sleep as Insufficient, Borderline, Optimal or Excessive."""
    if hours < 6:
        return "Insufficient"
    if hours < 7:
        return "Borderline"
    if hours <= 9:
        return "Optimal"
    return "Excessive"


def activity_impact(activity: PhysicalActivity) -> str:
    if activity == PhysicalActivity.SEDENTARY:
        return (
            "Your sedentary lifestyle increases several health risks. "
            "Regular physical activity is recommended."
        )
    if activity == PhysicalActivity.LIGHT:
        return "Increasing your physical activity could provide additional health benefits."
    return "Your active lifestyle helps protect against many chronic diseases. Keep it up!"


def bmi_guidance(category: str) -> str:
    return BMI_GUIDANCE.get(category, "")


def sort_by_severity(findings: list[RiskFinding]) -> list[RiskFinding]:
    """Return a new list ordered high to low; equal levels keep rule order."""
    return sorted(findings, key=lambda f: f.risk.severity, reverse=True)


def risk_summary(findings: list[RiskFinding]) -> str:
    if findings:
        return f"{len(findings)} potential health risks identified based on your data."
    return "No significant health risks identified based on your data."


@dataclass
class HealthAnalysis:
    """Everything the analysis view shows for one profile."""

    bmi: float | None
    bmi_category: str
    bmi_guidance: str
    sleep: str
    activity_impact: str
    diet_type: str
    smoking_status: str
    physical_activity: str
    risks: list[RiskFinding] = field(default_factory=list)
    highlights: list[RiskFinding] = field(default_factory=list)
    by_severity: list[RiskFinding] = field(default_factory=list)
    summary: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "bmi": self.bmi,
            "bmi_category": self.bmi_category,
            "bmi_guidance": self.bmi_guidance,
            "lifestyle": {
                "physical_activity": self.physical_activity,
                "sleep": self.sleep,
                "diet_type": self.diet_type,
                "smoking_status": self.smoking_status,
                "impact": self.activity_impact,
            },
            "risks": [finding_to_dict(f) for f in self.risks],
            "highlights": [finding_to_dict(f) for f in self.highlights],
            "risks_by_severity": [finding_to_dict(f) for f in self.by_severity],
            "risk_count": len(self.risks),
            "summary": self.summary,
        }


def build_health_analysis(profile: HealthProfile | None) -> HealthAnalysis | None:
    """Assemble the full analysis for a profile, or ``None`` without one.

    ``highlights`` are the first findings in rule order, as shown on the
    overview card; ``by_severity`` is the same list ordered high to low.
    """
    if profile is None:
        return None

    bmi = calculate_bmi(profile)
    category = classify_bmi(bmi)
    risks = get_health_risks(profile)

    return HealthAnalysis(
        bmi=bmi,
        bmi_category=category,
        bmi_guidance=bmi_guidance(category),
        sleep=sleep_assessment(profile.sleep_hours),
        activity_impact=activity_impact(profile.physical_activity),
        diet_type=profile.eating_habits.diet_type,
        smoking_status=profile.smoking_status.value,
        physical_activity=profile.physical_activity.value,
        risks=risks,
        highlights=risks[:HIGHLIGHT_COUNT],
        by_severity=sort_by_severity(risks),
        summary=risk_summary(risks),
    )
