"""Tests for the display-side health analysis."""

from __future__ import annotations

import pytest

from carewise.domains.health.domain_logic.analysis import (
    activity_impact,
    bmi_guidance,
    build_health_analysis,
    risk_summary,
    sleep_assessment,
    sort_by_severity,
)
from carewise.domains.health.domain_logic.profile_models import (
    PhysicalActivity,
    RiskLevel,
    SmokingStatus,
)
from carewise.domains.health.domain_logic.risk_evaluator import get_health_risks


class TestSleepAssessment:
    @pytest.mark.parametrize(
        "hours,label",
        [(3, "Insufficient"), (5.9, "Insufficient"), (6, "Borderline"), (6.5, "Borderline"),
         (7, "Optimal"), (9, "Optimal"), (9.5, "Excessive"), (12, "Excessive")],
    )
    def test_labels(self, hours, label):
        assert sleep_assessment(hours) == label


class TestGuidance:
    def test_sedentary_message(self):
        assert "sedentary" in activity_impact(PhysicalActivity.SEDENTARY)

    def test_light_message(self):
        assert "Increasing" in activity_impact(PhysicalActivity.LIGHT)

    @pytest.mark.parametrize("activity", [PhysicalActivity.MODERATE, PhysicalActivity.HIGH])
    def test_active_message(self, activity):
        assert "Keep it up" in activity_impact(activity)

    def test_bmi_guidance_per_category(self):
        assert "nutritionist" in bmi_guidance("Underweight")
        assert "healthy range" in bmi_guidance("Normal")
        assert bmi_guidance("Unknown") == ""


class TestSeverity:
    def test_sort_is_stable_high_first(self, make_profile):
        profile = make_profile(
            physical_activity=PhysicalActivity.SEDENTARY,
            smoking_status=SmokingStatus.CURRENT,
            family_history=("cancer",),
        )
        risks = get_health_risks(profile)
        ordered = sort_by_severity(risks)
        assert [r.condition for r in ordered] == [
            "Lung Cancer", "COPD", "Metabolic Syndrome", "Cancer",
        ]
        # the evaluator's own order is untouched
        assert [r.condition for r in risks][0] == "Lung Cancer"
        assert risks[2].risk == RiskLevel.MODERATE

    def test_summary_text(self, make_profile):
        assert risk_summary([]) == "No significant health risks identified based on your data."
        risks = get_health_risks(make_profile(age=70))
        assert risk_summary(risks).startswith("1 potential health risks")


class TestBuildHealthAnalysis:
    def test_none_without_profile(self):
        assert build_health_analysis(None) is None

    def test_healthy_profile(self, make_profile):
        analysis = build_health_analysis(make_profile())
        assert analysis.bmi == 24.2
        assert analysis.bmi_category == "Normal"
        assert analysis.sleep == "Optimal"
        assert analysis.risks == []
        assert analysis.highlights == []
        assert analysis.summary.startswith("No significant")

    def test_highlights_are_first_three_in_rule_order(self, make_profile):
        profile = make_profile(
            height=170, weight=100, age=70, smoking_status=SmokingStatus.CURRENT,
        )
        analysis = build_health_analysis(profile)
        assert len(analysis.risks) == 5
        assert [r.condition for r in analysis.highlights] == [
            "Type 2 Diabetes", "Cardiovascular Disease", "Hypertension",
        ]

    def test_to_dict_is_wire_form(self, make_profile):
        data = build_health_analysis(make_profile(sleep_hours=4)).to_dict()
        assert data["risk_count"] == 1
        assert data["risks"][0]["condition"] == "Mental Health Issues"
        assert data["risks"][0]["risk"] == "moderate"
        assert data["lifestyle"]["sleep"] == "Insufficient"
        assert data["lifestyle"]["diet_type"] == "balanced"

    def test_to_dict_includes_severity_view(self, make_profile):
        profile = make_profile(
            physical_activity=PhysicalActivity.SEDENTARY,
            smoking_status=SmokingStatus.CURRENT,
            family_history=("cancer",),
        )
        data = build_health_analysis(profile).to_dict()
        assert [r["condition"] for r in data["risks"]][2] == "Metabolic Syndrome"
        assert [r["risk"] for r in data["risks_by_severity"]] == [
            "high", "high", "moderate", "moderate",
        ]
