"""Tests for assessment intake: validation, defaults and serialization."""

from __future__ import annotations

import copy

import pytest

from carewise.domains.health.domain_logic.intake import (
    CONDITION_OPTIONS,
    DEFAULT_HEALTH_PROFILE,
    FAMILY_HISTORY_OPTIONS,
    ProfileValidationError,
    finding_to_dict,
    parse_health_profile,
    profile_to_dict,
)
from carewise.domains.health.domain_logic.profile_models import (
    AlcoholConsumption,
    CaffeineConsumption,
    Gender,
    PhysicalActivity,
    RiskFinding,
    RiskLevel,
    SmokingStatus,
)
from carewise.domains.health.domain_logic.risk_evaluator import get_health_risks


class TestParseValid:
    def test_full_payload(self, assessment_payload):
        profile = parse_health_profile(assessment_payload)
        assert profile.age == 52
        assert profile.height == 175
        assert profile.weight == 82
        assert profile.gender == Gender.FEMALE
        assert profile.physical_activity == PhysicalActivity.LIGHT
        assert profile.smoking_status == SmokingStatus.FORMER
        assert profile.sleep_hours == 6.5
        assert profile.pre_existing_conditions == ("hypertension",)
        assert profile.family_history == ("cancer",)
        habits = profile.eating_habits
        assert habits.diet_type == "vegetarian"
        assert habits.snacks_per_day == 1
        assert habits.alcohol_consumption == AlcoholConsumption.NONE
        assert habits.caffeine_consumption == CaffeineConsumption.LIGHT

    def test_payload_not_mutated(self, assessment_payload):
        original = copy.deepcopy(assessment_payload)
        parse_health_profile(assessment_payload)
        assert assessment_payload == original

    def test_tags_normalised(self, assessment_payload):
        assessment_payload["preExistingConditions"] = [" Diabetes", "diabetes", "", "Asthma "]
        profile = parse_health_profile(assessment_payload)
        assert profile.pre_existing_conditions == ("diabetes", "asthma")

    def test_normalised_tags_trigger_rules(self, assessment_payload):
        assessment_payload["familyHistory"] = ["Heart Disease"]
        profile = parse_health_profile(assessment_payload)
        assert "Heart Disease" in [r.condition for r in get_health_risks(profile)]

    def test_enum_values_case_insensitive(self, assessment_payload):
        assessment_payload["smokingStatus"] = "Current"
        assert parse_health_profile(assessment_payload).smoking_status == SmokingStatus.CURRENT

    def test_integral_float_age_accepted(self, assessment_payload):
        assessment_payload["age"] = 40.0
        profile = parse_health_profile(assessment_payload)
        assert profile.age == 40
        assert isinstance(profile.age, int)

    @pytest.mark.parametrize("field,value", [("age", 1), ("age", 120), ("height", 50),
                                             ("height", 250), ("weight", 300), ("sleepHours", 3),
                                             ("sleepHours", 12)])
    def test_range_limits_inclusive(self, assessment_payload, field, value):
        assessment_payload[field] = value
        parse_health_profile(assessment_payload)

    def test_free_text_tags_accepted(self, assessment_payload):
        assessment_payload["preExistingConditions"] = ["migraine"]
        assert parse_health_profile(assessment_payload).pre_existing_conditions == ("migraine",)


class TestParseInvalid:
    @pytest.mark.parametrize(
        "field,value",
        [("age", 0), ("age", 121), ("height", 49), ("height", 251),
         ("weight", 0), ("weight", 301), ("sleepHours", 2.5), ("sleepHours", 13)],
    )
    def test_out_of_range_rejected(self, assessment_payload, field, value):
        assessment_payload[field] = value
        with pytest.raises(ProfileValidationError) as exc_info:
            parse_health_profile(assessment_payload)
        assert any(field in e for e in exc_info.value.errors)

    def test_fractional_age_rejected(self, assessment_payload):
        assessment_payload["age"] = 40.5
        with pytest.raises(ProfileValidationError, match="whole number"):
            parse_health_profile(assessment_payload)

    @pytest.mark.parametrize("value", ["70", True, None, float("nan")])
    def test_non_numeric_weight_rejected(self, assessment_payload, value):
        assessment_payload["weight"] = value
        with pytest.raises(ProfileValidationError):
            parse_health_profile(assessment_payload)

    def test_unknown_enum_rejected(self, assessment_payload):
        assessment_payload["physicalActivity"] = "extreme"
        with pytest.raises(ProfileValidationError, match="physicalActivity must be one of"):
            parse_health_profile(assessment_payload)

    def test_tags_must_be_list(self, assessment_payload):
        assessment_payload["familyHistory"] = "cancer"
        with pytest.raises(ProfileValidationError, match="familyHistory"):
            parse_health_profile(assessment_payload)

    def test_missing_field_rejected(self, assessment_payload):
        del assessment_payload["smokingStatus"]
        with pytest.raises(ProfileValidationError, match="smokingStatus is required"):
            parse_health_profile(assessment_payload)

    def test_eating_habits_ranges(self, assessment_payload):
        assessment_payload["eatingHabits"]["mealsPerDay"] = 7
        assessment_payload["eatingHabits"]["waterConsumption"] = 21
        with pytest.raises(ProfileValidationError) as exc_info:
            parse_health_profile(assessment_payload)
        assert len(exc_info.value.errors) == 2

    def test_collects_every_error(self):
        with pytest.raises(ProfileValidationError) as exc_info:
            parse_health_profile({})
        # ten top-level fields, all missing
        assert len(exc_info.value.errors) == 10

    def test_non_dict_payload(self):
        with pytest.raises(ProfileValidationError):
            parse_health_profile(["not", "a", "dict"])

    def test_is_value_error(self):
        assert issubclass(ProfileValidationError, ValueError)


class TestDefaults:
    def test_default_profile_values(self):
        assert DEFAULT_HEALTH_PROFILE.age == 30
        assert DEFAULT_HEALTH_PROFILE.height == 170
        assert DEFAULT_HEALTH_PROFILE.weight == 70
        assert DEFAULT_HEALTH_PROFILE.eating_habits.water_consumption == 8
        assert DEFAULT_HEALTH_PROFILE.pre_existing_conditions == ()

    def test_partial_payload_filled_from_defaults(self):
        profile = parse_health_profile({"age": 64}, defaults=DEFAULT_HEALTH_PROFILE)
        assert profile.age == 64
        assert profile.height == DEFAULT_HEALTH_PROFILE.height
        assert profile.eating_habits == DEFAULT_HEALTH_PROFILE.eating_habits

    def test_partial_eating_habits_merged(self):
        profile = parse_health_profile(
            {"eatingHabits": {"dietType": "keto"}}, defaults=DEFAULT_HEALTH_PROFILE,
        )
        assert profile.eating_habits.diet_type == "keto"
        assert profile.eating_habits.meals_per_day == 3

    def test_partial_payload_still_validated(self):
        with pytest.raises(ProfileValidationError):
            parse_health_profile({"age": 500}, defaults=DEFAULT_HEALTH_PROFILE)

    def test_option_lists_cover_rule_tags(self):
        assert {"diabetes", "hypertension"} <= set(CONDITION_OPTIONS)
        assert {"heart disease", "cancer"} <= set(FAMILY_HISTORY_OPTIONS)


class TestSerialization:
    def test_profile_to_dict_wire_keys(self, assessment_payload):
        data = profile_to_dict(parse_health_profile(assessment_payload))
        assert data == assessment_payload

    def test_finding_to_dict(self):
        finding = RiskFinding("COPD", RiskLevel.HIGH, ("Quit smoking immediately",))
        assert finding_to_dict(finding) == {
            "condition": "COPD",
            "risk": "high",
            "preventiveMeasures": ["Quit smoking immediately"],
        }
