"""Unit tests for the methimazole calculator."""
import pytest

from thyrodose.domain.errors import MissingInputError
from thyrodose.domain.methimazole import (
    TITRATION_GUIDANCE,
    calculate_methimazole_dose,
    classify_hyperthyroid_severity,
    select_hormone_basis,
)
from thyrodose.domain.models import HormoneBasis, HormoneField, PatientProfile, Severity


def make_profile(**overrides):
    """Adult with suppressed TSH and overt, mildly raised free hormones."""
    data = {"current_tsh": 0.05, "age": 40, "weight_kg": 70, "current_ft4": 2.0, "current_ft3": 3.0}
    data.update(overrides)
    return PatientProfile(**data)


class TestNotIndicated:
    """Test early exits that return no dose."""

    def test_missing_tsh(self):
        with pytest.raises(MissingInputError):
            calculate_methimazole_dose(make_profile(current_tsh=None))

    def test_tsh_not_suppressed(self):
        result = calculate_methimazole_dose(make_profile(current_tsh=0.3))
        assert result.dose == 0
        assert result.alerts == [
            "TSH (0.3 mIU/L) is not suppressed enough to indicate hyperthyroidism requiring methimazole."
        ]

    def test_missing_all_hormones(self):
        result = calculate_methimazole_dose(
            PatientProfile(current_tsh=0.05, age=40, weight_kg=70)
        )
        assert result.dose == 0
        assert result.requires_hormone_data is True
        assert result.missing_hormone_fields == [
            HormoneField.FT3, HormoneField.FT4, HormoneField.T3, HormoneField.T4,
        ]
        assert result.alerts[0].startswith("⚠️ Missing hormone values")

    def test_incomplete_pairs(self):
        result = calculate_methimazole_dose(
            PatientProfile(current_tsh=0.05, current_ft4=3.0, current_t3=250)
        )
        assert result.requires_hormone_data is True
        assert result.missing_hormone_fields == ["FT3", "T4"]

    def test_subclinical_without_risk_factors(self):
        result = calculate_methimazole_dose(make_profile(current_ft4=1.2))
        assert result.dose == 0
        assert result.severity == Severity.MILD
        assert result.follow_up_weeks == 12
        assert result.alerts[0].startswith("Subclinical hyperthyroidism detected (TSH ≤ 0.1")
        assert TITRATION_GUIDANCE not in result.alerts


class TestSubclinicalTreatment:
    """Test the mild dose for at-risk subclinical patients."""

    @pytest.mark.parametrize("overrides", [
        {"age": 70},
        {"has_high_risk_heart_disease": True},
        {"has_low_risk_heart_disease": True},
        {"has_osteoporosis": True},
    ])
    def test_treated(self, overrides):
        result = calculate_methimazole_dose(make_profile(current_ft4=1.2, **overrides))
        assert result.dose == 5
        assert result.severity == Severity.MILD
        assert result.follow_up_weeks == 6
        assert result.alerts[-1] == TITRATION_GUIDANCE


class TestSeverityClassification:
    """Test FT4 ratio tiers."""

    def test_tiers(self):
        assert classify_hyperthyroid_severity(1.2, False) == (Severity.MILD, None)
        assert classify_hyperthyroid_severity(1.5, False) == (Severity.MODERATE, None)
        assert classify_hyperthyroid_severity(1.95, False) == (Severity.MODERATE, None)
        assert classify_hyperthyroid_severity(2.0, False) == (Severity.SEVERE, None)
        assert classify_hyperthyroid_severity(3.0, False) == (Severity.SEVERE, None)

    def test_borderline_upgrade(self):
        severity, alert = classify_hyperthyroid_severity(1.95, True)
        assert severity == Severity.SEVERE
        assert alert.startswith("Moderate-severe hyperthyroidism")

    def test_very_severe(self):
        severity, alert = classify_hyperthyroid_severity(3.4, False)
        assert severity == Severity.SEVERE
        assert "Consider specialist consultation" in alert

    def test_ft3_only_elevation_is_mild(self):
        assert classify_hyperthyroid_severity(0.8, False) == (Severity.MILD, None)


class TestAdultDosing:
    """Test severity, age and cardiac driven adult doses."""

    def test_mild_rounds_to_ten(self):
        result = calculate_methimazole_dose(make_profile())
        # 7.5 mg rounded half-up to the 5 mg grid
        assert result.dose == 10
        assert result.severity == Severity.MILD
        assert result.follow_up_weeks == 6
        assert "Mild hyperthyroidism: Age < 65 and no cardiac disease - 5-10 mg/day." in result.alerts

    def test_mild_with_elevated_t3(self):
        result = calculate_methimazole_dose(make_profile(current_ft3=5.0))
        assert result.dose == 10
        assert result.alerts[1].startswith("Mild hyperthyroidism with elevated T3")

    def test_mild_elderly(self):
        result = calculate_methimazole_dose(make_profile(age=70))
        assert result.dose == 5

    def test_mild_cardiac(self):
        result = calculate_methimazole_dose(make_profile(has_low_risk_heart_disease=True))
        assert result.dose == 5

    def test_moderate(self):
        result = calculate_methimazole_dose(make_profile(current_ft4=3.0, current_ft3=4.0))
        assert result.dose == 15
        assert result.severity == Severity.MODERATE
        assert result.follow_up_weeks == 4

    def test_moderate_disproportionate_ft3(self):
        result = calculate_methimazole_dose(make_profile(current_ft4=3.0, current_ft3=7.0))
        assert result.dose == 20

    def test_borderline_upgraded_to_severe(self):
        result = calculate_methimazole_dose(make_profile(current_ft4=3.5, current_ft3=8.0))
        assert result.severity == Severity.SEVERE
        assert result.dose == 35
        assert any(alert.startswith("Moderate-severe hyperthyroidism") for alert in result.alerts)

    def test_severe_young(self):
        result = calculate_methimazole_dose(make_profile(current_ft4=4.0))
        assert result.dose == 35
        assert result.severity == Severity.SEVERE
        assert result.follow_up_weeks == 2

    def test_severe_elderly(self):
        result = calculate_methimazole_dose(make_profile(current_ft4=4.0, age=70))
        assert result.dose == 20
        assert result.follow_up_weeks == 4

    def test_severe_cardiac(self):
        result = calculate_methimazole_dose(make_profile(current_ft4=4.0, has_high_risk_heart_disease=True))
        assert result.dose == 20
        assert result.follow_up_weeks == 2

    def test_very_severe_referral(self):
        result = calculate_methimazole_dose(make_profile(current_ft4=6.0))
        assert result.severity == Severity.SEVERE
        assert any("FT4 > 3× ULN" in alert for alert in result.alerts)

    def test_unknown_age_treated_as_adult(self):
        result = calculate_methimazole_dose(make_profile(age=None, current_ft4=4.0))
        assert result.dose == 35

    def test_titration_guidance_last(self):
        result = calculate_methimazole_dose(make_profile(current_ft4=4.0))
        assert result.alerts[0] == "Overt hyperthyroidism confirmed based on elevated hormone levels."
        assert result.alerts[-1] == TITRATION_GUIDANCE


class TestPediatricDosing:
    """Test weight-based doses for children."""

    def test_severe_child(self):
        result = calculate_methimazole_dose(make_profile(age=10, weight_kg=30, current_ft4=4.0))
        # min(30 * 0.7, 40) = 21 -> 20
        assert result.dose == 20
        assert result.follow_up_weeks == 4
        assert any(alert.startswith("Pediatric patient: Severe hyperthyroidism") for alert in result.alerts)

    def test_standard_child(self):
        result = calculate_methimazole_dose(make_profile(age=12, weight_kg=40))
        # 40 * 0.35 = 14 -> 15
        assert result.dose == 15

    def test_severe_child_capped(self):
        result = calculate_methimazole_dose(make_profile(age=16, weight_kg=70, current_ft4=4.0))
        assert result.dose == 40

    def test_child_without_weight_uses_adult_dosing(self):
        result = calculate_methimazole_dose(make_profile(age=10, weight_kg=None, current_ft4=4.0))
        assert result.dose == 35


class TestHormoneBasis:
    """Test free vs total hormone selection."""

    def test_free_preferred(self):
        profile = make_profile(current_t4=15, current_t3=250)
        assert select_hormone_basis(profile) == HormoneBasis.FREE

    def test_total_used_when_free_incomplete(self):
        profile = PatientProfile(current_tsh=0.05, age=30, current_ft4=1.0, current_t4=15, current_t3=150)
        assert select_hormone_basis(profile) == HormoneBasis.TOTAL
        result = calculate_methimazole_dose(profile)
        # T4 ratio 1.25 -> mild, T3 normal -> 7.5 -> 10
        assert result.severity == Severity.MILD
        assert result.dose == 10

    def test_total_severe(self):
        profile = PatientProfile(current_tsh=0.01, age=30, current_t4=30, current_t3=300)
        result = calculate_methimazole_dose(profile)
        assert result.severity == Severity.SEVERE
        assert result.dose == 35

    def test_repeat_calls_identical(self):
        profile = make_profile(current_ft4=3.0, current_ft3=7.0)
        assert calculate_methimazole_dose(profile) == calculate_methimazole_dose(profile)
