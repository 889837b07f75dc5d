"""Unit tests for condition summary and TSH classification."""
from thyrodose.domain.conditions import (
    HYPERTHYROID_RECOMMENDATIONS,
    HYPOTHYROID_RECOMMENDATIONS,
    NORMAL_RECOMMENDATIONS,
    classify_hyperthyroid_tier,
    classify_thyroid_condition,
    detailed_analysis,
    summarize_conditions,
)
from thyrodose.domain.models import KidneyDiseaseStage, LiverDiseaseType, PatientProfile, Severity


class TestSummarizeConditions:
    """Test the comma-joined comorbidity summary."""

    def test_no_conditions(self):
        assert summarize_conditions(PatientProfile(current_tsh=8, weight_kg=70, age=40)) == "None"

    def test_full_summary_order(self):
        profile = PatientProfile(
            current_tsh=8,
            weight_kg=40,
            age=65,
            is_pregnant=True,
            trimester=2,
            has_high_risk_heart_disease=True,
            has_kidney_disease=True,
            kidney_disease_stage=KidneyDiseaseStage.STAGE_3,
            has_liver_disease=True,
            liver_disease_type=LiverDiseaseType.CIRRHOSIS,
            has_osteoporosis=True,
            has_adrenal_insufficiency=True,
            has_gi_absorption_issues=True,
            on_estrogen_therapy=True,
        )
        assert summarize_conditions(profile) == (
            "High-risk heart disease, Stage 3 CKD, Cirrhosis, Osteoporosis, Adrenal insufficiency, "
            "Pregnancy (2nd trimester), GI absorption issues, Estrogen therapy, "
            "Elderly (≥60 years), Low body weight (<45kg)"
        )

    def test_high_risk_heart_disease_wins(self):
        profile = PatientProfile(has_high_risk_heart_disease=True, has_low_risk_heart_disease=True)
        assert summarize_conditions(profile) == "High-risk heart disease"

    def test_unspecified_subtypes(self):
        profile = PatientProfile(has_kidney_disease=True, has_liver_disease=True, is_pregnant=True)
        assert summarize_conditions(profile) == (
            "Kidney disease (stage unspecified), Liver disease (type unspecified), Pregnancy (trimester unspecified)"
        )

    def test_other_liver_disease(self):
        profile = PatientProfile(has_liver_disease=True, liver_disease_type="other")
        assert summarize_conditions(profile) == "Liver disease (other)"

    def test_subtype_ignored_without_flag(self):
        profile = PatientProfile(kidney_disease_stage=KidneyDiseaseStage.ESRD)
        assert summarize_conditions(profile) == "None"


class TestClassifyThyroidCondition:
    """Test TSH-based condition labels."""

    def test_insufficient_data(self):
        assert classify_thyroid_condition(None) == "Insufficient data"

    def test_hypothyroid_tiers(self):
        assert classify_thyroid_condition(25) == "Severe Hypothyroidism"
        assert classify_thyroid_condition(20) == "Severe Hypothyroidism"
        assert classify_thyroid_condition(15) == "Moderate Hypothyroidism"
        assert classify_thyroid_condition(6) == "Mild Hypothyroidism"

    def test_normal(self):
        assert classify_thyroid_condition(4.5) == "Normal Thyroid Function"
        assert classify_thyroid_condition(2.0) == "Normal Thyroid Function"
        assert classify_thyroid_condition(0.4) == "Normal Thyroid Function"

    def test_hyperthyroid_tiers(self):
        assert classify_thyroid_condition(0.3) == "Mild Hyperthyroidism"
        assert classify_thyroid_condition(0.2) == "Moderate Hyperthyroidism"
        assert classify_thyroid_condition(0.15) == "Moderate Hyperthyroidism"
        assert classify_thyroid_condition(0.1) == "Severe Hyperthyroidism"
        assert classify_thyroid_condition(0.02) == "Severe Hyperthyroidism"

    def test_hyperthyroid_tier(self):
        assert classify_hyperthyroid_tier(0.05) == Severity.SEVERE
        assert classify_hyperthyroid_tier(0.2) == Severity.MODERATE
        assert classify_hyperthyroid_tier(0.3) == Severity.MILD
        assert classify_hyperthyroid_tier(0.4) is None
        assert classify_hyperthyroid_tier(8) is None


class TestDetailedAnalysis:
    """Test the summary sentence and recommendations."""

    def test_insufficient_data(self):
        analysis = detailed_analysis(PatientProfile(current_ft4=1.0))
        assert analysis.condition == "Insufficient Data"
        assert analysis.summary == "TSH value is required for proper thyroid function assessment."
        assert analysis.recommendations == ["Obtain TSH measurement", "Consider complete thyroid panel"]

    def test_hypothyroid(self):
        analysis = detailed_analysis(PatientProfile(current_tsh=12))
        assert analysis.condition == "Moderate Hypothyroidism"
        assert analysis.summary == "TSH is elevated at 12 mIU/L, indicating underactive thyroid function."
        assert analysis.recommendations == list(HYPOTHYROID_RECOMMENDATIONS)

    def test_hypothyroid_confirmed_by_low_ft4(self):
        analysis = detailed_analysis(PatientProfile(current_tsh=12, current_ft4=0.5))
        assert analysis.summary.endswith(
            " Free T4 is also low at 0.5 ng/dl, confirming primary hypothyroidism."
        )

    def test_total_t4_used_without_ft4(self):
        analysis = detailed_analysis(PatientProfile(current_tsh=12, current_t4=3.0))
        assert "also low at 3 μg/dl" in analysis.summary

    def test_normal_ft4_adds_nothing(self):
        analysis = detailed_analysis(PatientProfile(current_tsh=12, current_ft4=1.2))
        assert "Free T4" not in analysis.summary

    def test_hyperthyroid_confirmed_by_high_ft4(self):
        analysis = detailed_analysis(PatientProfile(current_tsh=0.05, current_ft4=3.0))
        assert analysis.condition == "Severe Hyperthyroidism"
        assert analysis.summary == (
            "TSH is suppressed at 0.05 mIU/L, indicating overactive thyroid function. "
            "Free T4 is elevated at 3 ng/dl, confirming hyperthyroidism."
        )
        assert analysis.recommendations == list(HYPERTHYROID_RECOMMENDATIONS)

    def test_normal(self):
        analysis = detailed_analysis(PatientProfile(current_tsh=2.0, current_ft4=0.5))
        assert analysis.condition == "Normal Thyroid Function"
        assert analysis.summary == "TSH is within normal range at 2 mIU/L."
        assert analysis.recommendations == list(NORMAL_RECOMMENDATIONS)
