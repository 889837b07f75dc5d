from typing import List, Optional, Tuple

from .hormones import hormone_value
from .models import HormoneField, LiverDiseaseType, PatientProfile, ReferenceRange, Severity, ThyroidAnalysis
from .reference_tables import (
    ELDERLY_AGE_THRESHOLD,
    HYPERTHYROID_TSH_THRESHOLDS,
    HYPOTHYROID_TSH_THRESHOLDS,
    LOW_WEIGHT_THRESHOLD_KG,
    THYROID_REFERENCE_RANGES,
)


LIVER_DISEASE_LABELS = {
    LiverDiseaseType.CIRRHOSIS: "Cirrhosis",
    LiverDiseaseType.CHOLESTATIC: "Cholestatic liver disease",
    LiverDiseaseType.NAFLD: "NAFLD",
    LiverDiseaseType.HEPATITIS: "Hepatitis",
    LiverDiseaseType.POST_TRANSPLANT: "Post-liver transplant",
    LiverDiseaseType.OTHER: "Liver disease (other)",
}

TRIMESTER_LABELS = {1: "1st", 2: "2nd", 3: "3rd"}

HYPOTHYROID_RECOMMENDATIONS = (
    "Consider levothyroxine replacement therapy",
    "Monitor thyroid function in 6-8 weeks",
    "Check for underlying causes if newly diagnosed",
)
HYPERTHYROID_RECOMMENDATIONS = (
    "Consider antithyroid medication",
    "Evaluate for Graves disease or toxic nodules",
    "Monitor closely for cardiac symptoms",
)
NORMAL_RECOMMENDATIONS = (
    "Continue routine monitoring",
    "Reassess if symptoms develop",
)
INSUFFICIENT_DATA_RECOMMENDATIONS = (
    "Obtain TSH measurement",
    "Consider complete thyroid panel",
)


def summarize_conditions(profile: PatientProfile) -> str:
    conditions: List[str] = []

    if profile.has_high_risk_heart_disease:
        conditions.append("High-risk heart disease")
    elif profile.has_low_risk_heart_disease:
        conditions.append("Low-risk heart disease")

    if profile.has_kidney_disease:
        stage = profile.kidney_disease_stage
        if stage is not None:
            conditions.append(f"{stage.value} CKD")
        else:
            conditions.append("Kidney disease (stage unspecified)")

    if profile.has_liver_disease:
        liver_type = profile.liver_disease_type
        if liver_type is not None:
            conditions.append(LIVER_DISEASE_LABELS[liver_type])
        else:
            conditions.append("Liver disease (type unspecified)")

    if profile.has_osteoporosis:
        conditions.append("Osteoporosis")

    if profile.has_adrenal_insufficiency:
        conditions.append("Adrenal insufficiency")

    if profile.is_pregnant:
        if profile.trimester:
            conditions.append(f"Pregnancy ({TRIMESTER_LABELS[profile.trimester]} trimester)")
        else:
            conditions.append("Pregnancy (trimester unspecified)")

    if profile.has_gi_absorption_issues:
        conditions.append("GI absorption issues")

    if profile.on_estrogen_therapy:
        conditions.append("Estrogen therapy")

    if profile.age is not None and profile.age >= ELDERLY_AGE_THRESHOLD:
        conditions.append(f"Elderly (≥{ELDERLY_AGE_THRESHOLD} years)")

    if profile.weight_kg is not None and profile.weight_kg < LOW_WEIGHT_THRESHOLD_KG:
        conditions.append(f"Low body weight (<{LOW_WEIGHT_THRESHOLD_KG}kg)")

    return ", ".join(conditions) if conditions else "None"


def classify_hypothyroid_severity(tsh: float) -> Optional[Severity]:
    for severity in (Severity.SEVERE, Severity.MODERATE, Severity.MILD):
        if tsh >= HYPOTHYROID_TSH_THRESHOLDS[severity]:
            return severity
    return None


def classify_hyperthyroid_tier(tsh: float) -> Optional[Severity]:
    """TSH-only hyperthyroid tier; None when TSH is not below the reference low."""
    if tsh >= HYPERTHYROID_TSH_THRESHOLDS[Severity.MILD]:
        return None
    for severity in (Severity.SEVERE, Severity.MODERATE):
        if tsh <= HYPERTHYROID_TSH_THRESHOLDS[severity]:
            return severity
    return Severity.MILD


def classify_thyroid_condition(tsh: Optional[float]) -> str:
    """Label a TSH value as hypo-, hyper- or normal thyroid function."""
    if tsh is None:
        return "Insufficient data"

    if tsh > HYPOTHYROID_TSH_THRESHOLDS[Severity.MILD]:
        severity = classify_hypothyroid_severity(tsh)
        return f"{severity.value.capitalize()} Hypothyroidism"

    severity = classify_hyperthyroid_tier(tsh)
    if severity is not None:
        return f"{severity.value.capitalize()} Hyperthyroidism"

    return "Normal Thyroid Function"


def _thyroxine_reading(profile: PatientProfile) -> Optional[Tuple[float, ReferenceRange]]:
    for hormone in (HormoneField.FT4, HormoneField.T4):
        value = hormone_value(profile, hormone)
        if value is not None:
            return value, THYROID_REFERENCE_RANGES[hormone]
    return None


def detailed_analysis(profile: PatientProfile) -> ThyroidAnalysis:
    """
    Condition label plus a plain-language summary and next steps.

    The summary quotes the TSH value. It adds a confirming sentence when
    FT4 (or T4 if FT4 is absent) is low for hypothyroid TSH or high for
    hyperthyroid TSH.
    """
    tsh = profile.current_tsh
    if tsh is None:
        return ThyroidAnalysis(
            condition="Insufficient Data",
            summary="TSH value is required for proper thyroid function assessment.",
            recommendations=list(INSUFFICIENT_DATA_RECOMMENDATIONS),
        )

    condition = classify_thyroid_condition(tsh)
    units = THYROID_REFERENCE_RANGES["TSH"].units
    thyroxine = _thyroxine_reading(profile)

    if condition.endswith("Hypothyroidism"):
        summary = f"TSH is elevated at {tsh:g} {units}, indicating underactive thyroid function."
        if thyroxine is not None and thyroxine[0] < thyroxine[1].low:
            value, ref = thyroxine
            summary += f" Free T4 is also low at {value:g} {ref.units}, confirming primary hypothyroidism."
        recommendations = HYPOTHYROID_RECOMMENDATIONS
    elif condition.endswith("Hyperthyroidism"):
        summary = f"TSH is suppressed at {tsh:g} {units}, indicating overactive thyroid function."
        if thyroxine is not None and thyroxine[0] > thyroxine[1].high:
            value, ref = thyroxine
            summary += f" Free T4 is elevated at {value:g} {ref.units}, confirming hyperthyroidism."
        recommendations = HYPERTHYROID_RECOMMENDATIONS
    else:
        summary = f"TSH is within normal range at {tsh:g} {units}."
        recommendations = NORMAL_RECOMMENDATIONS

    return ThyroidAnalysis(condition=condition, summary=summary, recommendations=list(recommendations))
