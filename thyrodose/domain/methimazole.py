"""
Methimazole dose calculator for hyperthyroid patients.

Severity is graded on the ratio of FT4 (or total T4) to its upper limit of
normal, with FT3 able to push a borderline case up a tier. Children are
dosed by weight; adults by severity, age and cardiac risk.
"""
import logging
from typing import List, Optional, Tuple

from .errors import MissingInputError
from .hormones import hormone_value
from .models import DosageResult, HormoneBasis, HormoneField, PatientProfile, SafetyLimits, Severity
from .reference_tables import (
    DEFAULT_SAFETY_LIMITS,
    ELDERLY_HYPERTHYROID_AGE,
    FT3_DISPROPORTIONATE_RATIO,
    FT3_VERY_HIGH_RATIO,
    FT4_RATIO_BANDS,
    FT4_RATIO_BORDERLINE,
    FT4_RATIO_VERY_SEVERE,
    METHIMAZOLE_TSH_CEILING,
    PEDIATRIC_DOSING,
    PEDIATRIC_MAX_AGE,
    SUBCLINICAL_DOSE,
    SUBCLINICAL_TREATMENT_AGE,
    THYROID_REFERENCE_RANGES,
)
from .rounding import round_methimazole_dose


logger = logging.getLogger(__name__)


HORMONE_PAIRS = {
    HormoneBasis.FREE: (HormoneField.FT4, HormoneField.FT3),
    HormoneBasis.TOTAL: (HormoneField.T4, HormoneField.T3),
}

TITRATION_GUIDANCE = (
    "Titration: Recheck FT4 (± FT3) at 4-6 weeks. If FT4 normalizes, reduce dose by ~50%. "
    "Do NOT titrate early using TSH (TSH remains suppressed for months)."
)


def select_hormone_basis(profile: PatientProfile) -> Optional[HormoneBasis]:
    """Free pair if complete, else total pair if complete, else None."""
    for basis in (HormoneBasis.FREE, HormoneBasis.TOTAL):
        if all(hormone_value(profile, hormone) is not None for hormone in HORMONE_PAIRS[basis]):
            return basis
    return None


def missing_hormone_fields(profile: PatientProfile) -> List[HormoneField]:
    order = (HormoneField.FT3, HormoneField.FT4, HormoneField.T3, HormoneField.T4)
    return [hormone for hormone in order if hormone_value(profile, hormone) is None]


def classify_hyperthyroid_severity(ft4_ratio: float, ft3_very_high: bool) -> Tuple[Severity, Optional[str]]:
    """Severity tier for an FT4/ULN ratio, plus an alert when the tier needs one."""
    if FT4_RATIO_BANDS[Severity.SEVERE] <= ft4_ratio <= FT4_RATIO_VERY_SEVERE:
        return Severity.SEVERE, None
    if FT4_RATIO_BORDERLINE <= ft4_ratio < FT4_RATIO_BANDS[Severity.SEVERE] and ft3_very_high:
        return Severity.SEVERE, (
            "Moderate-severe hyperthyroidism: FT4 ratio near severe threshold with very high FT3 "
            "- classified as severe."
        )
    if FT4_RATIO_BANDS[Severity.MODERATE] <= ft4_ratio < FT4_RATIO_BANDS[Severity.SEVERE]:
        return Severity.MODERATE, None
    if ft4_ratio > FT4_RATIO_VERY_SEVERE:
        return Severity.SEVERE, "⚠️ Very severe hyperthyroidism (FT4 > 3× ULN). Consider specialist consultation."
    # below 1.0 only FT3 is elevated
    return Severity.MILD, None


def _pediatric_dose(weight: float, severity: Severity, alerts: List[str]) -> float:
    key = "severe" if severity == Severity.SEVERE else "standard"
    per_kg, cap = PEDIATRIC_DOSING[key]
    if severity == Severity.SEVERE:
        alerts.append(
            f"Pediatric patient: Severe hyperthyroidism - weight-based dosing "
            f"({weight:g}kg × {per_kg:g} mg/kg/day, capped at {cap:g} mg/day)."
        )
    else:
        alerts.append(
            f"Pediatric patient: Weight-based dosing ({weight:g}kg × {per_kg:g} mg/kg/day, capped at {cap:g} mg/day)."
        )
    return min(weight * per_kg, cap)


def _adult_dose(
    severity: Severity,
    age: float,
    has_cardiac: bool,
    ft3_elevated: bool,
    ft3_disproportionate: bool,
    alerts: List[str],
) -> Tuple[float, int]:
    is_elderly = age >= ELDERLY_HYPERTHYROID_AGE

    if severity == Severity.MILD:
        if not is_elderly and not has_cardiac:
            if ft3_elevated:
                alerts.append(
                    "Mild hyperthyroidism with elevated T3: Age < 65 and no cardiac disease - "
                    "10 mg/day (upper end of 5-10 mg/day range)."
                )
                return 10.0, 6
            alerts.append("Mild hyperthyroidism: Age < 65 and no cardiac disease - 5-10 mg/day.")
            return 7.5, 6
        alerts.append("Mild hyperthyroidism: Age ≥ 65 or cardiac disease present - 5 mg/day (conservative).")
        return 5.0, 6

    if severity == Severity.MODERATE:
        if ft3_disproportionate:
            alerts.append("Moderate hyperthyroidism with disproportionately high FT3 - 20 mg/day (upper end of range).")
            return 20.0, 4
        alerts.append("Moderate hyperthyroidism - 10-20 mg/day.")
        return 15.0, 4

    follow_up = 4 if is_elderly else 2
    if is_elderly or has_cardiac:
        alerts.append(
            "Severe hyperthyroidism in elderly/cardiac patient - 20 mg/day (conservative, avoid overtreatment). "
            "Recommend beta-blocker and close follow-up in 4-6 weeks."
        )
        return 20.0, follow_up
    alerts.append("Severe hyperthyroidism - 30-40 mg/day. Recommend beta-blocker and specialist supervision.")
    return 35.0, follow_up


def calculate_methimazole_dose(
    profile: PatientProfile,
    limits: SafetyLimits = DEFAULT_SAFETY_LIMITS,
) -> DosageResult:
    """
    Compute a methimazole dose (mg/day) for a suppressed-TSH profile.

    Missing FT3/FT4 and T3/T4 pairs are not an error: the result comes back
    with requires_hormone_data set and the absent fields listed.

    Raises:
        MissingInputError: TSH absent, or overt disease without an FT4/T4 value
    """
    if profile.current_tsh is None:
        raise MissingInputError("Current TSH is required for methimazole dosage calculation.", field="current_tsh")

    tsh = profile.current_tsh
    alerts: List[str] = []

    if tsh > METHIMAZOLE_TSH_CEILING:
        alerts.append(
            f"TSH ({tsh:g} mIU/L) is not suppressed enough to indicate hyperthyroidism requiring methimazole."
        )
        return DosageResult(dose=0, alerts=alerts)

    basis = select_hormone_basis(profile)
    if basis is None:
        missing = missing_hormone_fields(profile)
        logger.info("Methimazole dosing needs hormone data: %s", ", ".join(m.value for m in missing))
        alerts.append(
            "⚠️ Missing hormone values. Please enter either Free FT3 & Free FT4, OR Total T3 & Total T4 "
            "to calculate methimazole dose."
        )
        return DosageResult(
            dose=0,
            alerts=alerts,
            requires_hormone_data=True,
            missing_hormone_fields=missing,
        )

    t4_field, t3_field = HORMONE_PAIRS[basis]
    t4_value = hormone_value(profile, t4_field)
    t3_value = hormone_value(profile, t3_field)
    t4_uln = THYROID_REFERENCE_RANGES[t4_field].high
    t3_uln = THYROID_REFERENCE_RANGES[t3_field].high

    ft3_elevated = t3_value is not None and t3_value > t3_uln
    is_hyperthyroid = (t4_value is not None and t4_value > t4_uln) or ft3_elevated

    age = profile.age if profile.age is not None else 0
    has_cardiac = profile.has_heart_disease

    if not is_hyperthyroid:
        if age >= SUBCLINICAL_TREATMENT_AGE or has_cardiac or profile.has_osteoporosis:
            alerts.append(
                "Subclinical hyperthyroidism detected. Treatment indicated due to age ≥ 65, "
                "cardiac disease, or osteoporosis."
            )
            alerts.append(TITRATION_GUIDANCE)
            return DosageResult(dose=SUBCLINICAL_DOSE, alerts=alerts, severity=Severity.MILD, follow_up_weeks=6)

        alerts.append(
            "Subclinical hyperthyroidism detected (TSH ≤ 0.1 but FT4/FT3 normal). No methimazole treatment "
            "needed unless age ≥ 65, cardiac disease, or osteoporosis present."
        )
        return DosageResult(dose=0, alerts=alerts, severity=Severity.MILD, follow_up_weeks=12)

    alerts.append("Overt hyperthyroidism confirmed based on elevated hormone levels.")
    if t4_value is None:
        raise MissingInputError("Cannot determine severity without FT4 or T4 value.", field=t4_field.value)

    ft4_ratio = t4_value / t4_uln
    ft3_disproportionate = t3_value is not None and t3_value > t3_uln * FT3_DISPROPORTIONATE_RATIO
    ft3_very_high = t3_value is not None and t3_value > t3_uln * FT3_VERY_HIGH_RATIO

    severity, severity_alert = classify_hyperthyroid_severity(ft4_ratio, ft3_very_high)
    if severity_alert:
        alerts.append(severity_alert)

    weight = profile.weight_kg
    if 0 < age < PEDIATRIC_MAX_AGE and weight is not None and weight > 0:
        dose = _pediatric_dose(weight, severity, alerts)
        follow_up_weeks = 4
    else:
        dose, follow_up_weeks = _adult_dose(
            severity, age, has_cardiac, ft3_elevated, ft3_disproportionate, alerts
        )

    dose = round_methimazole_dose(dose, limits.methimazole_minimum_dose, limits.methimazole_maximum_dose)
    logger.debug("Methimazole %s dose %s mg (%s basis, FT4 ratio %.2f)", severity.value, dose, basis.value, ft4_ratio)

    alerts.append(TITRATION_GUIDANCE)
    return DosageResult(dose=dose, alerts=alerts, severity=severity, follow_up_weeks=follow_up_weeks)
