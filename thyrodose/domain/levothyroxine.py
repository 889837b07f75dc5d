"""
Levothyroxine (LT4) starting-dose calculator for hypothyroid patients.

The dose is built in a fixed order: severity base dose from weight and TSH,
then an ordered chain of adjustment stages acting on the running dose, then
titration limiting, symptom reduction, clamping and rounding. Every stage
that fires appends its own alert, so the alert list reads as the audit trail
of the calculation.
"""
import logging
import math
from typing import Callable, List, NamedTuple, Optional

from .conditions import TRIMESTER_LABELS, classify_hypothyroid_severity, summarize_conditions
from .errors import MissingInputError, UnsafeDosingError
from .hormones import evaluate_hormone_adjustment
from .models import DosageResult, PatientProfile, SafetyLimits, Severity
from .reference_tables import (
    DEFAULT_SAFETY_LIMITS,
    DIAGNOSIS_STRONG_TSH,
    ELDERLY_AGE_THRESHOLD,
    ESTROGEN_THERAPY_MULTIPLIER,
    FOLLOW_UP_WEEKS,
    GI_ABSORPTION_MULTIPLIER,
    HEART_DISEASE_MULTIPLIERS,
    KIDNEY_DISEASE_ADJUSTMENTS,
    LEVOTHYROXINE_MULTIPLIERS,
    LIVER_DISEASE_ADJUSTMENTS,
    LOW_TSH_THRESHOLD,
    LOW_WEIGHT_MULTIPLIER,
    LOW_WEIGHT_THRESHOLD_KG,
    MAX_DOSE_CHANGE,
    OSTEOPOROSIS_MULTIPLIER,
    PREGNANCY_MULTIPLIERS,
    PREGNANCY_TARGET_TSH,
    SYMPTOM_DOSE_FLOOR,
    SYMPTOM_DOSE_REDUCTION,
    THYROID_REFERENCE_RANGES,
)
from .rounding import nearest_commercial_tablet, nearest_safe_dose


logger = logging.getLogger(__name__)


SEVERITY_ALERTS = {
    Severity.SEVERE: "TSH ≥ 20 mIU/L - Severe hypothyroidism, full replacement dose recommended",
    Severity.MODERATE: "TSH 10-20 mIU/L - Moderate hypothyroidism, moderate replacement dose recommended",
    Severity.MILD: "TSH 4.5-10 mIU/L - Mild hypothyroidism, partial replacement dose recommended",
}

# A stage returns the new running dose, or None to stop with dose 0.
Stage = Callable[[PatientProfile, float, List[str], SafetyLimits], Optional[float]]


class ConditionRule(NamedTuple):
    applies: Callable[[PatientProfile], bool]
    factor: float
    alert: str


def _rule_stage(rule: ConditionRule) -> Stage:
    def stage(profile: PatientProfile, dose: float, alerts: List[str], limits: SafetyLimits) -> Optional[float]:
        if not rule.applies(profile):
            return dose
        alerts.append(rule.alert)
        return dose * rule.factor
    return stage


def _hormone_stage(profile, dose, alerts, limits):
    adjustment = evaluate_hormone_adjustment(profile)
    alerts.extend(adjustment.alerts)
    return dose * adjustment.factor


def _pregnancy_stage(profile, dose, alerts, limits):
    target_tsh = THYROID_REFERENCE_RANGES["TSH"].high
    if profile.is_pregnant:
        trimester = profile.trimester
        factor = PREGNANCY_MULTIPLIERS[trimester]
        increase = round((factor - 1) * 100)
        dose *= factor
        if trimester is None:
            alerts.append(
                f"Pregnancy detected but trimester not specified - {increase}% dose increase applied "
                "(please specify trimester for optimal dosing)"
            )
        else:
            alerts.append(f"{TRIMESTER_LABELS[trimester]} trimester pregnancy - {increase}% dose increase applied")

        target_tsh = PREGNANCY_TARGET_TSH[trimester]
        if trimester == 1:
            alerts.append(f"1st trimester target TSH < {target_tsh:.1f} mIU/L")
        else:
            alerts.append(f"2nd/3rd trimester target TSH < {target_tsh:.1f} mIU/L")

    if profile.current_tsh > target_tsh:
        alerts.append(
            f"Current TSH ({profile.current_tsh:g}) exceeds target (<{target_tsh:g}) - dose may need adjustment"
        )
    return dose


def _cardiac_stage(profile, dose, alerts, limits):
    if profile.has_high_risk_heart_disease:
        dose *= HEART_DISEASE_MULTIPLIERS["high_risk"]
        alerts.append("High-risk heart disease - 25% dose reduction for cardiac safety. Start low, go slow.")
        # anxiety stands in for palpitations
        if profile.symptoms.anxious_or_restless:
            alerts.append("ALERT: High-risk heart disease with symptoms - consider urgent cardiac evaluation")
        if dose > limits.cardiac_maximum_dose:
            dose = limits.cardiac_maximum_dose
            alerts.append(
                f"High-risk cardiac patient - dose capped at {limits.cardiac_maximum_dose:g} mcg for cardiac safety"
            )
    elif profile.has_low_risk_heart_disease:
        dose *= HEART_DISEASE_MULTIPLIERS["low_risk"]
        alerts.append("Low-risk heart disease - 10% dose reduction for cardiac safety.")
    return dose


def _adrenal_stage(profile, dose, alerts, limits):
    if profile.has_adrenal_insufficiency:
        alerts.append("Critical: Adrenal insufficiency must be treated before giving levothyroxine.")
        logger.info("Levothyroxine withheld: adrenal insufficiency")
        return None
    return dose


def _liver_stage(profile, dose, alerts, limits):
    if not profile.has_liver_disease:
        return dose
    factor, alert = LIVER_DISEASE_ADJUSTMENTS[profile.liver_disease_type]
    alerts.append(alert)
    return dose * factor


def _kidney_stage(profile, dose, alerts, limits):
    if not profile.has_kidney_disease:
        return dose
    factor, alert = KIDNEY_DISEASE_ADJUSTMENTS[profile.kidney_disease_stage]
    alerts.append(alert)
    return dose * factor


def _elderly_cap_stage(profile, dose, alerts, limits):
    if profile.age is not None and profile.age >= ELDERLY_AGE_THRESHOLD:
        dose = min(dose, limits.elderly_max_dose)
        alerts.append(
            f"Elderly patient (≥{ELDERLY_AGE_THRESHOLD}) - dose capped at {limits.elderly_max_dose:g} mcg for safety"
        )
    return dose


ADJUSTMENT_STAGES = (
    _hormone_stage,
    _pregnancy_stage,
    _cardiac_stage,
    _adrenal_stage,
    _rule_stage(ConditionRule(
        lambda p: p.has_osteoporosis,
        OSTEOPOROSIS_MULTIPLIER,
        "Patient has osteoporosis - dose reduced by 10% to minimize bone loss risk. "
        "Avoid TSH suppression below 1.0 mIU/L.",
    )),
    _rule_stage(ConditionRule(
        lambda p: p.on_estrogen_therapy,
        ESTROGEN_THERAPY_MULTIPLIER,
        "On estrogen therapy – increase LT4 dose by ~15% and recheck TSH in 6 weeks.",
    )),
    _rule_stage(ConditionRule(
        lambda p: p.has_gi_absorption_issues,
        GI_ABSORPTION_MULTIPLIER,
        "GI absorption issues - 20% dose increase applied",
    )),
    _liver_stage,
    _kidney_stage,
    _rule_stage(ConditionRule(
        lambda p: p.weight_kg < LOW_WEIGHT_THRESHOLD_KG,
        LOW_WEIGHT_MULTIPLIER,
        f"Low body weight (<{LOW_WEIGHT_THRESHOLD_KG}kg) - 10% dose reduction for conservative start",
    )),
    _elderly_cap_stage,
)


def _check_required_inputs(profile: PatientProfile) -> None:
    if profile.weight_kg is None:
        raise MissingInputError("Weight is required for dosage calculation.", field="weight_kg")
    if profile.current_tsh is None:
        raise MissingInputError("Current TSH is required for dosage calculation.", field="current_tsh")


def _check_low_tsh_safety(profile: PatientProfile) -> None:
    if profile.current_tsh >= LOW_TSH_THRESHOLD:
        return
    if not profile.has_hypothyroid_diagnosis:
        logger.warning("Levothyroxine refused: suppressed TSH without hypothyroid diagnosis")
        raise UnsafeDosingError(
            f"TSH too low (<{LOW_TSH_THRESHOLD}) - patient may be hyperthyroid. Recheck before dosing.",
            reason="possible_hyperthyroidism",
            details={"tsh": profile.current_tsh},
        )
    if profile.symptoms.count > 0:
        logger.warning("Levothyroxine refused: suppressed TSH with overdose symptoms")
        raise UnsafeDosingError(
            f"TSH is very low (<{LOW_TSH_THRESHOLD}) and patient has symptoms of overdosage. "
            "Pause or reduce dose and recheck TSH urgently.",
            reason="overdose_symptoms",
            details={"tsh": profile.current_tsh},
        )


def _diagnosis_note(profile: PatientProfile) -> Optional[str]:
    tsh = profile.current_tsh
    if profile.has_hypothyroid_diagnosis is False:
        if tsh > DIAGNOSIS_STRONG_TSH:
            return ("⚠️ TSH > 10 mIU/L suggests hypothyroidism despite negative diagnosis. "
                    "Proceeding based on labs but confirm diagnosis.")
        return ("ℹ️ Patient not formally diagnosed with hypothyroidism. Proceeding with LT4 dosing because "
                "TSH is above 4.5 mIU/L - confirm diagnosis with healthcare provider.")
    if profile.has_hypothyroid_diagnosis is None:
        if tsh > DIAGNOSIS_STRONG_TSH:
            return ("⚠️ TSH > 10 mIU/L strongly suggests hypothyroidism. Proceeding with dose calculation. "
                    "Confirm diagnosis with healthcare provider.")
        return ("⚠️ Hypothyroidism diagnosis status unknown. Proceeding with dose calculation based on TSH "
                "levels. Please confirm diagnosis with healthcare provider.")
    return None


def _limit_titration(profile: PatientProfile, dose: float, alerts: List[str]) -> float:
    if profile.current_dose is None:
        return dose

    max_change = MAX_DOSE_CHANGE["standard"]
    reason = ""
    if profile.has_high_risk_heart_disease:
        max_change = MAX_DOSE_CHANGE["conservative"]
        reason = " due to high-risk heart disease"
    elif profile.has_osteoporosis:
        max_change = MAX_DOSE_CHANGE["conservative"]
        reason = " due to osteoporosis"

    change = dose - profile.current_dose
    if abs(change) > max_change:
        dose = profile.current_dose + math.copysign(max_change, change)
        alerts.append(
            f"Gradual titration applied - dose change limited to ±{max_change:g} mcg from current dose "
            f"({profile.current_dose:g} mcg){reason}"
        )
    return dose


def _reduce_for_symptoms(profile: PatientProfile, dose: float, alerts: List[str]) -> float:
    reduction = SYMPTOM_DOSE_REDUCTION.get(profile.symptoms.count)
    if reduction is None:
        return dose
    alerts.append(f"Symptoms reported - dose reduced by {reduction:g} mcg. Recheck TSH in 4 weeks.")
    return max(SYMPTOM_DOSE_FLOOR, dose - reduction)


def calculate_levothyroxine_dose(
    profile: PatientProfile,
    limits: SafetyLimits = DEFAULT_SAFETY_LIMITS,
) -> DosageResult:
    """
    Compute a bounded LT4 starting dose (mcg/day) for a hypothyroid profile.

    Args:
        profile: Patient snapshot; weight_kg and current_tsh are required
        limits: Dose bounds, defaults to the reference safety limits

    Returns:
        DosageResult with the ladder-rounded dose, nearest commercial tablet,
        severity, follow-up interval and the alert trail. Dose is 0 for
        euthyroid TSH and for adrenal insufficiency.

    Raises:
        MissingInputError: weight or TSH absent
        UnsafeDosingError: TSH < 0.1 without a hypothyroid diagnosis, or
            with overdose symptoms
    """
    _check_required_inputs(profile)
    _check_low_tsh_safety(profile)

    tsh = profile.current_tsh
    alerts: List[str] = []
    tsh_range = THYROID_REFERENCE_RANGES["TSH"]

    if tsh < tsh_range.high:
        if tsh >= tsh_range.low:
            alerts.append(
                f"✅ No LT4 therapy needed at this time. Patient TSH ({tsh:g}) is within the normal range. "
                "Monitor periodically."
            )
        else:
            alerts.append(
                f"✅ No LT4 therapy needed at this time. Patient TSH ({tsh:g}) is below the "
                f"{tsh_range.high:g} mIU/L treatment threshold. Monitor periodically."
            )
        if tsh < LOW_TSH_THRESHOLD:
            alerts.append(
                f"WARNING: TSH is very low (<{LOW_TSH_THRESHOLD}) in diagnosed hypothyroid patient. "
                "Consider dose reduction or temporary hold."
            )
        return DosageResult(dose=0, alerts=alerts)

    note = _diagnosis_note(profile)
    if note:
        alerts.append(note)

    severity = classify_hypothyroid_severity(tsh)
    if severity is None:
        alerts.append("Consider clinical assessment before treatment.")
        return DosageResult(dose=0, alerts=alerts)

    dose = LEVOTHYROXINE_MULTIPLIERS[severity] * profile.weight_kg
    alerts.append(SEVERITY_ALERTS[severity])

    for stage in ADJUSTMENT_STAGES:
        dose = stage(profile, dose, alerts, limits)
        if dose is None:
            return DosageResult(
                dose=0,
                severity=severity,
                alerts=alerts,
                medical_conditions_summary=summarize_conditions(profile),
            )

    dose = _limit_titration(profile, dose, alerts)
    dose = _reduce_for_symptoms(profile, dose, alerts)

    dose = max(limits.minimum_dose, min(dose, limits.maximum_dose))
    final_dose = nearest_safe_dose(dose)
    logger.debug("Levothyroxine dose %.2f mcg rounded to %s mcg", dose, final_dose)

    return DosageResult(
        dose=final_dose,
        nearest_tablet=nearest_commercial_tablet(dose),
        severity=severity,
        follow_up_weeks=FOLLOW_UP_WEEKS[severity],
        alerts=alerts,
        medical_conditions_summary=summarize_conditions(profile),
    )
