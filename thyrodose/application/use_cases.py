import logging

from thyrodose.application.schemas import TreatmentPlan
from thyrodose.domain.conditions import classify_hyperthyroid_tier, detailed_analysis
from thyrodose.domain.errors import MissingInputError
from thyrodose.domain.hormones import hormone_value
from thyrodose.domain.levothyroxine import calculate_levothyroxine_dose
from thyrodose.domain.methimazole import HORMONE_PAIRS, calculate_methimazole_dose, select_hormone_basis
from thyrodose.domain.models import DosageResult, PatientProfile, SafetyLimits, Severity
from thyrodose.domain.reference_tables import (
    DEFAULT_SAFETY_LIMITS,
    FOLLOW_UP_WEEKS,
    HYPERTHYROID_FOLLOW_UP_WEEKS,
    HYPOTHYROID_TSH_THRESHOLDS,
    METHIMAZOLE_TSH_CEILING,
    THYROID_REFERENCE_RANGES,
    TSH_TIER_METHIMAZOLE_DOSES,
)


logger = logging.getLogger(__name__)


LEVOTHYROXINE_FREQUENCY = "Once daily (morning, empty stomach)"
METHIMAZOLE_FREQUENCY = "Once or twice daily"
TSH_TIER_METHIMAZOLE_FREQUENCY = "Twice daily"
NO_MEDICATION = "No medication required"


def hormones_within_range(profile: PatientProfile) -> bool:
    """True when a complete free or total hormone pair is present and in range."""
    basis = select_hormone_basis(profile)
    if basis is None:
        return False
    for hormone in HORMONE_PAIRS[basis]:
        ref = THYROID_REFERENCE_RANGES[hormone]
        if not ref.low <= hormone_value(profile, hormone) <= ref.high:
            return False
    return True


def build_no_treatment_result(profile: PatientProfile) -> DosageResult:
    tsh = profile.current_tsh
    if hormones_within_range(profile):
        message = f"TSH ({tsh:g} mIU/L) and hormone levels are within normal range. No treatment required."
    else:
        message = f"TSH ({tsh:g} mIU/L) is within normal range. Continue monitoring."
    return DosageResult(dose=0, follow_up_weeks=FOLLOW_UP_WEEKS["normal"], alerts=[message])


def build_tsh_tier_result(tsh: float, severity: Severity) -> DosageResult:
    """Starting methimazole estimate from the TSH tier alone, for mildly suppressed TSH."""
    return DosageResult(
        dose=TSH_TIER_METHIMAZOLE_DOSES[severity],
        severity=severity,
        follow_up_weeks=HYPERTHYROID_FOLLOW_UP_WEEKS[severity],
        alerts=[
            f"TSH suppressed at {tsh:g} mIU/L indicating hyperthyroidism. Requires antithyroid medication. "
            "Additional hormone levels (FT4/FT3 or T4/T3) needed for precise dosing."
        ],
    )


class ThyroidTreatmentUseCase:
    """Pick levothyroxine, methimazole or no treatment from TSH and run that calculator."""

    def __init__(self, limits: SafetyLimits = DEFAULT_SAFETY_LIMITS):
        self.limits = limits

    def recommend(self, profile: PatientProfile) -> TreatmentPlan:
        tsh = profile.current_tsh
        if tsh is None:
            raise MissingInputError("Current TSH is required to select a treatment.", field="current_tsh")

        analysis = detailed_analysis(profile)
        condition = analysis.condition

        if tsh > HYPOTHYROID_TSH_THRESHOLDS[Severity.MILD]:
            logger.info("Routing to levothyroxine: %s", condition)
            result = calculate_levothyroxine_dose(profile, self.limits)
            return TreatmentPlan(
                medication="Levothyroxine",
                unit="mcg",
                frequency=LEVOTHYROXINE_FREQUENCY,
                condition=condition,
                result=result,
                analysis=analysis,
            )

        hyper_tier = classify_hyperthyroid_tier(tsh)
        if hyper_tier is not None:
            if tsh <= METHIMAZOLE_TSH_CEILING:
                logger.info("Routing to methimazole: %s", condition)
                result = calculate_methimazole_dose(profile, self.limits)
                frequency = METHIMAZOLE_FREQUENCY if result.dose > 0 else ""
            else:
                logger.info("Methimazole estimated from TSH tier: %s", condition)
                result = build_tsh_tier_result(tsh, hyper_tier)
                frequency = TSH_TIER_METHIMAZOLE_FREQUENCY
            return TreatmentPlan(
                medication="Methimazole",
                unit="mg",
                frequency=frequency,
                condition=condition,
                result=result,
                analysis=analysis,
            )

        logger.info("No treatment indicated: %s", condition)
        return TreatmentPlan(
            medication=NO_MEDICATION,
            unit="",
            frequency="",
            condition=condition,
            result=build_no_treatment_result(profile),
            analysis=analysis,
        )
