from typing import List, NamedTuple, Optional

from .models import HormoneField, PatientProfile
from .reference_tables import HORMONE_LOW_ADJUSTMENTS, THYROID_REFERENCE_RANGES


class HormoneAdjustment(NamedTuple):
    factor: float
    alerts: List[str]


def hormone_value(profile: PatientProfile, hormone: HormoneField) -> Optional[float]:
    return {
        HormoneField.FT3: profile.current_ft3,
        HormoneField.FT4: profile.current_ft4,
        HormoneField.T3: profile.current_t3,
        HormoneField.T4: profile.current_t4,
    }[hormone]


def evaluate_hormone_adjustment(profile: PatientProfile) -> HormoneAdjustment:
    """
    Fold the low-hormone corrections for FT4, FT3, T4 and T3 into one factor.

    Every present value under its reference low multiplies the factor by
    (1 + increase) and contributes one alert. The checks are independent and
    compound.
    """
    factor = 1.0
    alerts: List[str] = []

    for hormone, label, increase in HORMONE_LOW_ADJUSTMENTS:
        value = hormone_value(profile, hormone)
        if value is None:
            continue
        ref = THYROID_REFERENCE_RANGES[hormone]
        if value < ref.low:
            factor *= 1 + increase
            alerts.append(
                f"{label} ({value:g} {ref.units}) is below the reference range "
                f"({ref.low:g}-{ref.high:g} {ref.units}); increasing LT4 dose by {round(increase * 100)}%."
            )

    return HormoneAdjustment(factor=factor, alerts=alerts)
