"""Map raw doses onto dispensable values."""
import math
from numbers import Real
from typing import Any

from .errors import InvalidDoseError
from .reference_tables import (
    AVAILABLE_DOSES,
    COMMERCIAL_TABLETS,
    METHIMAZOLE_ROUNDING_STEP,
    PREFER_LOWER_WITHIN,
    PREFER_UPPER_WITHIN,
    ROUNDING_BOUNDS,
)


def _clamped(predicted_dose: Any) -> float:
    if isinstance(predicted_dose, bool) or not isinstance(predicted_dose, Real) or math.isnan(predicted_dose):
        raise InvalidDoseError(predicted_dose)
    low, high = ROUNDING_BOUNDS
    return min(max(float(predicted_dose), low), high)


def nearest_safe_dose(predicted_dose: float) -> float:
    """
    Round a levothyroxine dose onto the 12.5 mcg ladder.

    The lower rung wins when it is within 6.25 mcg, unless the upper rung is
    within 1 mcg (99 -> 100). Otherwise the closer rung wins, lower on a tie.

    Raises:
        InvalidDoseError: if the dose is not a number
    """
    dose = _clamped(predicted_dose)

    lower = AVAILABLE_DOSES[0]
    upper = AVAILABLE_DOSES[-1]
    for rung in AVAILABLE_DOSES:
        if rung <= dose:
            lower = rung
        if rung >= dose:
            upper = rung
            break

    dist_to_lower = abs(dose - lower)
    dist_to_upper = abs(upper - dose)

    if dist_to_lower <= PREFER_LOWER_WITHIN and dist_to_upper > PREFER_UPPER_WITHIN:
        return lower
    if dist_to_upper <= PREFER_UPPER_WITHIN:
        return upper
    return lower if dist_to_lower <= dist_to_upper else upper


def nearest_commercial_tablet(predicted_dose: float) -> float:
    """Closest pharmacy tablet strength; the smaller tablet wins a tie."""
    dose = _clamped(predicted_dose)

    nearest = COMMERCIAL_TABLETS[0]
    min_distance = abs(dose - nearest)
    for tablet in COMMERCIAL_TABLETS:
        distance = abs(dose - tablet)
        if distance < min_distance:
            min_distance = distance
            nearest = tablet
    return nearest


def round_methimazole_dose(dose: float, minimum: float, maximum: float) -> float:
    # half-up, 7.5 -> 10
    rounded = math.floor(dose / METHIMAZOLE_ROUNDING_STEP + 0.5) * METHIMAZOLE_ROUNDING_STEP
    return float(max(minimum, min(rounded, maximum)))
