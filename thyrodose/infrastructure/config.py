import os
import logging

from thyrodose.domain.models import SafetyLimits
from thyrodose.domain.reference_tables import DEFAULT_SAFETY_LIMITS

try:
    import streamlit as st  # type: ignore
    _HAS_STREAMLIT = True
except ImportError:
    _HAS_STREAMLIT = False

logger = logging.getLogger(__name__)


# setting name -> SafetyLimits field
SAFETY_LIMIT_OVERRIDES = {
    "THYRODOSE_MINIMUM_DOSE": "minimum_dose",
    "THYRODOSE_MAXIMUM_DOSE": "maximum_dose",
    "THYRODOSE_ELDERLY_MAX_DOSE": "elderly_max_dose",
    "THYRODOSE_CARDIAC_MAX_DOSE": "cardiac_maximum_dose",
}


def get_secret(name: str, default: str | None = None) -> str | None:
    # Prefer Streamlit secrets if available
    if _HAS_STREAMLIT:
        try:
            if name in st.secrets:
                return str(st.secrets.get(name))
        except Exception as e:
            logger.debug("Streamlit secrets unavailable, reading %s from environment: %s", name, e)
    # Fallback to environment variables
    return os.environ.get(name, default)


class Settings:
    @property
    def log_level(self) -> str:
        return (get_secret("LOG_LEVEL", "INFO") or "INFO").upper()

    @property
    def safety_limits(self) -> SafetyLimits:
        overrides = {}
        for name, field in SAFETY_LIMIT_OVERRIDES.items():
            raw = get_secret(name)
            if raw is None or not raw.strip():
                continue
            try:
                overrides[field] = float(raw)
            except ValueError:
                logger.error("Setting %s is not a number: %r", name, raw)
                raise
        if not overrides:
            return DEFAULT_SAFETY_LIMITS
        logger.info("Safety limit overrides: %s", overrides)
        return SafetyLimits(**{**DEFAULT_SAFETY_LIMITS.dict(), **overrides})
