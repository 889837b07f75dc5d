"""Entry point for front ends that consume the dosage engine."""
import logging

from thyrodose.application.use_cases import ThyroidTreatmentUseCase
from thyrodose.infrastructure.config import Settings


logger = logging.getLogger(__name__)


def build_engine(settings: Settings | None = None) -> ThyroidTreatmentUseCase:
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level)
    limits = settings.safety_limits
    logger.debug(
        "Dosage engine ready (LT4 %g-%g mcg, elderly cap %g, cardiac cap %g)",
        limits.minimum_dose,
        limits.maximum_dose,
        limits.elderly_max_dose,
        limits.cardiac_maximum_dose,
    )
    return ThyroidTreatmentUseCase(limits=limits)
