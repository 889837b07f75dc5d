"""
Dosage engine exception hierarchy.

Hard failures only. A calculation that merely lacks hormone data is not an
error; it returns a DosageResult flagged with requires_hormone_data.
"""
from typing import Any, Dict, Optional


class DosageCalculationError(Exception):
    """Base exception for all dosage calculation failures."""

    def __init__(
        self,
        message: str,
        code: str = "DOSAGE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class MissingInputError(DosageCalculationError):
    """A value the calculator cannot work without was not supplied."""

    def __init__(
        self,
        message: str,
        field: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="MISSING_INPUT",
            details={"field": field, **(details or {})}
        )
        self.field = field


class UnsafeDosingError(DosageCalculationError):
    """The profile describes a situation where no dose may be computed."""

    def __init__(
        self,
        message: str,
        reason: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="UNSAFE_COMBINATION",
            details={"reason": reason, **(details or {})}
        )
        self.reason = reason


class InvalidDoseError(DosageCalculationError):
    """A rounding helper was given something that is not a number."""

    def __init__(self, value: Any):
        super().__init__(
            message="Invalid dose: must be a number",
            code="INVALID_DOSE",
            details={"value": repr(value)}
        )
        self.value = value
