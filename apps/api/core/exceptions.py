"""
Custom exception classes and error handling.

Provides consistent error responses across the API, plus the
engine-level errors raised by the weight cut services.
"""
from fastapi import HTTPException, status
from typing import Optional, Dict, Any


class APIException(HTTPException):
    """Base API exception with consistent structure."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class ValidationError(APIException):
    """Validation error."""

    def __init__(self, detail: str, field: Optional[str] = None):
        error_code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code=error_code
        )


# ---------------------------------------------------------------------------
# Engine errors (no HTTP semantics; routers translate them)
# ---------------------------------------------------------------------------


class WeightCutError(Exception):
    """Base class for weight cut engine errors."""


class InvalidWeightError(WeightCutError, ValueError):
    """A mass value fell outside the plausible range."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class ProtocolTableError(WeightCutError):
    """Protocol buckets overlap or leave a gap on the days-until axis."""


class OptimisticUpdateError(WeightCutError):
    """An optimistic update was committed and rolled back (or vice versa)."""
