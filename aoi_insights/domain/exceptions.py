"""
Domain error taxonomy.

Every public operation of the drawing engine and the fetch orchestrator
either returns a value or raises one of these. Each error carries a
machine-readable code so the HTTP layer can map it without string matching.
"""
from typing import Any, Dict, List, Optional


class AOIInsightsError(Exception):
    """Base class for all domain errors."""

    default_code: str = "AOI_INSIGHTS_ERROR"

    def __init__(self, message: str = "", code: str = ""):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    def to_error_dict(self) -> Dict[str, Any]:
        """Return a structured error payload with stable keys."""
        return {
            "code": self.code,
            "message": self.message,
        }


class InvalidPointError(AOIInsightsError, ValueError):
    """A coordinate is missing or not finite."""

    default_code = "INVALID_POINT"


class InsufficientPointsError(AOIInsightsError):
    """Too few points to build the requested region kind. Caller error, not retried."""

    default_code = "INSUFFICIENT_POINTS"

    def __init__(self, kind: str, required: int, actual: int):
        self.kind = kind
        self.required = required
        self.actual = actual
        super().__init__(
            f"A {kind} needs at least {required} points, got {actual}"
        )


class NoRegionError(AOIInsightsError):
    """A boundary fetch was requested but no region has been drawn."""

    default_code = "NO_REGION"

    def __init__(self, message: str = "No region of interest has been drawn yet"):
        super().__init__(message)


class DataUnavailableError(AOIInsightsError):
    """Every provider attempt failed.

    Attributes:
        failures: Classified failure of each attempted strategy, in order.
    """

    default_code = "DATA_UNAVAILABLE"

    def __init__(self, message: str, failures: Optional[List[Any]] = None):
        self.failures = list(failures or [])
        super().__init__(message)

    def to_error_dict(self) -> Dict[str, Any]:
        payload = super().to_error_dict()
        payload["attempts"] = [
            {"strategy": f.strategy, "kind": f.kind, "detail": f.detail}
            for f in self.failures
        ]
        return payload
