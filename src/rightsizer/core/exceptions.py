"""Custom exceptions for the rightsizing advisor."""

from typing import Optional, Dict, Any


class RightsizerException(Exception):
    """Base exception for the rightsizing advisor."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class EmptyInputError(RightsizerException):
    """Raised when a statistic is requested over an empty sample set."""

    def __init__(self, what: str = "samples"):
        self.what = what
        super().__init__(f"No {what} provided", {"what": what})


class InsufficientDataError(RightsizerException):
    """Raised when there are too few samples for trend estimation.

    The zero-valued trend is attached so callers can keep going with it.
    """

    def __init__(self, required: int, actual: int, trend: Any = None):
        self.required = required
        self.actual = actual
        self.trend = trend
        super().__init__(
            f"Insufficient data for trend analysis (need {required}+ samples, got {actual})",
            {"required": required, "actual": actual}
        )


class InvalidRequestError(RightsizerException):
    """Raised when a workload's requested resources are zero or negative."""

    def __init__(self, field: str, value: Any, message: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid request for {field}: {message}", {"field": field, "value": value})


class ConfigurationException(RightsizerException):
    """Raised when configuration is invalid."""
    pass


class PricingException(RightsizerException):
    """Raised when a pricing provider cannot produce cost information."""

    def __init__(self, provider: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.provider = provider
        super().__init__(f"Pricing lookup failed for {provider}: {message}", details)
