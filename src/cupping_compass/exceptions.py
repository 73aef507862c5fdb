"""Custom exceptions for cupping-compass."""


class CuppingCompassError(Exception):
    """Base exception for cupping-compass."""

    pass


class ValidationError(CuppingCompassError):
    """Raised when an input value is out of range or malformed.

    Attributes:
        field: Name of the offending field (dotted path for nested values).
        message: Human readable reason.
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class ComputationError(CuppingCompassError):
    """Raised when an aggregation produces a value that breaks an invariant."""

    pass


class EvaluationNotFoundError(CuppingCompassError):
    """Raised when an evaluation does not exist in the owner's scope."""

    pass


class AuthenticationError(CuppingCompassError):
    """Raised when API key is invalid or missing."""

    pass


class RateLimitError(CuppingCompassError):
    """Raised when API rate limit is exceeded."""

    pass


class NarrativeError(CuppingCompassError):
    """Raised when a narrative report cannot be generated."""

    pass
