class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(ValidationError):
    """Raised when a referenced record does not exist."""


class InvalidPatternError(ValidationError):
    """Raised for a malformed rotation pattern (empty, non-binary, mismatched counts)."""


class InvalidRangeError(ValidationError):
    """Raised when a date range ends before it starts."""


class InvalidTimeRangeError(ValidationError):
    """Raised when shift times cannot be parsed."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""
