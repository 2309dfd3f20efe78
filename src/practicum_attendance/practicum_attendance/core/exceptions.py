class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class BadRequestError(ValidationError):
    """Raised when a well-formed request does not fit the current record state."""


class AuthorizationError(DomainError):
    """Raised when a student is not allowed to perform an action."""


class NotFoundError(DomainError):
    """Raised when a required record does not exist."""


class ConflictError(DomainError):
    """Raised when an action collides with existing state."""


class DuplicateRecordError(ConflictError):
    """Raised by repositories when the (student, practicum, date) key already exists."""
