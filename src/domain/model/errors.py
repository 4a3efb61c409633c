"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist or is not owned by the caller."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class InvalidCredentialsError(DomainError):
    """Login email/password pair did not match a user."""


class InvalidTokenError(DomainError):
    """Token is malformed, fails signature verification, or has the wrong use."""


class UnauthenticatedError(DomainError):
    """No valid, still-active token resolves to a user."""


class StoreUnavailableError(DomainError):
    """Backing store could not be reached or rejected the operation."""
