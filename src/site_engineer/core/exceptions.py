class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the caller cannot be identified."""


class InvalidCredentials(AuthenticationError):
    """Raised when login credentials are invalid."""


class Unauthenticated(AuthenticationError):
    """Raised when a request carries no valid session."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFound(DomainError):
    """Raised when a referenced record does not exist."""


class InvalidStateTransition(DomainError):
    """Raised when a workflow record is not in a state that allows the change."""


class AlreadyCheckedOut(InvalidStateTransition):
    """Raised when closing a check-in that already has a check-out time."""


class InternalError(DomainError):
    """Raised when persistence or transport fails underneath an operation."""
