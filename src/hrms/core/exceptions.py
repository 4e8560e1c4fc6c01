class DomainError(Exception):
    """Base exception for business rule violations.

    These are expected outcomes of a request, never defects: controllers turn
    them into a JSON error and the process keeps running.
    """

    code = "DOMAIN_ERROR"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = "UNAUTHORIZED"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "FORBIDDEN"


class NotFoundError(DomainError):
    code = "NOT_FOUND"


class AlreadyClockedInError(ValidationError):
    code = "ALREADY_CLOCKED_IN"


class AlreadyClockedOutError(ValidationError):
    code = "ALREADY_CLOCKED_OUT"


class NotClockedInError(ValidationError):
    code = "NOT_CLOCKED_IN"


class InvalidRangeError(ValidationError):
    code = "INVALID_RANGE"


class InsufficientBalanceError(ValidationError):
    code = "INSUFFICIENT_BALANCE"


class AlreadyActionedError(DomainError):
    code = "ALREADY_ACTIONED"


class AlreadyGeneratedError(DomainError):
    code = "ALREADY_GENERATED"


class ConflictError(DomainError):
    """Raised when a transaction keeps colliding with concurrent writers."""

    code = "CONFLICT"
