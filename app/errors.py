"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
USER_EXISTS = "USER_EXISTS"
VALIDATION_ERROR = "VALIDATION_ERROR"
UNAUTHORIZED = "UNAUTHORIZED"
FORBIDDEN = "FORBIDDEN"
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
INVALID_REFRESH = "INVALID_REFRESH"
INVALID_RESET = "INVALID_RESET"
BOOTSTRAP_LOCKED = "BOOTSTRAP_LOCKED"
PROJECT_CODE_ERROR = "PROJECT_CODE_ERROR"
ASSIGNMENT_EXISTS = "ASSIGNMENT_EXISTS"
HTTP_ERROR = "HTTP_ERROR"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    pass


class DuplicateResourceError(DomainError):
    """Raised when attempting to create or update a resource that would violate a uniqueness constraint."""

    def __init__(self, message: str, code: str = USER_EXISTS):
        super().__init__(message)
        self.code = code


class UnauthorizedError(DomainError):
    """Raised when a request carries no usable access token."""

    pass


class ForbiddenError(DomainError):
    """Raised when the caller is authenticated but lacks the role or ownership required."""

    pass


class InvalidCredentialsError(DomainError):
    """Raised on any login failure. The message never says which part was wrong."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class InvalidRefreshError(DomainError):
    """Raised when a refresh token is unknown, revoked, expired or its user is inactive."""

    def __init__(self, message: str = "Refresh token invalid"):
        super().__init__(message)


class InvalidResetError(DomainError):
    """Raised when a password-reset token does not match or has expired."""

    def __init__(self, message: str = "Reset token is invalid or expired"):
        super().__init__(message)


class BootstrapLockedError(DomainError):
    """Raised when bootstrap is attempted after the first user exists."""

    def __init__(self, message: str = "Bootstrap already completed"):
        super().__init__(message)


class ProjectCodeError(DomainError):
    """Raised when no unique project code could be allocated."""

    def __init__(self, message: str = "Could not generate a unique project code"):
        super().__init__(message)


class InvalidTokenError(Exception):
    """Raised by the token service when a bearer token cannot be verified.

    Not a DomainError: callers translate it into the error that fits the flow
    (UnauthorizedError, InvalidRefreshError, or a silent logout).
    """

    pass
