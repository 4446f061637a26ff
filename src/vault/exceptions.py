"""Error taxonomy shared by services and handlers.

Every error carries the HTTP status it maps to. The application registers a
single handler that renders them as ``{"error": message}``.
"""


class VaultError(Exception):
    """Base exception for all application errors."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(VaultError):
    """Raised when request input is missing or malformed."""

    status_code = 400
    default_message = "Missing fields"


class ConflictError(ValidationError):
    """Raised when a unique constraint in the database is violated."""

    default_message = "Username or email already in use"


class InvalidCredentialsError(ValidationError):
    """Raised on a failed login.

    Unknown user, OAuth-only account and wrong password all share one message.
    """

    default_message = "Invalid username or password"


class AuthenticationError(VaultError):
    """Raised when a request carries no session token."""

    status_code = 401
    default_message = "Not authenticated"


class InvalidTokenError(AuthenticationError):
    """Raised when a session token fails verification."""

    default_message = "Invalid token"


class AuthorizationError(VaultError):
    """Raised when an authenticated user does not own the resource."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(VaultError):
    """Raised when a requested resource does not exist."""

    status_code = 404
    default_message = "Not found"


class UpstreamError(VaultError):
    """Raised when Supabase or GitHub fails.

    The message is always generic; details are logged server-side only.
    """

    status_code = 500
    default_message = "Upstream service failed"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
