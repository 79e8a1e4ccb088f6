"""Error types raised by the Auth Rocket client"""

from typing import Optional


class AuthError(Exception):
    """Base class for client-side authentication errors

    The underlying failure, when there is one, is available as ``cause``
    and is also chained as ``__cause__``.
    """

    prefix = "Authentication error"

    def __init__(self, cause: Optional[BaseException] = None, message: Optional[str] = None):
        self.cause = cause
        if message is None:
            message = f"{self.prefix}: {cause}" if cause is not None else self.prefix
        super().__init__(message)


class RegistrationFailed(AuthError):
    prefix = "Registration failed"


class LoginFailed(AuthError):
    prefix = "Login failed"


class VerificationFailed(AuthError):
    prefix = "Token verification failed"


class DeletionFailed(AuthError):
    prefix = "User deletion failed"


class NotAuthenticated(AuthError):
    """Raised before any network call when no user is signed in"""

    prefix = "User is not authenticated"
