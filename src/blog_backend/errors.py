"""
Domain errors for the Blog Backend.

Services and the auth dependency raise these; the application registers a single
handler that renders any `BlogError` as `{"success": false, "message": ...}` with
the error's HTTP status. Unexpected failures are not modelled here: route
handlers log them and answer with a generic 500.
"""

from typing import Dict, Optional


class BlogError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


class Unauthenticated(BlogError):
    """No bearer token was presented."""

    status_code = 401
    default_message = "No token provided"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(BlogError):
    """A bearer token was presented but could not be accepted."""

    status_code = 403
    default_message = "Failed to authenticate token"


class InvalidToken(Forbidden):
    """Signature mismatch, malformed payload, or expired token."""


class InvalidCredentials(BlogError):
    """Unknown email or wrong password. Both cases share one message."""

    status_code = 401
    default_message = "Invalid email or password"


class DuplicateEmail(BlogError):
    status_code = 401
    default_message = "Already a user with this email"


class NotFound(BlogError):
    status_code = 404
    default_message = "Not found"
