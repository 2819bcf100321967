"""
Domain errors raised by the service layer.

Every error carries the HTTP status it maps to; the API layer renders them as
`{"message": ...}` bodies.
"""

from typing import Optional


class ClubError(Exception):
    """Base class for errors with a user-facing message and HTTP status."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ClubError):
    status_code = 400
    default_message = "Invalid request"


class DuplicateCredential(ClubError):
    status_code = 400
    default_message = "User already exists"


class InvalidCredentials(ClubError):
    """Same message for unknown phone and wrong password."""

    status_code = 400
    default_message = "Invalid phone number or password"


class InvalidCode(ClubError):
    status_code = 400
    default_message = "Invalid or expired verification code"


class NotFound(ClubError):
    status_code = 404
    default_message = "Not found"


class AccountNotFound(NotFound):
    default_message = "No account found with this email"


class Unauthorized(ClubError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(ClubError):
    status_code = 403
    default_message = "Forbidden"


class UpstreamFailure(ClubError):
    status_code = 500
    default_message = "Upstream service failed"


class InternalError(ClubError):
    status_code = 500
    default_message = "Internal server error"
