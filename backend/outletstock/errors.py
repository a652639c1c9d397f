# Overview: API error taxonomy; each error knows the HTTP status it maps to.

from __future__ import annotations


class ApiError(Exception):
    """Base for errors rendered into the {success, error} envelope."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ApiError, ValueError):
    """400-level input problem. Message names the first failing field."""

    status_code = 400
    default_message = "Invalid request"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Authentication required"


class InvalidCredentials(Unauthorized):
    """
    Login failure.

    Unknown email and wrong password share this exact message so callers
    cannot probe which accounts exist.
    """

    default_message = "Invalid credentials"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Insufficient permissions"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class InternalError(ApiError):
    """Persistence or image-processing failure. Detail stays in the server log."""

    status_code = 500
    default_message = "Internal server error"
