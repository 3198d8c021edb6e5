"""
Domain errors raised by clinic services.

Routes never build error responses themselves; the handler registered in
``vetclinic.main`` maps any ``ClinicError`` to ``{"detail": message}`` with the
error's status code, matching the shape FastAPI uses for ``HTTPException``.
"""

from typing import Any, Dict


class ClinicError(Exception):
    """Base class for errors that carry an HTTP status and a client-safe message."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message}

    def __str__(self) -> str:
        return self.message


class BadRequest(ClinicError):
    """Missing or invalid input (required fields, age mismatch, lab description)."""

    status_code = 400


class Forbidden(ClinicError):
    """Role violation, or a missing/invalid diagnosis access code."""

    status_code = 403


class NotFound(ClinicError):
    status_code = 404


class Conflict(ClinicError):
    """Unique value already taken (e.g. an account email)."""

    status_code = 409


class ServerError(ClinicError):
    """
    Persistence or email failure, or missing configuration.

    The message stays generic. The underlying exception is logged where it
    is caught and kept on ``original_error``.
    """

    status_code = 500

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error
