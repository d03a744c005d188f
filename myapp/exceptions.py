"""
Error taxonomy shared by every app.

Each exception knows the HTTP status it maps to, a short ``error`` kind and a
human readable ``message``. The global handlers in ``myapp.api`` render them
as ``{"error": ..., "message": ..., **extra}``.
"""

from typing import Any, Dict, Optional


class ApiError(Exception):
    status_code = 500
    error = "Internal Server Error"

    def __init__(
        self,
        message: str,
        error: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error
        self.extra = extra or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message, **self.extra}


class ValidationError(ApiError):
    status_code = 400
    error = "Validation error"


class AuthenticationError(ApiError):
    status_code = 401
    error = "Authentication failed"


class AuthorizationError(ApiError):
    status_code = 403
    error = "Forbidden"


class NotFoundError(ApiError):
    status_code = 404
    error = "Not found"


class ConflictError(ApiError):
    status_code = 409
    error = "Conflict"
