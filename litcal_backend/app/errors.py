# litcal_backend/app/errors.py
from __future__ import annotations

from typing import Any, Dict


class LitCalError(Exception):
    """
    Base for errors that map onto an HTTP problem response.
    `error_type` is the stable identifier clients can switch on.
    """

    status_code: int = 500
    error_type: str = "internal-server-error"
    title: str = "Internal Server Error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.title)
        self.message = message or self.title

    def to_problem(self) -> Dict[str, Any]:
        return {
            "type": self.error_type,
            "title": self.title,
            "status": self.status_code,
            "detail": self.message,
        }


class ValidationError(LitCalError):
    status_code = 400
    error_type = "validation-error"
    title = "Bad Request"


class UnauthorizedError(LitCalError):
    status_code = 401
    error_type = "unauthorized"
    title = "Unauthorized"


class NotFoundError(LitCalError):
    status_code = 404
    error_type = "not-found"
    title = "Not Found"


class ConflictError(LitCalError):
    status_code = 409
    error_type = "conflict"
    title = "Conflict"


class UnsupportedMediaTypeError(LitCalError):
    status_code = 415
    error_type = "unsupported-media-type"
    title = "Unsupported Media Type"


class InternalServerError(LitCalError):
    status_code = 500
    error_type = "internal-server-error"
    title = "Internal Server Error"


class ServiceUnavailableError(LitCalError):
    status_code = 503
    error_type = "service-unavailable"
    title = "Service Unavailable"


class StoreDecodeError(ValueError):
    """A store file exists but does not hold JSON of the expected container type."""

    def __init__(self, path: Any, reason: str) -> None:
        super().__init__(f"Invalid JSON in {path}: {reason}")
        self.path = path
        self.reason = reason


__all__ = [
    "LitCalError",
    "ValidationError",
    "UnauthorizedError",
    "NotFoundError",
    "ConflictError",
    "UnsupportedMediaTypeError",
    "InternalServerError",
    "ServiceUnavailableError",
    "StoreDecodeError",
]
