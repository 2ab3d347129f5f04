"""
Application errors.

Every user-facing failure is an AppError tagged with an ErrorKind.
A boundary layer (HTTP or CLI) dispatches on `err.kind` instead of
catching a different exception class per failure.
"""

from enum import Enum


class ErrorKind(str, Enum):
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"

    @property
    def status_code(self) -> int:
        """HTTP status a boundary layer should answer with."""
        match self:
            case ErrorKind.BAD_REQUEST:
                return 400
            case ErrorKind.NOT_FOUND:
                return 404
            case ErrorKind.UNAUTHORIZED:
                return 401


class AppError(Exception):
    """An expected, caller-correctable failure."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"AppError({self.kind.name}, {self.message!r})"

    @classmethod
    def bad_request(cls, message: str = "Bad Request") -> "AppError":
        return cls(ErrorKind.BAD_REQUEST, message)

    @classmethod
    def not_found(cls, message: str = "Not Found") -> "AppError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized") -> "AppError":
        return cls(ErrorKind.UNAUTHORIZED, message)
