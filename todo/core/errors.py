"""Error taxonomy shared by services, repositories and the transport shell."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    CANCELLED = "cancelled"
    INFRASTRUCTURE = "infrastructure"


class ServiceError(Exception):
    """Base class for classified failures. Callers branch on ``kind``."""

    kind: ErrorKind = ErrorKind.INFRASTRUCTURE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class ValidationError(ServiceError):
    kind = ErrorKind.VALIDATION


class UnauthorizedError(ServiceError):
    kind = ErrorKind.UNAUTHORIZED


class ConflictError(ServiceError):
    kind = ErrorKind.CONFLICT


class NotFoundError(ServiceError):
    """Entity absent, or present but owned by someone else."""

    kind = ErrorKind.NOT_FOUND


class CancelledError(ServiceError):
    kind = ErrorKind.CANCELLED


class InfrastructureError(ServiceError):
    kind = ErrorKind.INFRASTRUCTURE
