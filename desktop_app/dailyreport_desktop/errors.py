"""Failure taxonomy shared by the storage clients and the editor."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of failure surfaced to the user."""

    VALIDATION = "validation"
    CAPACITY = "capacity"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    CONFLICT = "conflict"


class StorageError(RuntimeError):
    """A storage collaborator failure converted into one of the known kinds."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind

    @property
    def retryable(self) -> bool:
        return self.kind in (ErrorKind.NOT_FOUND, ErrorKind.UNAVAILABLE)


class ValidationError(StorageError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.VALIDATION, message)


class LimitReachedError(StorageError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.CAPACITY, message)


__all__ = ["ErrorKind", "StorageError", "ValidationError", "LimitReachedError"]
