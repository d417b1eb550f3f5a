# src/taskboard/core/errors.py

"""
Error taxonomy shared by the repository, stores and the console layer.

Every error is scoped to the single operation that raised it; none is fatal
to the process. Callers translate them into user-visible feedback.
"""

from __future__ import annotations

from dataclasses import dataclass


class TaskboardError(Exception):
    """Base class for all taskboard errors."""


@dataclass(frozen=True, slots=True)
class FieldError:
    field: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field}: {self.reason}"


class ValidationError(TaskboardError):
    """Bad input shape. Recoverable by correcting the input."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors) or "invalid input")

    @classmethod
    def single(cls, field: str, reason: str) -> ValidationError:
        return cls([FieldError(field, reason)])

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]


class Unauthenticated(TaskboardError):
    """No (or expired) session. The caller must sign in again."""

    def __init__(self, message: str = "not signed in") -> None:
        super().__init__(message)


class Forbidden(TaskboardError):
    """Signed in, but the operation needs the admin role."""

    def __init__(self, message: str = "admin role required") -> None:
        super().__init__(message)


class NotFound(TaskboardError):
    """Referenced task is absent or not visible to the caller."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"task not found: {task_id}")


class StoreUnavailable(TaskboardError):
    """Backing store failed or is unreachable. Not retried internally."""
