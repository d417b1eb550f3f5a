# src/taskboard/tasks/task_models.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool, field_validator

logger = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 3


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_db(cls, raw: str | None) -> Priority | None:
        """
        Unknown values come back as None instead of a default so that data-quality
        problems stay visible (e.g. they are left out of the priority histogram).
        """
        if not raw:
            return None
        try:
            return cls(raw)
        except ValueError:
            logger.warning("Unknown task priority in store: %r", raw)
            return None


class Category(StrEnum):
    NEW = "new"
    PENDING = "pending"
    SCHEDULED = "scheduled"

    @classmethod
    def from_db(cls, raw: str | None) -> Category | None:
        if not raw:
            return None
        try:
            return cls(raw)
        except ValueError:
            logger.warning("Unknown task category in store: %r", raw)
            return None


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    owner_id: str
    title: str
    description: str | None
    completed: bool
    priority: Priority | None
    category: Category | None
    due_date: datetime | None
    created_at: datetime


# ---- input variants (one per mutation kind) ----


def _parse_due_date(value: Any) -> Any:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            return datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError(f"not a valid date: {value!r}") from None
    raise ValueError("must be a date, datetime or ISO-8601 string")


def _check_title(value: str) -> str:
    title = value.strip()
    if len(title) < MIN_TITLE_LENGTH:
        raise ValueError(f"must be at least {MIN_TITLE_LENGTH} characters")
    return title


class _TaskInput(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class CreateTaskInput(_TaskInput):
    title: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    category: Category | None = None
    due_date: datetime | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _check_title(v)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority_default(cls, v: Any) -> Any:
        return Priority.MEDIUM if v is None else v

    @field_validator("category", mode="before")
    @classmethod
    def _category_blank(cls, v: Any) -> Any:
        return None if v == "" else v

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v: Any) -> Any:
        return _parse_due_date(v)


class UpdateTaskInput(_TaskInput):
    """
    Partial update. Only fields that were actually passed are applied
    (see changes()); description/category/due_date may be cleared with None.
    """

    title: str | None = None
    description: str | None = None
    priority: Priority | None = None
    category: Category | None = None
    due_date: datetime | None = None
    completed: StrictBool | None = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("cannot be cleared")
        return _check_title(v)

    @field_validator("priority")
    @classmethod
    def _priority(cls, v: Priority | None) -> Priority:
        if v is None:
            raise ValueError("cannot be cleared")
        return v

    @field_validator("completed")
    @classmethod
    def _completed(cls, v: bool | None) -> bool:
        if v is None:
            raise ValueError("cannot be cleared")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def _category_blank(cls, v: Any) -> Any:
        return None if v == "" else v

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v: Any) -> Any:
        return _parse_due_date(v)

    def changes(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in sorted(self.model_fields_set)}


class ToggleInput(_TaskInput):
    completed: StrictBool
