# src/taskboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The repository depends on Protocols instead of concrete stores.
This keeps storage swappable and makes testing easier.
"""

from datetime import datetime
from typing import Any, Protocol


class TaskRepo(Protocol):
    """Synchronous task storage (SQLite TaskStore implements it)."""

    def add_task(
            self,
            *,
            owner_id: str,
            title: str,
            description: str | None = None,
            priority: Any = None,
            category: Any = None,
            due_date: datetime | None = None,
            completed: bool = False,
    ) -> Any: ...

    def get_task(self, task_id: str) -> Any | None: ...
    def list_tasks(self, owner_id: str | None = None) -> list[Any]: ...

    def update_task_fields(
            self,
            task_id: str,
            fields: dict[str, Any],
            *,
            owner_id: str | None = None,
    ) -> Any | None: ...

    def set_completed(self, task_id: str, completed: bool, *, owner_id: str | None = None) -> bool: ...
    def delete_task(self, task_id: str, *, owner_id: str | None = None) -> bool: ...
    def count_tasks(self) -> int: ...


class ProfileRepo(Protocol):
    def get_profile(self, user_id: str) -> Any | None: ...
    def find_by_email(self, email: str) -> Any | None: ...
    def list_profiles(self) -> list[Any]: ...

    def upsert_profile(
            self,
            *,
            email: str,
            name: str | None = None,
            role: Any = None,
            avatar_url: str | None = None,
            profile_id: str | None = None,
    ) -> Any: ...
