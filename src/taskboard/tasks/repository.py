# src/taskboard/tasks/repository.py

from __future__ import annotations

"""
Task repository.

Async, ownership-scoped CRUD on top of a synchronous TaskRepo:
- every call takes the caller's Session explicitly,
- a task owned by someone else is reported as NotFound (admins bypass),
- input is validated before it reaches the store,
- blocking store calls run in a worker thread (asyncio.to_thread),
- store failures surface as StoreUnavailable; nothing is retried here.

Mutations return the new canonical state so callers can replace their cached
view instead of re-fetching.
"""

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from ..core.errors import Forbidden, NotFound, ValidationError
from ..core.ports import ProfileRepo, TaskRepo
from ..core.session import Session, require_session
from .task_models import CreateTaskInput, Task, UpdateTaskInput
from .validation import validate_create, validate_toggle, validate_update

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def _scope(session: Session) -> str | None:
    """Owner filter for store calls: None (any owner) for admins."""
    return None if session.is_admin else session.user_id


class TaskRepository:
    def __init__(self, store: TaskRepo, profiles: ProfileRepo | None = None) -> None:
        self._store = store
        self._profiles = profiles

    async def _run(self, fn: Callable[..., _T], *args: Any, **kwargs: Any) -> _T:
        return await asyncio.to_thread(fn, *args, **kwargs)

    def _visible(self, task: Task, session: Session) -> bool:
        return session.is_admin or task.owner_id == session.user_id

    async def _load(self, task_id: str, session: Session) -> Task:
        task = await self._run(self._store.get_task, task_id)
        if task is None:
            raise NotFound(task_id)
        if not self._visible(task, session):
            logger.info("Ownership check denied task_id=%s user_id=%s", task_id, session.user_id)
            raise NotFound(task_id)
        return task

    # ---- reads ----

    async def list(self, session: Session | None) -> list[Task]:
        """The caller's own tasks, newest first."""
        s = require_session(session)
        return await self._run(self._store.list_tasks, s.user_id)

    async def list_all(self, session: Session | None) -> list[Task]:
        """Every user's tasks, newest first (admin only)."""
        s = require_session(session)
        if not s.is_admin:
            raise Forbidden()
        return await self._run(self._store.list_tasks, None)

    async def get(self, task_id: str, session: Session | None) -> Task:
        s = require_session(session)
        return await self._load(task_id, s)

    # ---- mutations ----

    async def _insert(self, owner_id: str, data: CreateTaskInput) -> Task:
        task = await self._run(
            self._store.add_task,
            owner_id=owner_id,
            title=data.title,
            description=data.description,
            priority=data.priority,
            category=data.category,
            due_date=data.due_date,
        )
        logger.info("Task created id=%s owner=%s", task.id, owner_id)
        return task

    async def create(
        self, session: Session | None, fields: CreateTaskInput | Mapping[str, Any]
    ) -> Task:
        s = require_session(session)
        data = validate_create(fields)
        return await self._insert(s.user_id, data)

    async def assign(
        self,
        session: Session | None,
        owner_id: str,
        fields: CreateTaskInput | Mapping[str, Any],
    ) -> Task:
        """Create a task on behalf of another user (admin only)."""
        s = require_session(session)
        if not s.is_admin:
            raise Forbidden()
        data = validate_create(fields)
        if self._profiles is not None:
            profile = await self._run(self._profiles.get_profile, owner_id)
            if profile is None:
                raise ValidationError.single("owner_id", "unknown user")
        elif not owner_id:
            raise ValidationError.single("owner_id", "is required")
        return await self._insert(owner_id, data)

    async def update(
        self,
        task_id: str,
        session: Session | None,
        fields: UpdateTaskInput | Mapping[str, Any],
    ) -> Task:
        s = require_session(session)
        data = validate_update(fields)
        await self._load(task_id, s)
        updated = await self._run(
            self._store.update_task_fields, task_id, data.changes(), owner_id=_scope(s)
        )
        if updated is None:
            # Deleted (or re-checked as not owned) between the load and the write.
            raise NotFound(task_id)
        logger.info("Task updated id=%s by=%s", task_id, s.user_id)
        return updated

    async def toggle_completion(self, task_id: str, session: Session | None, completed: bool) -> None:
        s = require_session(session)
        data = validate_toggle({"completed": completed})
        await self._load(task_id, s)
        ok = await self._run(self._store.set_completed, task_id, data.completed, owner_id=_scope(s))
        if not ok:
            raise NotFound(task_id)
        logger.debug("Task %s completed=%s", task_id, data.completed)

    async def delete(self, task_id: str, session: Session | None) -> None:
        s = require_session(session)
        await self._load(task_id, s)
        ok = await self._run(self._store.delete_task, task_id, owner_id=_scope(s))
        if not ok:
            raise NotFound(task_id)
        logger.info("Task deleted id=%s by=%s", task_id, s.user_id)
