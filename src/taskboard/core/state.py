# src/taskboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..profiles.profile_store import ProfileStore
from ..tasks.repository import TaskRepository
from ..tasks.task_store import TaskStore
from .session import Session, SessionManager


@dataclass
class AppState:
    # Settings kept on the state for easy access in commands/connectors.
    settings: object

    task_store: TaskStore
    profiles: ProfileStore
    repository: TaskRepository
    sessions: SessionManager

    @property
    def session(self) -> Session | None:
        return self.sessions.current()
