# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite stores, the repository and the session manager into AppState,
- optionally signs in the configured default user.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.errors import ValidationError
from ..core.session import SessionManager
from ..core.state import AppState
from ..profiles.profile_models import Role
from ..profiles.profile_store import ProfileStore
from ..tasks.repository import TaskRepository
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    task_store = TaskStore(settings.db_path)
    profiles = ProfileStore(settings.db_path)

    return AppState(
        settings=settings,
        task_store=task_store,
        profiles=profiles,
        repository=TaskRepository(task_store, profiles),
        sessions=SessionManager(profiles),
    )


def sign_in_default_user(state: AppState) -> None:
    """
    Sign in settings.user_email, creating its profile on first run.
    No-op when no default user is configured.
    """
    email = str(getattr(state.settings, "user_email", "") or "").strip()
    if not email:
        logger.info("No default user configured; starting signed out.")
        return

    name = str(getattr(state.settings, "user_name", "") or "").strip() or None
    role = Role.from_db(str(getattr(state.settings, "user_role", "user")))

    if state.profiles.find_by_email(email) is None:
        try:
            state.profiles.upsert_profile(email=email, name=name, role=role)
        except ValueError as e:
            raise ValidationError.single("user_email", str(e)) from e
    state.sessions.sign_in(email)
