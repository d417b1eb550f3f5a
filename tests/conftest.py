# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.core.session import SessionManager
from taskboard.core.state import AppState
from taskboard.profiles.profile_models import Profile, Role
from taskboard.profiles.profile_store import ProfileStore
from taskboard.tasks.repository import TaskRepository
from taskboard.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path,
        db_path=tmp_path / "taskboard.sqlite3",
        user_email="",
        user_name="",
        user_role="user",
        summary_top_n=5,
    )


@pytest.fixture()
def task_store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.db_path)


@pytest.fixture()
def profile_store(settings: SimpleNamespace) -> ProfileStore:
    return ProfileStore(settings.db_path)


@pytest.fixture()
def alice(profile_store: ProfileStore) -> Profile:
    return profile_store.upsert_profile(email="alice@example.com", name="Alice")


@pytest.fixture()
def bob(profile_store: ProfileStore) -> Profile:
    return profile_store.upsert_profile(email="bob@example.com", name="Bob")


@pytest.fixture()
def root(profile_store: ProfileStore) -> Profile:
    return profile_store.upsert_profile(email="root@example.com", name="Root", role=Role.ADMIN)


@pytest.fixture()
def repo(task_store: TaskStore, profile_store: ProfileStore) -> TaskRepository:
    """Real SQLite stores: their ownership filters are part of what we test."""
    return TaskRepository(task_store, profile_store)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    task_store: TaskStore,
    profile_store: ProfileStore,
    repo: TaskRepository,
) -> AppState:
    return AppState(
        settings=settings,
        task_store=task_store,
        profiles=profile_store,
        repository=repo,
        sessions=SessionManager(profile_store),
    )
