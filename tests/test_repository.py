# tests/test_repository.py

from __future__ import annotations

import logging

import pytest

from taskboard.core.errors import (
    Forbidden,
    NotFound,
    StoreUnavailable,
    Unauthenticated,
    ValidationError,
)
from taskboard.core.session import Session
from taskboard.profiles.profile_models import Profile
from taskboard.tasks.repository import TaskRepository
from taskboard.tasks.task_models import Category, Priority, UpdateTaskInput

from .fakes import UnavailableTaskStore, session_for


@pytest.mark.asyncio
async def test_create_list_toggle_delete_scenario(repo: TaskRepository, alice: Profile) -> None:
    me = session_for(alice)

    created = await repo.create(me, {"title": "Buy milk", "priority": "low"})
    assert created.owner_id == alice.id
    assert created.priority == Priority.LOW

    tasks = await repo.list(me)
    assert len(tasks) == 1
    assert tasks[0].completed is False
    assert tasks[0].category is None

    await repo.toggle_completion(created.id, me, True)
    tasks = await repo.list(me)
    assert len(tasks) == 1
    assert tasks[0].completed is True

    await repo.delete(created.id, me)
    assert await repo.list(me) == []


@pytest.mark.asyncio
async def test_list_is_scoped_and_newest_first(repo: TaskRepository, alice: Profile, bob: Profile) -> None:
    a1 = await repo.create(session_for(alice), {"title": "Alice one"})
    await repo.create(session_for(bob), {"title": "Bob one"})
    a2 = await repo.create(session_for(alice), {"title": "Alice two"})

    assert [t.id for t in await repo.list(session_for(alice))] == [a2.id, a1.id]


@pytest.mark.asyncio
async def test_toggle_twice_is_idempotent(repo: TaskRepository, alice: Profile) -> None:
    me = session_for(alice)
    task = await repo.create(me, {"title": "Stretch"})

    await repo.toggle_completion(task.id, me, True)
    assert (await repo.get(task.id, me)).completed is True
    await repo.toggle_completion(task.id, me, True)
    assert (await repo.get(task.id, me)).completed is True

    await repo.toggle_completion(task.id, me, False)
    assert (await repo.get(task.id, me)).completed is False


@pytest.mark.asyncio
async def test_update_ownership(repo: TaskRepository, alice: Profile, bob: Profile, root: Profile) -> None:
    task = await repo.create(session_for(bob), {"title": "Bob's task"})

    with pytest.raises(NotFound):
        await repo.update(task.id, session_for(alice), {"title": "Not yours"})
    with pytest.raises(NotFound):
        await repo.get(task.id, session_for(alice))
    with pytest.raises(NotFound):
        await repo.toggle_completion(task.id, session_for(alice), True)
    with pytest.raises(NotFound):
        await repo.delete(task.id, session_for(alice))

    updated = await repo.update(task.id, session_for(root), {"title": "Fixed by admin"})
    assert updated.title == "Fixed by admin"
    assert updated.owner_id == bob.id

    await repo.delete(task.id, session_for(root))
    with pytest.raises(NotFound):
        await repo.get(task.id, session_for(bob))


@pytest.mark.asyncio
async def test_update_is_partial_and_returns_canonical_state(repo: TaskRepository, alice: Profile) -> None:
    me = session_for(alice)
    task = await repo.create(
        me,
        {"title": "Plan trip", "category": "scheduled", "due_date": "2024-06-01", "description": "beach"},
    )

    updated = await repo.update(task.id, me, UpdateTaskInput(priority=Priority.HIGH, due_date=None))
    assert updated.priority == Priority.HIGH
    assert updated.due_date is None
    assert updated.category == Category.SCHEDULED
    assert updated.description == "beach"
    assert updated.created_at == task.created_at
    assert await repo.get(task.id, me) == updated


@pytest.mark.asyncio
async def test_validation_errors(repo: TaskRepository, alice: Profile) -> None:
    me = session_for(alice)
    with pytest.raises(ValidationError):
        await repo.create(me, {"title": "no"})
    task = await repo.create(me, {"title": "Fine"})
    with pytest.raises(ValidationError):
        await repo.update(task.id, me, {"priority": "urgent"})
    with pytest.raises(ValidationError):
        await repo.toggle_completion(task.id, me, "yes")  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_missing_ids_are_not_found(repo: TaskRepository, alice: Profile, root: Profile) -> None:
    for session in (session_for(alice), session_for(root)):
        with pytest.raises(NotFound):
            await repo.get("does-not-exist", session)
        with pytest.raises(NotFound):
            await repo.delete("does-not-exist", session)


@pytest.mark.asyncio
async def test_unauthenticated(repo: TaskRepository) -> None:
    with pytest.raises(Unauthenticated):
        await repo.list(None)
    with pytest.raises(Unauthenticated):
        await repo.create(Session(user_id=""), {"title": "Anything"})
    with pytest.raises(Unauthenticated):
        await repo.delete("x", None)


@pytest.mark.asyncio
async def test_admin_only_operations(repo: TaskRepository, alice: Profile, bob: Profile, root: Profile) -> None:
    await repo.create(session_for(alice), {"title": "Alice task"})
    await repo.create(session_for(bob), {"title": "Bob task"})

    with pytest.raises(Forbidden):
        await repo.list_all(session_for(alice))
    with pytest.raises(Forbidden):
        await repo.assign(session_for(alice), bob.id, {"title": "Do this"})

    assigned = await repo.assign(session_for(root), bob.id, {"title": "Do this", "priority": "high"})
    assert assigned.owner_id == bob.id
    assert [t.title for t in await repo.list(session_for(bob))] == ["Do this", "Bob task"]
    assert len(await repo.list_all(session_for(root))) == 3

    with pytest.raises(ValidationError) as ei:
        await repo.assign(session_for(root), "ghost", {"title": "Nobody"})
    assert ei.value.fields == ["owner_id"]


@pytest.mark.asyncio
async def test_store_unavailable_is_surfaced_without_retry() -> None:
    store = UnavailableTaskStore()
    repo = TaskRepository(store)
    me = Session(user_id="u1")

    with pytest.raises(StoreUnavailable):
        await repo.list(me)
    with pytest.raises(StoreUnavailable):
        await repo.create(me, {"title": "Buy milk"})
    assert store.calls == ["list_tasks", "add_task"]


@pytest.mark.asyncio
async def test_missing_and_foreign_tasks_both_not_found(
    repo: TaskRepository, alice: Profile, bob: Profile, caplog: pytest.LogCaptureFixture
) -> None:
    task = await repo.create(session_for(bob), {"title": "Bob's task"})
    caplog.set_level(logging.INFO, logger="taskboard.tasks.repository")

    with pytest.raises(NotFound) as missing:
        await repo.get("no-such-task", session_for(alice))
    assert missing.value.task_id == "no-such-task"
    assert "Ownership check denied" not in caplog.text

    with pytest.raises(NotFound) as foreign:
        await repo.get(task.id, session_for(alice))
    assert foreign.value.task_id == task.id
    assert "Ownership check denied" in caplog.text
