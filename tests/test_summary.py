# tests/test_summary.py

from __future__ import annotations

from datetime import datetime, timedelta

from taskboard.admin.summary import (
    DashboardCounts,
    attach_owners,
    dashboard_counts,
    priority_breakdown,
    search_owned_tasks,
    summarize_by_user,
    task_overview,
)
from taskboard.profiles.profile_models import Profile
from taskboard.tasks.task_models import Category, Priority

from .fakes import make_task

NOON = datetime(2024, 5, 1, 12, 0)


def _users(n: int) -> list[Profile]:
    return [Profile(id=f"u{i}", email=f"user{i}@example.com", name=f"User {i}") for i in range(n)]


def test_summarize_two_equal_users_keeps_input_order() -> None:
    users = _users(2)
    tasks = []
    for u in users:
        tasks += [
            make_task(owner_id=u.id, completed=True),
            make_task(owner_id=u.id, completed=True),
            make_task(owner_id=u.id),
        ]

    rows = summarize_by_user(tasks, users)
    assert [(r.user_id, r.completed_count, r.pending_count) for r in rows] == [
        ("u0", 2, 1),
        ("u1", 2, 1),
    ]
    assert rows[0].display_name == "User 0"


def test_summarize_sorts_filters_and_truncates() -> None:
    users = _users(8)
    tasks = []
    # u{i} gets i tasks; u0 has none and must be left out
    for i, u in enumerate(users):
        tasks += [make_task(owner_id=u.id, completed=(k % 2 == 0)) for k in range(i)]
    tasks.append(make_task(owner_id="stranger"))

    rows = summarize_by_user(tasks, users)
    assert [r.user_id for r in rows] == ["u7", "u6", "u5", "u4", "u3"]
    assert rows[0].total == 7

    assert [r.user_id for r in summarize_by_user(tasks, users, limit=2)] == ["u7", "u6"]
    assert summarize_by_user([], users) == []


def test_dashboard_counts() -> None:
    tasks = [
        make_task(priority=Priority.HIGH),
        make_task(priority=Priority.HIGH, completed=True),
        make_task(priority=Priority.LOW),
        make_task(priority=Priority.MEDIUM, completed=True),
    ]
    assert dashboard_counts(tasks, _users(3)) == DashboardCounts(
        total_users=3, completed_tasks=2, pending_tasks=2, urgent_tasks=1
    )


def test_priority_breakdown_is_ordered() -> None:
    tasks = [make_task(priority=Priority.HIGH), make_task(priority=Priority.HIGH), make_task(priority=None)]
    assert priority_breakdown(tasks) == [(Priority.LOW, 0), (Priority.MEDIUM, 0), (Priority.HIGH, 2)]


def test_task_overview() -> None:
    tasks = [
        make_task(due_date=NOON.replace(hour=8), completed=True),
        make_task(due_date=NOON.replace(hour=20)),
        make_task(due_date=NOON + timedelta(days=2)),
        make_task(category=Category.NEW),
    ]
    ov = task_overview(tasks, NOON)
    assert ov.total == 4
    assert ov.completed == 1
    assert ov.pending == 3
    assert ov.completion_pct == 25
    assert ov.due_today == 2
    assert ov.due_today_pending == 1
    assert ov.upcoming == 2


def test_attach_owners_and_search() -> None:
    users = [
        Profile(id="u1", email="ana@example.com", name="Ana"),
        Profile(id="u2", email="bruno@example.com"),
    ]
    t1 = make_task(owner_id="u1", title="Buy milk")
    t2 = make_task(owner_id="u2", title="Pay rent")
    t3 = make_task(owner_id="gone", title="Orphan")

    entries = attach_owners([t1, t2, t3], users)
    assert [e.owner_name for e in entries] == ["Ana", "bruno", "User"]

    assert [e.task for e in search_owned_tasks(entries, "bruno")] == [t2]
    assert [e.task for e in search_owned_tasks(entries, "MILK")] == [t1]
    assert len(search_owned_tasks(entries, "")) == 3
