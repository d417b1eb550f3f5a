# src/taskboard/admin/summary.py

"""
Dashboard aggregation.

Pure reducers over already-fetched collections. Nothing is cached or kept
incrementally: callers recompute from a fresh list after every mutation.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from ..profiles.profile_models import Profile, display_name
from ..tasks.classifier import (
    priority_histogram,
    progress_percentage,
    search_tasks,
    tasks_due_on,
    upcoming_tasks,
)
from ..tasks.task_models import Priority, Task

DEFAULT_TOP_USERS = 5


@dataclass(frozen=True, slots=True)
class UserSummary:
    user_id: str
    display_name: str
    completed_count: int
    pending_count: int

    @property
    def total(self) -> int:
        return self.completed_count + self.pending_count


@dataclass(frozen=True, slots=True)
class DashboardCounts:
    total_users: int
    completed_tasks: int
    pending_tasks: int
    urgent_tasks: int


@dataclass(frozen=True, slots=True)
class TaskOverview:
    total: int
    pending: int
    completed: int
    completion_pct: int
    due_today: int
    due_today_pending: int
    upcoming: int


@dataclass(frozen=True, slots=True)
class OwnedTask:
    task: Task
    owner_name: str


def summarize_by_user(
    tasks: Iterable[Task],
    users: Sequence[Profile],
    limit: int = DEFAULT_TOP_USERS,
) -> list[UserSummary]:
    """
    Per-user completed/pending counts for users with at least one task,
    busiest first. The sort is stable, so ties keep the order of `users`.
    Tasks whose owner is not in `users` are ignored.
    """
    counts: dict[str, list[int]] = {u.id: [0, 0] for u in users}
    for t in tasks:
        bucket = counts.get(t.owner_id)
        if bucket is None:
            continue
        bucket[0 if t.completed else 1] += 1

    rows = [
        UserSummary(
            user_id=u.id,
            display_name=display_name(u),
            completed_count=counts[u.id][0],
            pending_count=counts[u.id][1],
        )
        for u in _unique(users)
        if sum(counts[u.id]) > 0
    ]
    rows.sort(key=lambda r: r.total, reverse=True)
    return rows[: max(0, int(limit))]


def _unique(users: Sequence[Profile]) -> list[Profile]:
    seen: set[str] = set()
    out: list[Profile] = []
    for u in users:
        if u.id in seen:
            continue
        seen.add(u.id)
        out.append(u)
    return out


def dashboard_counts(tasks: Iterable[Task], users: Sequence[Profile]) -> DashboardCounts:
    completed = pending = urgent = 0
    for t in tasks:
        if t.completed:
            completed += 1
            continue
        pending += 1
        if t.priority == Priority.HIGH:
            urgent += 1
    return DashboardCounts(
        total_users=len(users),
        completed_tasks=completed,
        pending_tasks=pending,
        urgent_tasks=urgent,
    )


def priority_breakdown(tasks: Iterable[Task]) -> list[tuple[Priority, int]]:
    """Histogram as ordered (priority, count) pairs, low -> high."""
    hist = priority_histogram(tasks)
    return [(p, hist[p.value]) for p in Priority]


def task_overview(tasks: Iterable[Task], now: datetime) -> TaskOverview:
    """Personal dashboard cards."""
    items = list(tasks)
    completed = sum(1 for t in items if t.completed)
    due_today = tasks_due_on(items, now)
    return TaskOverview(
        total=len(items),
        pending=len(items) - completed,
        completed=completed,
        completion_pct=progress_percentage(items),
        due_today=len(due_today),
        due_today_pending=sum(1 for t in due_today if not t.completed),
        upcoming=len(upcoming_tasks(items, now)),
    )


def attach_owners(tasks: Iterable[Task], users: Sequence[Profile]) -> list[OwnedTask]:
    by_id = {u.id: u for u in users}
    return [OwnedTask(task=t, owner_name=display_name(by_id.get(t.owner_id))) for t in tasks]


def search_owned_tasks(entries: Iterable[OwnedTask], query: str) -> list[OwnedTask]:
    """Like search_tasks, but also matches the owner's display name."""
    items = list(entries)
    q = (query or "").strip().lower()
    if not q:
        return items
    hits = {id(t) for t in search_tasks([e.task for e in items], q)}
    return [e for e in items if id(e.task) in hits or q in e.owner_name.lower()]
