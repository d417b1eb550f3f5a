# src/taskboard/tasks/classifier.py

"""
Pure view filters over a task collection.

Nothing here reads the clock: callers pass the reference `now`/`day`.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from .task_models import Category, Priority, Task

UNCATEGORIZED = "uncategorized"


def partition_by_completion(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    out: dict[str, list[Task]] = {"completed": [], "pending": []}
    for t in tasks:
        out["completed" if t.completed else "pending"].append(t)
    return out


def partition_by_category(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    """Group by the category field alone (no date logic)."""
    out: dict[str, list[Task]] = {c.value: [] for c in Category}
    out[UNCATEGORIZED] = []
    for t in tasks:
        key = t.category.value if t.category is not None else UNCATEGORIZED
        out.setdefault(key, []).append(t)
    return out


def _calendar_day(due: datetime, ref: date | datetime) -> date:
    # Compare in the reference's timezone when both sides are aware.
    if isinstance(ref, datetime) and ref.tzinfo is not None and due.tzinfo is not None:
        return due.astimezone(ref.tzinfo).date()
    return due.date()


def _ref_day(ref: date | datetime) -> date:
    return ref.date() if isinstance(ref, datetime) else ref


def is_due_on(task: Task, day: date | datetime) -> bool:
    if task.due_date is None:
        return False
    return _calendar_day(task.due_date, day) == _ref_day(day)


def tasks_due_on(tasks: Iterable[Task], day: date | datetime) -> list[Task]:
    """Tasks due on the same calendar day as `day`; time of day is ignored."""
    return [t for t in tasks if is_due_on(t, day)]


def is_today(task: Task, now: datetime) -> bool:
    if task.due_date is None:
        return task.category == Category.NEW
    return is_due_on(task, now)


def today_tasks(tasks: Iterable[Task], now: datetime) -> list[Task]:
    return [t for t in tasks if is_today(t, now)]


def upcoming_tasks(tasks: Iterable[Task], now: datetime) -> list[Task]:
    """Pending tasks with a due date strictly after `now`."""
    out: list[Task] = []
    for t in tasks:
        if t.completed or t.due_date is None:
            continue
        due = t.due_date
        # Naive and aware datetimes can't be compared; treat naive as same zone as now.
        if (due.tzinfo is None) != (now.tzinfo is None):
            due = due.replace(tzinfo=now.tzinfo)
        if due > now:
            out.append(t)
    return out


def priority_histogram(tasks: Iterable[Task]) -> dict[str, int]:
    """
    Count by priority. All three keys are always present.
    Tasks with a missing or malformed priority are skipped, not defaulted.
    """
    counts = {p.value: 0 for p in Priority}
    for t in tasks:
        if t.priority in counts:
            counts[t.priority] += 1
    return counts


def progress_percentage(tasks: Iterable[Task]) -> int:
    items = list(tasks)
    total = len(items)
    if total == 0:
        return 0
    done = sum(1 for t in items if t.completed)
    # Round half up (builtin round() is banker's rounding).
    return (200 * done + total) // (2 * total)


def search_tasks(tasks: Iterable[Task], query: str) -> list[Task]:
    q = (query or "").strip().lower()
    if not q:
        return list(tasks)
    return [
        t for t in tasks if q in t.title.lower() or (t.description and q in t.description.lower())
    ]
