# tests/test_classifier.py

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from taskboard.tasks.classifier import (
    is_today,
    partition_by_category,
    partition_by_completion,
    priority_histogram,
    progress_percentage,
    search_tasks,
    tasks_due_on,
    today_tasks,
    upcoming_tasks,
)
from taskboard.tasks.task_models import Category, Priority

from .fakes import make_task

NOON = datetime(2024, 5, 1, 12, 0)


def test_progress_percentage() -> None:
    assert progress_percentage([]) == 0
    assert progress_percentage([make_task(completed=True)]) == 100
    assert progress_percentage([make_task(completed=True), make_task(completed=False)]) == 50
    assert progress_percentage([make_task(completed=True)] + [make_task()] * 2) == 33
    assert progress_percentage([make_task(completed=True)] * 2 + [make_task()]) == 67


def test_progress_rounds_half_up() -> None:
    # 1/8 = 12.5%
    tasks = [make_task(completed=True)] + [make_task() for _ in range(7)]
    assert progress_percentage(tasks) == 13


def test_priority_histogram_always_has_all_keys() -> None:
    assert priority_histogram([make_task(priority=Priority.HIGH)]) == {"low": 0, "medium": 0, "high": 1}
    assert priority_histogram([]) == {"low": 0, "medium": 0, "high": 0}


def test_priority_histogram_skips_malformed_priority() -> None:
    tasks = [make_task(priority=None), make_task(priority=Priority.LOW), make_task(priority="urgent")]  # type: ignore[arg-type]
    assert priority_histogram(tasks) == {"low": 1, "medium": 0, "high": 0}


def test_tasks_due_on_ignores_time_of_day() -> None:
    late = make_task(due_date=datetime(2024, 5, 1, 23, 59))
    early = make_task(due_date=datetime(2024, 5, 1, 0, 1))
    other = make_task(due_date=datetime(2024, 5, 2, 0, 0))
    undated = make_task()
    assert tasks_due_on([late, early, other, undated], NOON) == [late, early]
    assert tasks_due_on([late, other], date(2024, 5, 2)) == [other]


def test_tasks_due_on_uses_reference_timezone() -> None:
    # 23:30 UTC on May 1st is already May 2nd at UTC+2.
    due = make_task(due_date=datetime(2024, 5, 1, 23, 30, tzinfo=timezone.utc))
    plus2 = timezone(timedelta(hours=2))
    assert tasks_due_on([due], datetime(2024, 5, 2, 9, 0, tzinfo=plus2)) == [due]
    assert tasks_due_on([due], datetime(2024, 5, 1, 9, 0, tzinfo=plus2)) == []


def test_is_today() -> None:
    assert is_today(make_task(due_date=datetime(2024, 5, 1, 8)), NOON)
    assert is_today(make_task(category=Category.NEW), NOON)
    assert not is_today(make_task(category=Category.PENDING), NOON)
    assert not is_today(make_task(), NOON)
    # A due date elsewhere wins over the "new" category.
    assert not is_today(make_task(category=Category.NEW, due_date=datetime(2024, 4, 30)), NOON)


def test_today_tasks_keeps_order() -> None:
    a = make_task(category=Category.NEW)
    b = make_task(due_date=datetime(2024, 5, 1, 18))
    c = make_task(due_date=datetime(2024, 5, 3))
    assert today_tasks([a, c, b], NOON) == [a, b]


def test_partitions() -> None:
    done = make_task(completed=True, category=Category.PENDING)
    open_new = make_task(category=Category.NEW)
    open_none = make_task()

    by_completion = partition_by_completion([done, open_new, open_none])
    assert by_completion == {"completed": [done], "pending": [open_new, open_none]}

    by_category = partition_by_category([done, open_new, open_none])
    assert by_category == {
        "new": [open_new],
        "pending": [done],
        "scheduled": [],
        "uncategorized": [open_none],
    }


def test_upcoming_tasks() -> None:
    soon = make_task(due_date=NOON + timedelta(hours=1))
    past = make_task(due_date=NOON - timedelta(hours=1))
    done = make_task(due_date=NOON + timedelta(days=1), completed=True)
    aware = make_task(due_date=datetime(2024, 5, 2, tzinfo=timezone.utc))
    assert upcoming_tasks([soon, past, done, make_task(), aware], NOON) == [soon, aware]


def test_search_tasks() -> None:
    milk = make_task(title="Buy milk")
    report = make_task(title="Report", description="Quarterly MILK numbers")
    other = make_task(title="Walk dog")
    assert search_tasks([milk, report, other], "milk") == [milk, report]
    assert search_tasks([milk, other], "  ") == [milk, other]
