# src/taskboard/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import uuid
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..core.errors import StoreUnavailable
from .task_models import Category, Priority, Task

logger = logging.getLogger(__name__)

# Columns an update may touch. Ownership and created_at are never rewritten.
_UPDATABLE = ("title", "description", "completed", "priority", "category", "due_date")


def _dt_to_db(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _dt_from_db(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        logger.warning("Unparseable datetime in store: %r", raw)
        return None


class TaskStore:
    """
    SQLite task store.

    Schema is created on first use (create table if missing, add missing
    columns with ALTER TABLE). Every row has exactly one owner (user_id).

    Thread-safety:
    - each method opens its own SQLite connection, so calls can be pushed to
      worker threads (see TaskRepository).

    Ownership filters are optional here (owner_id=None means "any owner");
    deciding who may pass None is the repository's job.
    """

    def __init__(self, db_path: str | Path = "taskboard.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except StoreUnavailable:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    @contextlib.contextmanager
    def _conn(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        except sqlite3.Error as e:
            raise StoreUnavailable(f"cannot open task store: {e}") from e
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"task store error: {e}") from e
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._conn() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT,
                    completed INTEGER NOT NULL DEFAULT 0,
                    priority TEXT NOT NULL DEFAULT 'medium',
                    category TEXT,
                    due_date TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )

            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("description", "TEXT")
            add_col("category", "TEXT")
            add_col("due_date", "TEXT")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_user_created ON tasks(user_id, created_at)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_due ON tasks(due_date)")

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            owner_id=str(row["user_id"]),
            title=str(row["title"] or ""),
            description=row["description"],
            completed=bool(row["completed"]),
            priority=Priority.from_db(row["priority"]),
            category=Category.from_db(row["category"]),
            due_date=_dt_from_db(row["due_date"]),
            created_at=_dt_from_db(row["created_at"]) or datetime.fromtimestamp(0, UTC),
        )

    @staticmethod
    def _owner_clause(owner_id: str | None) -> tuple[str, tuple[Any, ...]]:
        if owner_id is None:
            return "", ()
        return " AND user_id = ?", (owner_id,)

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._conn() as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)

    def add_task(
        self,
        *,
        owner_id: str,
        title: str,
        description: str | None = None,
        priority: Priority = Priority.MEDIUM,
        category: Category | None = None,
        due_date: datetime | None = None,
        completed: bool = False,
    ) -> Task:
        """Insert a task; the store assigns id and created_at."""
        if not owner_id:
            raise ValueError("owner_id is required")

        task = Task(
            id=uuid.uuid4().hex,
            owner_id=owner_id,
            title=title,
            description=description,
            completed=bool(completed),
            priority=priority,
            category=category,
            due_date=due_date,
            created_at=datetime.now(UTC),
        )

        with self._conn() as conn:
            conn.execute(
                """
                INSERT INTO tasks(
                    id, user_id, title, description, completed,
                    priority, category, due_date, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task.id,
                    task.owner_id,
                    task.title,
                    task.description,
                    int(task.completed),
                    task.priority.value if task.priority else Priority.MEDIUM.value,
                    task.category.value if task.category else None,
                    _dt_to_db(task.due_date),
                    _dt_to_db(task.created_at),
                ),
            )

        logger.debug("Task added id=%s owner=%s priority=%s", task.id, owner_id, task.priority)
        return task

    def get_task(self, task_id: str) -> Task | None:
        with self._conn() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
            return self._row_to_task(row) if row else None

    def list_tasks(self, owner_id: str | None = None) -> list[Task]:
        """Tasks ordered by created_at descending (newest first)."""
        where, params = ("WHERE user_id = ?", (owner_id,)) if owner_id is not None else ("", ())
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM tasks {where} ORDER BY created_at DESC, rowid DESC",
                params,
            ).fetchall()
            return [self._row_to_task(r) for r in rows]

    def update_task_fields(
        self,
        task_id: str,
        fields: dict[str, Any],
        *,
        owner_id: str | None = None,
    ) -> Task | None:
        """
        Replace the given columns. Returns the updated task, or None when no row
        matched (missing id, or owner mismatch when owner_id is given).
        """
        sets: list[str] = []
        params: list[Any] = []

        for name, value in fields.items():
            if name not in _UPDATABLE:
                raise ValueError(f"field is not updatable: {name}")
            if name == "completed":
                value = int(bool(value))
            elif name == "due_date":
                value = _dt_to_db(value)
            elif name in ("priority", "category") and value is not None:
                value = str(value)
            sets.append(f"{name} = ?")
            params.append(value)

        owner_sql, owner_params = self._owner_clause(owner_id)

        with self._conn() as conn:
            if sets:
                cur = conn.execute(
                    f"UPDATE tasks SET {', '.join(sets)} WHERE id = ?{owner_sql}",
                    (*params, task_id, *owner_params),
                )
                if cur.rowcount != 1:
                    return None
            row = conn.execute(
                f"SELECT * FROM tasks WHERE id = ?{owner_sql}", (task_id, *owner_params)
            ).fetchone()

        if row is None:
            return None
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(fields))
        return self._row_to_task(row)

    def set_completed(self, task_id: str, completed: bool, *, owner_id: str | None = None) -> bool:
        owner_sql, owner_params = self._owner_clause(owner_id)
        with self._conn() as conn:
            cur = conn.execute(
                f"UPDATE tasks SET completed = ? WHERE id = ?{owner_sql}",
                (int(bool(completed)), task_id, *owner_params),
            )
            return cur.rowcount == 1

    def delete_task(self, task_id: str, *, owner_id: str | None = None) -> bool:
        owner_sql, owner_params = self._owner_clause(owner_id)
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM tasks WHERE id = ?{owner_sql}", (task_id, *owner_params))
            deleted = cur.rowcount == 1
        if deleted:
            logger.debug("Task deleted id=%s", task_id)
        return deleted
