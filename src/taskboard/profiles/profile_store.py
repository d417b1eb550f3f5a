# src/taskboard/profiles/profile_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
import uuid
from collections.abc import Iterator
from pathlib import Path

from ..core.errors import StoreUnavailable
from .profile_models import Profile, Role

logger = logging.getLogger(__name__)


class ProfileStore:
    """
    SQLite `profiles` table (id, name, email, role, avatar_url).

    Shares the database file with TaskStore by default; each call opens its
    own connection.
    """

    def __init__(self, db_path: str | Path = "taskboard.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("ProfileStore ready db=%s profiles=%s", self._db_path, self.count_profiles())

    def close(self) -> None:
        return

    @contextlib.contextmanager
    def _conn(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        except sqlite3.Error as e:
            raise StoreUnavailable(f"cannot open profile store: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailable(f"profile store error: {e}") from e
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._conn() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS profiles (
                    id TEXT PRIMARY KEY,
                    name TEXT,
                    email TEXT NOT NULL,
                    role TEXT NOT NULL DEFAULT 'user',
                    avatar_url TEXT,
                    created_at REAL NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE UNIQUE INDEX IF NOT EXISTS idx_profiles_email ON profiles(lower(email))"
            )

    @staticmethod
    def _row_to_profile(row: sqlite3.Row) -> Profile:
        return Profile(
            id=str(row["id"]),
            email=str(row["email"] or ""),
            name=row["name"],
            role=Role.from_db(row["role"]),
            avatar_url=row["avatar_url"],
        )

    # ---- public API ----

    def count_profiles(self) -> int:
        with self._conn() as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM profiles").fetchone()
            return int(n)

    def upsert_profile(
        self,
        *,
        email: str,
        name: str | None = None,
        role: Role = Role.USER,
        avatar_url: str | None = None,
        profile_id: str | None = None,
    ) -> Profile:
        """
        Insert a profile, or update name/role/avatar of the one with the same
        e-mail (case-insensitive). Returns the stored profile.
        """
        email = (email or "").strip()
        if "@" not in email:
            raise ValueError("a valid email is required")

        existing = self.find_by_email(email)
        with self._conn() as conn:
            if existing is None:
                pid = profile_id or uuid.uuid4().hex
                conn.execute(
                    """
                    INSERT INTO profiles(id, name, email, role, avatar_url, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (pid, name, email, Role(role).value, avatar_url, time.time()),
                )
                logger.info("Profile created id=%s role=%s", pid, role)
            else:
                pid = existing.id
                conn.execute(
                    """
                    UPDATE profiles
                    SET name = COALESCE(?, name),
                        role = ?,
                        avatar_url = COALESCE(?, avatar_url)
                    WHERE id = ?
                    """,
                    (name, Role(role).value, avatar_url, pid),
                )
                logger.debug("Profile updated id=%s", pid)

            row = conn.execute("SELECT * FROM profiles WHERE id = ?", (pid,)).fetchone()
        return self._row_to_profile(row)

    def get_profile(self, user_id: str) -> Profile | None:
        if not user_id:
            return None
        with self._conn() as conn:
            row = conn.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
            return self._row_to_profile(row) if row else None

    def find_by_email(self, email: str) -> Profile | None:
        email = (email or "").strip()
        if not email:
            return None
        with self._conn() as conn:
            row = conn.execute(
                "SELECT * FROM profiles WHERE lower(email) = lower(?)", (email,)
            ).fetchone()
            return self._row_to_profile(row) if row else None

    def list_profiles(self) -> list[Profile]:
        """All profiles ordered by name (unnamed last), then e-mail."""
        with self._conn() as conn:
            rows = conn.execute(
                """
                SELECT *
                FROM profiles
                ORDER BY name IS NULL, lower(name) ASC, lower(email) ASC
                """
            ).fetchall()
            return [self._row_to_profile(r) for r in rows]

    def is_admin(self, user_id: str) -> bool:
        profile = self.get_profile(user_id)
        return profile is not None and profile.is_admin
