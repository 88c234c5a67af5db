"""SQLite storage for whereabout facts."""

import sqlite3
import time
from pathlib import Path
from typing import Callable

from .models import WhereaboutFact

DEFAULT_LOOKUP_WINDOW = 10


class FactStore:
    """Persistent last-known whereabouts, one record per user.

    Records are keyed by user id, or by name for senders without an id.
    Writes overwrite the previous record; no history is kept.
    """

    def __init__(
        self,
        db_path: Path,
        lookup_window: int = DEFAULT_LOOKUP_WINDOW,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the store with a database path.

        Args:
            db_path: Path to the SQLite database file.
            lookup_window: How many recently updated records
                `find_by_name` looks at.
            clock: Source of update timestamps, in epoch seconds.
        """
        self.db_path = db_path
        self.lookup_window = lookup_window
        self.clock = clock
        self._conn: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def init_db(self) -> None:
        """Create the whereabouts table if it doesn't exist."""
        conn = self._get_connection()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS user_whereabouts (
                key          TEXT PRIMARY KEY,
                user_id      TEXT,
                user_name    TEXT NOT NULL,
                whereabout   TEXT NOT NULL,
                raw_message  TEXT NOT NULL,
                updated_at   REAL NOT NULL
            )
        """)
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_whereabouts_updated_at "
            "ON user_whereabouts(updated_at)"
        )
        conn.commit()

    @staticmethod
    def record_key(user_id: str | None, user_name: str) -> str:
        """Key a record by user id, falling back to the display name."""
        if user_id:
            return user_id
        return f"name:{user_name}"

    def upsert(
        self,
        user_id: str | None,
        user_name: str,
        whereabout: str,
        raw_message: str,
    ) -> WhereaboutFact:
        """Save a user's whereabout, replacing any previous one.

        Args:
            user_id: Sender id, or None for name-only facts.
            user_name: Display name.
            whereabout: The extracted place or activity.
            raw_message: The message it came from.

        Returns:
            The stored fact with its update time.
        """
        conn = self._get_connection()
        updated_at = self.clock()
        conn.execute(
            """
            INSERT INTO user_whereabouts
                (key, user_id, user_name, whereabout, raw_message, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                user_name = excluded.user_name,
                whereabout = excluded.whereabout,
                raw_message = excluded.raw_message,
                updated_at = excluded.updated_at
            """,
            (
                self.record_key(user_id, user_name),
                user_id,
                user_name,
                whereabout,
                raw_message,
                updated_at,
            ),
        )
        conn.commit()
        return WhereaboutFact(
            user_id=user_id,
            user_name=user_name,
            whereabout=whereabout,
            raw_message=raw_message,
            updated_at=updated_at,
        )

    def save(self, fact: WhereaboutFact) -> WhereaboutFact:
        """Upsert an extracted fact."""
        return self.upsert(fact.user_id, fact.user_name, fact.whereabout, fact.raw_message)

    def recent(self, limit: int | None = None) -> list[WhereaboutFact]:
        """Get the most recently updated facts, newest first.

        Args:
            limit: Maximum number of facts, defaults to the lookup window.
        """
        if limit is None:
            limit = self.lookup_window
        conn = self._get_connection()
        cursor = conn.execute(
            "SELECT user_id, user_name, whereabout, raw_message, updated_at "
            "FROM user_whereabouts ORDER BY updated_at DESC, rowid DESC LIMIT ?",
            (limit,),
        )
        return [self._row_to_fact(row) for row in cursor.fetchall()]

    def find_by_name(self, query: str) -> WhereaboutFact | None:
        """Find the most recent fact whose user name contains `query`.

        Only the `lookup_window` most recently updated records are
        searched. Older facts are not found even if they match.

        Args:
            query: Name or part of a name, matched case-insensitively.

        Returns:
            The newest matching fact, or None.
        """
        needle = query.lower()
        for fact in self.recent(self.lookup_window):
            if fact.user_name and needle in fact.user_name.lower():
                return fact
        return None

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _row_to_fact(self, row: sqlite3.Row) -> WhereaboutFact:
        """Convert a database row to a WhereaboutFact."""
        return WhereaboutFact(
            user_id=row["user_id"],
            user_name=row["user_name"],
            whereabout=row["whereabout"],
            raw_message=row["raw_message"],
            updated_at=row["updated_at"],
        )
