"""SQLite-backed message log for the chat room."""

import asyncio
import sqlite3
import time
from pathlib import Path
from typing import Callable

from .models import ChatMessage, Identity


class MessageChannel:
    """Append-only, creation-ordered log of chat messages.

    Messages are stored in a local SQLite database. Readers either query
    the log directly or subscribe to a live stream of snapshots.
    """

    def __init__(
        self,
        db_path: Path,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the channel with a database path.

        Args:
            db_path: Path to the SQLite database file.
            clock: Source of creation timestamps, in epoch seconds.
        """
        self.db_path = db_path
        self.clock = clock
        self._conn: sqlite3.Connection | None = None
        self._subscriptions: set[MessageSubscription] = set()

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def init_db(self) -> None:
        """Create the messages table if it doesn't exist."""
        conn = self._get_connection()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS messages (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                text        TEXT NOT NULL,
                user_id     TEXT NOT NULL,
                user_name   TEXT NOT NULL,
                created_at  REAL NOT NULL
            )
        """)
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_messages_created_at ON messages(created_at)"
        )
        conn.commit()

    def append(self, text: str, identity: Identity) -> ChatMessage:
        """Append a message to the log.

        Args:
            text: The message body.
            identity: Who is posting it.

        Returns:
            The stored message with its id and creation time.
        """
        conn = self._get_connection()
        created_at = self.clock()
        cursor = conn.execute(
            """
            INSERT INTO messages (text, user_id, user_name, created_at)
            VALUES (?, ?, ?, ?)
            RETURNING id
            """,
            (text, identity.user_id, identity.user_name, created_at),
        )
        row = cursor.fetchone()
        conn.commit()

        for subscription in list(self._subscriptions):
            subscription.notify()

        return ChatMessage(
            id=row["id"],
            text=text,
            user_id=identity.user_id,
            user_name=identity.user_name,
            created_at=created_at,
        )

    def list_messages(self, limit: int | None = None) -> list[ChatMessage]:
        """Get messages in ascending creation order.

        Args:
            limit: If given, only the most recent `limit` messages.

        Returns:
            List of messages, oldest first.
        """
        conn = self._get_connection()
        if limit is None:
            cursor = conn.execute(
                "SELECT id, text, user_id, user_name, created_at FROM messages "
                "ORDER BY created_at ASC, id ASC"
            )
            return [self._row_to_message(row) for row in cursor.fetchall()]

        if limit <= 0:
            return []

        cursor = conn.execute(
            "SELECT id, text, user_id, user_name, created_at FROM messages "
            "ORDER BY created_at DESC, id DESC LIMIT ?",
            (limit,),
        )
        return [self._row_to_message(row) for row in reversed(cursor.fetchall())]

    def messages_after(self, timestamp: float) -> list[ChatMessage]:
        """Get messages created strictly after a timestamp, oldest first."""
        conn = self._get_connection()
        cursor = conn.execute(
            "SELECT id, text, user_id, user_name, created_at FROM messages "
            "WHERE created_at > ? ORDER BY created_at ASC, id ASC",
            (timestamp,),
        )
        return [self._row_to_message(row) for row in cursor.fetchall()]

    def latest_id(self) -> int:
        """Id of the newest message, 0 when the log is empty."""
        conn = self._get_connection()
        row = conn.execute("SELECT COALESCE(MAX(id), 0) AS latest FROM messages").fetchone()
        return row["latest"]

    def subscribe(self, poll_interval: float = 0.5) -> "MessageSubscription":
        """Open a live stream of message snapshots.

        Args:
            poll_interval: Seconds between checks for messages written
                by other processes.

        Returns:
            A subscription to iterate with `async for`. Close it when done.
        """
        subscription = MessageSubscription(self, poll_interval)
        self._subscriptions.add(subscription)
        return subscription

    def _unsubscribe(self, subscription: "MessageSubscription") -> None:
        self._subscriptions.discard(subscription)

    def close(self) -> None:
        """Close all subscriptions and the database connection."""
        for subscription in list(self._subscriptions):
            subscription.close()
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _row_to_message(self, row: sqlite3.Row) -> ChatMessage:
        """Convert a database row to a ChatMessage."""
        return ChatMessage(
            id=row["id"],
            text=row["text"],
            user_id=row["user_id"],
            user_name=row["user_name"],
            created_at=row["created_at"],
        )


class MessageSubscription:
    """Cancellable async stream of full message snapshots.

    The first snapshot is produced immediately. Afterwards a new snapshot
    is produced whenever the log has grown. Iteration ends after `close()`.
    Subscribing again starts over with a full snapshot.
    """

    def __init__(self, channel: MessageChannel, poll_interval: float = 0.5) -> None:
        self._channel = channel
        self._poll_interval = poll_interval
        self._wakeup = asyncio.Event()
        self._last_seen: int | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def notify(self) -> None:
        """Wake the iterator because the log changed."""
        self._wakeup.set()

    def close(self) -> None:
        """Stop the stream and detach from the channel."""
        self._closed = True
        self._wakeup.set()
        self._channel._unsubscribe(self)

    def __aiter__(self) -> "MessageSubscription":
        return self

    async def __anext__(self) -> list[ChatMessage]:
        while True:
            if self._closed:
                raise StopAsyncIteration

            latest = self._channel.latest_id()
            if self._last_seen is None or latest != self._last_seen:
                self._last_seen = latest
                return self._channel.list_messages()

            self._wakeup.clear()
            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout=self._poll_interval)
            except asyncio.TimeoutError:
                pass
