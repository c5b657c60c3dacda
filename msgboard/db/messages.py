"""
MsgBoard Message Database Operations

CRUD operations for board messages. Display reads join the owner's
current username and role so renames show up on old messages.
"""

import time
import logging
from typing import Callable, Optional

from .connection import Database
from .models import Message, MessageView

logger = logging.getLogger(__name__)

_VIEW_SELECT = """
    SELECT m.*,
           COALESCE(u.username, 'unknown') AS username,
           COALESCE(u.is_admin, 0) AS owner_is_admin
    FROM messages m
    LEFT JOIN users u ON u.id = m.user_id
"""


class MessageRepository:
    """Repository for message-related database operations."""

    def __init__(self, db: Database, clock: Callable[[], float] = time.time):
        self.db = db
        self.clock = clock

    def create_message(self, user_id: int, title: str, content: str) -> Message:
        """Create a new message."""
        now_us = int(self.clock() * 1_000_000)

        cursor = self.db.execute("""
            INSERT INTO messages (title, content, user_id, created_at_us)
            VALUES (?, ?, ?, ?)
        """, (title, content, user_id, now_us))

        return Message(
            id=cursor.lastrowid,
            title=title,
            content=content,
            user_id=user_id,
            created_at_us=now_us
        )

    def get_message_by_id(self, message_id: int) -> Optional[Message]:
        """Get message by ID."""
        row = self.db.fetchone("SELECT * FROM messages WHERE id = ?", (message_id,))
        return self._row_to_message(row) if row else None

    def get_message_view(self, message_id: int) -> Optional[MessageView]:
        """Get a message joined with its owner."""
        row = self.db.fetchone(_VIEW_SELECT + " WHERE m.id = ?", (message_id,))
        return self._row_to_view(row) if row else None

    def update_message(self, message_id: int, title: str, content: str) -> Optional[Message]:
        """Replace title and content, stamping updated_at. None if absent."""
        now_us = int(self.clock() * 1_000_000)
        cursor = self.db.execute("""
            UPDATE messages
            SET title = ?, content = ?, updated_at_us = ?
            WHERE id = ?
        """, (title, content, now_us, message_id))

        if cursor.rowcount == 0:
            return None
        return self.get_message_by_id(message_id)

    def delete_message(self, message_id: int) -> bool:
        """Delete a message. Returns False if it did not exist."""
        cursor = self.db.execute("DELETE FROM messages WHERE id = ?", (message_id,))
        return cursor.rowcount > 0

    def list_messages(self, limit: int = 100) -> list[MessageView]:
        """List newest messages first, at most ``limit``."""
        rows = self.db.fetchall(
            _VIEW_SELECT + " ORDER BY m.created_at_us DESC, m.id DESC LIMIT ?",
            (limit,)
        )
        return [self._row_to_view(row) for row in rows]

    def count_user_messages_since(self, user_id: int, since_us: int) -> int:
        """Count a user's messages created strictly after ``since_us``."""
        row = self.db.fetchone("""
            SELECT COUNT(*) FROM messages
            WHERE user_id = ? AND created_at_us > ?
        """, (user_id, since_us))
        return row[0] if row else 0

    def get_user_message_times_since(self, user_id: int, since_us: int) -> list[int]:
        """Creation times of a user's messages after ``since_us``, oldest first."""
        rows = self.db.fetchall("""
            SELECT created_at_us FROM messages
            WHERE user_id = ? AND created_at_us > ?
            ORDER BY created_at_us
        """, (user_id, since_us))
        return [row[0] for row in rows]

    def _row_to_message(self, row) -> Message:
        """Convert database row to Message object."""
        return Message(
            id=row["id"],
            title=row["title"],
            content=row["content"],
            user_id=row["user_id"],
            created_at_us=row["created_at_us"],
            updated_at_us=row["updated_at_us"]
        )

    def _row_to_view(self, row) -> MessageView:
        return MessageView(
            id=row["id"],
            title=row["title"],
            content=row["content"],
            user_id=row["user_id"],
            username=row["username"],
            is_admin=bool(row["owner_is_admin"]),
            created_at_us=row["created_at_us"],
            updated_at_us=row["updated_at_us"]
        )
