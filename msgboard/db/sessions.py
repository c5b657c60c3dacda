"""
MsgBoard Session Database Operations
"""

import secrets
import time
import logging
from typing import Callable, Optional

from .connection import Database
from .models import Session

logger = logging.getLogger(__name__)

# 256 bits from the OS CSPRNG
SESSION_TOKEN_BYTES = 32


class SessionRepository:
    """Repository for login sessions."""

    def __init__(self, db: Database, clock: Callable[[], float] = time.time):
        self.db = db
        self.clock = clock

    def create_session(self, user_id: int) -> str:
        """Create a session for a user and return its token."""
        now_us = int(self.clock() * 1_000_000)
        session_id = secrets.token_urlsafe(SESSION_TOKEN_BYTES)

        self.db.execute(
            "INSERT INTO sessions (id, user_id, created_at_us) VALUES (?, ?, ?)",
            (session_id, user_id, now_us)
        )
        return session_id

    def get_session(self, session_id: str) -> Optional[Session]:
        """Get session by token."""
        row = self.db.fetchone("SELECT * FROM sessions WHERE id = ?", (session_id,))
        if not row:
            return None
        return Session(
            id=row["id"],
            user_id=row["user_id"],
            created_at_us=row["created_at_us"]
        )

    def delete_session(self, session_id: str) -> bool:
        """Delete a session. Deleting an unknown token is not an error."""
        cursor = self.db.execute("DELETE FROM sessions WHERE id = ?", (session_id,))
        return cursor.rowcount > 0

    def delete_user_sessions(self, user_id: int) -> int:
        """Delete every session belonging to a user."""
        cursor = self.db.execute("DELETE FROM sessions WHERE user_id = ?", (user_id,))
        return cursor.rowcount

    def delete_sessions_before(self, cutoff_us: int) -> int:
        """Delete sessions created at or before ``cutoff_us``."""
        cursor = self.db.execute(
            "DELETE FROM sessions WHERE created_at_us <= ?",
            (cutoff_us,)
        )
        deleted = cursor.rowcount
        if deleted > 0:
            logger.info(f"Deleted {deleted} expired sessions")
        return deleted
