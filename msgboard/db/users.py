"""
MsgBoard User Database Operations

CRUD operations for user accounts.
"""

import sqlite3
import time
import logging
from typing import Callable, Optional

from ..errors import ConflictError
from .connection import Database
from .models import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user-related database operations."""

    def __init__(self, db: Database, clock: Callable[[], float] = time.time):
        self.db = db
        self.clock = clock

    def create_user(
        self,
        username: str,
        password_hash: str,
        is_admin: bool = False
    ) -> User:
        """
        Create a new user.

        Uniqueness is enforced by the table constraint, so two concurrent
        creates of the same name cannot both succeed.

        Raises:
            ConflictError: username already taken
        """
        now_us = int(self.clock() * 1_000_000)

        try:
            cursor = self.db.execute("""
                INSERT INTO users (username, password_hash, is_admin, created_at_us)
                VALUES (?, ?, ?, ?)
            """, (
                username,
                password_hash,
                1 if is_admin else 0,
                now_us
            ))
        except sqlite3.IntegrityError as e:
            logger.info(f"Rejected duplicate username: {username}")
            raise ConflictError("Username is already taken") from e

        return User(
            id=cursor.lastrowid,
            username=username,
            password_hash=password_hash,
            is_admin=is_admin,
            created_at_us=now_us
        )

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        row = self.db.fetchone("SELECT * FROM users WHERE id = ?", (user_id,))
        return self._row_to_user(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by exact username."""
        row = self.db.fetchone(
            "SELECT * FROM users WHERE username = ?",
            (username,)
        )
        return self._row_to_user(row) if row else None

    def update_password(self, user_id: int, password_hash: str) -> Optional[User]:
        """Replace a user's password hash. Returns None if the user is absent."""
        cursor = self.db.execute(
            "UPDATE users SET password_hash = ? WHERE id = ?",
            (password_hash, user_id)
        )
        if cursor.rowcount == 0:
            return None
        return self.get_user_by_id(user_id)

    def list_users(self) -> list[User]:
        """List all users in creation order."""
        rows = self.db.fetchall("SELECT * FROM users ORDER BY id")
        return [self._row_to_user(row) for row in rows]

    def count_users(self) -> int:
        return self.db.count_users()

    def _row_to_user(self, row) -> User:
        """Convert database row to User object."""
        return User(
            id=row["id"],
            username=row["username"],
            password_hash=row["password_hash"],
            is_admin=bool(row["is_admin"]),
            created_at_us=row["created_at_us"]
        )
