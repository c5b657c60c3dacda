"""
MsgBoard Database Connection Manager

SQLite database with WAL mode. A single connection is shared by all
request threads; every statement runs under one re-entrant lock so that
read-modify-write sequences wrapped in ``transaction()`` are serialized.
"""

import sqlite3
import logging
import threading
import time
from pathlib import Path
from contextlib import contextmanager
from typing import Optional, Generator

logger = logging.getLogger(__name__)


class Database:
    """
    SQLite database manager for MsgBoard.

    Autocommit mode with synchronous=FULL: each statement outside a
    transaction is durable before it returns.
    """

    def __init__(self, path: str):
        """
        Initialize database connection.

        Args:
            path: Path to SQLite database file, or ":memory:"
        """
        self.path = Path(path)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._initialized = False

    def initialize(self):
        """Initialize database connection and schema."""
        in_memory = str(self.path) == ":memory:"

        # Ensure directory exists
        if not in_memory:
            self.path.parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(
            str(self.path),
            check_same_thread=False,
            isolation_level=None  # Autocommit mode
        )

        # WAL keeps readers on a consistent snapshot while a write commits
        if not in_memory:
            self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA synchronous=FULL")

        # Enable foreign keys
        self._conn.execute("PRAGMA foreign_keys=ON")

        # Use Row factory for dict-like access
        self._conn.row_factory = sqlite3.Row

        # Run migrations
        self._run_migrations()

        self._initialized = True
        logger.info(f"Database initialized: {self.path}")

    @property
    def initialized(self) -> bool:
        return self._initialized

    def _run_migrations(self):
        """Run database migrations."""
        # Create migrations tracking table
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS _migrations (
                id INTEGER PRIMARY KEY,
                name TEXT UNIQUE NOT NULL,
                applied_at INTEGER NOT NULL
            )
        """)

        # Get applied migrations
        applied = {
            row[0] for row in
            self._conn.execute("SELECT name FROM _migrations").fetchall()
        }

        # Run pending migrations
        migrations = [
            ("001_initial", self._migration_001_initial),
        ]

        for name, func in migrations:
            if name not in applied:
                logger.info(f"Running migration: {name}")
                func()
                self._conn.execute(
                    "INSERT INTO _migrations (name, applied_at) VALUES (?, ?)",
                    (name, int(time.time() * 1_000_000))
                )

    def _migration_001_initial(self):
        """Initial database schema."""
        # INTEGER PRIMARY KEY without AUTOINCREMENT allocates max(id) + 1
        self._conn.executescript("""
            -- Users table
            CREATE TABLE IF NOT EXISTS users (
                id              INTEGER PRIMARY KEY,
                username        TEXT NOT NULL UNIQUE,
                password_hash   TEXT NOT NULL,
                is_admin        INTEGER NOT NULL DEFAULT 0,
                created_at_us   INTEGER NOT NULL
            );

            -- Sessions table
            CREATE TABLE IF NOT EXISTS sessions (
                id              TEXT PRIMARY KEY,
                user_id         INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                created_at_us   INTEGER NOT NULL
            );
            CREATE INDEX IF NOT EXISTS idx_sessions_user ON sessions(user_id);
            CREATE INDEX IF NOT EXISTS idx_sessions_created ON sessions(created_at_us);

            -- Messages table
            CREATE TABLE IF NOT EXISTS messages (
                id              INTEGER PRIMARY KEY,
                title           TEXT NOT NULL,
                content         TEXT NOT NULL,
                user_id         INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                created_at_us   INTEGER NOT NULL,
                updated_at_us   INTEGER
            );
            CREATE INDEX IF NOT EXISTS idx_messages_created ON messages(created_at_us);
            CREATE INDEX IF NOT EXISTS idx_messages_user_created ON messages(user_id, created_at_us);
        """)

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Context manager for database transactions (holds the write lock)."""
        with self._lock:
            self._conn.execute("BEGIN IMMEDIATE")
            try:
                yield self._conn
                self._conn.execute("COMMIT")
            except Exception:
                self._conn.execute("ROLLBACK")
                raise

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute SQL query."""
        with self._lock:
            return self._conn.execute(sql, params)

    def fetchone(self, sql: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        """Execute query and fetch one result."""
        with self._lock:
            return self._conn.execute(sql, params).fetchone()

    def fetchall(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        """Execute query and fetch all results."""
        with self._lock:
            return self._conn.execute(sql, params).fetchall()

    def close(self):
        """Close database connection."""
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None
                self._initialized = False
                logger.info("Database connection closed")

    # === Utility Methods ===

    def count_users(self) -> int:
        """Count total registered users."""
        row = self.fetchone("SELECT COUNT(*) FROM users")
        return row[0] if row else 0

    def count_messages(self) -> int:
        """Count total messages."""
        row = self.fetchone("SELECT COUNT(*) FROM messages")
        return row[0] if row else 0

    def count_sessions(self) -> int:
        """Count stored sessions."""
        row = self.fetchone("SELECT COUNT(*) FROM sessions")
        return row[0] if row else 0
