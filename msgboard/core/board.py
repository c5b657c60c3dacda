"""
MsgBoard Main Board Class

Central orchestrator: wires configuration, storage and services together
and exposes the operations surface used by the HTTP adapter.
"""

import functools
import logging
import time
from typing import Callable, Mapping, Optional

from ..config import Config
from ..errors import BoardError, InternalError, ValidationError
from ..utils.formatting import format_uptime
from .crypto import PasswordHasher

logger = logging.getLogger(__name__)

Cookies = Optional[Mapping[str, str]]


def guarded(func):
    """
    Turn unexpected exceptions from an operation into InternalError.

    Expected failures are already returned as ``(None, error)``; anything
    raised is logged with its traceback and reported generically.
    """
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except BoardError as e:
            return None, e
        except Exception:
            logger.exception(f"Unexpected error in {func.__name__}")
            self.stats.errors += 1
            return None, InternalError()
    return wrapper


class MessageBoard:
    """
    Main MsgBoard class - orchestrates all board components.

    Responsibilities:
    - Initialize and manage database connection
    - Seed the first admin account
    - Resolve callers from session cookies
    - Route operations to the auth and message services
    """

    def __init__(self, config: Config, clock: Callable[[], float] = time.time):
        """
        Initialize MsgBoard with configuration.

        Args:
            config: Loaded configuration object
            clock: Time source returning epoch seconds
        """
        self.config = config
        self.clock = clock
        self.start_time: float = 0

        self.hasher = PasswordHasher(
            iterations=config.crypto.pbkdf2_iterations,
            salt_length=config.crypto.salt_bytes,
            key_length=config.crypto.key_length
        )

        # These will be initialized in setup()
        self.db = None
        self.sessions = None
        self.auth = None
        self.message_service = None

        self.stats = BoardStats()

        logger.info(f"MsgBoard initialized: {config.board.name}")

    def setup(self):
        """Open the database, build services and seed the first admin."""
        logger.info("Setting up MsgBoard components...")

        from ..db.connection import Database
        from ..db.sessions import SessionRepository
        from ..db.users import UserRepository
        from .auth import AuthService
        from .messages import MessageService
        from .sessions import SessionManager

        self.db = Database(self.config.database.path)
        self.db.initialize()

        users = UserRepository(self.db, clock=self.clock)
        self.sessions = SessionManager(
            SessionRepository(self.db, clock=self.clock),
            users,
            cookie_name=self.config.session.cookie_name,
            max_age_seconds=self.config.session.max_age_days * 86400,
            secure=self.config.web.production,
            clock=self.clock
        )
        self.auth = AuthService(users, self.sessions, self.hasher)
        self.message_service = MessageService(
            self.db,
            max_messages=self.config.rate_limits.messages_per_window,
            window_seconds=self.config.rate_limits.window_seconds,
            clock=self.clock
        )

        self.auth.bootstrap_admin(
            self.config.board.admin_username,
            self.config.board.admin_password
        )
        self.sessions.purge_expired()

        self.start_time = self.clock()
        logger.info("MsgBoard setup complete")

    def shutdown(self):
        """Close the database."""
        logger.info("Shutting down MsgBoard...")
        logger.info(f"Stats: {self.stats}, uptime={format_uptime(self.uptime)}")

        if self.db:
            self.db.close()
            self.db = None

        logger.info("MsgBoard shutdown complete")

    # === Operations surface ===

    @guarded
    def login(self, username: str, password: str):
        """Returns (LoginResult, None) or (None, error)."""
        result, error = self.auth.login(username, password)
        if error:
            self.stats.failed_logins += 1
            return None, error
        self.stats.logins += 1
        return result, None

    @guarded
    def logout(self, cookies: Cookies):
        """Returns (clearing SessionCookie, None)."""
        return self.auth.logout(cookies), None

    @guarded
    def who_am_i(self, cookies: Cookies):
        """Returns (PublicUser or None, None)."""
        return self.auth.current_user(cookies), None

    @guarded
    def list_messages(self, limit: Optional[int] = None):
        """Returns (list[MessageView], None)."""
        limit = limit or self.config.board.message_list_limit
        return self.message_service.list_messages(limit), None

    @guarded
    def post_message(self, cookies: Cookies, title: str, content: str):
        user, error = self.auth.require_user(cookies)
        if error:
            return None, error

        view, error = self.message_service.create_message(user.id, title, content)
        if error:
            return None, error

        self.stats.messages_posted += 1
        return view, None

    @guarded
    def edit_message(self, cookies: Cookies, message_id: int, title: str, content: str):
        user, error = self.auth.require_user(cookies)
        if error:
            return None, error

        if not _is_message_id(message_id):
            return None, ValidationError("Invalid message id")

        return self.message_service.update_message(
            message_id, user.id, user.is_admin, title, content
        )

    @guarded
    def delete_message(self, cookies: Cookies, message_id: int):
        """Returns (True, None) on success, including for unknown ids."""
        user, error = self.auth.require_user(cookies)
        if error:
            return None, error

        if not _is_message_id(message_id):
            logger.warning("Delete requested with invalid message id")
            return True, None

        return self.message_service.delete_message(message_id, user.id, user.is_admin)

    @guarded
    def list_accounts(self, cookies: Cookies):
        _, error = self.auth.require_admin(cookies)
        if error:
            return None, error
        return self.auth.list_accounts(), None

    @guarded
    def create_account(self, cookies: Cookies, username: str, password: str, is_admin: bool = False):
        _, error = self.auth.require_admin(cookies)
        if error:
            return None, error
        return self.auth.provision_account(username, password, is_admin)

    @guarded
    def reset_account_password(self, cookies: Cookies, user_id: int, password: str):
        _, error = self.auth.require_admin(cookies)
        if error:
            return None, error
        return self.auth.reset_password(user_id, password)

    @property
    def uptime(self) -> float:
        """Return uptime in seconds."""
        if self.start_time == 0:
            return 0
        return self.clock() - self.start_time


def _is_message_id(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class BoardStats:
    """Statistics tracking for the board."""

    def __init__(self):
        self.logins: int = 0
        self.failed_logins: int = 0
        self.messages_posted: int = 0
        self.errors: int = 0

    def __str__(self) -> str:
        return (
            f"logins={self.logins}, failed_logins={self.failed_logins}, "
            f"posted={self.messages_posted}, errs={self.errors}"
        )
