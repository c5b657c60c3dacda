"""
MsgBoard Session Manager

Issues, resolves and revokes login sessions. The session token travels in
an http-only cookie; the server keeps the authoritative record.
"""

import time
import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from ..db.models import User
from ..db.sessions import SessionRepository
from ..db.users import UserRepository
from ..utils.validation import is_encodable

logger = logging.getLogger(__name__)


DEFAULT_COOKIE_NAME = "sessionId"
DEFAULT_MAX_AGE_SECONDS = 7 * 24 * 3600


@dataclass
class SessionCookie:
    """Outbound cookie instruction for the HTTP layer."""
    name: str
    value: str
    max_age: int
    http_only: bool = True
    secure: bool = False
    same_site: str = "Lax"

    @property
    def is_clearing(self) -> bool:
        return self.max_age == 0


class SessionManager:
    """
    Cookie-bound session lifecycle.

    Sessions expire server-side after ``max_age_seconds``, matching the
    cookie max-age.
    """

    def __init__(
        self,
        sessions: SessionRepository,
        users: UserRepository,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS,
        secure: bool = False,
        clock: Callable[[], float] = time.time
    ):
        self.sessions = sessions
        self.users = users
        self.cookie_name = cookie_name
        self.max_age_seconds = max_age_seconds
        self.secure = secure
        self.clock = clock

    def issue(self, user_id: int) -> tuple[str, SessionCookie]:
        """Create a session for a user and the cookie that carries it."""
        self.purge_expired()

        session_id = self.sessions.create_session(user_id)
        logger.info(f"Session issued for user {user_id}")

        return session_id, self._cookie(session_id, self.max_age_seconds)

    def resolve(self, cookies: Optional[Mapping[str, str]]) -> Optional[User]:
        """
        Resolve the calling user from request cookies.

        Returns None for anonymous callers and for unknown, expired or
        orphaned sessions.
        """
        session_id = self._token(cookies)
        if not session_id:
            return None

        session = self.sessions.get_session(session_id)
        if not session:
            return None

        if self._is_expired(session.created_at_us):
            self.sessions.delete_session(session_id)
            logger.debug(f"Session expired for user {session.user_id}")
            return None

        user = self.users.get_user_by_id(session.user_id)
        if not user:
            # Owner is gone - prune the dangling session
            self.sessions.delete_session(session_id)
            logger.warning(f"Pruned orphaned session for missing user {session.user_id}")
            return None

        return user

    def revoke(self, cookies: Optional[Mapping[str, str]]) -> SessionCookie:
        """Delete the caller's session, if any, and return a clearing cookie."""
        session_id = self._token(cookies)
        if session_id and self.sessions.delete_session(session_id):
            logger.info("Session revoked")

        return self._cookie("", 0)

    def revoke_user(self, user_id: int) -> int:
        """Delete every session of a user."""
        count = self.sessions.delete_user_sessions(user_id)
        if count:
            logger.info(f"Revoked {count} sessions for user {user_id}")
        return count

    def purge_expired(self) -> int:
        """Delete all sessions older than the max age."""
        now_us = int(self.clock() * 1_000_000)
        return self.sessions.delete_sessions_before(now_us - self.max_age_seconds * 1_000_000)

    def _is_expired(self, created_at_us: int) -> bool:
        now_us = int(self.clock() * 1_000_000)
        return now_us - created_at_us >= self.max_age_seconds * 1_000_000

    def _token(self, cookies: Optional[Mapping[str, str]]) -> Optional[str]:
        if not cookies:
            return None
        token = cookies.get(self.cookie_name)
        if not isinstance(token, str) or not token or not is_encodable(token):
            return None
        return token

    def _cookie(self, value: str, max_age: int) -> SessionCookie:
        return SessionCookie(
            name=self.cookie_name,
            value=value,
            max_age=max_age,
            http_only=True,
            secure=self.secure,
            same_site="Lax"
        )
