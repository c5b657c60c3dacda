"""
MsgBoard Authentication Service

Login, account provisioning, password resets and the authorization
checks used by the operations surface.
"""

import secrets
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from ..db.models import PublicUser, User
from ..db.users import UserRepository
from ..errors import (
    AuthError,
    AuthorizationError,
    BoardError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from ..utils.validation import is_encodable
from .crypto import PasswordHasher
from .sessions import SessionCookie, SessionManager

logger = logging.getLogger(__name__)


MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = "Invalid username or password"


@dataclass
class LoginResult:
    """Successful login: who logged in and the cookie to hand back."""
    user: PublicUser
    session_id: str
    cookie: SessionCookie


class AuthService:
    """
    Credential checks and account management.

    Admin-only operations here do not check the caller; use
    ``require_admin`` at the boundary first.
    """

    def __init__(
        self,
        users: UserRepository,
        sessions: SessionManager,
        hasher: PasswordHasher
    ):
        self.users = users
        self.sessions = sessions
        self.hasher = hasher

        # Verified against when the username is unknown, so both failure
        # paths pay for one KDF run
        self._dummy_hash = hasher.hash_password(secrets.token_hex(16))

    def login(self, username: str, password: str) -> tuple[Optional[LoginResult], Optional[BoardError]]:
        """
        Check credentials and start a session.

        Returns:
            (LoginResult, None) on success
            (None, ValidationError | AuthError) on failure
        """
        if not isinstance(username, str) or not username.strip():
            return None, ValidationError("Username is required")

        if not isinstance(password, str) or not password.strip():
            return None, ValidationError("Password is required")

        if not is_encodable(username) or not is_encodable(password):
            return None, ValidationError("Invalid characters in credentials")

        user = self.users.get_user_by_username(username.strip())

        if not user:
            self.hasher.verify_password(password, self._dummy_hash)
            logger.info("Login failed: unknown username")
            return None, AuthError(INVALID_CREDENTIALS)

        if not self.hasher.verify_password(password, user.password_hash):
            logger.info(f"Login failed: bad password for user {user.id}")
            return None, AuthError(INVALID_CREDENTIALS)

        session_id, cookie = self.sessions.issue(user.id)
        logger.info(f"User {user.username} logged in")

        return LoginResult(user=user.sanitized(), session_id=session_id, cookie=cookie), None

    def logout(self, cookies: Optional[Mapping[str, str]]) -> SessionCookie:
        """End the caller's session. Always succeeds."""
        return self.sessions.revoke(cookies)

    def provision_account(
        self,
        username: str,
        password: str,
        is_admin: bool = False
    ) -> tuple[Optional[PublicUser], Optional[BoardError]]:
        """
        Create an account.

        Returns:
            (PublicUser, None) on success
            (None, ValidationError | ConflictError) on failure
        """
        if not isinstance(username, str) or len(username.strip()) < MIN_USERNAME_LENGTH:
            return None, ValidationError(
                f"Username must be at least {MIN_USERNAME_LENGTH} characters"
            )

        if not is_encodable(username):
            return None, ValidationError("Username contains invalid characters")

        error = self._check_password(password)
        if error:
            return None, error

        try:
            user = self.users.create_user(
                username=username.strip(),
                password_hash=self.hasher.hash_password(password),
                is_admin=bool(is_admin)
            )
        except ConflictError as e:
            return None, e

        logger.info(f"Account created: {user.username} (admin={user.is_admin})")
        return user.sanitized(), None

    def reset_password(
        self,
        user_id: int,
        new_password: str
    ) -> tuple[Optional[PublicUser], Optional[BoardError]]:
        """
        Set a new password for an account and end its sessions.

        Returns:
            (PublicUser, None) on success
            (None, ValidationError | NotFoundError) on failure
        """
        if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
            return None, ValidationError("Invalid user")

        error = self._check_password(new_password)
        if error:
            return None, error

        if not self.users.get_user_by_id(user_id):
            return None, NotFoundError("User not found")

        user = self.users.update_password(user_id, self.hasher.hash_password(new_password))
        if not user:
            return None, NotFoundError("User not found")

        self.sessions.revoke_user(user_id)
        logger.info(f"Password reset for user {user.username}")

        return user.sanitized(), None

    def current_user(self, cookies: Optional[Mapping[str, str]]) -> Optional[PublicUser]:
        """The caller's sanitized user, or None when anonymous."""
        user = self.sessions.resolve(cookies)
        return user.sanitized() if user else None

    def list_accounts(self) -> list[PublicUser]:
        """All accounts in creation order."""
        return [user.sanitized() for user in self.users.list_users()]

    def require_user(self, cookies: Optional[Mapping[str, str]]) -> tuple[Optional[User], Optional[BoardError]]:
        """Resolve the caller or fail with AuthError."""
        user = self.sessions.resolve(cookies)
        if not user:
            return None, AuthError("Login required")
        return user, None

    def require_admin(self, cookies: Optional[Mapping[str, str]]) -> tuple[Optional[User], Optional[BoardError]]:
        """Resolve the caller and insist on admin rights."""
        user, error = self.require_user(cookies)
        if error:
            return None, error
        if not user.is_admin:
            return None, AuthorizationError("Admin access required")
        return user, None

    def bootstrap_admin(self, username: str, password: str) -> Optional[PublicUser]:
        """
        Seed the first admin account if the store has no users.

        Returns the created admin, or None if users already exist.
        """
        if self.users.count_users() > 0:
            return None

        try:
            user = self.users.create_user(
                username=username.strip(),
                password_hash=self.hasher.hash_password(password),
                is_admin=True
            )
        except ConflictError:
            # Another process seeded first
            return None

        logger.warning(
            f"Seeded default admin account '{user.username}'. "
            f"Change its password: python -m msgboard passwd {user.username} <new-password>"
        )
        return user.sanitized()

    def _check_password(self, password: str) -> Optional[ValidationError]:
        if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
            return ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if not is_encodable(password):
            return ValidationError("Password contains invalid characters")
        return None
