"""MsgBoard Core Module - Main board class, crypto, sessions, and services."""

from .board import MessageBoard
from .crypto import PasswordHasher
from .rate_limiter import MessageRateLimiter
from .sessions import SessionManager, SessionCookie
from .auth import AuthService, LoginResult
from .messages import MessageService

__all__ = [
    "MessageBoard",
    "PasswordHasher",
    "MessageRateLimiter",
    "SessionManager",
    "SessionCookie",
    "AuthService",
    "LoginResult",
    "MessageService",
]
