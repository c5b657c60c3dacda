"""MsgBoard Database Module - SQLite database operations."""

from .connection import Database
from .models import User, PublicUser, Session, Message, MessageView
from .users import UserRepository
from .sessions import SessionRepository
from .messages import MessageRepository

__all__ = [
    "Database",
    "User",
    "PublicUser",
    "Session",
    "Message",
    "MessageView",
    "UserRepository",
    "SessionRepository",
    "MessageRepository",
]
