"""
MsgBoard Data Models

Dataclasses representing database entities and the projections handed
to callers.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class User:
    """Registered board account."""
    id: Optional[int] = None
    username: str = ""
    password_hash: str = ""
    is_admin: bool = False
    created_at_us: int = 0

    def sanitized(self) -> "PublicUser":
        """Projection without the password hash."""
        return PublicUser(
            id=self.id,
            username=self.username,
            is_admin=self.is_admin,
            created_at_us=self.created_at_us
        )


@dataclass
class PublicUser:
    """User as returned to callers - never carries the password hash."""
    id: int
    username: str
    is_admin: bool
    created_at_us: int


@dataclass
class Session:
    """Server-side login session."""
    id: str = ""
    user_id: int = 0
    created_at_us: int = 0


@dataclass
class Message:
    """Board message."""
    id: Optional[int] = None
    title: str = ""
    content: str = ""
    user_id: int = 0
    created_at_us: int = 0
    updated_at_us: Optional[int] = None


@dataclass
class MessageView:
    """Message joined with its owner's current username and role."""
    id: int
    title: str
    content: str
    user_id: int
    username: str
    is_admin: bool
    created_at_us: int
    updated_at_us: Optional[int] = None
