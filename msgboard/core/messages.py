"""
MsgBoard Message Service

Posting, editing, deleting and listing board messages with ownership
checks and per-user rate limiting.
"""

import time
import logging
from typing import Callable, Optional

from ..db.connection import Database
from ..db.messages import MessageRepository
from ..db.models import MessageView
from ..errors import (
    AuthorizationError,
    BoardError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from ..utils.validation import is_encodable
from .rate_limiter import MessageRateLimiter

logger = logging.getLogger(__name__)


# Message limits
MAX_TITLE_LENGTH = 120
MAX_CONTENT_LENGTH = 1000
DEFAULT_LIST_LIMIT = 100


def validate_message(title, content) -> tuple[Optional[tuple[str, str]], Optional[ValidationError]]:
    """
    Trim and validate a title/content pair.

    Returns:
        ((title, content), None) with trimmed values
        (None, ValidationError) on failure
    """
    if not isinstance(title, str) or not title.strip():
        return None, ValidationError("Title is required")

    title = title.strip()
    if not is_encodable(title):
        return None, ValidationError("Title contains invalid characters")

    if len(title) > MAX_TITLE_LENGTH:
        return None, ValidationError(f"Title too long (max {MAX_TITLE_LENGTH} characters)")

    if not isinstance(content, str) or not content.strip():
        return None, ValidationError("Content is required")

    content = content.strip()
    if not is_encodable(content):
        return None, ValidationError("Content contains invalid characters")

    if len(content) > MAX_CONTENT_LENGTH:
        return None, ValidationError(f"Message too long (max {MAX_CONTENT_LENGTH} characters)")

    return (title, content), None


class MessageService:
    """
    Message operations for MsgBoard.

    Rules:
    - Anyone may list
    - Authenticated users post, rate limited per user
    - Owner or admin may edit and delete
    - Deleting a missing message succeeds
    """

    def __init__(
        self,
        db: Database,
        max_messages: int = 3,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.time
    ):
        self.db = db
        self.messages = MessageRepository(db, clock=clock)
        self.rate_limiter = MessageRateLimiter(
            self.messages,
            max_messages=max_messages,
            window_seconds=window_seconds,
            clock=clock
        )

    def list_messages(self, limit: int = DEFAULT_LIST_LIMIT) -> list[MessageView]:
        """Newest messages first, with owner name and role."""
        return self.messages.list_messages(limit)

    def create_message(
        self,
        author_id: int,
        title: str,
        content: str
    ) -> tuple[Optional[MessageView], Optional[BoardError]]:
        """
        Post a new message.

        Returns:
            (MessageView, None) on success
            (None, ValidationError | RateLimitError) on failure
        """
        values, error = validate_message(title, content)
        if error:
            return None, error
        title, content = values

        with self.db.transaction():
            allowed, retry_after = self.rate_limiter.check(author_id)
            if not allowed:
                return None, RateLimitError(
                    "Rate limit exceeded, try again shortly",
                    retry_after=retry_after
                )

            message = self.messages.create_message(author_id, title, content)
            view = self.messages.get_message_view(message.id)

        logger.info(f"Message {message.id} posted by user {author_id}")
        return view, None

    def update_message(
        self,
        message_id: int,
        requester_id: int,
        is_requester_admin: bool,
        title: str,
        content: str
    ) -> tuple[Optional[MessageView], Optional[BoardError]]:
        """
        Edit a message's title and content.

        Returns:
            (MessageView, None) on success
            (None, ValidationError | NotFoundError | AuthorizationError) on failure
        """
        values, error = validate_message(title, content)
        if error:
            return None, error
        title, content = values

        with self.db.transaction():
            message = self.messages.get_message_by_id(message_id)
            if not message:
                return None, NotFoundError("Message not found")

            if message.user_id != requester_id and not is_requester_admin:
                logger.warning(f"User {requester_id} denied edit of message {message_id}")
                return None, AuthorizationError("You can only edit your own messages")

            self.messages.update_message(message_id, title, content)
            view = self.messages.get_message_view(message_id)

        logger.info(f"Message {message_id} edited by user {requester_id}")
        return view, None

    def delete_message(
        self,
        message_id: int,
        requester_id: int,
        is_requester_admin: bool
    ) -> tuple[bool, Optional[BoardError]]:
        """
        Delete a message.

        Returns:
            (True, None) on success, including when already gone
            (False, AuthorizationError) if not owner or admin
        """
        with self.db.transaction():
            message = self.messages.get_message_by_id(message_id)
            if not message:
                return True, None

            if message.user_id != requester_id and not is_requester_admin:
                logger.warning(f"User {requester_id} denied delete of message {message_id}")
                return False, AuthorizationError("You can only delete your own messages")

            self.messages.delete_message(message_id)

        logger.info(f"Message {message_id} deleted by user {requester_id}")
        return True, None
