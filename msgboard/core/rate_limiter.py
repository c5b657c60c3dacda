"""
MsgBoard Rate Limiter

Rolling-window limit on message posting per user. The window is counted
from the message store itself, so the limit survives restarts and needs
no in-memory buckets.
"""

import time
import logging
from typing import Callable

from ..db.messages import MessageRepository

logger = logging.getLogger(__name__)


class MessageRateLimiter:
    """
    At most ``max_messages`` per user in any ``window_seconds`` span.

    A message created at ``t`` counts while ``now - window < t``. Callers
    must run ``check`` and the following insert inside one store
    transaction.
    """

    def __init__(
        self,
        messages: MessageRepository,
        max_messages: int = 3,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize rate limiter.

        Args:
            messages: Message repository to count recent posts from
            max_messages: Posts allowed per window
            window_seconds: Window length in seconds
            clock: Time source returning epoch seconds
        """
        self.messages = messages
        self.max_messages = max_messages
        self.window_us = int(window_seconds * 1_000_000)
        self.clock = clock

        logger.debug(f"MessageRateLimiter initialized: {max_messages}/{window_seconds}s")

    def recent_count(self, user_id: int) -> int:
        """Messages by the user inside the current window."""
        now_us = int(self.clock() * 1_000_000)
        return self.messages.count_user_messages_since(user_id, now_us - self.window_us)

    def check(self, user_id: int) -> tuple[bool, float]:
        """
        Check whether a user may post now.

        Returns:
            (allowed, retry_after_seconds) tuple
        """
        now_us = int(self.clock() * 1_000_000)
        times = self.messages.get_user_message_times_since(user_id, now_us - self.window_us)

        if len(times) < self.max_messages:
            return True, 0.0

        # The post that has to age out before a slot frees up
        blocking_us = times[len(times) - self.max_messages]
        retry_after = max(0.0, (blocking_us + self.window_us - now_us) / 1_000_000)

        logger.warning(f"Rate limit exceeded for user {user_id} ({len(times)} in window)")
        return False, retry_after
