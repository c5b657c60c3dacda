"""
MsgBoard Formatting Utilities

Helper functions for formatting output.
"""

from datetime import datetime, timezone
from typing import Optional

from ..db.models import MessageView, PublicUser


def format_timestamp(timestamp_us: Optional[int]) -> Optional[str]:
    """
    Format microsecond timestamp as ISO-8601 UTC.

    Args:
        timestamp_us: Microseconds since epoch

    Returns:
        String like "2025-12-10T14:32:05.123Z", or None for None
    """
    if timestamp_us is None:
        return None

    dt = datetime.fromtimestamp(timestamp_us / 1_000_000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def format_uptime(elapsed_seconds: float) -> str:
    """
    Format an uptime duration.

    Returns:
        Formatted string like "2d 5h 30m"
    """
    elapsed = int(elapsed_seconds)

    days = elapsed // 86400
    hours = (elapsed % 86400) // 3600
    minutes = (elapsed % 3600) // 60

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0 or days > 0:
        parts.append(f"{hours}h")
    parts.append(f"{minutes}m")

    return " ".join(parts)


def user_to_dict(user: Optional[PublicUser]) -> Optional[dict]:
    """JSON shape of a sanitized user."""
    if user is None:
        return None
    return {
        "id": user.id,
        "username": user.username,
        "isAdmin": user.is_admin,
        "createdAt": format_timestamp(user.created_at_us),
    }


def message_to_dict(message: MessageView) -> dict:
    """JSON shape of a message with its owner."""
    return {
        "id": message.id,
        "title": message.title,
        "content": message.content,
        "userId": message.user_id,
        "username": message.username,
        "isAdmin": message.is_admin,
        "createdAt": format_timestamp(message.created_at_us),
        "updatedAt": format_timestamp(message.updated_at_us),
    }
