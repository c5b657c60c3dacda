"""MsgBoard Utilities Module."""

from .formatting import format_timestamp, format_uptime, user_to_dict, message_to_dict
from .validation import is_encodable

__all__ = ["format_timestamp", "format_uptime", "user_to_dict", "message_to_dict", "is_encodable"]
