"""
MsgBoard Input Validation Helpers
"""


def is_encodable(value: str) -> bool:
    """True if the string survives UTF-8 encoding (no lone surrogates)."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True
