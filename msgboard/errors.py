"""
MsgBoard Error Types

Every expected failure of a board operation is one of these. Services
return them as the second element of a ``(result, error)`` tuple; the
HTTP adapter maps ``status`` to the response code.
"""

from typing import Optional


class BoardError(Exception):
    """Base class for board errors. ``message`` is safe to show callers."""

    status = 500
    code = "error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    default_message = "Request failed"

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class ValidationError(BoardError):
    """Malformed or out-of-range input. No state was changed."""
    status = 400
    code = "invalid_input"
    default_message = "Invalid input"


class AuthError(BoardError):
    """Bad credentials, or no valid session."""
    status = 401
    code = "unauthorized"
    default_message = "Unauthorized"


class AuthorizationError(BoardError):
    """Authenticated, but not allowed to do this."""
    status = 403
    code = "forbidden"
    default_message = "Forbidden"


class NotFoundError(BoardError):
    status = 404
    code = "not_found"
    default_message = "Not found"


class ConflictError(BoardError):
    """Duplicate unique key."""
    status = 409
    code = "conflict"
    default_message = "Already exists"


class RateLimitError(BoardError):
    """Too many writes in the current window."""
    status = 429
    code = "rate_limited"
    default_message = "Rate limit exceeded"

    def __init__(self, message: str = "", retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.retry_after is not None:
            data["retryAfter"] = round(self.retry_after, 3)
        return data


class InternalError(BoardError):
    """Persistence failure or broken invariant. Details stay in the log."""
    status = 500
    code = "internal_error"
    default_message = "Internal error"
