"""MsgBoard Web Module - JSON HTTP adapter (requires the ``web`` extra)."""

from .app import create_app

__all__ = ["create_app"]
