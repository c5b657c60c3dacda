"""
MsgBoard Web Adapter

Flask JSON routes over the MessageBoard operations surface. Identity comes
from the session cookie; every BoardError maps to its HTTP status.
"""

import logging
import re
from typing import Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.board import MessageBoard
from ..core.sessions import SessionCookie
from ..errors import BoardError
from ..utils.formatting import message_to_dict, user_to_dict

logger = logging.getLogger(__name__)

_MESSAGE_ID = re.compile(r"[0-9]+")


def _error_response(error: BoardError):
    response = jsonify(error.to_dict())
    response.status_code = error.status
    if getattr(error, "retry_after", None):
        response.headers["Retry-After"] = str(max(1, round(error.retry_after)))
    return response


def _apply_cookie(response, cookie: SessionCookie):
    if cookie.is_clearing:
        response.delete_cookie(
            cookie.name,
            secure=cookie.secure,
            httponly=cookie.http_only,
            samesite=cookie.same_site
        )
    else:
        response.set_cookie(
            cookie.name,
            cookie.value,
            max_age=cookie.max_age,
            secure=cookie.secure,
            httponly=cookie.http_only,
            samesite=cookie.same_site
        )
    return response


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _parse_id(raw: str) -> Optional[int]:
    if not isinstance(raw, str) or not _MESSAGE_ID.fullmatch(raw):
        return None
    return int(raw)


def create_app(board: MessageBoard) -> Flask:
    """
    Build the Flask application for a set-up board.

    Args:
        board: MessageBoard whose setup() has already run
    """
    app = Flask(__name__)
    app.extensions["msgboard"] = board

    # === Auth ===

    @app.post("/api/auth/login")
    def login():
        body = _json_body()
        result, error = board.login(body.get("username"), body.get("password"))
        if error:
            return _error_response(error)

        response = jsonify({"success": True, "user": user_to_dict(result.user)})
        return _apply_cookie(response, result.cookie)

    @app.post("/api/auth/logout")
    def logout():
        cookie, error = board.logout(request.cookies)
        if error:
            return _error_response(error)
        return _apply_cookie(jsonify({"success": True}), cookie)

    @app.get("/api/auth/me")
    def me():
        user, error = board.who_am_i(request.cookies)
        if error:
            return _error_response(error)
        return jsonify({"user": user_to_dict(user)})

    # === Messages ===

    @app.get("/api/messages")
    def list_messages():
        messages, error = board.list_messages()
        if error:
            return _error_response(error)
        return jsonify({"messages": [message_to_dict(m) for m in messages]})

    @app.post("/api/messages")
    def post_message():
        body = _json_body()
        message, error = board.post_message(request.cookies, body.get("title"), body.get("content"))
        if error:
            return _error_response(error)
        return jsonify({"message": message_to_dict(message)}), 201

    @app.put("/api/messages/<raw_id>")
    def edit_message(raw_id):
        message_id = _parse_id(raw_id)
        if message_id is None:
            return jsonify({"error": "Invalid message id", "code": "invalid_input"}), 400

        body = _json_body()
        message, error = board.edit_message(
            request.cookies, message_id, body.get("title"), body.get("content")
        )
        if error:
            return _error_response(error)
        return jsonify({"message": message_to_dict(message)})

    @app.delete("/api/messages/<raw_id>")
    def delete_message(raw_id):
        message_id = _parse_id(raw_id)
        if message_id is None:
            logger.warning(f"Delete with invalid message id: {raw_id!r}")
            return jsonify({"success": True})

        _, error = board.delete_message(request.cookies, message_id)
        if error:
            return _error_response(error)
        return jsonify({"success": True})

    # === Accounts (admin) ===

    @app.get("/api/users")
    def list_users():
        users, error = board.list_accounts(request.cookies)
        if error:
            return _error_response(error)
        return jsonify({"users": [user_to_dict(u) for u in users]})

    @app.post("/api/users")
    def create_user():
        body = _json_body()
        user, error = board.create_account(
            request.cookies,
            body.get("username"),
            body.get("password"),
            bool(body.get("isAdmin", False))
        )
        if error:
            return _error_response(error)
        return jsonify({"success": True, "user": user_to_dict(user)}), 201

    @app.patch("/api/users")
    def reset_password():
        body = _json_body()
        user, error = board.reset_account_password(
            request.cookies, body.get("userId"), body.get("password")
        )
        if error:
            return _error_response(error)
        return jsonify({"success": True, "user": user_to_dict(user)})

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        return jsonify({"error": e.name, "code": "http_error"}), e.code

    return app
