"""
Tests for MsgBoard Orchestrator

Drives the operations surface end to end, the way the HTTP adapter does.
"""

import logging

from msgboard.config import Config
from msgboard.core.board import MessageBoard
from msgboard.errors import (
    AuthError,
    AuthorizationError,
    ConflictError,
    InternalError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)


class FakeClock:
    """Controllable time source."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def make_config(db_path=":memory:") -> Config:
    config = Config()
    config.database.path = db_path
    config.board.admin_username = "root"
    config.board.admin_password = "secret1"
    # Low work factor for faster tests
    config.crypto.pbkdf2_iterations = 1000
    return config


class TestMessageBoard:
    """Tests for the operations surface."""

    def setup_method(self):
        self.clock = FakeClock()
        self.board = MessageBoard(make_config(), clock=self.clock)
        self.board.setup()

    def teardown_method(self):
        self.board.shutdown()

    def login(self, username, password):
        result, error = self.board.login(username, password)
        assert error is None
        return {"sessionId": result.session_id}

    def test_bootstrap_admin_seeded(self):
        root = self.login("root", "secret1")
        user, error = self.board.who_am_i(root)

        assert error is None
        assert user.username == "root"
        assert user.is_admin is True

    def test_end_to_end_scenario(self):
        root = self.login("root", "secret1")

        alice_user, error = self.board.create_account(root, "alice", "password1", False)
        assert error is None
        assert alice_user.is_admin is False

        alice = self.login("alice", "password1")
        posted, error = self.board.post_message(alice, "Hi", "hello")
        assert error is None

        messages, _ = self.board.list_messages()
        first = messages[0]
        assert first.id == posted.id
        assert first.title == "Hi"
        assert first.content == "hello"
        assert first.username == "alice"
        assert first.is_admin is False
        assert first.updated_at_us is None

        self.clock.advance(2)
        edited, error = self.board.edit_message(alice, posted.id, "Hi", "hello world")
        assert error is None
        assert edited.content == "hello world"
        assert edited.updated_at_us is not None

        ok, error = self.board.delete_message(root, posted.id)
        assert ok is True
        assert error is None

        messages, _ = self.board.list_messages()
        assert posted.id not in [m.id for m in messages]

    def test_who_am_i_anonymous(self):
        user, error = self.board.who_am_i({})
        assert user is None
        assert error is None

    def test_logout(self):
        root = self.login("root", "secret1")

        cookie, error = self.board.logout(root)

        assert error is None
        assert cookie.is_clearing
        assert self.board.who_am_i(root) == (None, None)

    def test_anonymous_cannot_post(self):
        message, error = self.board.post_message({}, "Hi", "hello")
        assert message is None
        assert isinstance(error, AuthError)

    def test_anonymous_cannot_edit_or_delete(self):
        _, error = self.board.edit_message({}, 1, "Hi", "x")
        assert isinstance(error, AuthError)

        _, error = self.board.delete_message({}, 1)
        assert isinstance(error, AuthError)

    def test_admin_operations_require_admin(self):
        root = self.login("root", "secret1")
        self.board.create_account(root, "alice", "password1")
        alice = self.login("alice", "password1")

        _, error = self.board.list_accounts(alice)
        assert isinstance(error, AuthorizationError)

        _, error = self.board.create_account(alice, "mallory", "password1")
        assert isinstance(error, AuthorizationError)

        _, error = self.board.reset_account_password(alice, 1, "hacked1")
        assert isinstance(error, AuthorizationError)

        _, error = self.board.list_accounts({})
        assert isinstance(error, AuthError)

    def test_admin_account_management(self):
        root = self.login("root", "secret1")
        alice, _ = self.board.create_account(root, "alice", "password1")

        _, error = self.board.create_account(root, "alice", "password2")
        assert isinstance(error, ConflictError)

        _, error = self.board.create_account(root, "al", "password2")
        assert isinstance(error, ValidationError)

        user, error = self.board.reset_account_password(root, alice.id, "newpass1")
        assert error is None
        assert user.username == "alice"

        _, error = self.board.reset_account_password(root, 999, "newpass1")
        assert isinstance(error, NotFoundError)

        accounts, _ = self.board.list_accounts(root)
        assert [a.username for a in accounts] == ["root", "alice"]

    def test_rate_limit_through_board(self):
        root = self.login("root", "secret1")
        for i in range(3):
            _, error = self.board.post_message(root, f"t{i}", "c")
            assert error is None

        _, error = self.board.post_message(root, "t3", "c")
        assert isinstance(error, RateLimitError)

        self.clock.advance(60)
        _, error = self.board.post_message(root, "t4", "c")
        assert error is None

    def test_non_owner_cannot_edit(self):
        root = self.login("root", "secret1")
        self.board.create_account(root, "alice", "password1")
        self.board.create_account(root, "bob", "password1")
        alice = self.login("alice", "password1")
        bob = self.login("bob", "password1")

        message, _ = self.board.post_message(alice, "Hi", "hello")

        _, error = self.board.edit_message(bob, message.id, "Hi", "mine now")
        assert isinstance(error, AuthorizationError)

        _, error = self.board.delete_message(bob, message.id)
        assert isinstance(error, AuthorizationError)

    def test_invalid_message_ids(self):
        root = self.login("root", "secret1")

        _, error = self.board.edit_message(root, "abc", "Hi", "x")
        assert isinstance(error, ValidationError)

        assert self.board.delete_message(root, "abc") == (True, None)

    def test_unencodable_input_is_validation_error(self):
        _, error = self.board.login("root", "\ud800abcdef")
        assert isinstance(error, ValidationError)
        assert error.status == 400

        root = self.login("root", "secret1")
        _, error = self.board.create_account(root, "alice", "\ud800abcdef")
        assert isinstance(error, ValidationError)

        _, error = self.board.post_message(root, "Hi", "\udc00")
        assert isinstance(error, ValidationError)
        assert self.board.stats.errors == 0

    def test_unexpected_error_becomes_internal_error(self, caplog):
        def broken(limit):
            raise RuntimeError("disk on fire")

        self.board.message_service.list_messages = broken

        with caplog.at_level(logging.ERROR):
            messages, error = self.board.list_messages()

        assert messages is None
        assert isinstance(error, InternalError)
        assert "disk on fire" not in error.message
        assert "disk on fire" in caplog.text
        assert self.board.stats.errors == 1

    def test_stats(self):
        self.board.login("root", "secret1")
        self.board.login("root", "wrong-password")

        assert self.board.stats.logins == 1
        assert self.board.stats.failed_logins == 1


class TestPersistence:
    """Tests for state surviving a restart."""

    def test_restart_keeps_state(self, tmp_path):
        config = make_config(str(tmp_path / "board.db"))

        board = MessageBoard(config)
        board.setup()
        result, _ = board.login("root", "secret1")
        cookies = {"sessionId": result.session_id}
        board.post_message(cookies, "Hi", "persisted")
        board.shutdown()

        board = MessageBoard(config)
        board.setup()
        try:
            messages, _ = board.list_messages()
            assert [m.content for m in messages] == ["persisted"]

            user, _ = board.who_am_i(cookies)
            assert user.username == "root"

            accounts, _ = board.list_accounts(cookies)
            assert len(accounts) == 1
        finally:
            board.shutdown()
