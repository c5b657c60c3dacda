"""
Tests for MsgBoard Configuration
"""

from msgboard.config import Config, load_config


class TestConfig:
    """Tests for loading and validating configuration."""

    def test_defaults(self):
        config = Config()

        assert config.session.cookie_name == "sessionId"
        assert config.session.max_age_days == 7
        assert config.rate_limits.messages_per_window == 3
        assert config.rate_limits.window_seconds == 60
        assert config.crypto.pbkdf2_iterations == 100_000

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.toml")
        assert config == Config()

    def test_load_sections(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[board]\n'
            'name = "Test Board"\n'
            'admin_password = "rotated!"\n'
            '\n'
            '[database]\n'
            'path = "/tmp/test.db"\n'
            '\n'
            '[web]\n'
            'port = 9000\n'
            'production = true\n'
        )

        config = load_config(path)

        assert config.board.name == "Test Board"
        assert config.board.admin_password == "rotated!"
        assert config.board.admin_username == "admin"
        assert config.database.path == "/tmp/test.db"
        assert config.web.port == 9000
        assert config.web.production is True

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "config.toml"
        config = Config()
        config.board.name = "Saved"
        config.rate_limits.messages_per_window = 5

        config.save(path)
        loaded = load_config(path)

        assert loaded.board.name == "Saved"
        assert loaded.rate_limits.messages_per_window == 5

    def test_validate_default_password(self):
        errors = Config().validate()
        assert any("admin_password" in e for e in errors)

    def test_validate_ok(self):
        config = Config()
        config.board.admin_password = "a-real-password"

        assert config.validate() == []

    def test_validate_weak_settings(self):
        config = Config()
        config.board.admin_password = "a-real-password"
        config.crypto.pbkdf2_iterations = 1000
        config.rate_limits.window_seconds = 0
        config.web.port = 70000

        errors = config.validate()

        assert any("pbkdf2_iterations" in e for e in errors)
        assert any("window_seconds" in e for e in errors)
        assert any("web.port" in e for e in errors)

    def test_to_toml(self):
        text = Config().to_toml()
        assert "[board]" in text
        assert "[rate_limits]" in text
