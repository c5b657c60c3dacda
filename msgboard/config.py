"""
MsgBoard Configuration Module

Handles loading, validation, and management of configuration settings.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        raise ImportError("Please install tomli: pip install tomli")


DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "changeme"
MIN_PBKDF2_ITERATIONS = 100_000


@dataclass
class BoardConfig:
    """Board general settings and the first-run admin credential."""
    name: str = "MsgBoard"
    admin_username: str = DEFAULT_ADMIN_USERNAME
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    message_list_limit: int = 100


@dataclass
class DatabaseConfig:
    """Database settings."""
    path: str = "data/msgboard.db"


@dataclass
class CryptoConfig:
    """Password hashing settings."""
    pbkdf2_iterations: int = MIN_PBKDF2_ITERATIONS
    salt_bytes: int = 16
    key_length: int = 64


@dataclass
class SessionConfig:
    """Session cookie settings."""
    cookie_name: str = "sessionId"
    max_age_days: int = 7


@dataclass
class RateLimitsConfig:
    """Rate limiting settings."""
    messages_per_window: int = 3
    window_seconds: int = 60


@dataclass
class WebConfig:
    """HTTP adapter settings."""
    host: str = "127.0.0.1"
    port: int = 8080
    production: bool = False


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    file: str = ""
    max_size_mb: int = 10
    backup_count: int = 3


@dataclass
class Config:
    """Main configuration container."""
    board: BoardConfig = field(default_factory=BoardConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    crypto: CryptoConfig = field(default_factory=CryptoConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    rate_limits: RateLimitsConfig = field(default_factory=RateLimitsConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        # Board validation
        if not self.board.name:
            errors.append("board.name cannot be empty")
        if len(self.board.admin_username.strip()) < 3:
            errors.append("board.admin_username must be at least 3 characters")
        if self.board.admin_password == DEFAULT_ADMIN_PASSWORD:
            errors.append("board.admin_password must be changed from default")
        elif len(self.board.admin_password) < 6:
            errors.append("board.admin_password must be at least 6 characters")
        if self.board.message_list_limit <= 0:
            errors.append("board.message_list_limit must be positive")

        # Crypto validation
        if self.crypto.pbkdf2_iterations < MIN_PBKDF2_ITERATIONS:
            errors.append(f"crypto.pbkdf2_iterations must be at least {MIN_PBKDF2_ITERATIONS}")
        if self.crypto.salt_bytes < 16:
            errors.append("crypto.salt_bytes must be at least 16")
        if self.crypto.key_length < 64:
            errors.append("crypto.key_length must be at least 64")

        # Session validation
        if not self.session.cookie_name:
            errors.append("session.cookie_name cannot be empty")
        if self.session.max_age_days <= 0:
            errors.append("session.max_age_days must be positive")

        # Rate limit validation
        if self.rate_limits.messages_per_window <= 0:
            errors.append("rate_limits.messages_per_window must be positive")
        if self.rate_limits.window_seconds <= 0:
            errors.append("rate_limits.window_seconds must be positive")

        # Web validation
        if not 0 < self.web.port < 65536:
            errors.append("web.port must be between 1 and 65535")

        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if self.logging.level.upper() not in valid_levels:
            errors.append(f"logging.level must be one of: {valid_levels}")

        return errors

    def save(self, path: Path):
        """Save configuration to TOML file."""
        import toml  # For writing

        data = self._to_dict()

        with open(path, "w") as f:
            toml.dump(data, f)

    def to_toml(self) -> str:
        """Render configuration as TOML text."""
        import toml

        return toml.dumps(self._to_dict())

    def _to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        from dataclasses import asdict
        return asdict(self)


_SECTIONS = {
    "board": BoardConfig,
    "database": DatabaseConfig,
    "crypto": CryptoConfig,
    "session": SessionConfig,
    "rate_limits": RateLimitsConfig,
    "web": WebConfig,
    "logging": LoggingConfig,
}


def load_config(path: Path) -> Config:
    """Load configuration from TOML file."""
    config = Config()

    if not path.exists():
        return config

    with open(path, "rb") as f:
        data = tomllib.load(f)

    # Map TOML sections to config dataclasses
    for section, cls in _SECTIONS.items():
        if section in data:
            setattr(config, section, cls(**data[section]))

    return config


def create_default_config(path: Path):
    """Create a default configuration file."""
    config = Config()
    config.save(path)
