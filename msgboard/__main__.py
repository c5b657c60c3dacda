"""
MsgBoard Entry Point

Usage:
    python -m msgboard                          # Run the JSON API server
    python -m msgboard config --show            # Show effective config
    python -m msgboard config --validate        # Validate config
    python -m msgboard passwd <user> <password> # Set an account password
    python -m msgboard --help                   # Show help
"""

import argparse
import sys
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from . import __version__


def setup_logging(level: str, log_file: str | None = None, max_size_mb: int = 10, backup_count: int = 3):
    """Configure logging for the application."""
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    handlers = [logging.StreamHandler()]

    if log_file:
        handlers.append(RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count
        ))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=log_format,
        handlers=handlers,
        force=True
    )


def run_config(args, config) -> int:
    """Handle the config subcommand."""
    if args.init:
        from .config import create_default_config
        if args.config.exists():
            print(f"{args.config} already exists.")
            return 1
        create_default_config(args.config)
        print(f"Wrote default configuration to {args.config}")
        return 0

    if args.validate:
        errors = config.validate()
        if errors:
            print("Configuration errors:")
            for err in errors:
                print(f"  - {err}")
            return 1
        print("Configuration is valid.")
        return 0

    print(config.to_toml())
    return 0


def run_passwd(args, config) -> int:
    """Set an account password from the command line."""
    from .core.board import MessageBoard

    board = MessageBoard(config)
    board.setup()
    try:
        user = board.auth.users.get_user_by_username(args.username.strip())
        if not user:
            print(f"No such user: {args.username}")
            return 1

        updated, error = board.auth.reset_password(user.id, args.password)
        if error:
            print(f"Error: {error.message}")
            return 1

        print(f"Password updated for {updated.username}")
        return 0
    finally:
        board.shutdown()


def run_server(config, logger) -> int:
    """Run the HTTP adapter until interrupted."""
    from .core.board import MessageBoard

    try:
        from .web import create_app
    except ImportError:
        logger.error("Flask is not installed: pip install 'msgboard[web]'")
        return 1

    board = MessageBoard(config)
    board.setup()
    try:
        app = create_app(board)
        logger.info(f"Starting MsgBoard v{__version__} on {config.web.host}:{config.web.port}")
        app.run(host=config.web.host, port=config.web.port, threaded=True)
    finally:
        board.shutdown()
    return 0


def main():
    """Main entry point for MsgBoard."""
    parser = argparse.ArgumentParser(
        prog="msgboard",
        description="MsgBoard - Minimal authenticated message board"
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"MsgBoard {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=Path("config.toml"),
        help="Path to configuration file (default: config.toml)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: from config, else INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Config subcommand
    config_parser = subparsers.add_parser("config", help="Show or check configuration")
    config_parser.add_argument("--show", action="store_true", help="Show current config")
    config_parser.add_argument("--validate", action="store_true", help="Validate config")
    config_parser.add_argument("--init", action="store_true", help="Write a default config file")

    # Password subcommand
    passwd_parser = subparsers.add_parser("passwd", help="Set an account password")
    passwd_parser.add_argument("username", help="Account to update")
    passwd_parser.add_argument("password", help="New password (min 6 characters)")

    args = parser.parse_args()

    from .config import load_config

    config = load_config(args.config)
    setup_logging(
        args.log_level or config.logging.level,
        config.logging.file or None,
        config.logging.max_size_mb,
        config.logging.backup_count
    )
    logger = logging.getLogger("msgboard")

    if args.command == "config":
        sys.exit(run_config(args, config))

    try:
        if args.command == "passwd":
            sys.exit(run_passwd(args, config))

        for err in config.validate():
            logger.warning(f"Config: {err}")

        sys.exit(run_server(config, logger))
    except KeyboardInterrupt:
        logger.info("Shutdown requested")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
