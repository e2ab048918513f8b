"""CLI/bootstrap helpers for the ZipHopp application."""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ziphopp.action_messages import build_actionable_error
from ziphopp.config import (
    DEBUG_LOG_FILENAME,
    coerce_history_limit,
    get_config_dir,
    get_history_db_path,
    load_config,
)
from ziphopp.models import APP_VERSION, MAX_HISTORY_LIMIT, UserConfig
from ziphopp.services.history_store import HistoryStore

logger = logging.getLogger(__name__)


def _resolve_archive_arg(archive: Path) -> str | int:
    """Validate an archive given on the command line. Returns its path or an exit code."""
    archive_path = archive.expanduser().resolve()
    if not archive_path.exists():
        print(f"Error: {archive_path} not found", file=sys.stderr)
        return 1
    if archive_path.is_dir():
        print(f"Error: {archive_path} is a directory, not an archive", file=sys.stderr)
        return 1
    if not os.access(archive_path, os.R_OK):
        print(f"Error: {archive_path} is not readable (permission denied)", file=sys.stderr)
        return 1
    return str(archive_path)


def _list_recent(config: UserConfig, history_db_path: Path) -> int:
    """Print the recent-files list and return an exit code."""
    store = HistoryStore(history_db_path, max_entries=config.history_limit)
    paths = store.paths()
    if not paths:
        print(
            build_actionable_error(
                "list recent archives",
                why="no archives have been opened yet",
                next_step="run ziphopp and press o to open one",
            ),
            file=sys.stderr,
        )
        return 1
    print("Recent archives:")
    for path in paths:
        print(f"  {path}")
    return 0


def _configure_logging(debug: bool) -> None:
    """Configure logging. When debug=True, logs to file at DEBUG level."""
    if not debug:
        # Default: suppress all logging (TUI captures stderr)
        logging.disable(logging.CRITICAL)
        return

    log_dir = get_config_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / DEBUG_LOG_FILENAME

    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG)


def _configure_color_mode(color_mode: str) -> None:
    """Configure environment hints for terminal color behavior."""
    if color_mode == "never":
        os.environ["NO_COLOR"] = "1"
        os.environ.pop("FORCE_COLOR", None)
        return
    if color_mode == "always":
        os.environ["FORCE_COLOR"] = "1"
        os.environ.pop("NO_COLOR", None)
        return
    # auto
    os.environ.pop("FORCE_COLOR", None)


def _validate_interactive_tty() -> bool:
    """Return True when stdin/stdout are interactive terminals."""
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def main(
    argv: list[str] | None = None,
    *,
    load_config_fn: Callable[[], UserConfig] = load_config,
    history_db_path_fn: Callable[[], Path] = get_history_db_path,
    configure_logging_fn: Callable[[bool], None] = _configure_logging,
    configure_color_mode_fn: Callable[[str], None] = _configure_color_mode,
    validate_interactive_tty_fn: Callable[[], bool] = _validate_interactive_tty,
    app_factory: Callable[..., Any] | None = None,
) -> int:
    """Main entry point. Returns exit code."""
    parser = argparse.ArgumentParser(
        prog="ziphopp",
        description="Browse ZIP archives (including password-protected ones) in a TUI",
    )
    parser.add_argument(
        "archive",
        nargs="?",
        type=Path,
        default=None,
        help="Archive to open on startup",
    )
    parser.add_argument(
        "--history-limit",
        type=int,
        default=None,
        help=f"Number of recent archives to remember (1-{MAX_HISTORY_LIMIT}; default: config value)",
    )
    parser.add_argument(
        "--list-recent",
        action="store_true",
        help="Print recently opened archives and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to file (~/.config/ziphopp/debug.log)",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output mode for terminal UI (default: auto)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable terminal colors (equivalent to --color never)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    args = parser.parse_args(argv)

    if args.list_recent and args.archive is not None:
        print("Error: --list-recent cannot be combined with an archive path", file=sys.stderr)
        return 1

    color_mode = "never" if args.no_color else args.color
    configure_color_mode_fn(color_mode)
    configure_logging_fn(args.debug)
    logger.debug("ziphopp starting, cwd=%s", Path.cwd())

    config = load_config_fn()
    if args.history_limit is not None:
        config.history_limit = coerce_history_limit(args.history_limit)

    if args.list_recent:
        return _list_recent(config, history_db_path_fn())

    initial_path: str | None = None
    if args.archive is not None:
        resolved = _resolve_archive_arg(args.archive)
        if isinstance(resolved, int):
            return resolved
        initial_path = resolved

    if not validate_interactive_tty_fn():
        print(
            "Error: ziphopp requires an interactive TTY for the full UI.",
            file=sys.stderr,
        )
        print("Next steps:", file=sys.stderr)
        print("  - Run ziphopp directly in a terminal session", file=sys.stderr)
        print("  - Use --list-recent for non-interactive output", file=sys.stderr)
        print("  - Use --help for command documentation", file=sys.stderr)
        return 2

    if app_factory is None:
        from ziphopp.app import ZipHopp as _ZipHopp

        app_factory = _ZipHopp

    app = app_factory(config=config, initial_path=initial_path)
    app.run()
    return 0


__all__ = [
    "_configure_color_mode",
    "_configure_logging",
    "_list_recent",
    "_resolve_archive_arg",
    "_validate_interactive_tty",
    "main",
]
