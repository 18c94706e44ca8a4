"""Logging setup for the castlog CLI."""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(
    verbose: bool = False,
    log_file: Path | None = None,
    level: str = "INFO",
) -> None:
    """Configure root logging for a CLI run.

    Console output goes to stderr through rich; an optional log file gets
    plain timestamped lines.

    Args:
        verbose: Log at DEBUG level regardless of level
        log_file: Also write logs to this file
        level: Default log level name
    """
    log_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            show_path=verbose,
            rich_tracebacks=verbose,
        )
    ]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )

    # Keep HTTP client chatter out of normal runs
    if not verbose:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
