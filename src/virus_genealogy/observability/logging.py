"""Structured logging for virus_genealogy.

The package is a library, so importing it never touches the host's logging:
events go through structlog into the stdlib ``virus_genealogy`` logger, which
only carries a ``NullHandler`` until the host opts in. Level filtering is
done by stdlib at call time, so reconfiguring takes effect for loggers that
were created earlier.

Opting in with configure_logging() gives two outputs on the package logger:
- Console: rich output to stderr, level chosen by verbosity
- File: every event as JSON lines to {log_dir}/debug.jsonl
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003 - Used at runtime for path operations

import structlog
from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "virus_genealogy"

# Handlers installed by configure_logging(); host handlers are never touched
_handlers: list[logging.Handler] = []
_file_handler: logging.FileHandler | None = None
_logs_dir: Path | None = None

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


class JSONLFileHandler(logging.FileHandler):
    """File handler that writes one JSON object per record."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "timestamp": datetime.now(UTC).isoformat(),
                "level": record.levelname,
                "logger": record.name,
            }

            # wrap_for_formatter leaves the structlog event dict in record.msg
            if isinstance(record.msg, dict):
                event_dict = {k: v for k, v in record.msg.items() if not k.startswith("_")}
                entry["message"] = event_dict.pop("event", "")
                entry.update(event_dict)
            else:
                entry["message"] = record.getMessage()

            if self.stream:
                self.stream.write(json.dumps(entry, default=str) + "\n")
                self.stream.flush()
        except Exception:
            self.handleError(record)


def _console_formatter() -> structlog.stdlib.ProcessorFormatter:
    """Render structlog events as ``event key=value`` for the rich handler."""
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
    )


def configure_logging(
    verbosity: int = 0,
    log_to_file: bool = False,
    log_dir: Path | None = None,
) -> None:
    """Attach console (and optionally file) output to the package logger.

    Only the ``virus_genealogy`` logger is configured; the root logger and
    its handlers are left alone. Calling again replaces the previous setup.

    Args:
        verbosity: 0=WARNING (default), 1=INFO, 2+=DEBUG
        log_to_file: If True, also write {log_dir}/debug.jsonl.
        log_dir: Directory for file logging. Required if log_to_file=True.

    Raises:
        ValueError: If log_to_file=True but log_dir is not provided.
    """
    global _file_handler, _logs_dir

    if log_to_file and log_dir is None:
        raise ValueError("log_dir is required when log_to_file=True")

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in _handlers:
        package_logger.removeHandler(handler)
        handler.close()
    _handlers.clear()
    _file_handler = None
    _logs_dir = None

    levels = {0: logging.WARNING, 1: logging.INFO}
    console_level = levels.get(verbosity, logging.DEBUG)

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbosity >= 1,
        show_path=verbosity >= 2,
        markup=False,
        level=console_level,
    )
    console_handler.setFormatter(_console_formatter())
    _handlers.append(console_handler)

    if log_to_file and log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        _logs_dir = log_dir
        _file_handler = JSONLFileHandler(str(log_dir / "debug.jsonl"), mode="a")
        _file_handler.setLevel(logging.DEBUG)
        _handlers.append(_file_handler)

    for handler in _handlers:
        package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if (verbosity > 0 or log_to_file) else logging.WARNING)
    package_logger.propagate = False


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger bound to a stdlib logger.

    Does not configure anything. The processors are fixed here rather than
    taken from the global structlog configuration, so the host's structlog
    setup neither affects nor is affected by this package.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Bound logger instance.
    """
    logger: structlog.stdlib.BoundLogger = structlog.wrap_logger(
        logging.getLogger(name or PACKAGE_LOGGER),
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    return logger


def get_logs_dir() -> Path | None:
    """Get the configured logs directory, or None if file logging is off."""
    return _logs_dir


def close_file_logging() -> None:
    """Detach and close the file handler, keeping console output."""
    global _file_handler, _logs_dir
    if _file_handler:
        logging.getLogger(PACKAGE_LOGGER).removeHandler(_file_handler)
        _handlers.remove(_file_handler)
        _file_handler.close()
        _file_handler = None
        _logs_dir = None
