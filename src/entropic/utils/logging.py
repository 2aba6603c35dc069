from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional, Union

PACKAGE_LOGGER = "entropic"

_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

# Active CLI command (or scenario name), inherited by nested calls
_current_command: ContextVar[str] = ContextVar("entropic_current_command", default="entropic")


class _CommandFilter(logging.Filter):
    """Stamp every record with the active command label."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.command = getattr(record, "command", None) or _current_command.get()
        return True


def _numeric_level(level: Union[str, int]) -> int:
    if isinstance(level, str):
        return _LEVELS.get(level.lower(), logging.WARNING)
    return int(level)


def setup_logging(level: Union[str, int] = "WARNING") -> None:
    """
    Configure the package logger once.

    Output goes to stderr with a ``[command] LEVEL: message`` prefix. Calling it
    again only changes the level.
    """
    numeric_level = _numeric_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(command)s] %(levelname)s: %(message)s"))
        handler.addFilter(_CommandFilter())
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(numeric_level)
    logging.captureWarnings(True)


def set_command_context(command: str) -> None:
    """Tag subsequent log records with the active command name."""
    _current_command.set(command)


@contextmanager
def command_context(command: str) -> Iterator[None]:
    """Temporarily tag log records, e.g. while a scenario is running."""
    token = _current_command.set(command)
    try:
        yield
    finally:
        _current_command.reset(token)


def resolve_log_level(verbose: bool, debug: bool) -> str:
    """Derive the configured level name from CLI flags."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    return "WARNING"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name if name is not None else PACKAGE_LOGGER)
