"""Logging utilities for apidoc commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, MutableMapping, Tuple

_LOGGER_NAME = "apidoc"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the apidoc hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class WalkLogger(logging.LoggerAdapter):
    """Adapter that marks field-walk diagnostics with their nesting depth.

    Call sites pass ``depth=N``; the message gets the same ``--`` marker the
    parameter table uses and the depth is exposed on the record as
    ``walk_depth`` for filters and file handlers.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        depth = int(kwargs.pop("depth", 0) or 0)
        extra = dict(kwargs.get("extra") or {})
        extra["walk_depth"] = depth
        kwargs["extra"] = extra
        return f"{'--' * depth}{msg}", kwargs


def get_walk_logger(name: str) -> WalkLogger:
    """Return a depth-aware logger for recursive type walks."""
    return WalkLogger(get_logger(name), {})


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the apidoc logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[apidoc] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["WalkLogger", "configure_logging", "get_logger", "get_walk_logger"]
