"""Logging utilities for gradlegraph commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "gradlegraph"
# Child hierarchy carrying per-request traces and retry/backoff decisions.
GITHUB_LOGGER_NAME = f"{_LOGGER_NAME}.github"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the gradlegraph hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *,
    verbose: bool = False,
    trace_requests: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the gradlegraph logger with console output and optional file sink.

    ``verbose`` lowers every gradlegraph logger to DEBUG. ``trace_requests``
    does so only for the GitHub client, so each API request and every
    retry decision is reported without the rest of the debug output.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    github_logger = logging.getLogger(GITHUB_LOGGER_NAME)
    github_logger.setLevel(logging.DEBUG if trace_requests else logging.NOTSET)

    handler_level = logging.DEBUG if (verbose or trace_requests) else logging.INFO

    # Reset handlers so repeated CLI invocations do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(handler_level)
    stream_handler.setFormatter(logging.Formatter("[gradlegraph] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(handler_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["GITHUB_LOGGER_NAME", "configure_logging", "get_logger"]
