"""Logging utilities for microgen commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "microgen"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the microgen hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class ArtifactLoggerAdapter(logging.LoggerAdapter):
    """Prefix messages with the artifact being generated.

    Units log from their own threads, so every line names the file it is
    about. The path is also attached to records as ``artifact``.
    """

    def process(self, msg, kwargs):
        artifact = self.extra["artifact"]
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return f"{artifact}: {msg}", kwargs


def get_artifact_logger(name: str, artifact: str) -> ArtifactLoggerAdapter:
    """Return ``get_logger(name)`` bound to the ``artifact`` relative path."""
    return ArtifactLoggerAdapter(get_logger(name), {"artifact": artifact})


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the microgen logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations in one process do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[microgen] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["ArtifactLoggerAdapter", "configure_logging", "get_artifact_logger", "get_logger"]
