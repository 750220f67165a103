from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .json_formatter import JSONFormatter

_LOGGER_NAME = "todokit"
_CONFIGURED_ATTR = "_todokit_json_logging"


def _parse_level(raw: str) -> int:
    normalized = raw.strip().upper()
    return getattr(logging, normalized, logging.WARNING)


def _is_on(name: str, default: str = "off") -> bool:
    return os.getenv(name, default).strip().casefold() == "on"


def configure_logging(log_dir: Path | None = None, level: str | None = None) -> logging.Logger:
    """Install JSON logging on the ``todokit`` logger.

    Records go to stderr so that command output on stdout stays parseable.
    A rotating file handler is added when ``TODOKIT_LOG_TO_FILE=on``.
    Calling this more than once does not duplicate handlers.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(_parse_level(level or os.getenv("TODOKIT_LOG_LEVEL", "WARNING")))
    logger.propagate = False

    formatter = JSONFormatter()

    if not any(
        getattr(handler, _CONFIGURED_ATTR, False) and not isinstance(handler, RotatingFileHandler)
        for handler in logger.handlers
    ):
        stream_handler = logging.StreamHandler(stream=sys.stderr)
        stream_handler.setFormatter(formatter)
        setattr(stream_handler, _CONFIGURED_ATTR, True)
        logger.addHandler(stream_handler)

    if _is_on("TODOKIT_LOG_TO_FILE"):
        target_dir = Path(os.getenv("TODOKIT_LOG_DIR") or (log_dir or Path.cwd()) / "logs")
        target_dir.mkdir(parents=True, exist_ok=True)
        log_path = target_dir / "todokit.log"
        max_bytes = int(os.getenv("TODOKIT_LOG_MAX_BYTES", "5000000"))
        backup_count = int(os.getenv("TODOKIT_LOG_BACKUP_COUNT", "5"))

        file_exists = any(
            isinstance(handler, RotatingFileHandler)
            and getattr(handler, _CONFIGURED_ATTR, False)
            and Path(handler.baseFilename) == log_path.absolute()
            for handler in logger.handlers
        )
        if not file_exists:
            file_handler = RotatingFileHandler(
                filename=log_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            setattr(file_handler, _CONFIGURED_ATTR, True)
            logger.addHandler(file_handler)

    return logger
