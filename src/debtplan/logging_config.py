"""Logging setup: readable console lines plus a rotating JSON log file."""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path

from .config import BaseConfig

ROOT_LOGGER_NAME = "debtplan"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {
    "message",
    "asctime",
}

# (format, datefmt) keyed by DEV_MODE
CONSOLE_FORMATS = {
    True: ("[%(asctime)s] %(levelname)-8s %(name)s: %(message)s", "%H:%M:%S"),
    False: ("%(asctime)s [%(levelname)s] %(name)s: %(message)s", "%Y-%m-%d %H:%M:%S"),
}


class JSONFormatter(logging.Formatter):
    """One JSON object per record: time, level, logger, message, ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _console_handler(config: BaseConfig) -> logging.Handler:
    fmt, datefmt = CONSOLE_FORMATS[bool(config.DEV_MODE)]
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO if config.DEV_MODE else logging.WARNING)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
    return handler


def _file_handler(config: BaseConfig, log_file: Path) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=log_file,
        maxBytes=config.LOG_MAX_BYTES,
        backupCount=config.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(config.LOG_LEVEL)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(config: BaseConfig) -> logging.Logger:
    """Attach console and JSON file handlers to the ``debtplan`` logger.

    The file lives at ``DATA_DIR/logs/<LOG_FILENAME>``. Calling this again
    replaces the handlers installed by the previous call.
    """

    log_file = Path(config.DATA_DIR) / "logs" / config.LOG_FILENAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(config.LOG_LEVEL)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_console_handler(config))
    logger.addHandler(_file_handler(config, log_file))

    logger.info(
        "Logging initialized",
        extra={"app": config.APP_NAME, "dev_mode": config.DEV_MODE, "log_file": str(log_file)},
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the ``debtplan.<name>`` logger, e.g. ``get_logger("services.debts")``."""

    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
