"""Application configuration objects and helpers."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from dotenv import load_dotenv

from .models.debt import Strategy

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "DebtPlan"
    LOG_FILENAME = "debtplan.log"
    LOG_MAX_BYTES = 10 * 1024 * 1024
    LOG_BACKUP_COUNT = 5

    def __init__(self, data_dir: Path | str | None = None) -> None:
        self.DATA_DIR = self._resolve_data_dir(data_dir)
        self.DEV_MODE = _env_bool("DEBTPLAN_DEV_MODE", default=True)
        self.CURRENCY = os.getenv("DEBTPLAN_CURRENCY", "INR").strip().upper() or "INR"
        self.DEFAULT_STRATEGY = Strategy.parse(os.getenv("DEBTPLAN_STRATEGY", "Avalanche"))
        self.LOG_LEVEL = self._resolve_log_level(os.getenv("DEBTPLAN_LOG_LEVEL", "INFO"))

    def _resolve_data_dir(self, override: Path | str | None = None) -> Path:
        """Return the directory where logs and exports live."""

        data_root = override if override is not None else os.getenv("DEBTPLAN_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _resolve_log_level(raw: str) -> int:
        level = logging.getLevelName(raw.strip().upper())
        if not isinstance(level, int):
            raise ValueError(f"DEBTPLAN_LOG_LEVEL must be a logging level name (got {raw!r})")
        return level


class DevConfig(BaseConfig):
    """Development configuration with verbose console logs."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration used by the test-suite.

    Without an explicit ``data_dir`` it writes under a fresh temporary directory
    instead of ``DEBTPLAN_DATA_DIR``.
    """

    __test__ = False

    DEBUG = False
    TESTING = True

    def __init__(self, data_dir: Path | str | None = None) -> None:
        if data_dir is None:
            data_dir = tempfile.mkdtemp(prefix="debtplan-test-")
        super().__init__(data_dir)
