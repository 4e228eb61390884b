# =============================================================================
# mobile_core/logging/config.py
# Root Logger Setup Driven by CoreConfig
# =============================================================================
"""
Process-wide logging for the core.

``setup_logging`` reads everything from a CoreConfig: the level, the line
format, whether to also write a dated file under ``<storage_dir>/logs`` and
that file's name pattern. Modules only call ``get_logger(__name__)``.
"""

from __future__ import annotations
import logging
import sys
import time
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Union

from mobile_core.constants import LogDefaults

if TYPE_CHECKING:
    from mobile_core.config import CoreConfig

PACKAGE_LOGGER = "mobile_core"


def log_file_path(config: CoreConfig, day: Optional[date] = None) -> Path:
    """File that ``setup_logging`` writes to for ``day`` (today when None)."""
    return config.log_dir / config.log_file_pattern.format(date=day or date.today())


def setup_logging(
    config: Optional[CoreConfig] = None,
    level: Union[int, str, None] = None,
) -> Optional[Path]:
    """
    Replace the root logger's handlers with stdout plus, when
    ``config.log_to_file`` is set, a dated log file.

    Args:
        config: Level, format and file settings (built-in defaults when None)
        level: Overrides ``config.log_level``

    Returns:
        The log file in use, or None when only stdout is configured
    """
    if level is None:
        level = config.log_level if config is not None else logging.INFO
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    line_format = config.log_format if config is not None else LogDefaults.FORMAT

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    log_file = None
    if config is not None and config.log_to_file:
        log_file = log_file_path(config)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=line_format,
        datefmt=LogDefaults.DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
    for name in LogDefaults.QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    target = f" and {log_file}" if log_file else ""
    get_logger(PACKAGE_LOGGER).info(
        f"Logging {logging.getLevelName(level)} to stdout{target}"
    )
    return log_file


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Time a block and log how it ended. Exceptions are logged and re-raised.

    Usage:
        with LogContext(logger, "Opening storage boxes"):
            ...
    """

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.INFO):
        self.logger = logger
        self.operation = operation
        self.level = level
        self._started = 0.0

    def __enter__(self) -> LogContext:
        self._started = time.perf_counter()
        self.logger.debug(f"{self.operation}: started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        elapsed_ms = (time.perf_counter() - self._started) * 1000
        if exc_type is None:
            self.logger.log(self.level, f"{self.operation}: done in {elapsed_ms:.0f} ms")
        else:
            self.logger.error(
                f"{self.operation}: failed after {elapsed_ms:.0f} ms: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb),
            )
        return False
