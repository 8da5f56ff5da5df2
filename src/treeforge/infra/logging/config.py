from __future__ import annotations

"""
Logging Configuration Models.

Holds the immutable settings used to bootstrap the logging subsystem and the
mapping from level names to the native logging constants.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings for configure_logging.

    Attributes:
        level: Minimum severity captured by every handler.
        console: Emit records on stderr.
        log_file: Optional path of a rotating log file.
        max_bytes: Size at which the log file rolls over.
        backup_count: Rolled-over files kept on disk.
        console_fmt: Record format on stderr.
        file_fmt: Record format in the log file.
        datefmt: Timestamp format for the log file.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
