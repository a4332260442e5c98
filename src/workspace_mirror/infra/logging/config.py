from __future__ import annotations

"""
Logging Configuration Models.

Defines the settings object consumed by the logging bootstrap and the
mapping from textual severity names to native logging levels.
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
    Immutable description of how the root logger should be wired.

    Attributes:
        level: Minimum severity name to capture.
        console: Emit records to stderr.
        log_file: Optional path of a rotating log file.
        max_bytes: Size threshold for log rotation.
        backup_count: Rotated segments to keep.
        console_fmt: Format for terminal records.
        file_fmt: Format for file records.
        datefmt: Timestamp format for file records.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
