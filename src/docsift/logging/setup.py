"""Dual-handler logging setup: JSON rotating file + human-readable console.

Configures Python's stdlib logging with two handlers:
    1. RotatingFileHandler -- JSON format, DEBUG level, size-based rotation
    2. StreamHandler -- Text format, INFO level, on stderr so stdout stays
       free for the JSON result printed by the CLI

Call setup_logging() once at startup. Library code only ever uses
logging.getLogger(__name__) and never configures handlers itself.
"""

import logging
import logging.handlers
import sys
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter


def setup_logging(
    log_dir: str = "logs",
    log_level_file: int | str = logging.DEBUG,
    log_level_console: int | str = logging.INFO,
    max_bytes: int = 10_485_760,  # 10MB
    backup_count: int = 5,
) -> None:
    """Configure dual-handler logging: JSON file + text console.

    Creates the log directory if it does not exist. Clears any existing
    handlers on the root logger so repeated calls do not duplicate output.

    Args:
        log_dir: Directory for log files.
        log_level_file: Level (number or name) for the file handler.
            Defaults to DEBUG.
        log_level_console: Level (number or name) for the console handler.
            Defaults to INFO.
        max_bytes: Maximum size per log file before rotation (default 10MB).
        backup_count: Number of rotated backup files to keep (default 5).
    """
    Path(log_dir).mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture everything; handlers filter
    root_logger.handlers.clear()

    file_handler = logging.handlers.RotatingFileHandler(
        filename=str(Path(log_dir) / "docsift.log"),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level_file)
    file_handler.setFormatter(
        JsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "component",
            },
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level_console)
    console_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
