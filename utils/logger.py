"""
Logging setup: rotating file log plus console, configured once per process
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = 'feed_scout.log'
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5

LOG_FORMAT = '%(asctime)s | %(levelname)-7s | %(name)-28s | %(message)s'
CONSOLE_FORMAT = '%(asctime)s | %(levelname)-7s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
CONSOLE_DATE_FORMAT = '%H:%M:%S'

NOISY_LOGGERS = ('asyncio', 'playwright', 'urllib3')

_configured = False


def setup_logging(level: str = 'INFO', log_dir: str = 'logs', log_to_file: bool = True) -> Optional[Path]:
    """Configure the root logger; later calls are no-ops. Returns the log file path."""
    global _configured
    log_path = Path(log_dir) / LOG_FILE_NAME
    if _configured:
        return log_path

    log_level = getattr(logging, (level or 'INFO').upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if log_to_file:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT,
            encoding='utf-8',
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, CONSOLE_DATE_FORMAT))
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True
    logging.getLogger(__name__).debug(f"Logging initialized at {level.upper()} -> {log_path}")
    return log_path if log_to_file else None


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
