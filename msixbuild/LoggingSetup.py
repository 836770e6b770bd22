# LoggingSetup.py
import sys
import logging
from pathlib import Path
from typing import Optional
from logging.handlers import RotatingFileHandler

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(message)s'
LOG_FILE_NAME = "msixbuild.log"


def setup_logging(logs_dir: Optional[Path] = None, verbose: bool = False):
    """
    Configure logging for packaging runs.

    Always logs to the console; additionally writes a rotating log file when
    a logs directory is given (useful on CI agents that archive build logs).

    Args:
        logs_dir: Directory to store log files, None for console only
        verbose: If True, set DEBUG level; otherwise INFO
    """
    level = logging.DEBUG if verbose else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    if logs_dir is not None:
        logs_dir.mkdir(parents=True, exist_ok=True)

        # Add rotating file handler (10MB max, keep 5 files)
        file_handler = RotatingFileHandler(
            logs_dir / LOG_FILE_NAME,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.debug(f"Logging initialized: level={logging.getLevelName(level)}, logs_dir={logs_dir}")
