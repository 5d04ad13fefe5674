"""Centralized logging configuration module"""

import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import settings

# Whether already initialized
_initialized = False

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(name)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(log_dir: Optional[Path] = None, level: Optional[str] = None) -> Path:
    """Configure console + rotating file logging. Safe to call more than once."""
    global _initialized

    logs_dir = Path(log_dir or settings.log_dir)
    log_file = logs_dir / "paper_llm.log"
    if _initialized:
        return log_file

    logs_dir.mkdir(parents=True, exist_ok=True)

    # Write session separator
    with open(log_file, 'a', encoding='utf-8') as f:
        f.write("\n" + "=" * 100 + "\n")
        f.write(f"Session started at: {datetime.now().strftime(DATE_FORMAT)}\n")
        f.write("=" * 100 + "\n\n")

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    # max 10MB per file, keep 3 backups
    file_handler = RotatingFileHandler(
        log_file, maxBytes=10 * 1024 * 1024, backupCount=3, encoding='utf-8'
    )
    file_handler.setFormatter(formatter)

    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        handlers=[console_handler, file_handler],
        force=True
    )

    logging.getLogger('paper_llm').setLevel(log_level)

    # Reduce log level for third-party libraries; httpx logs full request URLs
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)

    _initialized = True
    logging.getLogger(__name__).info("Logging initialized, writing to %s", log_file.absolute())
    return log_file
