"""Centralized logging configuration module"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import Settings, settings as default_settings

# Whether already initialized
_initialized = False

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(name)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def build_file_handler(logs_dir: Path, max_mb: int, backup_count: int,
                       base_name: str = "server.log") -> RotatingFileHandler:
    """Size-rotated file handler (keep latest N backups)"""
    logs_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        logs_dir / base_name,
        maxBytes=max_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding='utf-8',
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(config: Optional[Settings] = None, *, force: bool = False) -> None:
    """Configure application logging once; later calls are no-ops unless forced."""
    global _initialized

    if _initialized and not force:
        return

    config = config or default_settings
    level = logging.getLevelName(config.log_level)
    if not isinstance(level, int):
        level = logging.INFO

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    file_handler = build_file_handler(
        Path(config.logs_dir),
        config.log_file_max_mb,
        config.log_backup_count,
    )

    # Configure root logger
    logging.basicConfig(
        level=level,
        handlers=[console_handler, file_handler],
        force=True,
    )

    logging.getLogger('src').setLevel(level)

    # Reduce log level for third-party libraries
    logging.getLogger('asyncio').setLevel(logging.WARNING)

    _initialized = True
    logging.getLogger(__name__).info(
        "Logging initialized: level=%s, file=%s",
        logging.getLevelName(level),
        file_handler.baseFilename,
    )
