"""
Logging setup for runlens processes (CLI, daemon, API).
"""

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from .config import Config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(config: Config, level: Optional[str] = None) -> logging.Logger:
    """Configure the ``runlens`` logger tree once per process."""
    logger = logging.getLogger("runlens")
    resolved = (level or config.logging.level or "INFO").upper()
    logger.setLevel(getattr(logging, resolved, logging.INFO))

    if getattr(logger, "_runlens_configured", False):
        return logger

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)

    if config.logging.to_file:
        log_dir = config.data_dir / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        handler = RotatingFileHandler(
            log_dir / config.logging.file_name,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger._runlens_configured = True
    return logger
