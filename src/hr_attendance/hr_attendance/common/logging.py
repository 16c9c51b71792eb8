from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOGGER_NAME = "hr_attendance"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO", log_dir: Optional[str] = None) -> logging.Logger:
    """Set up the process-wide application logger.

    Called once from ``create_app``; components receive the returned logger
    (or a child of it) through the container.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path / "attendance.log", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def kv(**fields) -> str:
    """Render context fields as ``key=value`` pairs for log messages."""
    return " ".join(f"{k}={v}" for k, v in fields.items())
