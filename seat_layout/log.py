"""Logging setup for the seat layout engine and its HTTP service."""

from __future__ import annotations

import sys
from typing import Optional

from loguru import logger

from .config import load_settings


LOG_FORMAT = " | ".join(
    (
        "<lk>{time:YYYY-MM-DD HH:mm:ss.SSS}</>",
        "<lvl>{level:<8}</>",
        "<c>{name}::{function}:{line}</>",
        "{message}",
    )
)


def configure_logging(level: Optional[str] = None) -> None:
    level = level or load_settings().log_level
    logger.remove()  # drop loguru's default sink so records are not printed twice
    logger.add(sys.stderr, format=LOG_FORMAT, level=level)
