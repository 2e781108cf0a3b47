"""Logging helpers shared by the measura modules."""

from __future__ import annotations

import logging
from typing import Optional

from . import config

logger = logging.getLogger("measura")


def configure_logging(level: Optional[str] = None) -> None:
    """Install a basic stderr handler; used by the CLI, never by the library."""

    logging.basicConfig(
        level=(level or config.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def log_event(message: str, *, level: int = logging.INFO, **extra: object) -> None:
    """Log ``message`` with a structured payload attached."""

    payload = {key: value for key, value in extra.items() if value is not None}
    if payload:
        details = " ".join(f"{key}={value}" for key, value in payload.items())
        logger.log(level, "%s (%s)", message, details, extra={"payload": payload})
    else:
        logger.log(level, message, extra={"payload": payload})
