"""Environment-driven settings for measura."""

from __future__ import annotations

import os


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


LOG_LEVEL = os.getenv("MEASURA_LOG_LEVEL", "WARNING").upper()

# Reject unit names the registry does not know when parsing text.
STRICT_UNIT_NAMES = _flag("MEASURA_STRICT_UNIT_NAMES")

# Log every successful unification at DEBUG.
TRACE_UNIFY = _flag("MEASURA_TRACE_UNIFY")


__all__ = ["LOG_LEVEL", "STRICT_UNIT_NAMES", "TRACE_UNIFY"]
