"""Time utilities for sysline."""

from __future__ import annotations

from datetime import datetime

__all__ = ["local_now"]


def local_now() -> datetime:
    """Return the current local time as a naive ``datetime``."""

    return datetime.now()
