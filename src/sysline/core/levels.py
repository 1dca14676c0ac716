"""Mapping between stdlib logging levels and syslog severities."""

from __future__ import annotations

import logging

from .priority import Severity

TRACE_LEVEL_NAME = "TRACE"
TRACE_LEVEL_NUM = 5

# Checked from the most severe bucket down; a level maps to the first bucket
# it reaches.
_LEVEL_BUCKETS = (
    (logging.CRITICAL, Severity.CRIT),
    (logging.ERROR, Severity.ERR),
    (logging.WARNING, Severity.WARNING),
    (logging.INFO, Severity.INFO),
)


def get_level_by_name(name: str) -> int:
    """Resolve a logging level from a friendly name."""

    if name.upper() == TRACE_LEVEL_NAME:
        return TRACE_LEVEL_NUM
    if name.isdigit():
        return int(name)
    resolved = logging.getLevelName(name.upper())
    if isinstance(resolved, int):
        return resolved
    return logging.INFO


def ensure_level(value: int | str) -> int:
    """Normalize user supplied level values."""

    if isinstance(value, int):
        return value
    return get_level_by_name(value)


def severity_for_level(levelno: int) -> Severity:
    """Return the syslog severity used for records at ``levelno``."""

    for threshold, severity in _LEVEL_BUCKETS:
        if levelno >= threshold:
            return severity
    return Severity.DEBUG
