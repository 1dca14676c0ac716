"""Syslog facility/severity codes and the priority codec."""

from __future__ import annotations

from enum import IntEnum
from logging.handlers import SysLogHandler

from .errors import InvalidPriority

__all__ = [
    "Facility",
    "Severity",
    "make_priority",
    "facility_of",
    "severity_of",
    "combine",
    "validate_priority",
    "encode_header",
    "parse_facility",
    "parse_severity",
]

_SEVERITY_MASK = 0x07
_FACILITY_SHIFT = 3


class Facility(IntEnum):
    """RFC 5424 facility codes."""

    KERN = 0
    USER = 1
    MAIL = 2
    DAEMON = 3
    AUTH = 4
    SYSLOG = 5
    LPR = 6
    NEWS = 7
    UUCP = 8
    CRON = 9
    AUTHPRIV = 10
    FTP = 11
    NTP = 12
    SECURITY = 13
    CONSOLE = 14
    SOLCRON = 15
    LOCAL0 = 16
    LOCAL1 = 17
    LOCAL2 = 18
    LOCAL3 = 19
    LOCAL4 = 20
    LOCAL5 = 21
    LOCAL6 = 22
    LOCAL7 = 23


class Severity(IntEnum):
    """RFC 5424 severity codes, most severe first."""

    EMERG = 0
    ALERT = 1
    CRIT = 2
    ERR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


_MAX_PRIORITY = (max(Facility) << _FACILITY_SHIFT) | max(Severity)


def make_priority(facility: int | str, severity: int | str) -> int:
    """Combine ``facility`` and ``severity`` into a wire priority."""

    return (parse_facility(facility) << _FACILITY_SHIFT) | parse_severity(severity)


def facility_of(priority: int) -> Facility:
    return Facility(priority >> _FACILITY_SHIFT)


def severity_of(priority: int) -> Severity:
    return Severity(priority & _SEVERITY_MASK)


def combine(priority: int, severity: int) -> int:
    """Return ``priority``'s facility with the severity bits of ``severity``.

    ``severity`` may itself be a full priority; only its low three bits are
    used, so the facility always comes from ``priority``.
    """

    return (priority & ~_SEVERITY_MASK) | (int(severity) & _SEVERITY_MASK)


def validate_priority(priority: object) -> int:
    """Return ``priority`` unchanged or raise :class:`InvalidPriority`."""

    if isinstance(priority, bool) or not isinstance(priority, int):
        raise InvalidPriority(f"priority must be an integer, got {priority!r}")
    if priority < 0 or priority > _MAX_PRIORITY:
        raise InvalidPriority(f"invalid syslog priority: {priority}")
    return int(priority)


def encode_header(priority: int) -> int:
    """Return the value written between ``<`` and ``>`` in a frame."""

    return validate_priority(priority)


def _normalize_name(name: str) -> str:
    lowered = name.strip().lower()
    if lowered.startswith("log_"):
        lowered = lowered[len("log_"):]
    return lowered


def parse_facility(value: int | str) -> Facility:
    """Resolve a facility from an enum member, code, or name such as ``"local0"``."""

    if isinstance(value, str):
        key = _normalize_name(value)
        if key.isdigit():
            return parse_facility(int(key))
        if key.upper() in Facility.__members__:
            return Facility[key.upper()]
        code = SysLogHandler.facility_names.get(key)
        if code is None:
            raise InvalidPriority(f"unknown syslog facility: {value!r}")
        return Facility(code)
    try:
        return Facility(value)
    except ValueError as exc:
        raise InvalidPriority(f"unknown syslog facility: {value!r}") from exc


def parse_severity(value: int | str) -> Severity:
    """Resolve a severity from an enum member, code, or name such as ``"warn"``."""

    if isinstance(value, str):
        key = _normalize_name(value)
        if key.isdigit():
            return parse_severity(int(key))
        if key.upper() in Severity.__members__:
            return Severity[key.upper()]
        code = SysLogHandler.priority_names.get(key)
        if code is None:
            raise InvalidPriority(f"unknown syslog severity: {value!r}")
        return Severity(code)
    try:
        return Severity(value)
    except ValueError as exc:
        raise InvalidPriority(f"unknown syslog severity: {value!r}") from exc
