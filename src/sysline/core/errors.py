"""Exception types raised by sysline."""

from __future__ import annotations

__all__ = [
    "SyslineError",
    "InvalidPriority",
    "DialError",
    "WriteError",
    "CloseError",
    "ClosedWriterError",
]


class SyslineError(Exception):
    """Base class for all sysline errors."""


class InvalidPriority(SyslineError, ValueError):
    """Raised when a facility or severity is outside the recognized range."""


class DialError(SyslineError, OSError):
    """Raised when no transport could be connected."""


class WriteError(SyslineError, OSError):
    """Raised when a write failed even after one reconnect attempt."""


class CloseError(SyslineError, OSError):
    """Raised when closing the underlying connection failed."""


class ClosedWriterError(SyslineError, RuntimeError):
    """Raised when a closed writer is used again."""
