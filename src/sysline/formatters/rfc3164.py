"""RFC 3164 style frame builder."""

from __future__ import annotations

import os
from datetime import datetime

from ..core.priority import encode_header

__all__ = ["format_timestamp", "frame_message"]

# Month names are fixed by the protocol, independent of the process locale.
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as ``Mmm dd hh:mm:ss`` with a space-padded day."""

    return (
        f"{_MONTHS[moment.month - 1]} {moment.day:2d} "
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )


def frame_message(
    priority: int,
    hostname: str,
    tag: str,
    message: str,
    *,
    moment: datetime,
    pid: int | None = None,
    newline: bool = False,
) -> bytes:
    """Build the wire bytes for one log entry.

    The frame is ``<PRI>TIMESTAMP HOST TAG[PID]: MSG``. Stream transports pass
    ``newline=True`` so the receiver can split entries; a message that already
    ends in ``\\n`` does not get a second one.
    """

    if pid is None:
        pid = os.getpid()
    frame = f"<{encode_header(priority)}>{format_timestamp(moment)} {hostname} {tag}[{pid}]: {message}"
    if newline and not frame.endswith("\n"):
        frame += "\n"
    return frame.encode("utf-8", errors="replace")
