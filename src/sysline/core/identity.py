"""Client identity (tag and hostname) resolved once per writer."""

from __future__ import annotations

import os
import socket
import sys
from dataclasses import dataclass

__all__ = ["ClientIdentity", "default_tag", "default_hostname", "resolve_identity"]


@dataclass(frozen=True, slots=True)
class ClientIdentity:
    tag: str
    hostname: str


def default_tag() -> str:
    """Return the program's invocation name."""

    invoked = sys.argv[0] if sys.argv and sys.argv[0] else sys.executable
    return os.path.basename(invoked) or "python"


def default_hostname() -> str:
    """Return the local hostname, or ``""`` when it cannot be discovered."""

    try:
        return socket.gethostname()
    except OSError:
        return ""


def resolve_identity(tag: str = "", hostname: str | None = None) -> ClientIdentity:
    """Fill in defaults for an empty ``tag`` and a missing ``hostname``."""

    return ClientIdentity(
        tag=tag or default_tag(),
        hostname=default_hostname() if hostname is None else hostname,
    )
