"""Connections to the local syslog daemon over Unix domain sockets."""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass
from typing import Iterable, Literal

from .base import SocketConnection

__all__ = ["LocalCandidate", "DEFAULT_LOCAL_CANDIDATES", "dial_unix", "dial_local"]

_LOGGER = logging.getLogger(__name__)

UnixNetwork = Literal["unixgram", "unix"]

_SOCKET_TYPES = {
    "unixgram": socket.SOCK_DGRAM,
    "unix": socket.SOCK_STREAM,
}

_DEFAULT_PATHS = ("/dev/log", "/var/run/syslog", "/var/run/log")


@dataclass(frozen=True, slots=True)
class LocalCandidate:
    """One local socket to probe."""

    network: UnixNetwork
    path: str


DEFAULT_LOCAL_CANDIDATES: tuple[LocalCandidate, ...] = tuple(
    LocalCandidate(network=network, path=path)
    for network in ("unixgram", "unix")
    for path in _DEFAULT_PATHS
)


def dial_unix(network: str, path: str, *, timeout: float | None = None) -> SocketConnection:
    """Connect a Unix domain socket of kind ``network`` to ``path``."""

    socktype = _SOCKET_TYPES.get(network)
    if socktype is None:
        raise ValueError(f"Unknown unix network kind: {network!r}")
    sock = socket.socket(socket.AF_UNIX, socktype)
    try:
        if timeout is not None:
            sock.settimeout(timeout)
        sock.connect(path)
    except OSError:
        sock.close()
        raise
    return SocketConnection(sock, datagram=socktype == socket.SOCK_DGRAM, description=f"{network}:{path}")


def dial_local(
    candidates: Iterable[LocalCandidate] = DEFAULT_LOCAL_CANDIDATES,
    *,
    timeout: float | None = None,
) -> SocketConnection:
    """Return a connection to the first candidate that accepts one.

    Raises the last ``OSError`` seen when every candidate fails.
    """

    last_error: OSError | None = None
    for candidate in candidates:
        try:
            connection = dial_unix(candidate.network, candidate.path, timeout=timeout)
        except OSError as exc:
            _LOGGER.debug("Local syslog candidate %s:%s unavailable: %s", candidate.network, candidate.path, exc)
            last_error = exc
            continue
        _LOGGER.debug("Connected to local syslog at %s:%s", candidate.network, candidate.path)
        return connection
    if last_error is None:
        raise FileNotFoundError("No local syslog candidates configured")
    raise last_error
