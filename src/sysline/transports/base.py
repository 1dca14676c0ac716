"""Socket-backed connection handle shared by every transport."""

from __future__ import annotations

import socket
from typing import Protocol

__all__ = ["Connection", "SocketConnection"]


class Connection(Protocol):
    """A live link to a collector."""

    @property
    def datagram(self) -> bool: ...

    def write(self, frame: bytes) -> None: ...

    def close(self) -> None: ...


class SocketConnection:
    """Connection over a connected socket (Unix, UDP, TCP or TLS-wrapped TCP)."""

    def __init__(self, sock: socket.socket, *, datagram: bool, description: str) -> None:
        self._sock = sock
        self._datagram = datagram
        self.description = description

    @property
    def datagram(self) -> bool:
        return self._datagram

    def write(self, frame: bytes) -> None:
        self._sock.sendall(frame)

    def close(self) -> None:
        # socket.close() is a no-op on an already closed socket
        self._sock.close()

    def __repr__(self) -> str:
        kind = "datagram" if self._datagram else "stream"
        return f"<SocketConnection {kind} {self.description}>"
