"""Remote connections over UDP, TCP and TLS."""

from __future__ import annotations

import logging
import socket
import ssl

from .base import SocketConnection

__all__ = ["dial_udp", "dial_tcp", "dial_tls"]

_LOGGER = logging.getLogger(__name__)


def dial_udp(host: str, port: int, *, timeout: float | None = None) -> SocketConnection:
    """Return a connected UDP socket for ``host:port``."""

    last_error: OSError | None = None
    for family, socktype, proto, _, sockaddr in socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM):
        sock = socket.socket(family, socktype, proto)
        try:
            if timeout is not None:
                sock.settimeout(timeout)
            sock.connect(sockaddr)
        except OSError as exc:
            sock.close()
            last_error = exc
            continue
        return SocketConnection(sock, datagram=True, description=f"udp:{host}:{port}")
    if last_error is None:
        raise OSError(f"getaddrinfo returned no UDP addresses for {host}:{port}")
    raise last_error


def dial_tcp(host: str, port: int, *, timeout: float | None = None) -> SocketConnection:
    """Return a plain TCP stream connection to ``host:port``."""

    sock = socket.create_connection((host, port), timeout=timeout)
    return SocketConnection(sock, datagram=False, description=f"tcp:{host}:{port}")


def dial_tls(
    host: str,
    port: int,
    context: ssl.SSLContext,
    *,
    timeout: float | None = None,
) -> SocketConnection:
    """Return a TLS stream to ``host:port`` verified against ``context``."""

    raw = socket.create_connection((host, port), timeout=timeout)
    try:
        sock = context.wrap_socket(raw, server_hostname=host)
    except (OSError, ssl.SSLError):
        raw.close()
        raise
    _LOGGER.debug("TLS session to %s:%s established (%s)", host, port, sock.version())
    return SocketConnection(sock, datagram=False, description=f"tls:{host}:{port}")
