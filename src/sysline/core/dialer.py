"""Destination descriptor and transport selection."""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass, field
from typing import Callable, Dict

from ..transports.base import Connection
from ..transports.local import DEFAULT_LOCAL_CANDIDATES, LocalCandidate, dial_local, dial_unix
from ..transports.network import dial_tcp, dial_tls, dial_udp
from ..utils.addresses import split_host_port
from .errors import DialError

__all__ = [
    "Destination",
    "Dialer",
    "DIALERS",
    "NETWORKS",
    "DEFAULT_PORT",
    "DEFAULT_TLS_PORT",
    "dial",
]

_LOGGER = logging.getLogger(__name__)

DEFAULT_PORT = 514
DEFAULT_TLS_PORT = 6514


@dataclass(frozen=True, slots=True)
class Destination:
    """Where a writer connects to; fixed for the writer's lifetime."""

    network: str = ""
    address: str = ""
    tls_config: ssl.SSLContext | None = field(default=None, compare=False)
    local_candidates: tuple[LocalCandidate, ...] = DEFAULT_LOCAL_CANDIDATES
    timeout: float | None = None

    def describe(self) -> str:
        if not self.network:
            return "local syslog"
        scheme = "tls" if self.tls_config is not None else self.network
        return f"{scheme}://{self.address}"


Dialer = Callable[[Destination], Connection]


def _dial_local(destination: Destination) -> Connection:
    return dial_local(destination.local_candidates, timeout=destination.timeout)


def _dial_unix_path(destination: Destination) -> Connection:
    if not destination.address:
        raise ValueError(f"Network {destination.network!r} requires a socket path")
    return dial_unix(destination.network, destination.address, timeout=destination.timeout)


def _dial_udp(destination: Destination) -> Connection:
    host, port = split_host_port(destination.address, DEFAULT_PORT)
    return dial_udp(host, port, timeout=destination.timeout)


def _dial_tcp(destination: Destination) -> Connection:
    if destination.tls_config is not None:
        host, port = split_host_port(destination.address, DEFAULT_TLS_PORT)
        return dial_tls(host, port, destination.tls_config, timeout=destination.timeout)
    host, port = split_host_port(destination.address, DEFAULT_PORT)
    return dial_tcp(host, port, timeout=destination.timeout)


DIALERS: Dict[str, Dialer] = {
    "": _dial_local,
    "unixgram": _dial_unix_path,
    "unix": _dial_unix_path,
    "udp": _dial_udp,
    "tcp": _dial_tcp,
}

NETWORKS = frozenset(DIALERS)


def _check_tls(destination: Destination) -> None:
    context = destination.tls_config
    if context is None:
        return
    if destination.network != "tcp":
        raise DialError(f"TLS is only supported over tcp, not {destination.network or 'local'!r}")
    if context.verify_mode == ssl.CERT_NONE:
        raise DialError("TLS trust configuration must verify the server certificate")


def dial(destination: Destination) -> Connection:
    """Open a new connection for ``destination``.

    Every failure, whether a refused connection, a failed handshake or a
    malformed address, surfaces as :class:`DialError`.
    """

    builder = DIALERS.get(destination.network)
    if builder is None:
        raise DialError(f"Unknown network kind: {destination.network!r}")
    _check_tls(destination)
    try:
        connection = builder(destination)
    except (OSError, ValueError) as exc:
        raise DialError(f"Unable to connect to {destination.describe()}: {exc}") from exc
    _LOGGER.debug("Dialed %s", destination.describe())
    return connection
