"""Address parsing helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

__all__ = ["ParsedAddress", "parse_address", "split_host_port"]

_SCHEMES = {
    "udp": ("udp", False),
    "tcp": ("tcp", False),
    "tls": ("tcp", True),
    "unix": ("unix", False),
    "unixgram": ("unixgram", False),
}


@dataclass(frozen=True, slots=True)
class ParsedAddress:
    """Result of splitting an address that may carry a scheme prefix."""

    network: str | None
    address: str
    tls: bool = False


def parse_address(value: str) -> ParsedAddress:
    """Split ``tcp://host:port`` style shorthands into network and address.

    Values without a recognized scheme are returned untouched with
    ``network`` set to ``None``.
    """

    scheme, sep, rest = value.partition("://")
    if not sep:
        return ParsedAddress(network=None, address=value)
    entry = _SCHEMES.get(scheme.lower())
    if entry is None:
        raise ValueError(f"Unsupported address scheme: {scheme!r}")
    network, tls = entry
    return ParsedAddress(network=network, address=rest, tls=tls)


def split_host_port(address: str, default_port: int) -> Tuple[str, int]:
    """Split ``host:port``, ``[v6]:port`` or a bare host into its parts."""

    if not address:
        raise ValueError("Remote address must not be empty")

    if address.startswith("["):
        host, sep, tail = address[1:].partition("]")
        if not sep:
            raise ValueError(f"Missing ']' in address {address!r}")
        if not tail:
            return host, default_port
        if not tail.startswith(":"):
            raise ValueError(f"Unexpected text after ']' in address {address!r}")
        port_str = tail[1:]
    elif address.count(":") == 1:
        host, _, port_str = address.partition(":")
    else:
        # bare hostname or unbracketed IPv6 literal
        return address, default_port

    if not port_str.isdigit():
        raise ValueError(f"Invalid port in address {address!r}")
    port = int(port_str)
    if not 0 < port < 65536:
        raise ValueError(f"Port out of range in address {address!r}")
    return host or "localhost", port
