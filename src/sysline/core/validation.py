"""Configuration validation helpers."""

from __future__ import annotations

from ..config.schema import SyslineConfig
from .dialer import NETWORKS
from .errors import InvalidPriority
from .priority import make_priority


class ConfigurationError(ValueError):
    """Raised when configuration validation fails."""


def validate_configuration(config: SyslineConfig) -> int:
    """Ensure the configuration can be dialed; return its priority."""

    destination = config.destination
    network = destination.network
    if network not in NETWORKS:
        raise ConfigurationError(f"Unknown destination network {network!r}")

    if network and not destination.address:
        raise ConfigurationError(f"Destination network {network!r} requires an address")

    if not network:
        if not config.local.candidates:
            raise ConfigurationError("Local destination requires at least one socket candidate")
        for candidate in config.local.candidates:
            if candidate.network not in ("unix", "unixgram"):
                raise ConfigurationError(
                    f"Local candidate {candidate.path!r} has unknown network {candidate.network!r}"
                )

    if config.tls.enabled and network != "tcp":
        raise ConfigurationError(f"TLS requires the 'tcp' network, not {network or 'local'!r}")

    if config.tls.key_file and not config.tls.cert_file:
        raise ConfigurationError("TLS key_file given without cert_file")

    if destination.timeout is not None and destination.timeout <= 0:
        raise ConfigurationError("Destination timeout must be positive")

    try:
        return make_priority(config.priority.facility, config.priority.severity)
    except InvalidPriority as exc:
        raise ConfigurationError(str(exc)) from exc
