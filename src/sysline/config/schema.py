"""Configuration schema definition for sysline."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

from ..transports.local import DEFAULT_LOCAL_CANDIDATES, LocalCandidate
from ..utils.addresses import parse_address

DEFAULT_CONFIG: Dict[str, Any] = {
    "destination": {
        "network": "",
        "address": "",
        "timeout": None,
    },
    "priority": {
        "facility": "user",
        "severity": "info",
    },
    "identity": {
        "tag": "",
        "hostname": None,
    },
    "tls": {
        "enabled": False,
        "ca_file": None,
        "ca_path": None,
        "cert_file": None,
        "key_file": None,
    },
    "local": {
        "candidates": [
            {"network": candidate.network, "path": candidate.path}
            for candidate in DEFAULT_LOCAL_CANDIDATES
        ],
    },
    "handler": {
        "level": "DEBUG",
        "format": "%(message)s",
    },
}


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration mapping."""

    return deepcopy(DEFAULT_CONFIG)


@dataclass(slots=True)
class DestinationConfig:
    network: str = ""
    address: str = ""
    timeout: float | None = None


@dataclass(slots=True)
class PriorityConfig:
    facility: str | int = "user"
    severity: str | int = "info"


@dataclass(slots=True)
class IdentityConfig:
    tag: str = ""
    hostname: str | None = None


@dataclass(slots=True)
class TLSConfig:
    enabled: bool = False
    ca_file: str | None = None
    ca_path: str | None = None
    cert_file: str | None = None
    key_file: str | None = None


@dataclass(slots=True)
class LocalConfig:
    candidates: List[LocalCandidate] = field(default_factory=lambda: list(DEFAULT_LOCAL_CANDIDATES))


@dataclass(slots=True)
class HandlerConfig:
    level: str | int = "DEBUG"
    format: str = "%(message)s"


@dataclass(slots=True)
class SyslineConfig:
    destination: DestinationConfig
    priority: PriorityConfig
    identity: IdentityConfig
    tls: TLSConfig
    local: LocalConfig
    handler: HandlerConfig
    raw: Dict[str, Any] = field(repr=False)


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _to_destination(data: Mapping[str, Any]) -> tuple[DestinationConfig, bool]:
    network = str(data.get("network", "") or "").lower()
    parsed = parse_address(str(data.get("address", "") or ""))
    if parsed.network is not None:
        network = parsed.network
    timeout_raw = data.get("timeout")
    timeout = float(timeout_raw) if timeout_raw is not None else None
    return DestinationConfig(network=network, address=parsed.address, timeout=timeout), parsed.tls


def _to_priority(data: Mapping[str, Any]) -> PriorityConfig:
    return PriorityConfig(
        facility=data.get("facility", "user"),
        severity=data.get("severity", "info"),
    )


def _to_identity(data: Mapping[str, Any]) -> IdentityConfig:
    hostname = data.get("hostname")
    return IdentityConfig(
        tag=str(data.get("tag", "") or ""),
        hostname=str(hostname) if hostname is not None else None,
    )


def _to_tls(data: Mapping[str, Any], *, implied: bool) -> TLSConfig:
    return TLSConfig(
        enabled=implied or bool(data.get("enabled", False)),
        ca_file=_optional_str(data.get("ca_file")),
        ca_path=_optional_str(data.get("ca_path")),
        cert_file=_optional_str(data.get("cert_file")),
        key_file=_optional_str(data.get("key_file")),
    )


def _to_candidate(entry: Any) -> LocalCandidate:
    if isinstance(entry, Mapping):
        network, path = entry.get("network", "unixgram"), entry.get("path", "")
    elif isinstance(entry, str):
        network, _, path = entry.rpartition(":")
        network = network or "unixgram"
    elif isinstance(entry, Iterable):
        network, path = list(entry)
    else:
        raise ValueError(f"Invalid local candidate: {entry!r}")
    return LocalCandidate(network=str(network).lower(), path=str(path))  # type: ignore[arg-type]


def _to_local(data: Mapping[str, Any]) -> LocalConfig:
    raw = data.get("candidates")
    if not isinstance(raw, list):
        return LocalConfig()
    return LocalConfig(candidates=[_to_candidate(entry) for entry in raw])


def _to_handler(data: Mapping[str, Any]) -> HandlerConfig:
    return HandlerConfig(
        level=data.get("level", "DEBUG"),
        format=str(data.get("format", "%(message)s")),
    )


def build_config(data: Mapping[str, Any]) -> SyslineConfig:
    destination, tls_implied = _to_destination(data.get("destination", {}))
    return SyslineConfig(
        destination=destination,
        priority=_to_priority(data.get("priority", {})),
        identity=_to_identity(data.get("identity", {})),
        tls=_to_tls(data.get("tls", {}), implied=tls_implied),
        local=_to_local(data.get("local", {})),
        handler=_to_handler(data.get("handler", {})),
        raw=deepcopy({k: v for k, v in data.items()}),
    )
