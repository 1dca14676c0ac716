"""Public API surface for sysline."""

from __future__ import annotations

import logging
import ssl
from typing import Any, Dict, Iterable

from .config.loader import load_configuration
from .config.tls import load_cert_path
from .core.dialer import Destination, Dialer, dial as dial_destination
from .core.errors import DialError
from .core.identity import resolve_identity
from .core.manager import GLOBAL_MANAGER
from .core.priority import validate_priority
from .core.writer import Clock, SyslogWriter
from .handlers.syslog import SyslogWriterHandler
from .transports.local import DEFAULT_LOCAL_CANDIDATES, LocalCandidate
from .utils.time import local_now

_CONFIGURED = False


def dial_with_tls_config(
    network: str,
    address: str,
    priority: int,
    tag: str = "",
    tls_config: ssl.SSLContext | None = None,
    *,
    hostname: str | None = None,
    local_candidates: Iterable[LocalCandidate] = DEFAULT_LOCAL_CANDIDATES,
    timeout: float | None = None,
    dialer: Dialer = dial_destination,
    clock: Clock = local_now,
) -> SyslogWriter:
    """Connect to a collector and return a writer.

    An empty ``network`` connects to the local syslog daemon. The priority is
    validated before any connection is attempted.
    """

    validate_priority(priority)
    destination = Destination(
        network=network,
        address=address,
        tls_config=tls_config,
        local_candidates=tuple(local_candidates),
        timeout=timeout,
    )
    identity = resolve_identity(tag, hostname)
    return SyslogWriter(priority, destination, identity, dialer=dialer, clock=clock)


def dial(network: str, address: str, priority: int, tag: str = "", **kwargs: Any) -> SyslogWriter:
    """Connect to ``address`` over ``network`` without TLS."""

    return dial_with_tls_config(network, address, priority, tag, None, **kwargs)


def new(priority: int, tag: str = "", **kwargs: Any) -> SyslogWriter:
    """Connect to the local syslog daemon."""

    return dial_with_tls_config("", "", priority, tag, None, **kwargs)


def dial_with_tls_cert_path(
    network: str,
    address: str,
    priority: int,
    tag: str,
    cert_path: str,
    **kwargs: Any,
) -> SyslogWriter:
    """Connect over TLS trusting only the PEM certificate at ``cert_path``."""

    validate_priority(priority)
    try:
        context = load_cert_path(cert_path)
    except (OSError, ValueError) as exc:
        raise DialError(f"Unable to load TLS trust from {cert_path!r}: {exc}") from exc
    return dial_with_tls_config(network, address, priority, tag, context, **kwargs)


def new_logger(
    priority: int,
    tag: str = "",
    *,
    name: str | None = None,
    fmt: str = "%(message)s",
    **kwargs: Any,
) -> logging.Logger:
    """Return a logger whose records go to the local syslog daemon."""

    writer = new(priority, tag, **kwargs)
    logger = logging.getLogger(name or f"syslog.{writer.identity.tag}")
    handler = SyslogWriterHandler(writer)
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    return logger


def configure(overrides: Dict[str, Any] | None = None) -> SyslogWriter:
    """Load configuration, dial it and attach a handler to the root logger."""

    global _CONFIGURED
    config = load_configuration(overrides or {})
    writer = GLOBAL_MANAGER.configure(config)
    _CONFIGURED = True
    return writer


def _ensure_configured() -> None:
    if not _CONFIGURED:
        configure({})


def get_logger(name: str) -> logging.Logger:
    """Return a logger with the given name, configuring sysline on first use."""

    _ensure_configured()
    return logging.getLogger(name)


def shutdown() -> None:
    """Detach the root handler installed by :func:`configure` and close its writer."""

    global _CONFIGURED
    GLOBAL_MANAGER.shutdown()
    _CONFIGURED = False
