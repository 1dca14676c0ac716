"""Process-wide syslog setup driven by configuration."""

from __future__ import annotations

import logging

from ..config.schema import SyslineConfig
from ..config.tls import build_tls_context
from ..handlers.syslog import build_syslog_handler
from .dialer import Destination, Dialer, dial
from .identity import resolve_identity
from .validation import validate_configuration
from .writer import SyslogWriter

_LOGGER = logging.getLogger(__name__)


def writer_from_config(config: SyslineConfig, *, dialer: Dialer = dial) -> SyslogWriter:
    """Validate ``config`` and dial a writer for it."""

    priority = validate_configuration(config)
    tls_context = build_tls_context(config.tls) if config.tls.enabled else None
    destination = Destination(
        network=config.destination.network,
        address=config.destination.address,
        tls_config=tls_context,
        local_candidates=tuple(config.local.candidates),
        timeout=config.destination.timeout,
    )
    identity = resolve_identity(config.identity.tag, config.identity.hostname)
    return SyslogWriter(priority, destination, identity, dialer=dialer)


class SyslogManager:
    """Own the configured writer and its root logger handler."""

    def __init__(self) -> None:
        self._config: SyslineConfig | None = None
        self._writer: SyslogWriter | None = None
        self._handler: logging.Handler | None = None

    @property
    def config(self) -> SyslineConfig | None:
        return self._config

    @property
    def writer(self) -> SyslogWriter | None:
        return self._writer

    def configure(self, config: SyslineConfig, *, dialer: Dialer = dial) -> SyslogWriter:
        """Dial ``config``'s destination and route the root logger to it."""

        writer = writer_from_config(config, dialer=dialer)
        self._teardown()
        self._config = config
        self._writer = writer
        self._handler = build_syslog_handler(writer, config.handler)
        logging.getLogger().addHandler(self._handler)
        _LOGGER.debug("Root logger now sends to %s", writer.destination.describe())
        return writer

    def shutdown(self) -> None:
        """Detach the handler and close the writer."""

        self._teardown()
        self._config = None

    def _teardown(self) -> None:
        handler, self._handler = self._handler, None
        self._writer = None
        if handler is None:
            return
        logging.getLogger().removeHandler(handler)
        handler.close()


GLOBAL_MANAGER = SyslogManager()
