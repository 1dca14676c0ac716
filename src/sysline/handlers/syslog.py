"""``logging`` handler that forwards records to a :class:`SyslogWriter`."""

from __future__ import annotations

import logging

from ..config.schema import HandlerConfig
from ..core.levels import ensure_level, severity_for_level
from ..core.writer import SyslogWriter

__all__ = ["InternalRecordFilter", "SyslogWriterHandler", "build_syslog_handler"]

_INTERNAL_LOGGER = "sysline"


class InternalRecordFilter(logging.Filter):
    """Reject records emitted by sysline's own loggers."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        name = record.name
        return not (name == _INTERNAL_LOGGER or name.startswith(_INTERNAL_LOGGER + "."))


class SyslogWriterHandler(logging.Handler):
    """Send each formatted record through ``writer`` at a mapped severity."""

    def __init__(self, writer: SyslogWriter, *, level: int = logging.NOTSET, owns_writer: bool = True) -> None:
        super().__init__(level)
        self.writer = writer
        self.owns_writer = owns_writer
        self.addFilter(InternalRecordFilter())

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        try:
            message = self.format(record)
            self.writer.log(severity_for_level(record.levelno), message)
        except Exception:
            self.handleError(record)

    def close(self) -> None:  # type: ignore[override]
        self.acquire()
        try:
            if self.owns_writer and not self.writer.closed:
                self.writer.close()
        finally:
            self.release()
            super().close()


def build_syslog_handler(writer: SyslogWriter, config: HandlerConfig | None = None) -> logging.Handler:
    cfg = config or HandlerConfig()
    handler = SyslogWriterHandler(writer, level=ensure_level(cfg.level))
    handler.setFormatter(logging.Formatter(cfg.format))
    return handler
