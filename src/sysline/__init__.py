"""sysline public API."""

from .api import (
    configure,
    dial,
    dial_with_tls_cert_path,
    dial_with_tls_config,
    get_logger,
    new,
    new_logger,
    shutdown,
)
from .core.dialer import Destination
from .core.errors import (
    ClosedWriterError,
    CloseError,
    DialError,
    InvalidPriority,
    SyslineError,
    WriteError,
)
from .core.priority import Facility, Severity, make_priority
from .core.writer import SyslogWriter
from .handlers.syslog import SyslogWriterHandler
from .transports.local import LocalCandidate
from .version import __version__

__all__ = [
    "configure",
    "dial",
    "dial_with_tls_cert_path",
    "dial_with_tls_config",
    "get_logger",
    "new",
    "new_logger",
    "shutdown",
    "Destination",
    "ClosedWriterError",
    "CloseError",
    "DialError",
    "InvalidPriority",
    "SyslineError",
    "WriteError",
    "Facility",
    "Severity",
    "make_priority",
    "SyslogWriter",
    "SyslogWriterHandler",
    "LocalCandidate",
    "__version__",
]
