"""Concurrency-safe syslog writer with reconnect-on-failure."""

from __future__ import annotations

import logging
import os
import threading
from datetime import datetime
from typing import Any, Callable, List, Tuple

from ..formatters.rfc3164 import frame_message
from ..transports.base import Connection
from ..utils.time import local_now
from .dialer import Destination, Dialer, dial
from .errors import ClosedWriterError, CloseError, WriteError
from .identity import ClientIdentity
from .priority import Severity, combine, severity_of, validate_priority

__all__ = ["SyslogWriter"]

_LOGGER = logging.getLogger(__name__)

Clock = Callable[[], datetime]
# (level, message, args) logged once the writer lock is released
_Note = Tuple[int, str, Tuple[Any, ...]]


class SyslogWriter:
    """Send log lines to a syslog collector over a single connection.

    All state lives behind one lock that is held for framing, the network
    write and any reconnect, so concurrent callers never interleave bytes on
    the wire. A failed write drops the connection, dials the same destination
    again and retries exactly once before raising :class:`WriteError`.

    The writer also behaves like a text stream (``write``/``flush``) so it can
    back a :class:`logging.StreamHandler` or any other file-like consumer.
    Diagnostics about a failed write are logged only after the lock is
    released. A line that reaches the writer from the thread that is already
    inside it (a dialer's debug record routed back through a handler) is
    dropped instead of waiting on the lock.
    """

    def __init__(
        self,
        priority: int,
        destination: Destination,
        identity: ClientIdentity,
        *,
        dialer: Dialer = dial,
        clock: Clock = local_now,
    ) -> None:
        self._priority = validate_priority(priority)
        self._destination = destination
        self._identity = identity
        self._dialer = dialer
        self._clock = clock
        self._lock = threading.Lock()
        self._local = threading.local()
        self._closed = False
        self._conn: Connection | None = self._dialer(destination)

    # ------------------------------------------------------------------
    @property
    def priority(self) -> int:
        return self._priority

    @property
    def destination(self) -> Destination:
        return self._destination

    @property
    def identity(self) -> ClientIdentity:
        return self._identity

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def connected(self) -> bool:
        return self._conn is not None and not self._closed

    # ------------------------------------------------------------------
    def log(self, severity: int, message: str) -> int:
        """Send ``message`` at ``severity`` and return the bytes written.

        The facility always comes from the writer's own priority; when
        ``severity`` is a full priority only its severity bits are used.
        Returns ``0`` without writing when called re-entrantly from the
        thread that is already writing.
        """

        if getattr(self._local, "busy", False):
            return 0
        self._local.busy = True
        notes: List[_Note] = []
        try:
            with self._lock:
                if self._closed:
                    raise ClosedWriterError("write on closed syslog writer")
                return self._write_and_retry(combine(self._priority, severity), message, notes)
        finally:
            try:
                for level, msg, args in notes:
                    _LOGGER.log(level, msg, *args)
            finally:
                self._local.busy = False

    def emergency(self, message: str) -> int:
        return self.log(Severity.EMERG, message)

    def alert(self, message: str) -> int:
        return self.log(Severity.ALERT, message)

    def critical(self, message: str) -> int:
        return self.log(Severity.CRIT, message)

    def error(self, message: str) -> int:
        return self.log(Severity.ERR, message)

    def warning(self, message: str) -> int:
        return self.log(Severity.WARNING, message)

    def notice(self, message: str) -> int:
        return self.log(Severity.NOTICE, message)

    def info(self, message: str) -> int:
        return self.log(Severity.INFO, message)

    def debug(self, message: str) -> int:
        return self.log(Severity.DEBUG, message)

    # -- file-like sink --------------------------------------------------
    def write(self, data: bytes | str) -> int:
        """Log ``data`` at the writer's own severity; return ``len(data)``."""

        text = data.decode("utf-8", errors="replace") if isinstance(data, (bytes, bytearray)) else data
        if text.endswith("\n"):
            text = text[:-1]
        self.log(severity_of(self._priority), text)
        return len(data)

    def flush(self) -> None:
        # frames are written synchronously; nothing is buffered
        return None

    # ------------------------------------------------------------------
    def close(self) -> None:
        """Close the connection; the writer cannot be used afterwards."""

        with self._lock:
            if self._closed:
                raise ClosedWriterError("syslog writer already closed")
            self._closed = True
            conn, self._conn = self._conn, None
            if conn is None:
                return
            try:
                conn.close()
            except OSError as exc:
                raise CloseError(f"Failed to close connection to {self._destination.describe()}: {exc}") from exc

    def __enter__(self) -> "SyslogWriter":
        return self

    def __exit__(self, exc_type, exc: BaseException | None, tb) -> None:
        if not self._closed:
            self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else ("connected" if self._conn is not None else "disconnected")
        return f"<SyslogWriter {self._destination.describe()} tag={self._identity.tag!r} {state}>"

    # -- lock held below -------------------------------------------------
    def _write_once(self, priority: int, message: str) -> int:
        conn = self._conn
        if conn is None:
            raise ConnectionError(f"Not connected to {self._destination.describe()}")
        frame = frame_message(
            priority,
            self._identity.hostname,
            self._identity.tag,
            message,
            moment=self._clock(),
            pid=os.getpid(),
            newline=not conn.datagram,
        )
        conn.write(frame)
        return len(frame)

    def _write_and_retry(self, priority: int, message: str, notes: List[_Note]) -> int:
        target = self._destination.describe()
        try:
            return self._write_once(priority, message)
        except OSError as exc:
            write_error = exc
        notes.append((logging.WARNING, "Write to %s failed, redialing: %s", (target, write_error)))

        self._drop_connection(notes)
        try:
            self._conn = self._dialer(self._destination)
        except OSError as dial_error:
            raise WriteError(f"Write to {target} failed and redial failed: {dial_error}") from write_error

        try:
            written = self._write_once(priority, message)
        except OSError as exc:
            raise WriteError(f"Write to {target} failed after reconnect: {exc}") from exc
        notes.append((logging.INFO, "Reconnected to %s after write failure", (target,)))
        return written

    def _drop_connection(self, notes: List[_Note]) -> None:
        conn, self._conn = self._conn, None
        if conn is None:
            return
        try:
            conn.close()
        except OSError as exc:
            notes.append((logging.DEBUG, "Ignoring error while discarding connection: %s", (exc,)))
