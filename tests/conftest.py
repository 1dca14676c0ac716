from __future__ import annotations

import logging
import shutil
import socket
import ssl
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator, List

import pytest

import sysline.api as sysline_api

FIXED_MOMENT = datetime(2024, 3, 5, 7, 8, 9)


@pytest.fixture(autouse=True)
def reset_sysline() -> Iterator[None]:
    yield
    sysline_api.shutdown()
    logging.getLogger().setLevel(logging.WARNING)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_MOMENT


@pytest.fixture
def short_tmp() -> Iterator[Path]:
    # AF_UNIX paths are limited to ~100 bytes, so avoid pytest's deep tmp_path.
    directory = Path(tempfile.mkdtemp(prefix="sl-"))
    yield directory
    shutil.rmtree(directory, ignore_errors=True)


class Collector:
    """Base for the in-process collectors used by end-to-end tests."""

    def __init__(self) -> None:
        self.frames: List[bytes] = []
        self._cond = threading.Condition()
        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []

    def _record(self, frame: bytes) -> None:
        with self._cond:
            self.frames.append(frame)
            self._cond.notify_all()

    def _spawn(self, target: Callable[..., None], *args: object) -> None:
        thread = threading.Thread(target=target, args=args, daemon=True)
        thread.start()
        self._threads.append(thread)

    def wait_until(self, predicate: Callable[[List[bytes]], bool], timeout: float = 5.0) -> List[bytes]:
        with self._cond:
            self._cond.wait_for(lambda: predicate(self.frames), timeout=timeout)
            return list(self.frames)

    def wait_for(self, count: int, timeout: float = 5.0) -> List[bytes]:
        return self.wait_until(lambda frames: len(frames) >= count, timeout=timeout)

    def stop(self) -> None:
        self._stop.set()
        for thread in self._threads:
            thread.join(timeout=2.0)


class DatagramCollector(Collector):
    def __init__(self, family: int, bind_to: object) -> None:
        super().__init__()
        self.sock = socket.socket(family, socket.SOCK_DGRAM)
        self.sock.bind(bind_to)
        self.sock.settimeout(0.1)
        self._spawn(self._serve)

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                data = self.sock.recv(65535)
            except socket.timeout:
                continue
            except OSError:
                return
            self._record(data)

    def stop(self) -> None:
        super().stop()
        self.sock.close()


class StreamCollector(Collector):
    """Accepts any number of connections and records newline-delimited frames."""

    def __init__(self, family: int, bind_to: object, *, tls_context: ssl.SSLContext | None = None) -> None:
        super().__init__()
        self.tls_context = tls_context
        self.accepted = 0
        self._conns: List[socket.socket] = []
        self._conns_lock = threading.Lock()
        self.sock = socket.socket(family, socket.SOCK_STREAM)
        if family != socket.AF_UNIX:
            self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.sock.bind(bind_to)
        self.sock.listen(16)
        self.sock.settimeout(0.1)
        self._spawn(self._accept_loop)

    def _accept_loop(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self.sock.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            with self._conns_lock:
                self.accepted += 1
                self._conns.append(conn)
            self._spawn(self._read_loop, conn)

    def _read_loop(self, conn: socket.socket) -> None:
        if self.tls_context is not None:
            conn.settimeout(5.0)
            try:
                conn = self.tls_context.wrap_socket(conn, server_side=True)
            except OSError:
                conn.close()
                return
        conn.settimeout(0.1)
        buffer = b""
        while not self._stop.is_set():
            try:
                chunk = conn.recv(65535)
            except socket.timeout:
                continue
            except OSError:
                break
            if not chunk:
                break
            buffer += chunk
            while b"\n" in buffer:
                line, buffer = buffer.split(b"\n", 1)
                self._record(line + b"\n")
        conn.close()

    def drop_connections(self) -> None:
        """Close every accepted connection while keeping the listener up."""

        with self._conns_lock:
            conns, self._conns = self._conns, []
        for conn in conns:
            try:
                conn.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            conn.close()

    def stop(self) -> None:
        super().stop()
        self.drop_connections()
        self.sock.close()


def _inet_address(sock: socket.socket) -> str:
    host, port = sock.getsockname()[:2]
    return f"{host}:{port}"


@pytest.fixture
def unix_dgram_collector(short_tmp: Path) -> Iterator[DatagramCollector]:
    path = short_tmp / "dgram.sock"
    collector = DatagramCollector(socket.AF_UNIX, str(path))
    collector.path = str(path)  # type: ignore[attr-defined]
    yield collector
    collector.stop()


@pytest.fixture
def unix_stream_collector(short_tmp: Path) -> Iterator[StreamCollector]:
    path = short_tmp / "stream.sock"
    collector = StreamCollector(socket.AF_UNIX, str(path))
    collector.path = str(path)  # type: ignore[attr-defined]
    yield collector
    collector.stop()


@pytest.fixture
def udp_collector() -> Iterator[DatagramCollector]:
    collector = DatagramCollector(socket.AF_INET, ("127.0.0.1", 0))
    collector.address = _inet_address(collector.sock)  # type: ignore[attr-defined]
    yield collector
    collector.stop()


@pytest.fixture
def tcp_collector() -> Iterator[StreamCollector]:
    collector = StreamCollector(socket.AF_INET, ("127.0.0.1", 0))
    collector.address = _inet_address(collector.sock)  # type: ignore[attr-defined]
    yield collector
    collector.stop()


@pytest.fixture
def unused_tcp_address() -> str:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    address = _inet_address(sock)
    sock.close()
    return address
