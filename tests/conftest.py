"""
pytest configuration and fixtures.
"""

import os
import socket
import threading
from typing import Callable, Generator, Optional, Tuple
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import netsock
from netsock import log
from netsock import Direction, Family, SockType


def open_fd_count() -> Optional[int]:
    """Number of open descriptors in this process, or None if unknown."""
    for path in ("/proc/self/fd", "/dev/fd"):
        if os.path.isdir(path):
            return len(os.listdir(path))
    return None


class FakeSocket:
    """
    Stand-in for a connected socket that moves at most ``chunk`` bytes per
    call, the way a busy TCP connection can.
    """

    def __init__(self, incoming: bytes = b"", chunk: int = 3, fail_after: Optional[int] = None):
        self.incoming = bytearray(incoming)
        self.outgoing = bytearray()
        self.chunk = chunk
        self.fail_after = fail_after
        self.calls = 0

    def fileno(self) -> int:
        return 99

    def _maybe_fail(self):
        self.calls += 1
        if self.fail_after is not None and self.calls > self.fail_after:
            raise ConnectionResetError(104, "Connection reset by peer")

    def send(self, data) -> int:
        self._maybe_fail()
        piece = bytes(data[:self.chunk])
        self.outgoing += piece
        return len(piece)

    def recv_into(self, view) -> int:
        self._maybe_fail()
        count = min(self.chunk, len(view), len(self.incoming))
        view[:count] = self.incoming[:count]
        del self.incoming[:count]
        return count


class BackgroundTask:
    """Run one callable in a daemon thread and collect its result."""

    def __init__(self, target: Callable, *args):
        self.result = None
        self.error: Optional[BaseException] = None
        self._thread = threading.Thread(target=self._run, args=(target,) + args, daemon=True)

    def _run(self, target, *args):
        try:
            self.result = target(*args)
        except BaseException as exc:
            self.error = exc

    def start(self) -> "BackgroundTask":
        self._thread.start()
        return self

    def join(self, timeout: float = 10.0):
        self._thread.join(timeout)
        if self._thread.is_alive():
            raise RuntimeError("Background task did not finish")
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


@pytest.fixture
def listener() -> Generator[socket.socket, None, None]:
    """IPv4 stream listener on an ephemeral loopback port."""
    sock = netsock.resolve_and_listen("127.0.0.1", 0, Family.IPV4, SockType.TCP)
    netsock.set_timeout(sock, Direction.RECEIVE, 5000)
    yield sock
    netsock.close(sock)


@pytest.fixture
def tcp_pair(listener: socket.socket) -> Generator[Tuple[socket.socket, socket.socket], None, None]:
    """(server side, client side) of one loopback connection."""
    port = listener.getsockname()[1]
    client = netsock.resolve_and_connect("127.0.0.1", str(port), Family.IPV4, SockType.TCP)
    server = netsock.accept(listener)

    for sock in (client, server):
        netsock.set_timeout(sock, Direction.RECEIVE, 5000)
        netsock.set_timeout(sock, Direction.SEND, 5000)

    yield server, client

    netsock.close(client)
    netsock.close(server)


@pytest.fixture
def udp_socket() -> Generator[socket.socket, None, None]:
    """Bound IPv4 datagram socket on an ephemeral loopback port."""
    sock = netsock.resolve_and_listen("127.0.0.1", 0, Family.IPV4, SockType.UDP)
    netsock.set_timeout(sock, Direction.RECEIVE, 5000)
    yield sock
    netsock.close(sock)


@pytest.fixture
def ipv6_loopback() -> str:
    """'::1', or skip the test where the host has no IPv6 loopback."""
    if not socket.has_ipv6:
        pytest.skip("Python built without IPv6")
    try:
        with socket.socket(socket.AF_INET6, socket.SOCK_STREAM) as s:
            s.bind(("::1", 0))
    except OSError as exc:
        pytest.skip(f"::1 unavailable: {exc}")
    return "::1"


@pytest.fixture
def reset_log() -> Generator[None, None, None]:
    """Make sure no test leaves a sink attached."""
    yield
    log.end()
