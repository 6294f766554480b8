"""
POSIX socket backend (Linux, macOS, the BSDs).

Timeout options take a ``struct timeval``: whole seconds plus the remaining
microseconds. Both fields are C ``long`` on the platforms we target.
"""

import errno
import socket
import struct


NAME = "posix"

SUPPORTS_CREATION_FLAGS = True

_TIMEVAL = struct.Struct("@ll")

_TIMEOUT_ERRNOS = frozenset({errno.EAGAIN, errno.EWOULDBLOCK, errno.ETIMEDOUT})


def socket_type(kind: int, flags: int) -> int:
    """Combine a socket kind with creation flags such as SOCK_CLOEXEC."""
    return int(kind) | flags


def encode_timeout(milliseconds: int) -> bytes:
    """Pack milliseconds as a struct timeval."""
    seconds, remainder = divmod(milliseconds, 1000)
    try:
        return _TIMEVAL.pack(seconds, remainder * 1000)
    except struct.error as exc:
        raise OverflowError(f"timeout too large: {milliseconds} ms") from exc


def decode_timeout(raw: bytes) -> int:
    seconds, microseconds = _TIMEVAL.unpack(raw)
    return seconds * 1000 + microseconds // 1000


def set_timeout_option(sock: socket.socket, option: int, milliseconds: int) -> None:
    sock.setsockopt(socket.SOL_SOCKET, option, encode_timeout(milliseconds))


def get_timeout_option(sock: socket.socket, option: int) -> int:
    raw = sock.getsockopt(socket.SOL_SOCKET, option, _TIMEVAL.size)
    return decode_timeout(raw)


def is_timeout_error(exc: OSError) -> bool:
    """
    True when ``exc`` means "the configured timeout fired".

    A blocking socket whose SO_RCVTIMEO expires fails with EAGAIN, which
    Python surfaces as BlockingIOError rather than socket.timeout.
    """
    if isinstance(exc, socket.timeout):
        return True
    return exc.errno in _TIMEOUT_ERRNOS
