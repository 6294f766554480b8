"""
Windows (Winsock) socket backend.

Winsock takes SO_RCVTIMEO / SO_SNDTIMEO as a DWORD of milliseconds, and has
no SOCK_NONBLOCK / SOCK_CLOEXEC bits to OR into the socket type.
"""

import errno
import socket


NAME = "windows"

SUPPORTS_CREATION_FLAGS = False

WSAEWOULDBLOCK = 10035
WSAETIMEDOUT = 10060

_TIMEOUT_ERRNOS = frozenset({errno.EAGAIN, errno.EWOULDBLOCK, errno.ETIMEDOUT})
_TIMEOUT_WINERRORS = frozenset({WSAEWOULDBLOCK, WSAETIMEDOUT})


def socket_type(kind: int, flags: int) -> int:
    # Callers check SUPPORTS_CREATION_FLAGS first; flags is always 0 here.
    return int(kind)


def set_timeout_option(sock: socket.socket, option: int, milliseconds: int) -> None:
    sock.setsockopt(socket.SOL_SOCKET, option, milliseconds)


def get_timeout_option(sock: socket.socket, option: int) -> int:
    return sock.getsockopt(socket.SOL_SOCKET, option)


def is_timeout_error(exc: OSError) -> bool:
    if isinstance(exc, socket.timeout):
        return True
    if getattr(exc, "winerror", None) in _TIMEOUT_WINERRORS:
        return True
    return exc.errno in _TIMEOUT_ERRNOS
