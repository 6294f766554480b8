"""
=============================================================================
SOCKET OPTIONS: TIMEOUTS
=============================================================================

Blocking sockets wait forever unless the kernel is told otherwise. We tell
it through SO_RCVTIMEO (receive side, which also covers accept()) and
SO_SNDTIMEO (send side):

    set_timeout(sock, Direction.RECEIVE, 1500)
        └── 1500 ms = 1 s + 500000 µs ──► setsockopt(SO_RCVTIMEO, ...)

How the value is encoded (struct timeval vs DWORD) is the backend's job.

Note this is NOT socket.settimeout(). That one switches the Python socket
into internal non-blocking mode and polls. Kernel timeouts keep the socket
truly blocking, and an expired wait surfaces as an error whose
``timed_out`` property is true.

A timeout of 0 means "no timeout". Negative values are refused before the
socket is touched, so a bad call never changes what was configured before.
=============================================================================
"""

import socket
import logging
import numbers
from enum import Enum
from typing import Union

from ..backends import backend
from ..errors import InvalidArgument, OptionError


logger = logging.getLogger(__name__)


class Direction(Enum):
    """Which side of the socket a timeout applies to."""
    RECEIVE = "receive"
    SEND = "send"

    @property
    def option(self) -> int:
        if self is Direction.RECEIVE:
            return socket.SO_RCVTIMEO
        return socket.SO_SNDTIMEO


def _direction(value: Union[Direction, str]) -> Direction:
    try:
        return Direction(value)
    except ValueError:
        raise InvalidArgument(f"Unknown timeout direction: {value!r}") from None


def set_timeout(
    handle: socket.socket,
    direction: Union[Direction, str],
    milliseconds: int,
) -> None:
    """
    Set the receive or send timeout of a socket.

    Args:
        handle: The socket.
        direction: Direction.RECEIVE or Direction.SEND.
        milliseconds: Non-negative whole milliseconds; 0 disables it.

    Raises:
        InvalidArgument: Negative, non-integer or out-of-range duration.
        OptionError: The platform rejected the option.
    """
    direction = _direction(direction)

    if isinstance(milliseconds, bool) or not isinstance(milliseconds, numbers.Integral):
        raise InvalidArgument(f"Timeout must be whole milliseconds, got {milliseconds!r}")
    if milliseconds < 0:
        raise InvalidArgument(f"Timeout must not be negative, got {milliseconds}")

    try:
        backend.set_timeout_option(handle, direction.option, int(milliseconds))
    except OverflowError as exc:
        raise InvalidArgument(str(exc)) from exc
    except OSError as exc:
        logger.error("setsockopt(%s timeout, fd %d): %s",
                     direction.value, handle.fileno(), exc)
        raise OptionError(
            f"Cannot set {direction.value} timeout: {exc}", errno=exc.errno
        ) from exc

    logger.debug("fd %d %s timeout = %d ms", handle.fileno(), direction.value, milliseconds)


def get_timeout(handle: socket.socket, direction: Union[Direction, str]) -> int:
    """
    Current receive or send timeout in milliseconds (0 = none).

    The value is what the kernel stored, not what was set. Linux keeps these
    timeouts in scheduler ticks, so set_timeout(s, RECEIVE, 1) reads back
    as 4 on a 250 Hz kernel. Whole seconds survive unchanged.
    """
    direction = _direction(direction)
    try:
        return backend.get_timeout_option(handle, direction.option)
    except OSError as exc:
        logger.error("getsockopt(%s timeout, fd %d): %s",
                     direction.value, handle.fileno(), exc)
        raise OptionError(
            f"Cannot read {direction.value} timeout: {exc}", errno=exc.errno
        ) from exc


def set_recv_timeout(handle: socket.socket, milliseconds: int) -> None:
    set_timeout(handle, Direction.RECEIVE, milliseconds)


def set_send_timeout(handle: socket.socket, milliseconds: int) -> None:
    set_timeout(handle, Direction.SEND, milliseconds)
