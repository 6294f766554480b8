"""
=============================================================================
HANDLE LIFECYCLE
=============================================================================

A handle is the socket object returned by the constructors. It belongs to
whoever created it, and it is released exactly once with close():

    close(sock)
        │
        ├──► shutdown(SHUT_RDWR)   no more sending OR receiving
        │                          (sends FIN on a connected stream)
        └──► close()               give the descriptor back to the OS

close() is a cleanup step, not a fallible operation. A listener or an
unconnected datagram socket has nothing to shut down, and the platform says
so (ENOTCONN). That is logged at debug level and ignored. A failing close()
is logged as a warning. Neither is raised.

This layer does not track handle state. Using a handle after close() is the
caller's bug; is_valid() is there for callers that need to check.
=============================================================================
"""

import socket
import logging
from enum import IntEnum
from typing import Optional

from ..errors import NetSockError


logger = logging.getLogger(__name__)


class Shutdown(IntEnum):
    READ = socket.SHUT_RD
    WRITE = socket.SHUT_WR
    BOTH = socket.SHUT_RDWR


def is_valid(handle: Optional[socket.socket]) -> bool:
    """True for an open socket, False for None or a closed socket."""
    return handle is not None and handle.fileno() != -1


def shutdown(handle: socket.socket, how: Shutdown = Shutdown.BOTH) -> None:
    """
    Half- or fully close a connected socket without releasing it.

    Raises:
        NetSockError: The platform refused (e.g. not connected).
    """
    how = Shutdown(how)
    try:
        handle.shutdown(how)
    except OSError as exc:
        logger.error("shutdown %s (fd %d): %s", how.name, handle.fileno(), exc)
        raise NetSockError(f"shutdown failed: {exc}", errno=exc.errno) from exc


def close(handle: Optional[socket.socket]) -> None:
    """Shut down both directions and release the socket. Never raises."""
    if not is_valid(handle):
        logger.debug("close: handle already invalid")
        return

    fd = handle.fileno()

    try:
        handle.shutdown(socket.SHUT_RDWR)
    except OSError as exc:
        logger.debug("shutdown (fd %d): %s", fd, exc)

    try:
        handle.close()
    except OSError as exc:
        logger.warning("close (fd %d): %s", fd, exc)
        return

    logger.debug("Closed fd %d", fd)
