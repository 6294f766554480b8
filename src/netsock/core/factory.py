"""
=============================================================================
SOCKET FACTORY
=============================================================================

Given the candidates from the resolver, produce ONE working socket.

Both directions share the same walk:

    for candidate in candidates:            (resolver order, no scoring)
        │
        ├──► socket(family, type | flags, protocol)
        │        └── failed? remember the error, try the next one
        │
        ├──► connect(address)     ◄── connect()
        │    bind(address)        ◄── bind()
        │        └── failed? CLOSE the socket, remember, next one
        │
        └──► success → return it        (first one wins)

    nothing worked → ConnectError / BindError with the LAST error

Closing before advancing matters: a failed candidate must never leak a
file descriptor, however many candidates the resolver returns.

=============================================================================
LISTENERS
=============================================================================

A stream listener needs two more steps on the winning candidate:

    socket()
    setsockopt(SO_REUSEADDR)   ← before bind, or it has no effect
    bind()
    listen(BACKLOG)            ← BACKLOG = 5 pending connections

SO_REUSEADDR lets a restarted server bind the port while old connections
sit in TIME_WAIT. If the platform refuses the option we do NOT carry on
without it (that would turn into a confusing "Address already in use" on
the next restart): the socket is closed and the whole call fails with
OptionError.

Datagram sockets are only bound. There is nothing to listen() for.
=============================================================================
"""

import socket
import logging
from typing import Iterable, Optional, Type

from ..backends import backend
from ..errors import BindError, ConnectError, InvalidArgument, NetSockError, OptionError
from ..log import TRACE
from .resolver import AddressCandidate


logger = logging.getLogger(__name__)


BACKLOG = 5


def _check_flags(flags: int) -> None:
    if flags and not backend.SUPPORTS_CREATION_FLAGS:
        raise InvalidArgument(
            f"Socket creation flags are not supported on {backend.NAME}: {flags:#x}"
        )


def _create(candidate: AddressCandidate, flags: int) -> socket.socket:
    return socket.socket(
        candidate.family,
        backend.socket_type(candidate.socktype, flags),
        candidate.protocol,
    )


def _exhausted(
    error_class: Type[NetSockError],
    action: str,
    last_error: Optional[OSError],
) -> NetSockError:
    if last_error is None:
        logger.error("%s: no candidates", action)
        return error_class(f"{action}: no usable address candidates")

    logger.error("%s: %s", action, last_error)
    error = error_class(f"{action} failed: {last_error}", errno=last_error.errno)
    error.__cause__ = last_error
    return error


def connect(candidates: Iterable[AddressCandidate], flags: int = 0) -> socket.socket:
    """
    Create a socket and connect it to the first candidate that accepts.

    If ``flags`` made the socket non-blocking, a connect that is still in
    progress (EINPROGRESS) counts as success; finishing it is the caller's
    job.

    Raises:
        ConnectError: No candidate could be connected.
        InvalidArgument: Flags not supported by this platform.
    """
    _check_flags(flags)
    last_error: Optional[OSError] = None

    for candidate in candidates:
        try:
            sock = _create(candidate, flags)
        except OSError as exc:
            logger.log(TRACE, "socket() for %s failed: %s", candidate, exc)
            last_error = exc
            continue

        try:
            sock.connect(candidate.address)
        except BlockingIOError as exc:
            if sock.gettimeout() == 0.0:
                logger.debug("Connect to %s in progress (fd %d)", candidate, sock.fileno())
                return sock
            logger.log(TRACE, "connect(%s) failed: %s", candidate, exc)
            last_error = exc
            sock.close()
            continue
        except OSError as exc:
            logger.log(TRACE, "connect(%s) failed: %s", candidate, exc)
            last_error = exc
            sock.close()
            continue

        logger.debug("Connected to %s (fd %d)", candidate, sock.fileno())
        return sock

    raise _exhausted(ConnectError, "connect", last_error)


def bind(
    candidates: Iterable[AddressCandidate],
    flags: int = 0,
    listen: bool = False,
) -> socket.socket:
    """
    Create a socket and bind it to the first candidate that accepts.

    Args:
        candidates: Resolver output, tried in order.
        flags: Creation flags OR'ed into the socket type.
        listen: Make stream sockets listeners (SO_REUSEADDR + listen).

    Raises:
        BindError: No candidate could be bound (or listened on).
        OptionError: SO_REUSEADDR was refused; nothing further was tried.
        InvalidArgument: Flags not supported by this platform.
    """
    _check_flags(flags)
    last_error: Optional[OSError] = None

    for candidate in candidates:
        try:
            sock = _create(candidate, flags)
        except OSError as exc:
            logger.log(TRACE, "socket() for %s failed: %s", candidate, exc)
            last_error = exc
            continue

        make_listener = listen and candidate.is_stream

        if make_listener:
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            except OSError as exc:
                logger.error("setsockopt(SO_REUSEADDR): %s", exc)
                sock.close()
                raise OptionError(
                    f"Cannot enable address reuse: {exc}", errno=exc.errno
                ) from exc

        try:
            sock.bind(candidate.address)
            if make_listener:
                sock.listen(BACKLOG)
        except OSError as exc:
            logger.log(TRACE, "bind(%s) failed: %s", candidate, exc)
            last_error = exc
            sock.close()
            continue

        if make_listener:
            logger.debug("Listening on %s (fd %d)", candidate, sock.fileno())
        else:
            logger.debug("Bound to %s (fd %d)", candidate, sock.fileno())
        return sock

    raise _exhausted(BindError, "bind", last_error)
