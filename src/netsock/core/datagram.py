"""
=============================================================================
DATAGRAM TRANSFER
=============================================================================

UDP has no connection and no stream: every sendto() is one message, every
recvfrom() returns one message plus who sent it. So there is nothing to
loop over here. Each function does exactly one transfer call.

SENDING
───────

    send_to(sock, b"ping", "localhost", "9999")
        │
        ├──► getsockname()        what family is THIS socket?
        ├──► getaddrinfo(..., family=<that family>, SOCK_DGRAM)
        └──► sendto() each candidate in order, stop at the first success

The resolution is constrained to the socket's own family. An IPv4 socket
asked to send to "localhost" must not be handed ::1 first.

RECEIVING
─────────

    recv_from(sock, buf)
        │
        ├──► recvfrom_into(buf)            → (12, ('127.0.0.1', 54321))
        └──► getnameinfo(NUMERICHOST | NUMERICSERV)
                                           → ('127.0.0.1', '54321')

The peer is reported as NUMERIC strings. We never do a reverse DNS lookup:
that could block on a name server that has nothing to do with the message
we just received. If even the numeric conversion fails, that is a
ResolutionError. A message whose sender we cannot name is not reported as
a success.
=============================================================================
"""

import socket
import logging
from typing import Optional, Tuple, Union

from ..errors import ReceiveError, ResolutionError, SendError
from ..log import ALL
from .resolver import EndpointSpec, Family, SockType, resolve
from .stream import cursor


logger = logging.getLogger(__name__)


_NUMERIC = socket.NI_NUMERICHOST | socket.NI_NUMERICSERV


def send_to(
    handle: socket.socket,
    buffer,
    hostname: str,
    service: Union[str, int],
    length: Optional[int] = None,
    flags: int = 0,
) -> int:
    """
    Send one datagram to (hostname, service).

    ``flags`` are MSG_* values passed straight to sendto().

    Returns:
        Bytes sent.

    Raises:
        ResolutionError: The destination could not be resolved.
        SendError: getsockname failed, or every candidate refused the send.
    """
    view = cursor(buffer, length, writable=False)

    try:
        handle.getsockname()
    except OSError as exc:
        logger.error("getsockname (fd %d): %s", handle.fileno(), exc)
        raise SendError(f"getsockname failed: {exc}", errno=exc.errno) from exc

    spec = EndpointSpec(hostname, service, Family.of(handle.family), SockType.UDP)
    candidates = resolve(spec)

    last_error: Optional[OSError] = None
    for candidate in candidates:
        try:
            sent = handle.sendto(view, flags, candidate.address)
        except OSError as exc:
            logger.debug("sendto %s (fd %d): %s", candidate, handle.fileno(), exc)
            last_error = exc
            continue

        logger.log(ALL, "sendto %d → %s: %d/%dB",
                   handle.fileno(), candidate, sent, view.nbytes)
        return sent

    logger.error("sendto %s:%s (fd %d): %s", hostname, service, handle.fileno(), last_error)
    raise SendError(
        f"sendto {hostname}:{service} failed: {last_error}",
        errno=getattr(last_error, "errno", None),
    ) from last_error


def recv_from(
    handle: socket.socket,
    buffer,
    length: Optional[int] = None,
    flags: int = 0,
) -> Tuple[int, str, str]:
    """
    Receive one datagram into ``buffer``.

    A datagram larger than the buffer is truncated by the platform.
    ``flags`` are MSG_* values passed to recvfrom(); MSG_PEEK leaves the
    datagram queued for the next call.

    Returns:
        (bytes_received, peer_host, peer_service), both peer fields numeric.

    Raises:
        ReceiveError: The receive failed or timed out.
        ResolutionError: The sender's address could not be converted.
    """
    view = cursor(buffer, length, writable=True)

    try:
        size, address = handle.recvfrom_into(view, 0, flags)
    except OSError as exc:
        logger.error("recvfrom (fd %d): %s", handle.fileno(), exc)
        raise ReceiveError(f"recvfrom failed: {exc}", errno=exc.errno) from exc

    if not address:
        logger.error("recvfrom (fd %d): no peer address", handle.fileno())
        raise ResolutionError("Received a datagram without a peer address")

    try:
        host, service = socket.getnameinfo(address, _NUMERIC)
    except OSError as exc:
        reason = exc.strerror or str(exc)
        logger.error("getnameinfo: %s", reason)
        raise ResolutionError(
            f"Cannot convert peer address {address!r}: {reason}", errno=exc.errno
        ) from exc

    logger.log(ALL, "recvfrom %d ← %s:%s: %d/%dB",
               handle.fileno(), host, service, size, view.nbytes)
    return size, host, service


def read_dgram(handle: socket.socket, size: int) -> bytes:
    """
    One recv() on a connected datagram socket.

    Returns whatever single message arrived, truncated to ``size``.
    """
    try:
        data = handle.recv(size)
    except OSError as exc:
        logger.error("recv (fd %d): %s", handle.fileno(), exc)
        raise ReceiveError(f"recv failed: {exc}", errno=exc.errno) from exc

    logger.log(ALL, "read dgram %d: %d/%dB", handle.fileno(), len(data), size)
    return data
