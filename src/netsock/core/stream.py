"""
=============================================================================
STREAM TRANSFER
=============================================================================

A single send() or recv() on a TCP socket moves AT MOST the bytes you asked
for. It may move fewer, and how many depends on kernel buffers, the network
and the peer:

    write_all(sock, b"HelloWorld")

        send(b"HelloWorld")   → 4     "Hell" went out
        send(b"oWorld")       → 6     the rest went out
        return 10

    read_all(sock, buf, 10)

        recv_into(buf[0:10])  → 3     "Hel"
        recv_into(buf[3:10])  → 7     "loWorld"
        return 10

Both functions keep calling the single-shot primitive on the REMAINING part
of the buffer until everything has moved. The "remaining part" is a
memoryview slice, so nothing is copied.

=============================================================================
HOW A LOOP ENDS
=============================================================================

    ┌──────────────────────────────┬──────────────────────────────────────┐
    │ Single-shot result           │ Outcome                              │
    ├──────────────────────────────┼──────────────────────────────────────┤
    │ all requested bytes moved    │ return length                        │
    │ 0 on a non-empty request     │ peer shut down: return bytes so far  │
    │ OSError (incl. timeout)      │ raise SendError / ReceiveError       │
    └──────────────────────────────┴──────────────────────────────────────┘

A short count is NOT an error: it means the other side closed the stream
cleanly. Compare the result with what you asked for if you need exactly N.
Errors carry ``transferred`` so callers can tell how far we got.
=============================================================================
"""

import numbers
import socket
import logging
from typing import Optional

from ..errors import InvalidArgument, ReceiveError, SendError
from ..log import ALL


logger = logging.getLogger(__name__)


def cursor(buffer, length: Optional[int], writable: bool) -> memoryview:
    """
    View the first ``length`` bytes of a caller-supplied buffer.

    Any bytes-like object works (bytes, bytearray, memoryview, array...).
    ``length`` defaults to the whole buffer.
    """
    try:
        view = memoryview(buffer).cast("B")
    except TypeError as exc:
        raise InvalidArgument(f"Not a contiguous bytes-like buffer: {exc}") from exc

    if writable and view.readonly:
        raise InvalidArgument("Buffer is read-only")

    if length is None:
        return view
    if isinstance(length, bool) or not isinstance(length, numbers.Integral):
        raise InvalidArgument(f"Length must be a whole number of bytes, got {length!r}")
    if length < 0 or length > view.nbytes:
        raise InvalidArgument(
            f"Length {length} out of range for a {view.nbytes}-byte buffer"
        )
    return view[:length]


def write_all(handle: socket.socket, buffer, length: Optional[int] = None) -> int:
    """
    Send ``length`` bytes of ``buffer`` (default: all of it).

    Returns:
        Bytes sent. Fewer than requested only if the socket stopped
        accepting data without reporting an error.

    Raises:
        SendError: The platform send failed (``transferred`` = bytes sent).
        InvalidArgument: Bad buffer or length.
    """
    view = cursor(buffer, length, writable=False)
    total = view.nbytes
    sent = 0

    while sent < total:
        try:
            count = handle.send(view[sent:])
        except OSError as exc:
            logger.error("send (fd %d): %s", handle.fileno(), exc)
            raise SendError(
                f"send failed after {sent}/{total} bytes: {exc}",
                errno=exc.errno,
                transferred=sent,
            ) from exc

        if count == 0:
            logger.warning("send (fd %d): no progress after %d/%d bytes",
                           handle.fileno(), sent, total)
            break
        sent += count

    logger.log(ALL, "write %d: %d/%dB", handle.fileno(), sent, total)
    return sent


def read_all(handle: socket.socket, buffer, length: Optional[int] = None) -> int:
    """
    Fill ``length`` bytes of ``buffer`` (default: all of it) from the socket.

    Returns:
        Bytes received. Fewer than requested means the peer shut down.

    Raises:
        ReceiveError: The platform receive failed or timed out
                      (``transferred`` = bytes already stored in buffer).
        InvalidArgument: Bad buffer or length.
    """
    view = cursor(buffer, length, writable=True)
    total = view.nbytes
    received = 0

    while received < total:
        try:
            count = handle.recv_into(view[received:])
        except OSError as exc:
            logger.error("recv (fd %d): %s", handle.fileno(), exc)
            raise ReceiveError(
                f"recv failed after {received}/{total} bytes: {exc}",
                errno=exc.errno,
                transferred=received,
            ) from exc

        if count == 0:
            logger.debug("recv (fd %d): peer closed after %d/%d bytes",
                          handle.fileno(), received, total)
            break
        received += count

    logger.log(ALL, "read stream %d: %d/%dB", handle.fileno(), received, total)
    return received


def recv_exact(handle: socket.socket, size: int) -> bytes:
    """read_all() into a fresh buffer; the result is short on peer shutdown."""
    buffer = bytearray(size)
    count = read_all(handle, buffer)
    return bytes(buffer[:count])
