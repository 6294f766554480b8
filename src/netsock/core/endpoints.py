"""
=============================================================================
CLIENT AND LISTENER CONSTRUCTION
=============================================================================

The entry points most callers need. Each one composes the resolver and the
factory for a common case:

    resolve_and_connect("example.com", "80")
        └──► resolve(...) ──► factory.connect(...) ──► connected socket

    resolve_and_listen(None, "8080")
        └──► resolve(..., passive=True) ──► factory.bind(..., listen=True)

    accept(listener)
        └──► listener.accept() ──► new connected socket

TYPICAL SERVER SHAPE:
─────────────────────

    listener = resolve_and_listen(None, "8080", Family.IPV4)
    while True:
        client = accept(listener)        # blocks (or times out)
        hand_off(client)                 # one owner per handle
    close(listener)

This layer has no accept loop of its own and no threads. Handing accepted
sockets to workers is the caller's business.
=============================================================================
"""

import socket
import logging
from typing import Optional, Union

from ..errors import AcceptError
from .factory import bind, connect
from .resolver import EndpointSpec, Family, SockType, resolve


logger = logging.getLogger(__name__)


def resolve_and_connect(
    hostname: Optional[str],
    service: Union[str, int],
    family: Family = Family.IPV4,
    socktype: SockType = SockType.TCP,
    flags: int = 0,
    numeric_host: bool = False,
) -> socket.socket:
    """
    Resolve a remote endpoint and connect a stream or datagram socket to it.

    A connected datagram socket simply has a default peer; use it with
    write_all()/read_dgram() instead of send_to()/recv_from().

    Raises:
        ResolutionError: The name could not be resolved. No socket exists.
        ConnectError: Every candidate refused.
        InvalidArgument: Bad selector or unsupported flags.
    """
    spec = EndpointSpec(hostname, service, family, socktype, flags, numeric_host)
    candidates = resolve(spec)
    return connect(candidates, flags)


def resolve_and_listen(
    hostname: Optional[str],
    service: Union[str, int],
    family: Family = Family.ANY,
    socktype: SockType = SockType.TCP,
    flags: int = 0,
) -> socket.socket:
    """
    Resolve a local endpoint and build a server socket on it.

    Stream sockets come back bound AND listening with a backlog of 5.
    Datagram sockets come back bound, ready for recv_from().

    Args:
        hostname: Local address to bind. None means every interface.
        service: Port or service name. 0 asks the OS for a free port.

    Raises:
        ResolutionError, BindError, OptionError, InvalidArgument
    """
    spec = EndpointSpec(hostname, service, family, socktype, flags)
    candidates = resolve(spec, passive=True)
    sock = bind(candidates, flags, listen=True)

    logger.info("Listening on %s (%s)", _describe(sock), SockType(socktype).name)
    return sock


def accept(listener: socket.socket) -> socket.socket:
    """
    Accept one pending connection.

    The peer's address is not returned. If a receive timeout was set on the
    listener and nobody connects in time, AcceptError is raised with
    ``timed_out`` set.
    """
    logger.debug("Accepting new connection (fd %d)", listener.fileno())
    try:
        client, _ = listener.accept()
    except OSError as exc:
        logger.error("accept (fd %d): %s", listener.fileno(), exc)
        raise AcceptError(f"accept failed: {exc}", errno=exc.errno) from exc

    logger.debug("Accepted fd %d", client.fileno())
    return client


# ─────────────────────────────────────────────────────────────────────────
# SHORTCUTS
# ─────────────────────────────────────────────────────────────────────────
# IPv4 only, and clients take literal addresses (no DNS lookups).

def connect_stream(host: str, service: Union[str, int]) -> socket.socket:
    return resolve_and_connect(host, service, Family.IPV4, SockType.TCP, numeric_host=True)


def connect_dgram(host: str, service: Union[str, int]) -> socket.socket:
    return resolve_and_connect(host, service, Family.IPV4, SockType.UDP, numeric_host=True)


def bind_stream(service: Union[str, int]) -> socket.socket:
    return resolve_and_listen(None, service, Family.IPV4, SockType.TCP)


def _describe(sock: socket.socket) -> str:
    try:
        address = sock.getsockname()
    except OSError:
        return f"fd {sock.fileno()}"
    if sock.family == socket.AF_INET6:
        return f"[{address[0]}]:{address[1]}"
    return f"{address[0]}:{address[1]}"
