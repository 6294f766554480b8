"""
=============================================================================
NETSOCK - Blocking TCP/UDP Sockets Without the Platform Noise
=============================================================================

A small procedural layer over the operating system's socket API. It hides
the POSIX/Windows differences and turns "send/receive once" into
"transfer exactly N bytes or fail".

=============================================================================
QUICK START
=============================================================================

    import netsock
    from netsock import Family, SockType

    # Server
    listener = netsock.resolve_and_listen(None, "9000", Family.IPV4)
    netsock.set_timeout(listener, netsock.Direction.RECEIVE, 5000)
    client = netsock.accept(listener)

    buf = bytearray(5)
    netsock.read_all(client, buf)           # exactly 5 bytes (or peer closed)

    netsock.close(client)
    netsock.close(listener)

    # Client
    sock = netsock.resolve_and_connect("127.0.0.1", "9000")
    netsock.write_all(sock, b"hello")
    netsock.close(sock)

    # Datagrams
    udp = netsock.resolve_and_listen("127.0.0.1", 0, Family.IPV4, SockType.UDP)
    netsock.send_to(udp, b"ping", "127.0.0.1", "9001")
    size, host, port = netsock.recv_from(udp, bytearray(1500))

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    netsock/
    ├── __init__.py          # This file - public API
    ├── __main__.py          # CLI (python -m netsock)
    ├── config.py            # NetSockConfig dataclass
    ├── errors.py            # Exception hierarchy
    ├── log.py               # Logging sink (start/end, formatter)
    ├── backends/            # One module per platform family
    │   ├── posix.py
    │   └── windows.py
    └── core/
        ├── resolver.py      # getaddrinfo → candidates
        ├── factory.py       # candidates → one socket
        ├── endpoints.py     # connect / listen / accept entry points
        ├── stream.py        # write_all / read_all
        ├── datagram.py      # send_to / recv_from
        ├── options.py       # timeouts
        └── handle.py        # close / shutdown
=============================================================================
"""

__version__ = "1.0.0"

from .errors import (
    AcceptError,
    BindError,
    ConnectError,
    InvalidArgument,
    NetSockError,
    OptionError,
    ReceiveError,
    ResolutionError,
    SendError,
    TransferError,
)
from .config import NetSockConfig
from .core import (
    BACKLOG,
    AddressCandidate,
    Direction,
    EndpointSpec,
    Family,
    Shutdown,
    SockType,
    accept,
    bind,
    bind_stream,
    close,
    connect,
    connect_dgram,
    connect_stream,
    get_timeout,
    is_valid,
    read_all,
    read_dgram,
    recv_exact,
    recv_from,
    resolve,
    resolve_and_connect,
    resolve_and_listen,
    send_to,
    set_recv_timeout,
    set_send_timeout,
    set_timeout,
    shutdown,
    write_all,
)

__all__ = [
    # Errors
    "AcceptError",
    "BindError",
    "ConnectError",
    "InvalidArgument",
    "NetSockError",
    "OptionError",
    "ReceiveError",
    "ResolutionError",
    "SendError",
    "TransferError",
    # Types and selectors
    "AddressCandidate",
    "EndpointSpec",
    "Family",
    "SockType",
    "Direction",
    "Shutdown",
    "BACKLOG",
    # Construction
    "resolve",
    "connect",
    "bind",
    "resolve_and_connect",
    "resolve_and_listen",
    "accept",
    "connect_stream",
    "connect_dgram",
    "bind_stream",
    # Transfer
    "write_all",
    "read_all",
    "recv_exact",
    "send_to",
    "recv_from",
    "read_dgram",
    # Options and lifecycle
    "set_timeout",
    "get_timeout",
    "set_recv_timeout",
    "set_send_timeout",
    "shutdown",
    "close",
    "is_valid",
    # Configuration
    "NetSockConfig",
    "__version__",
]
