"""
=============================================================================
CORE SOCKET LAYER
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          ENDPOINTS                                  │
    │  resolve_and_connect / resolve_and_listen / accept                  │
    └──────────────┬───────────────────────────────┬──────────────────────┘
                   │                               │
                   ▼                               ▼
    ┌──────────────────────────┐      ┌──────────────────────────────────┐
    │        RESOLVER          │ ───► │            FACTORY               │
    │  (host, service) →       │      │  first candidate that connects   │
    │  ordered candidates      │      │  or binds wins                   │
    └──────────────────────────┘      └──────────────────────────────────┘

    Once a caller holds a socket:

    ┌──────────────┐  ┌──────────────┐  ┌──────────────┐  ┌──────────────┐
    │   OPTIONS    │  │    STREAM    │  │   DATAGRAM   │  │    HANDLE    │
    │ set_timeout  │  │  write_all   │  │   send_to    │  │    close     │
    │              │  │  read_all    │  │   recv_from  │  │              │
    └──────────────┘  └──────────────┘  └──────────────┘  └──────────────┘

Everything is blocking and single-threaded. Nothing here retries.
=============================================================================
"""

from .resolver import AddressCandidate, EndpointSpec, Family, SockType, resolve
from .factory import BACKLOG, bind, connect
from .endpoints import (
    accept,
    bind_stream,
    connect_dgram,
    connect_stream,
    resolve_and_connect,
    resolve_and_listen,
)
from .stream import read_all, recv_exact, write_all
from .datagram import read_dgram, recv_from, send_to
from .options import Direction, get_timeout, set_recv_timeout, set_send_timeout, set_timeout
from .handle import Shutdown, close, is_valid, shutdown

__all__ = [
    "AddressCandidate",
    "EndpointSpec",
    "Family",
    "SockType",
    "resolve",
    "BACKLOG",
    "bind",
    "connect",
    "accept",
    "bind_stream",
    "connect_dgram",
    "connect_stream",
    "resolve_and_connect",
    "resolve_and_listen",
    "read_all",
    "recv_exact",
    "write_all",
    "read_dgram",
    "recv_from",
    "send_to",
    "Direction",
    "get_timeout",
    "set_recv_timeout",
    "set_send_timeout",
    "set_timeout",
    "Shutdown",
    "close",
    "is_valid",
    "shutdown",
]
