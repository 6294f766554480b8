"""
=============================================================================
PLATFORM BACKENDS
=============================================================================

POSIX and Windows sockets agree on almost everything Python exposes, but a
handful of details still differ:

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Concern              │ POSIX                  │ Windows             │
    ├─────────────────────────────────────────────────────────────────────┤
    │ SO_RCVTIMEO value    │ struct timeval         │ DWORD milliseconds  │
    │ Creation flags       │ OR'ed into the type    │ not supported       │
    │ "timed out" errors   │ EAGAIN / ETIMEDOUT     │ WSAETIMEDOUT        │
    └─────────────────────────────────────────────────────────────────────┘

Each backend module exposes the SAME names:

    NAME                          "posix" or "windows"
    SUPPORTS_CREATION_FLAGS       bool
    socket_type(kind, flags)      type argument for socket.socket()
    set_timeout_option(sock, option, milliseconds)
    get_timeout_option(sock, option) -> milliseconds
    is_timeout_error(exc) -> bool

The backend is chosen ONCE, when this package is imported. Nothing else in
netsock looks at sys.platform.
"""

import sys

if sys.platform == "win32":
    from . import windows as backend
else:
    from . import posix as backend

__all__ = ["backend"]
