"""
=============================================================================
CONFIGURATION
=============================================================================

Settings for programs built on netsock (the bundled CLI among them). The
socket layer itself takes everything as function arguments; this dataclass
is where an application collects those arguments in one place.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m netsock --timeout 2000 ...                       │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── NETSOCK_RECV_TIMEOUT=2000 python -m netsock ...            │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Validation happens once, at startup, so a typo in an environment variable
fails immediately instead of at the first socket call.
=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional

from .core.resolver import Family
from .log import parse_level


_FAMILIES = {
    "4": Family.IPV4,
    "6": Family.IPV6,
    "any": Family.ANY,
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_bool(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None or value.strip().lower() == "auto":
        return None
    value = value.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass
class NetSockConfig:
    """
    Configuration for a netsock program.

    LOGGING
    - log_level, log_file, log_color

    SOCKETS
    - family, recv_timeout_ms, send_timeout_ms, buffer_size
    """

    log_level: str = "INFO"
    """INFO by default. TRACE and ALL show every candidate and transfer."""

    log_file: Optional[str] = None
    """Append log lines to this file instead of stdout."""

    log_color: Optional[bool] = None
    """Colour level names. None = only when writing to a terminal."""

    family: str = "4"
    """'4', '6' or 'any'. IPv4 by default."""

    recv_timeout_ms: int = 0
    """Receive (and accept) timeout in milliseconds. 0 = wait forever."""

    send_timeout_ms: int = 0
    """Send timeout in milliseconds. 0 = wait forever."""

    buffer_size: int = 65536
    """Receive buffer size for datagrams, in bytes."""

    @property
    def family_selector(self) -> Family:
        return _FAMILIES[self.family.lower()]

    @classmethod
    def from_env(cls) -> "NetSockConfig":
        """
        Create configuration from environment variables.

        NETSOCK_LOG_LEVEL      Logging level (default: INFO)
        NETSOCK_LOG_FILE       Log file path (default: stdout)
        NETSOCK_LOG_COLOR      true / false / auto (default: auto)
        NETSOCK_FAMILY         4, 6 or any (default: 4)
        NETSOCK_RECV_TIMEOUT   Receive timeout, ms (default: 0)
        NETSOCK_SEND_TIMEOUT   Send timeout, ms (default: 0)
        NETSOCK_BUFFER_SIZE    Datagram buffer size (default: 65536)
        """
        return cls(
            log_level=os.getenv("NETSOCK_LOG_LEVEL", "INFO"),
            log_file=os.getenv("NETSOCK_LOG_FILE") or None,
            log_color=_env_bool("NETSOCK_LOG_COLOR"),
            family=os.getenv("NETSOCK_FAMILY", "4"),
            recv_timeout_ms=int(os.getenv("NETSOCK_RECV_TIMEOUT", "0")),
            send_timeout_ms=int(os.getenv("NETSOCK_SEND_TIMEOUT", "0")),
            buffer_size=int(os.getenv("NETSOCK_BUFFER_SIZE", "65536")),
        )

    def validate(self) -> None:
        """Raise ValueError on the first bad setting."""
        parse_level(self.log_level)

        if self.family.lower() not in _FAMILIES:
            raise ValueError(f"Invalid family: {self.family!r}. Must be 4, 6 or any.")

        if self.recv_timeout_ms < 0:
            raise ValueError("recv_timeout_ms must be >= 0")

        if self.send_timeout_ms < 0:
            raise ValueError("send_timeout_ms must be >= 0")

        if not 1 <= self.buffer_size <= 65536:
            raise ValueError("buffer_size must be between 1 and 65536")
