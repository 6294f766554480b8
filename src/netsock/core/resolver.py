"""
=============================================================================
ADDRESS RESOLVER
=============================================================================

Turns a (hostname, service) pair into the list of concrete endpoints we can
try, using the platform's getaddrinfo().

    resolve(EndpointSpec("localhost", "8080", Family.ANY, SockType.TCP))
        │
        ▼
    getaddrinfo("localhost", "8080", AF_UNSPEC, SOCK_STREAM)
        │
        ▼
    [ AddressCandidate(AF_INET6, SOCK_STREAM, 6, ('::1', 8080, 0, 0)),
      AddressCandidate(AF_INET,  SOCK_STREAM, 6, ('127.0.0.1', 8080)) ]

The order is whatever the platform resolver returned (on Linux it follows
/etc/gai.conf). We never re-sort it: the factory simply walks the list and
the first candidate that works wins.

=============================================================================
SELECTORS
=============================================================================

Callers pick families and socket types with small enums instead of raw
AF_* / SOCK_* constants:

    Family.IPV4  → AF_INET        SockType.TCP → SOCK_STREAM
    Family.IPV6  → AF_INET6       SockType.UDP → SOCK_DGRAM
    Family.ANY   → AF_UNSPEC

An unknown selector is rejected before any system call is made.
=============================================================================
"""

import numbers
import socket
import logging
from enum import IntEnum
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from ..errors import InvalidArgument, ResolutionError
from ..log import TRACE


logger = logging.getLogger(__name__)


MAX_PORT = 65535


class Family(IntEnum):
    """Address family selector."""
    IPV4 = 0x04
    IPV6 = 0x08
    ANY = 0x0C   # IPV4 | IPV6

    @property
    def address_family(self) -> int:
        return _ADDRESS_FAMILIES[self]

    @classmethod
    def of(cls, address_family: int) -> "Family":
        """Selector matching a concrete AF_INET / AF_INET6 value."""
        for selector, value in _ADDRESS_FAMILIES.items():
            if value == address_family and selector is not cls.ANY:
                return selector
        raise InvalidArgument(f"Unsupported address family: {address_family!r}")


class SockType(IntEnum):
    """Socket type selector."""
    TCP = 0x01
    UDP = 0x02

    @property
    def kind(self) -> int:
        return _SOCKET_KINDS[self]


_ADDRESS_FAMILIES = {
    Family.IPV4: socket.AF_INET,
    Family.IPV6: socket.AF_INET6,
    Family.ANY: socket.AF_UNSPEC,
}

_SOCKET_KINDS = {
    SockType.TCP: socket.SOCK_STREAM,
    SockType.UDP: socket.SOCK_DGRAM,
}


def family_selector(value: Union[Family, int]) -> Family:
    try:
        return Family(value)
    except ValueError:
        raise InvalidArgument(f"Unsupported family selector: {value!r}") from None


def socktype_selector(value: Union[SockType, int]) -> SockType:
    try:
        return SockType(value)
    except ValueError:
        raise InvalidArgument(f"Unsupported type selector: {value!r}") from None


def check_port(service: Union[str, int, None]) -> None:
    """
    Reject numeric services outside 0..65535.

    glibc wraps them modulo 65536 instead of failing, so port 70000 would
    quietly become 4464.
    """
    if isinstance(service, bool):
        raise InvalidArgument(f"Service must be a port or a name, got {service!r}")
    if isinstance(service, numbers.Integral):
        port = int(service)
    elif isinstance(service, str) and service.strip().isdigit():
        port = int(service)
    else:
        return
    if not 0 <= port <= MAX_PORT:
        raise InvalidArgument(f"Port {service!r} out of range 0..{MAX_PORT}")


@dataclass(frozen=True)
class EndpointSpec:
    """
    What the caller asked for: one resolve-and-connect/bind attempt.

    Attributes:
        hostname: Host to resolve. None means "any local address" for binds.
        service: Numeric port (int or str) or a service name like "http".
        family: Address family selector.
        socktype: Socket type selector.
        flags: Creation flags OR'ed into the socket type (e.g. SOCK_CLOEXEC).
        numeric_host: Refuse to do a name lookup; hostname must be a literal
                      IP address.
    """
    hostname: Optional[str]
    service: Union[str, int]
    family: Family = Family.ANY
    socktype: SockType = SockType.TCP
    flags: int = 0
    numeric_host: bool = False


@dataclass(frozen=True)
class AddressCandidate:
    """One resolved endpoint, exactly as getaddrinfo described it."""
    family: socket.AddressFamily
    socktype: socket.SocketKind
    protocol: int
    address: Any
    canonname: str = ""

    @classmethod
    def from_addrinfo(cls, info: tuple) -> "AddressCandidate":
        family, socktype, protocol, canonname, address = info
        return cls(family, socktype, protocol, address, canonname)

    @property
    def is_stream(self) -> bool:
        return self.socktype == socket.SOCK_STREAM

    def __str__(self) -> str:
        host, port = self.address[0], self.address[1]
        if self.family == socket.AF_INET6:
            return f"[{host}]:{port}"
        return f"{host}:{port}"


def resolve(spec: EndpointSpec, passive: bool = False) -> List[AddressCandidate]:
    """
    Resolve an endpoint into an ordered list of candidates.

    Args:
        spec: The endpoint to resolve.
        passive: Resolve for bind() rather than connect(). With a None
                 hostname this yields the wildcard address.

    Returns:
        At least one candidate, in platform resolver order.

    Raises:
        InvalidArgument: Unknown family or type selector, or a numeric
                         port out of range.
        ResolutionError: getaddrinfo failed or found nothing.
    """
    family = family_selector(spec.family)
    socktype = socktype_selector(spec.socktype)
    check_port(spec.service)

    flags = 0
    if passive:
        flags |= socket.AI_PASSIVE
    if spec.numeric_host:
        flags |= socket.AI_NUMERICHOST

    logger.log(TRACE, "getaddrinfo(%r, %r, %s, %s)",
               spec.hostname, spec.service, family.name, socktype.name)

    try:
        infos = socket.getaddrinfo(
            spec.hostname, spec.service,
            family.address_family, socktype.kind, 0, flags,
        )
    except socket.gaierror as exc:
        reason = exc.strerror or str(exc)
        logger.error("getaddrinfo: %s", reason)
        raise ResolutionError(
            f"Cannot resolve {spec.hostname or '*'}:{spec.service}: {reason}",
            errno=exc.errno,
        ) from exc
    except UnicodeError as exc:
        # Labels IDNA cannot encode (empty, too long) never reach the resolver
        logger.error("getaddrinfo: %s", exc)
        raise ResolutionError(f"Cannot resolve {spec.hostname!r}: {exc}") from exc

    if not infos:
        raise ResolutionError(f"No addresses for {spec.hostname or '*'}:{spec.service}")

    candidates = [AddressCandidate.from_addrinfo(info) for info in infos]
    logger.log(TRACE, "Resolved %d candidate(s): %s",
               len(candidates), ", ".join(str(c) for c in candidates))
    return candidates
