"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every failure in netsock is raised as a subclass of NetSockError. The
platform's own OSError is chained as ``__cause__`` (``raise ... from exc``)
so nothing is lost when we translate it.

    NetSockError
    ├── ResolutionError      name/service lookup or numeric peer conversion
    ├── ConnectError         no candidate could be connected
    ├── BindError            no candidate could be bound (or listened on)
    ├── AcceptError          accept() failed, including receive timeouts
    ├── OptionError          setsockopt/getsockopt rejected by the platform
    ├── TransferError        send/receive primitive failed
    │   ├── SendError
    │   └── ReceiveError
    └── InvalidArgument      caller error, also a ValueError

Nothing in this package retries. If you want a reconnect loop, you write
it around these exceptions.
"""

from typing import Optional

from .backends import backend


class NetSockError(Exception):
    """
    Base class for all netsock errors.

    Attributes:
        message: Human-readable description.
        errno: The platform error number, when there was one.
    """

    def __init__(self, message: str, errno: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.errno = errno

    @property
    def timed_out(self) -> bool:
        """True when the underlying failure was a configured timeout firing."""
        cause = self.__cause__
        return isinstance(cause, OSError) and backend.is_timeout_error(cause)


class ResolutionError(NetSockError):
    """A hostname or service could not be resolved."""


class ConnectError(NetSockError):
    """Every resolved candidate failed to connect."""


class BindError(NetSockError):
    """Every resolved candidate failed to bind or listen."""


class AcceptError(NetSockError):
    """accept() on a listener failed."""


class OptionError(NetSockError):
    """The platform rejected a socket option."""


class TransferError(NetSockError):
    """
    A send or receive primitive failed mid-transfer.

    ``transferred`` is how many bytes had already moved when it failed.
    """

    def __init__(self, message: str, errno: Optional[int] = None, transferred: int = 0):
        super().__init__(message, errno)
        self.transferred = transferred


class SendError(TransferError):
    """Sending failed."""


class ReceiveError(TransferError):
    """Receiving failed."""


class InvalidArgument(NetSockError, ValueError):
    """The caller passed something this layer refuses to forward."""
