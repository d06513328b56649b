"""Error taxonomy for socket operations."""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Type

_state = threading.local()


class TcpSockError(Exception):
    """Base class for every error raised by tcpsock."""

    def __init__(self, message: str, errno: Optional[int] = None):
        """
        Initialize the error.

        Args:
            message: Human-readable description of the failed operation
            errno: Platform error code reported by the OS, if any
        """
        self.message = message
        self.errno = errno
        if errno is not None:
            message = f"{message} (errno {errno})"
        super().__init__(message)


class InvalidAddressError(TcpSockError):
    """Host is not a dotted quad or wildcard token, or port is out of range."""


class SocketCreateError(TcpSockError):
    """The OS refused to allocate a socket, or platform startup failed."""


class SocketOptionError(TcpSockError):
    """A socket option was rejected."""


class BindError(TcpSockError):
    """Binding to the local address failed."""


class ListenError(TcpSockError):
    """Marking the socket as listening failed."""


class AcceptError(TcpSockError):
    """Accepting a pending connection failed."""


class ConnectError(TcpSockError):
    """Connecting to the remote address failed."""


class SendError(TcpSockError):
    """Writing to the socket failed."""


class ReceiveError(TcpSockError):
    """Reading from the socket failed."""


class CloseError(TcpSockError):
    """Closing the socket failed."""


class RoleError(TcpSockError):
    """Operation invoked on an endpoint of the wrong role."""


def get_last_error() -> int:
    """
    Get the last platform error code recorded on the calling thread.

    Returns:
        errno of the most recent failed OS call, or 0 if none failed yet
    """
    return getattr(_state, "errno", 0)


def _record(errno: Optional[int]) -> None:
    _state.errno = errno or 0


@contextmanager
def translate(error_class: Type[TcpSockError], message: str) -> Iterator[None]:
    """
    Translate an OSError raised inside the block into a tcpsock error.

    Args:
        error_class: Error type to raise
        message: Message for the raised error

    Raises:
        error_class: If the block raised OSError
    """
    try:
        yield
    except OSError as exc:
        _record(exc.errno)
        raise error_class(message, exc.errno) from exc
