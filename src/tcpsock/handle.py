"""Reference-counted ownership of an OS socket handle."""

import logging
import socket
import threading
from typing import Optional

from tcpsock.errors import CloseError, translate
from tcpsock.system import SocketAPI, default_api

logger = logging.getLogger(__name__)


class SharedHandle:
    """
    Owner of one OS socket, closed exactly once.

    Every holder takes a reference with :meth:`acquire` and gives it back
    with :meth:`release`; the socket is closed when the last reference is
    released. A new handle starts with a single reference.
    """

    def __init__(self, sock: socket.socket, api: Optional[SocketAPI] = None):
        """
        Initialize the handle.

        Args:
            sock: Socket to take ownership of
            api: Socket API used to close it (defaults to the platform API)
        """
        self._sock = sock
        self._api = api if api is not None else default_api
        self._refs = 1
        self._lock = threading.Lock()

    @property
    def socket(self) -> socket.socket:
        return self._sock

    @property
    def refs(self) -> int:
        return self._refs

    @property
    def closed(self) -> bool:
        return self._refs == 0

    def fileno(self) -> int:
        return self._sock.fileno()

    def acquire(self) -> "SharedHandle":
        """
        Take an additional reference.

        Returns:
            self, for passing to the new holder

        Raises:
            CloseError: If the handle has already been closed
        """
        with self._lock:
            if self._refs == 0:
                raise CloseError("Socket handle already closed")
            self._refs += 1
        return self

    def release(self) -> bool:
        """
        Give back one reference, closing the socket on the last one.

        Returns:
            True if this call closed the socket

        Raises:
            CloseError: If the handle is already closed or the OS close fails
        """
        with self._lock:
            if self._refs == 0:
                raise CloseError("Socket handle already closed")
            self._refs -= 1
            if self._refs:
                return False
        logger.debug("Closing socket fd=%s", self._sock.fileno())
        with translate(CloseError, "Error closing socket"):
            self._api.close(self._sock)
        return True

    def __repr__(self) -> str:
        return f"SharedHandle(sock={self._sock!r}, refs={self._refs})"
