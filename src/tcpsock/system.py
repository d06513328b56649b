"""Capability interface over the OS socket primitives.

Everything that touches the platform socket API goes through
:class:`SocketAPI`, so endpoints and connections can be exercised with a
substitute implementation. The process-wide network stack lifecycle lives
here as well.
"""

import atexit
import logging
import socket
import threading
from typing import Tuple

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_started = False


def startup() -> None:
    """
    Initialize the platform network stack once per process.

    Safe to call any number of times; only the first call does work.
    Teardown is registered to run at interpreter exit.

    Raises:
        OSError: If the platform has no IPv4 stream socket support
    """
    global _started
    with _lock:
        if _started:
            return
        if not hasattr(socket, "AF_INET") or not hasattr(socket, "SOCK_STREAM"):
            raise OSError("IPv4 stream sockets are not supported on this platform")
        atexit.register(teardown)
        _started = True
    logger.debug("Network stack started")


def teardown() -> None:
    """Mark the network stack as shut down."""
    global _started
    with _lock:
        if not _started:
            return
        atexit.unregister(teardown)
        _started = False
    logger.debug("Network stack torn down")


def is_started() -> bool:
    """Return True if startup() has run and teardown() has not."""
    return _started


class SocketAPI:
    """Thin pass-through to the ``socket`` module for IPv4 stream sockets."""

    def startup(self) -> None:
        startup()

    def create(self) -> socket.socket:
        """Allocate a blocking IPv4 stream socket."""
        return socket.socket(socket.AF_INET, socket.SOCK_STREAM)

    def set_reuse_address(self, sock: socket.socket) -> None:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

    def bind(self, sock: socket.socket, address: Tuple[str, int]) -> None:
        sock.bind(address)

    def listen(self, sock: socket.socket, backlog: int) -> None:
        sock.listen(backlog)

    def local_address(self, sock: socket.socket) -> Tuple[str, int]:
        return sock.getsockname()

    def accept(self, sock: socket.socket) -> Tuple[socket.socket, Tuple[str, int]]:
        return sock.accept()

    def connect(self, sock: socket.socket, address: Tuple[str, int]) -> None:
        sock.connect(address)

    def send(self, sock: socket.socket, data: bytes) -> int:
        return sock.send(data)

    def recv_into(self, sock: socket.socket, buffer, nbytes: int) -> int:
        return sock.recv_into(buffer, nbytes)

    def close(self, sock: socket.socket) -> None:
        sock.close()


default_api = SocketAPI()
