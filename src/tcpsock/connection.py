"""One established TCP peer."""

import logging
import socket
from typing import Optional, Union

from tcpsock.address import AddressBinding
from tcpsock.errors import CloseError, ReceiveError, SendError, translate
from tcpsock.handle import SharedHandle
from tcpsock.system import SocketAPI, default_api

logger = logging.getLogger(__name__)

BUFFER_SIZE = 4096

Data = Union[bytes, bytearray, memoryview, str]


def _to_bytes(data: Data) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def send_once(api: SocketAPI, sock: socket.socket, data: Data) -> int:
    """
    Write data with a single OS call.

    Args:
        api: Socket API to write through
        sock: Connected socket
        data: Bytes to send; str is encoded as UTF-8

    Returns:
        Number of bytes the OS accepted, possibly fewer than len(data)

    Raises:
        SendError: If the write fails
    """
    payload = _to_bytes(data)
    with translate(SendError, "Error sending data"):
        return api.send(sock, payload)


def send_all(api: SocketAPI, sock: socket.socket, data: Data) -> int:
    """
    Write data, repeating short writes until everything is sent.

    Returns:
        Total number of bytes sent (always len of the encoded data)

    Raises:
        SendError: If any write fails or the OS stops accepting data
    """
    view = memoryview(_to_bytes(data))
    total = 0
    while total < len(view):
        sent = send_once(api, sock, view[total:])
        if sent == 0:
            raise SendError("Error sending data: connection stopped accepting data")
        total += sent
    return total


def receive_once(
    api: SocketAPI, sock: socket.socket, buffer: Union[bytearray, memoryview]
) -> bytes:
    """
    Read up to BUFFER_SIZE bytes with a single OS call.

    Args:
        api: Socket API to read through
        sock: Connected socket
        buffer: Writable scratch buffer the data is read into

    Returns:
        The bytes read; b"" means the peer closed the connection

    Raises:
        ReceiveError: If the read fails or the buffer has no room
    """
    view = memoryview(buffer)
    nbytes = min(len(view), BUFFER_SIZE)
    if nbytes == 0:
        raise ReceiveError("Error receiving data: buffer has no room")
    with translate(ReceiveError, "Error receiving data"):
        received = api.recv_into(sock, view, nbytes)
    return bytes(view[:received])


class Connection:
    """
    A connected peer: its socket, its address and a receive buffer.

    Connections come from :meth:`Endpoint.accept` on servers and
    :meth:`Endpoint.connect_ref` on clients. The handle is closed by
    :meth:`close` or on leaving a ``with`` block, unless the connection
    was built with ``close_on_release=False``.
    """

    def __init__(
        self,
        handle: Union[SharedHandle, socket.socket],
        host: str,
        port: int,
        close_on_release: bool = True,
        api: Optional[SocketAPI] = None,
    ):
        """
        Initialize the connection.

        Args:
            handle: Handle reference owned by this connection, or a raw
                    socket to wrap in a new handle
            host: Peer IPv4 address
            port: Peer port
            close_on_release: If False the handle is borrowed and left
                              open when the connection is closed
            api: Socket API (defaults to the platform API)
        """
        self._api = api if api is not None else default_api
        if not isinstance(handle, SharedHandle):
            handle = SharedHandle(handle, self._api)
        self._handle: Optional[SharedHandle] = handle
        self._address = AddressBinding(host, port)
        self._close_on_release = close_on_release
        self._buffer = bytearray(BUFFER_SIZE)

    @property
    def handle(self) -> Optional[SharedHandle]:
        return self._handle

    @property
    def host(self) -> str:
        return self._address.host

    @property
    def port(self) -> int:
        return self._address.port

    @property
    def address(self) -> AddressBinding:
        return self._address

    @property
    def address_length(self) -> int:
        return self._address.address_length

    @property
    def closed(self) -> bool:
        return self._handle is None

    @property
    def close_on_release(self) -> bool:
        return self._close_on_release

    def send(self, data: Data) -> int:
        """
        Send data to the peer with a single write.

        Args:
            data: Bytes to send; str is encoded as UTF-8

        Returns:
            Number of bytes sent. A short write is not retried.

        Raises:
            SendError: If the write fails or the connection is closed
        """
        if self._handle is None:
            raise SendError("Error sending data: connection is closed")
        return send_once(self._api, self._handle.socket, data)

    def send_all(self, data: Data) -> int:
        """
        Send all of data, looping over short writes.

        Raises:
            SendError: If a write fails or the connection is closed
        """
        if self._handle is None:
            raise SendError("Error sending data: connection is closed")
        return send_all(self._api, self._handle.socket, data)

    def receive(self, buffer: Optional[Union[bytearray, memoryview]] = None) -> bytes:
        """
        Receive up to 4096 bytes from the peer.

        Blocks until data arrives or the peer closes.

        Args:
            buffer: Writable buffer to read into. If omitted, the
                    connection's internal buffer is used.

        Returns:
            The bytes received, or b"" if the peer closed the connection

        Raises:
            ReceiveError: If the read fails or the connection is closed
        """
        if self._handle is None:
            raise ReceiveError("Error receiving data: connection is closed")
        if buffer is None:
            buffer = self._buffer
        return receive_once(self._api, self._handle.socket, buffer)

    def close(self) -> None:
        """
        Release the connection's handle.

        Raises:
            CloseError: If already closed or the OS close fails
        """
        if self._handle is None:
            raise CloseError("Connection already closed")
        handle, self._handle = self._handle, None
        if self._close_on_release:
            handle.release()
        logger.debug("Connection to %s released", self._address)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        if self._handle is not None:
            self.close()

    def __repr__(self) -> str:
        return f"Connection(peer={self._address}, closed={self.closed})"
