"""Listening or connecting TCP endpoint."""

import logging
import socket
from enum import Enum
from typing import Optional, Union

from tcpsock.address import ANY_ADDR, LOCALHOST, AddressBinding
from tcpsock.connection import (
    BUFFER_SIZE,
    Connection,
    Data,
    receive_once,
    send_all,
    send_once,
)
from tcpsock.errors import (
    AcceptError,
    BindError,
    CloseError,
    ConnectError,
    ListenError,
    ReceiveError,
    RoleError,
    SendError,
    SocketCreateError,
    SocketOptionError,
    TcpSockError,
    translate,
)
from tcpsock.handle import SharedHandle
from tcpsock.system import SocketAPI, default_api

logger = logging.getLogger(__name__)

DEFAULT_BACKLOG = 10

Target = Union[Connection, SharedHandle, socket.socket]


class Role(Enum):
    """Endpoint role, fixed at construction."""

    CLIENT = "client"
    SERVER = "server"


class Endpoint:
    """
    A local TCP socket in either the server or the client role.

    A server endpoint is bound and listening by the time the constructor
    returns. A client endpoint makes no network call until
    :meth:`connect` or :meth:`connect_ref`.
    """

    def __init__(
        self,
        port: int,
        host: Optional[str] = ANY_ADDR,
        role: Role = Role.SERVER,
        reuse_address: bool = True,
        backlog: int = DEFAULT_BACKLOG,
        api: Optional[SocketAPI] = None,
    ):
        """
        Initialize the endpoint.

        Args:
            port: Port to bind (server) or connect to (client); a server
                  given port 0 gets one assigned by the OS
            host: Address to bind (server) or connect to (client)
            role: Role.SERVER or Role.CLIENT
            reuse_address: Set SO_REUSEADDR before binding (server only)
            backlog: Pending connection queue length (server only)
            api: Socket API (defaults to the platform API)

        Raises:
            InvalidAddressError: If host or port is invalid
            SocketCreateError: If the socket can't be allocated
            SocketOptionError: If SO_REUSEADDR is rejected
            BindError: If the address can't be bound, e.g. it is in use
            ListenError: If the socket can't listen
        """
        if not isinstance(role, Role):
            raise RoleError(f"Unknown role: {role!r}")
        self._api = api if api is not None else default_api
        self._role = role
        self._reuse_address = reuse_address
        self._backlog = backlog
        self._binding = AddressBinding(host, port)
        self._buffer = bytearray(BUFFER_SIZE)
        self._handle: Optional[SharedHandle] = None
        self._connected = False

        with translate(SocketCreateError, "Network stack startup failed"):
            self._api.startup()
        with translate(SocketCreateError, "Error creating socket"):
            sock = self._api.create()
        self._handle = SharedHandle(sock, self._api)

        if role is Role.SERVER:
            try:
                self._bind()
                self._listen()
            except TcpSockError:
                handle, self._handle = self._handle, None
                try:
                    handle.release()
                except CloseError as exc:
                    logger.debug("Cleanup after failed setup could not close socket: %s", exc)
                raise

    @classmethod
    def create(cls, port: int, role: Role, api: Optional[SocketAPI] = None) -> "Endpoint":
        """Create an endpoint on the loopback address with default options."""
        return cls(port, LOCALHOST, role, api=api)

    @classmethod
    def from_config(cls, config, api: Optional[SocketAPI] = None) -> "Endpoint":
        """
        Create an endpoint from a SocketConfig.

        Args:
            config: tcpsock.config.settings.SocketConfig instance
            api: Socket API (defaults to the platform API)
        """
        try:
            role = Role(config.role)
        except ValueError as exc:
            raise RoleError(f"Unknown role: {config.role!r}") from exc
        return cls(
            config.port,
            config.host,
            role,
            reuse_address=config.reuse_address,
            backlog=config.backlog,
            api=api,
        )

    def _bind(self) -> None:
        sock = self._handle.socket
        if self._reuse_address:
            with translate(SocketOptionError, "Error setting socket options"):
                self._api.set_reuse_address(sock)
        with translate(BindError, "Error binding socket to IP/Port"):
            self._api.bind(sock, self._binding.as_tuple())
        if self._binding.port == 0:
            # Record the port the OS assigned
            with translate(BindError, "Error reading bound address"):
                _, port = self._api.local_address(sock)
            self._binding.port = port
        logger.debug("Bound to %s", self._binding)

    def _listen(self) -> None:
        with translate(ListenError, "Error listening to socket"):
            self._api.listen(self._handle.socket, self._backlog)
        logger.debug("Listening on %s (backlog %d)", self._binding, self._backlog)

    @property
    def role(self) -> Role:
        return self._role

    @property
    def handle(self) -> Optional[SharedHandle]:
        return self._handle

    @property
    def address(self) -> AddressBinding:
        return self._binding

    @property
    def host(self) -> str:
        return self._binding.host

    @property
    def port(self) -> int:
        return self._binding.port

    @property
    def reuse_address(self) -> bool:
        return self._reuse_address

    @property
    def backlog(self) -> int:
        return self._backlog

    @property
    def closed(self) -> bool:
        return self._handle is None

    @property
    def connected(self) -> bool:
        return self._connected

    def accept(self) -> Connection:
        """
        Wait for a client and accept it.

        Blocks until a peer connects.

        Returns:
            Connection owning the accepted socket, with the peer's address

        Raises:
            RoleError: If this is a client endpoint
            AcceptError: If the accept call fails or the endpoint is closed
        """
        if self._role is not Role.SERVER:
            raise RoleError("Can't accept connections on a client socket")
        if self._handle is None:
            raise AcceptError("Error accepting connection: socket is closed")
        with translate(AcceptError, "Error accepting connection"):
            sock, (host, port) = self._api.accept(self._handle.socket)
        logger.debug("Accepted connection from %s:%d", host, port)
        return Connection(SharedHandle(sock, self._api), host, port, api=self._api)

    def connect(self) -> None:
        """
        Connect to the configured server.

        Blocks until the connection is established or fails. The
        endpoint's own socket becomes the connection.

        Raises:
            RoleError: If this is a server endpoint
            ConnectError: If the connection fails or the endpoint is closed
        """
        if self._role is not Role.CLIENT:
            raise RoleError("Can't connect on a server socket")
        if self._handle is None:
            raise ConnectError("Error connecting to server: socket is closed")
        with translate(ConnectError, "Error connecting to server"):
            self._api.connect(self._handle.socket, self._binding.as_tuple())
        self._connected = True
        logger.debug("Connected to %s", self._binding)

    def connect_ref(self) -> Connection:
        """
        Connect to the configured server and return the connection.

        The returned Connection shares this endpoint's socket. Each side
        holds its own reference; the socket is closed when both have been
        closed.

        Returns:
            Connection to the server

        Raises:
            RoleError: If this is a server endpoint
            ConnectError: If the connection fails or the endpoint is closed
        """
        self.connect()
        return Connection(
            self._handle.acquire(), self._binding.host, self._binding.port, api=self._api
        )

    def _resolve(self, target: Optional[Target], error_class, message: str) -> socket.socket:
        if target is None:
            if self._handle is None:
                raise error_class(f"{message}: socket is closed")
            return self._handle.socket
        if isinstance(target, Connection):
            if target.handle is None:
                raise error_class(f"{message}: connection is closed")
            return target.handle.socket
        if isinstance(target, SharedHandle):
            if target.closed:
                raise error_class(f"{message}: socket is closed")
            return target.socket
        return target

    def send(self, data: Data, target: Optional[Target] = None) -> int:
        """
        Send data with a single write.

        Args:
            data: Bytes to send; str is encoded as UTF-8
            target: Connection, handle or socket to write to. If omitted,
                    the endpoint's own socket is used (after connect()).

        Returns:
            Number of bytes sent. A short write is not retried.

        Raises:
            SendError: If the write fails or the target is closed
        """
        sock = self._resolve(target, SendError, "Error sending data")
        return send_once(self._api, sock, data)

    def send_all(self, data: Data, target: Optional[Target] = None) -> int:
        """Send all of data, looping over short writes."""
        sock = self._resolve(target, SendError, "Error sending data")
        return send_all(self._api, sock, data)

    def receive(
        self,
        source: Optional[Target] = None,
        buffer: Optional[Union[bytearray, memoryview]] = None,
    ) -> bytes:
        """
        Receive up to 4096 bytes.

        Blocks until data arrives or the peer closes.

        Args:
            source: Connection, handle or socket to read from. If omitted,
                    the endpoint's own socket is used.
            buffer: Writable buffer to read into. If omitted, a
                    Connection source reads into its own buffer and any
                    other source into the endpoint's internal buffer.

        Returns:
            The bytes received, or b"" if the peer closed the connection

        Raises:
            ReceiveError: If the read fails or the source is closed
        """
        if isinstance(source, Connection):
            return source.receive(buffer)
        sock = self._resolve(source, ReceiveError, "Error receiving data")
        if buffer is None:
            buffer = self._buffer
        return receive_once(self._api, sock, buffer)

    def close(self) -> None:
        """
        Release the endpoint's socket.

        If a Connection from connect_ref() is still open, the socket stays
        open until that connection is closed too.

        Raises:
            CloseError: If already closed or the OS close fails
        """
        if self._handle is None:
            raise CloseError("Error closing socket: already closed")
        handle, self._handle = self._handle, None
        self._connected = False
        handle.release()
        logger.debug("Endpoint %s closed", self._binding)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        if self._handle is not None:
            self.close()

    def __repr__(self) -> str:
        return (
            f"Endpoint(role={self._role.value}, address={self._binding}, "
            f"closed={self.closed})"
        )
