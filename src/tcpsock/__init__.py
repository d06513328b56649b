"""Blocking IPv4 TCP sockets: listening/connecting endpoints and connections."""

from tcpsock.address import ANY_ADDR, LOCALHOST, AddressBinding
from tcpsock.connection import BUFFER_SIZE, Connection
from tcpsock.endpoint import DEFAULT_BACKLOG, Endpoint, Role
from tcpsock.errors import (
    AcceptError,
    BindError,
    CloseError,
    ConnectError,
    InvalidAddressError,
    ListenError,
    ReceiveError,
    RoleError,
    SendError,
    SocketCreateError,
    SocketOptionError,
    TcpSockError,
    get_last_error,
)
from tcpsock.handle import SharedHandle

# Aliases
Socket = Endpoint
Node = Connection

__version__ = "0.1.0"
__all__ = [
    "ANY_ADDR",
    "LOCALHOST",
    "BUFFER_SIZE",
    "DEFAULT_BACKLOG",
    "AddressBinding",
    "Connection",
    "Endpoint",
    "Node",
    "Role",
    "SharedHandle",
    "Socket",
    "AcceptError",
    "BindError",
    "CloseError",
    "ConnectError",
    "InvalidAddressError",
    "ListenError",
    "ReceiveError",
    "RoleError",
    "SendError",
    "SocketCreateError",
    "SocketOptionError",
    "TcpSockError",
    "get_last_error",
    "__version__",
]
