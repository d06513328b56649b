"""IPv4 address binding."""

import socket
import struct
from typing import Optional, Tuple

from tcpsock.errors import InvalidAddressError

ANY_ADDR = "0.0.0.0"
LOCALHOST = "127.0.0.1"

WILDCARD_TOKENS = ("", ANY_ADDR)

# sockaddr_in: family (host order), port (network order), address, zero padding
_SOCKADDR_IN = struct.Struct("=H2s4s8x")


class AddressBinding:
    """
    A (host, port) pair and the native ``sockaddr_in`` derived from it.

    The native structure is re-derived every time the host or port
    changes, so it always matches the textual form.
    """

    def __init__(self, host: Optional[str] = ANY_ADDR, port: int = 0):
        """
        Initialize the binding.

        Args:
            host: Dotted-quad IPv4 address, or a wildcard token (None, ""
                  or ANY_ADDR) meaning every local interface
            port: Port number, 0-65535

        Raises:
            InvalidAddressError: If host or port is invalid
        """
        self._host = ANY_ADDR
        self._port = 0
        self._packed = socket.inet_aton(ANY_ADDR)
        self.set_address(host, port)

    def set_address(self, host: Optional[str], port: int) -> None:
        """
        Populate the binding from a host and port.

        Args:
            host: Dotted-quad IPv4 address or wildcard token
            port: Port number, 0-65535

        Raises:
            InvalidAddressError: If host is not a dotted quad or wildcard
                                 token, or port is out of range
        """
        if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 0xFFFF:
            raise InvalidAddressError(f"Invalid port: {port!r}")

        if host is None or host in WILDCARD_TOKENS:
            host = ANY_ADDR
        elif not isinstance(host, str):
            raise InvalidAddressError(f"Invalid IPv4 address: {host!r}")

        try:
            packed = socket.inet_pton(socket.AF_INET, host)
        except OSError as exc:
            raise InvalidAddressError(f"Invalid IPv4 address: {host!r}") from exc

        self._host = host
        self._port = port
        self._packed = packed

    @property
    def host(self) -> str:
        return self._host

    @host.setter
    def host(self, value: Optional[str]) -> None:
        self.set_address(value, self._port)

    @property
    def port(self) -> int:
        return self._port

    @port.setter
    def port(self, value: int) -> None:
        self.set_address(self._host, value)

    @property
    def is_wildcard(self) -> bool:
        return self._host == ANY_ADDR

    @property
    def native(self) -> bytes:
        """The 16-byte ``sockaddr_in`` structure for this binding."""
        return _SOCKADDR_IN.pack(
            socket.AF_INET, struct.pack("!H", self._port), self._packed
        )

    @property
    def address_length(self) -> int:
        return _SOCKADDR_IN.size

    def as_tuple(self) -> Tuple[str, int]:
        """Return the (host, port) tuple accepted by the socket module."""
        return (self._host, self._port)

    @classmethod
    def from_native(cls, raw: bytes) -> "AddressBinding":
        """
        Build a binding from a native ``sockaddr_in`` structure.

        Args:
            raw: Bytes in the layout produced by :attr:`native`

        Returns:
            AddressBinding with the decoded host and port

        Raises:
            InvalidAddressError: If raw is not an IPv4 sockaddr_in
        """
        try:
            family, port_bytes, packed = _SOCKADDR_IN.unpack(raw)
        except struct.error as exc:
            raise InvalidAddressError("Malformed sockaddr_in structure") from exc
        if family != socket.AF_INET:
            raise InvalidAddressError(f"Unsupported address family: {family}")
        (port,) = struct.unpack("!H", port_bytes)
        return cls(socket.inet_ntoa(packed), port)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AddressBinding):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self) -> int:
        return hash(self.as_tuple())

    def __repr__(self) -> str:
        return f"AddressBinding(host={self._host!r}, port={self._port})"

    def __str__(self) -> str:
        return f"{self._host}:{self._port}"
