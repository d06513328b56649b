"""Endpoint configuration settings."""

from dataclasses import dataclass

from tcpsock.address import ANY_ADDR
from tcpsock.endpoint import Role


@dataclass
class SocketConfig:
    """Endpoint configuration."""

    host: str = ANY_ADDR
    port: int = 0
    role: Role = Role.SERVER

    # Server settings
    reuse_address: bool = True
    backlog: int = 10
