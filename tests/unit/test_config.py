"""Unit tests for config.settings module."""

from tcpsock.config.settings import SocketConfig
from tcpsock.endpoint import Role


class TestSocketConfig:
    """Test suite for SocketConfig dataclass."""

    def test_initialization_defaults(self):
        """Test SocketConfig initialization with default values."""
        config = SocketConfig()

        assert config.host == "0.0.0.0"
        assert config.port == 0
        assert config.role is Role.SERVER
        assert config.reuse_address is True
        assert config.backlog == 10

    def test_initialization_custom_values(self):
        """Test SocketConfig initialization with custom values."""
        config = SocketConfig(
            host="127.0.0.1",
            port=49110,
            role=Role.CLIENT,
            reuse_address=False,
            backlog=1,
        )

        assert config.host == "127.0.0.1"
        assert config.port == 49110
        assert config.role is Role.CLIENT
        assert config.reuse_address is False
        assert config.backlog == 1

    def test_dataclass_equality(self):
        """Test that two SocketConfig instances with same values are equal."""
        assert SocketConfig(port=8080) == SocketConfig(port=8080)
        assert SocketConfig(port=8080) != SocketConfig(port=9000)

    def test_dataclass_repr(self):
        """Test SocketConfig string representation."""
        repr_str = repr(SocketConfig(host="127.0.0.1", port=8080))

        assert "SocketConfig" in repr_str
        assert "127.0.0.1" in repr_str
        assert "8080" in repr_str
