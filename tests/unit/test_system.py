"""Unit tests for system module."""

import socket
from unittest.mock import Mock, patch

import pytest

from tcpsock import system
from tcpsock.system import SocketAPI


@pytest.fixture
def fresh_stack():
    """Reset the process-wide startup state around a test."""
    system.teardown()
    yield
    system.teardown()


class TestLifecycle:
    """Test suite for startup/teardown."""

    def test_startup(self, fresh_stack):
        """Test startup marks the stack as started."""
        assert system.is_started() is False

        system.startup()

        assert system.is_started() is True

    @patch("tcpsock.system.atexit")
    def test_startup_is_idempotent(self, mock_atexit, fresh_stack):
        """Test repeated startup registers teardown only once."""
        system.startup()
        system.startup()
        system.startup()

        mock_atexit.register.assert_called_once_with(system.teardown)

    @patch("tcpsock.system.atexit")
    def test_teardown(self, mock_atexit, fresh_stack):
        """Test teardown resets the started flag."""
        system.startup()
        system.teardown()

        assert system.is_started() is False
        mock_atexit.unregister.assert_called_once_with(system.teardown)

    def test_teardown_when_not_started(self, fresh_stack):
        """Test teardown before startup does nothing."""
        system.teardown()  # Should not raise

        assert system.is_started() is False

    def test_startup_unsupported_platform(self, fresh_stack, monkeypatch):
        """Test startup fails without IPv4 stream sockets."""
        monkeypatch.delattr(socket, "SOCK_STREAM")

        with pytest.raises(OSError, match="not supported"):
            system.startup()

        assert system.is_started() is False


class TestSocketAPI:
    """Test suite for SocketAPI pass-through calls."""

    @patch("socket.socket")
    def test_create(self, mock_socket_class):
        """Test create allocates an IPv4 stream socket."""
        api = SocketAPI()
        sock = api.create()

        mock_socket_class.assert_called_once_with(socket.AF_INET, socket.SOCK_STREAM)
        assert sock is mock_socket_class.return_value

    def test_set_reuse_address(self):
        """Test SO_REUSEADDR is set."""
        sock = Mock()
        SocketAPI().set_reuse_address(sock)

        sock.setsockopt.assert_called_once_with(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

    def test_calls_pass_through(self):
        """Test each primitive forwards to the socket object."""
        api = SocketAPI()
        sock = Mock()
        sock.send.return_value = 3
        sock.recv_into.return_value = 2
        sock.accept.return_value = (Mock(), ("127.0.0.1", 5000))
        sock.getsockname.return_value = ("0.0.0.0", 4000)
        buffer = bytearray(8)

        api.bind(sock, ("0.0.0.0", 4000))
        api.listen(sock, 10)
        api.connect(sock, ("127.0.0.1", 4000))
        assert api.send(sock, b"abc") == 3
        assert api.recv_into(sock, buffer, 8) == 2
        assert api.accept(sock)[1] == ("127.0.0.1", 5000)
        assert api.local_address(sock) == ("0.0.0.0", 4000)
        api.close(sock)

        sock.bind.assert_called_once_with(("0.0.0.0", 4000))
        sock.listen.assert_called_once_with(10)
        sock.connect.assert_called_once_with(("127.0.0.1", 4000))
        sock.send.assert_called_once_with(b"abc")
        sock.recv_into.assert_called_once_with(buffer, 8)
        sock.close.assert_called_once()

    def test_default_api(self):
        """Test a module-level default API exists."""
        assert isinstance(system.default_api, SocketAPI)
