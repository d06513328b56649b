"""Unit tests for errors module."""

import errno
import threading

import pytest

from tcpsock import errors
from tcpsock.errors import (
    BindError,
    SendError,
    TcpSockError,
    get_last_error,
    translate,
)


class TestErrors:
    """Test suite for the error taxonomy."""

    @pytest.mark.parametrize(
        "error_class",
        [
            errors.InvalidAddressError,
            errors.SocketCreateError,
            errors.SocketOptionError,
            errors.BindError,
            errors.ListenError,
            errors.AcceptError,
            errors.ConnectError,
            errors.SendError,
            errors.ReceiveError,
            errors.CloseError,
            errors.RoleError,
        ],
    )
    def test_subclasses_base(self, error_class):
        """Test every error derives from TcpSockError."""
        assert issubclass(error_class, TcpSockError)

    def test_message_without_errno(self):
        """Test error message when no errno is given."""
        error = BindError("Error binding socket to IP/Port")

        assert str(error) == "Error binding socket to IP/Port"
        assert error.message == "Error binding socket to IP/Port"
        assert error.errno is None

    def test_message_with_errno(self):
        """Test errno is included in the message."""
        error = BindError("Error binding socket to IP/Port", errno.EADDRINUSE)

        assert error.errno == errno.EADDRINUSE
        assert f"errno {errno.EADDRINUSE}" in str(error)


class TestTranslate:
    """Test suite for translate()."""

    def test_translates_oserror(self):
        """Test OSError becomes the requested error, chained."""
        with pytest.raises(SendError) as exc_info:
            with translate(SendError, "Error sending data"):
                raise OSError(errno.EPIPE, "Broken pipe")

        assert exc_info.value.errno == errno.EPIPE
        assert isinstance(exc_info.value.__cause__, OSError)
        assert get_last_error() == errno.EPIPE

    def test_passes_through_on_success(self):
        """Test the block's result is unaffected when nothing is raised."""
        with translate(SendError, "Error sending data"):
            value = 42

        assert value == 42

    def test_other_exceptions_propagate(self):
        """Test non-OSError exceptions are not translated."""
        with pytest.raises(ValueError):
            with translate(SendError, "Error sending data"):
                raise ValueError("bad")

    def test_oserror_without_errno(self):
        """Test an OSError with no errno records 0."""
        with pytest.raises(BindError) as exc_info:
            with translate(BindError, "Error binding socket to IP/Port"):
                raise OSError("no code")

        assert exc_info.value.errno is None
        assert get_last_error() == 0

    def test_last_error_is_per_thread(self):
        """Test errors recorded in another thread are not visible here."""
        with pytest.raises(SendError):
            with translate(SendError, "Error sending data"):
                raise OSError(errno.ECONNRESET, "reset")

        seen = []

        def worker():
            seen.append(get_last_error())

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert seen == [0]
        assert get_last_error() == errno.ECONNRESET
