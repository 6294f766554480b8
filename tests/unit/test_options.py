"""
Unit tests for timeout options and handle lifecycle.
"""

import socket

import pytest

from netsock import (
    Direction,
    InvalidArgument,
    NetSockError,
    OptionError,
    Shutdown,
    close,
    get_timeout,
    is_valid,
    set_recv_timeout,
    set_send_timeout,
    set_timeout,
    shutdown,
)
from netsock.backends import backend


@pytest.fixture
def sock():
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    yield s
    s.close()


class TestSetTimeout:
    """Tests for set_timeout() / get_timeout()."""

    def test_receive_round_trip(self, sock):
        set_timeout(sock, Direction.RECEIVE, 2000)
        assert get_timeout(sock, Direction.RECEIVE) == 2000

    def test_send_round_trip(self, sock):
        set_timeout(sock, Direction.SEND, 1000)
        assert get_timeout(sock, Direction.SEND) == 1000

    def test_directions_are_independent(self, sock):
        set_recv_timeout(sock, 3000)
        set_send_timeout(sock, 0)

        assert get_timeout(sock, Direction.RECEIVE) == 3000
        assert get_timeout(sock, Direction.SEND) == 0

    def test_string_direction(self, sock):
        set_timeout(sock, "receive", 1000)
        assert get_timeout(sock, "receive") == 1000

    def test_same_value_twice(self, sock):
        """Setting the same timeout again changes nothing observable."""
        set_timeout(sock, Direction.RECEIVE, 2000)
        first = get_timeout(sock, Direction.RECEIVE)
        set_timeout(sock, Direction.RECEIVE, 2000)

        assert get_timeout(sock, Direction.RECEIVE) == first

    def test_sub_tick_value_reads_back_rounded(self, sock):
        """A 1 ms timeout is kept as at least one kernel tick, never as 0."""
        set_timeout(sock, Direction.RECEIVE, 1)

        assert 1 <= get_timeout(sock, Direction.RECEIVE) <= 16

    def test_zero_disables(self, sock):
        set_timeout(sock, Direction.RECEIVE, 1000)
        set_timeout(sock, Direction.RECEIVE, 0)

        assert get_timeout(sock, Direction.RECEIVE) == 0

    def test_negative_rejected_and_previous_kept(self, sock):
        set_timeout(sock, Direction.RECEIVE, 2000)

        with pytest.raises(InvalidArgument):
            set_timeout(sock, Direction.RECEIVE, -1)

        assert get_timeout(sock, Direction.RECEIVE) == 2000

    @pytest.mark.parametrize("value", [1.5, "100", True, None])
    def test_non_integer_rejected(self, sock, value):
        with pytest.raises(InvalidArgument):
            set_timeout(sock, Direction.RECEIVE, value)

    def test_unknown_direction(self, sock):
        with pytest.raises(InvalidArgument):
            set_timeout(sock, "sideways", 100)

    def test_huge_value_rejected(self, sock):
        with pytest.raises(InvalidArgument):
            set_timeout(sock, Direction.RECEIVE, 2 ** 80)

    def test_closed_socket_is_option_error(self):
        s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        s.close()

        with pytest.raises(OptionError):
            set_timeout(s, Direction.RECEIVE, 100)


@pytest.mark.skipif(backend.NAME != "posix", reason="struct timeval encoding")
class TestPosixEncoding:
    """Milliseconds split into seconds + microseconds."""

    def test_encode_decode(self):
        from netsock.backends import posix

        raw = posix.encode_timeout(1500)
        assert posix.decode_timeout(raw) == 1500

    def test_fields(self):
        from netsock.backends import posix

        seconds, microseconds = posix._TIMEVAL.unpack(posix.encode_timeout(2250))
        assert (seconds, microseconds) == (2, 250000)


class TestHandleLifecycle:
    """Tests for close(), shutdown() and is_valid()."""

    def test_close_invalidates(self):
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        assert is_valid(s)

        close(s)

        assert not is_valid(s)

    def test_close_never_raises_on_unconnected(self):
        """Unconnected sockets refuse shutdown(); close() still releases them."""
        s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        close(s)
        assert s.fileno() == -1

    def test_close_none_and_twice(self):
        close(None)
        s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        close(s)
        close(s)

    def test_is_valid_none(self):
        assert not is_valid(None)

    def test_shutdown_unconnected_raises(self, sock):
        with pytest.raises(NetSockError):
            shutdown(sock, Shutdown.WRITE)

    def test_shutdown_values(self):
        assert Shutdown.READ == socket.SHUT_RD
        assert Shutdown.WRITE == socket.SHUT_WR
        assert Shutdown.BOTH == socket.SHUT_RDWR
