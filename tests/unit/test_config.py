"""
Unit tests for configuration and the error taxonomy.
"""

import errno
import socket

import pytest

from netsock import (
    AcceptError,
    Family,
    InvalidArgument,
    NetSockConfig,
    NetSockError,
    ReceiveError,
    SendError,
    TransferError,
)


class TestNetSockConfig:
    """Tests for NetSockConfig."""

    def test_defaults_validate(self):
        config = NetSockConfig()
        config.validate()

        assert config.family_selector is Family.IPV4
        assert config.recv_timeout_ms == 0

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("NETSOCK_LOG_LEVEL", "TRACE")
        monkeypatch.setenv("NETSOCK_LOG_FILE", "/tmp/netsock.log")
        monkeypatch.setenv("NETSOCK_LOG_COLOR", "no")
        monkeypatch.setenv("NETSOCK_FAMILY", "any")
        monkeypatch.setenv("NETSOCK_RECV_TIMEOUT", "1500")
        monkeypatch.setenv("NETSOCK_SEND_TIMEOUT", "250")
        monkeypatch.setenv("NETSOCK_BUFFER_SIZE", "2048")

        config = NetSockConfig.from_env()
        config.validate()

        assert config.log_level == "TRACE"
        assert config.log_file == "/tmp/netsock.log"
        assert config.log_color is False
        assert config.family_selector is Family.ANY
        assert config.recv_timeout_ms == 1500
        assert config.send_timeout_ms == 250
        assert config.buffer_size == 2048

    def test_bad_color_value(self, monkeypatch):
        monkeypatch.setenv("NETSOCK_LOG_COLOR", "sometimes")

        with pytest.raises(ValueError):
            NetSockConfig.from_env()

    @pytest.mark.parametrize("overrides", [
        {"log_level": "LOUD"},
        {"family": "5"},
        {"recv_timeout_ms": -1},
        {"send_timeout_ms": -10},
        {"buffer_size": 0},
        {"buffer_size": 70000},
    ])
    def test_validate_rejects(self, overrides):
        with pytest.raises(ValueError):
            NetSockConfig(**overrides).validate()


class TestErrors:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self):
        assert issubclass(SendError, TransferError)
        assert issubclass(ReceiveError, TransferError)
        assert issubclass(TransferError, NetSockError)
        assert issubclass(InvalidArgument, ValueError)

    def test_metadata(self):
        error = ReceiveError("short read", errno=errno.ECONNRESET, transferred=7)

        assert error.message == "short read"
        assert error.errno == errno.ECONNRESET
        assert error.transferred == 7
        assert str(error) == "short read"

    def test_timed_out_from_cause(self):
        try:
            try:
                raise socket.timeout("timed out")
            except OSError as exc:
                raise AcceptError("accept failed") from exc
        except AcceptError as error:
            assert error.timed_out

    def test_eagain_counts_as_timeout(self):
        try:
            try:
                raise BlockingIOError(errno.EAGAIN, "Resource temporarily unavailable")
            except OSError as exc:
                raise ReceiveError("recv failed", errno=exc.errno) from exc
        except ReceiveError as error:
            assert error.timed_out

    def test_other_errors_are_not_timeouts(self):
        try:
            try:
                raise ConnectionRefusedError(errno.ECONNREFUSED, "refused")
            except OSError as exc:
                raise NetSockError("connect failed") from exc
        except NetSockError as error:
            assert not error.timed_out

    def test_no_cause_is_not_timeout(self):
        assert not NetSockError("plain").timed_out
