"""
Unit tests for the logging sink.
"""

import io
import logging
import re

import pytest

from netsock import log


LINE = re.compile(r"^\(\d\d-\d\d-\d\d \d\d:\d\d:\d\d +(\w+)\) (.*)$")


@pytest.fixture(autouse=True)
def _cleanup(reset_log):
    yield


class TestLevels:
    """Custom levels and level parsing."""

    def test_extra_levels_registered(self):
        assert logging.getLevelName(log.TRACE) == "TRACE"
        assert logging.getLevelName(log.ALL) == "ALL"
        assert log.ALL < log.TRACE < logging.DEBUG

    @pytest.mark.parametrize("name, expected", [
        ("info", logging.INFO),
        ("WARN", logging.WARNING),
        ("fatal", logging.CRITICAL),
        ("TRACE", log.TRACE),
        ("ALL", log.ALL),
        (logging.ERROR, logging.ERROR),
    ])
    def test_parse_level(self, name, expected):
        assert log.parse_level(name) == expected

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            log.parse_level("chatty")


class TestSink:
    """start() / end() lifecycle and line format."""

    def test_stream_target(self):
        stream = io.StringIO()
        log.start(stream, "INFO", color=False)

        logging.getLogger("netsock.core.test").info("Listening on %s", "0.0.0.0:80")

        match = LINE.match(stream.getvalue().strip())
        assert match is not None
        assert match.group(1) == "info"
        assert match.group(2) == "Listening on 0.0.0.0:80"

    def test_level_filtering(self):
        stream = io.StringIO()
        log.start(stream, "WARNING", color=False)

        logger = logging.getLogger("netsock.core.test")
        logger.info("hidden")
        logger.warning("shown")

        output = stream.getvalue()
        assert "hidden" not in output
        assert "warn) shown" in output

    def test_debug_lines_carry_location(self):
        stream = io.StringIO()
        log.start(stream, "DEBUG", color=False)

        logging.getLogger("netsock.core.test").debug("detail")

        assert re.search(r"debug\) test_log\.py:\d+ detail", stream.getvalue())

    def test_colour(self):
        stream = io.StringIO()
        log.start(stream, "INFO", color=True)

        logging.getLogger("netsock").error("boom")

        assert "\x1b[31m" in stream.getvalue()

    def test_file_target_appends(self, tmp_path):
        path = tmp_path / "netsock.log"
        path.write_text("existing\n")

        log.start(path)
        logging.getLogger("netsock").info("appended")
        log.end()

        lines = path.read_text().splitlines()
        assert lines[0] == "existing"
        assert lines[1].endswith("appended")
        assert "\x1b[" not in lines[1]

    def test_end_detaches(self):
        stream = io.StringIO()
        log.start(stream, color=False)
        assert log.is_started()

        log.end()
        logging.getLogger("netsock").warning("after end")

        assert not log.is_started()
        assert "after end" not in stream.getvalue()

    def test_start_replaces_previous(self):
        first, second = io.StringIO(), io.StringIO()
        log.start(first, color=False)
        log.start(second, color=False)

        logging.getLogger("netsock").info("once")

        assert first.getvalue() == ""
        assert "once" in second.getvalue()

    def test_end_without_start(self):
        log.end()

    def test_silent_without_sink(self, capsys):
        """Library errors stay off stderr until someone starts a sink."""
        handlers = logging.getLogger(log.ROOT_LOGGER).handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)

        logging.getLogger("netsock.core.test").error("nobody listening")

        assert "nobody listening" not in capsys.readouterr().err

    def test_end_keeps_null_handler(self):
        log.start(io.StringIO(), color=False)
        log.end()

        handlers = logging.getLogger(log.ROOT_LOGGER).handlers
        assert [type(h) for h in handlers] == [logging.NullHandler]
