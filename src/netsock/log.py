"""
=============================================================================
LOGGING SINK
=============================================================================

netsock modules never print. Each one does:

    logger = logging.getLogger(__name__)

and writes leveled messages to it. Whether those messages go anywhere is
decided by whoever runs the program, through this module:

    from netsock import log

    log.start()                      # stdout, INFO and above
    log.start("netsock.log", "DEBUG")  # append to a file instead
    ...
    log.end()                        # detach and close the handler

=============================================================================
LINE FORMAT
=============================================================================

    (24-06-10 10:55:36  info) Listening on 0.0.0.0:8080
    (24-06-10 10:55:37 debug) endpoints.py:142 Accepting new connection
    └──── timestamp ─┘ └level┘ └ location (debug/trace/error/fatal only)

Two levels exist below DEBUG for very chatty output:

    TRACE (5)   control flow through the candidate loops
    ALL   (1)   one line per transfer call

On a terminal each level name is coloured. Files get plain text.
=============================================================================
"""

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO, Union


TRACE = 5
ALL = 1

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(ALL, "ALL")

ROOT_LOGGER = "netsock"

# Silent until start(); keeps the last-resort stderr handler out of it
logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())

_LEVEL_NAMES = {
    ALL: "all",
    TRACE: "trace",
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "fatal",
}

_LEVEL_COLORS = {
    ALL: "\x1b[37m",
    TRACE: "\x1b[36m",
    logging.DEBUG: "\x1b[34m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[35m",
}

_RESET = "\x1b[0m"

# Levels whose lines carry file:line of the call site
_LOCATED_LEVELS = frozenset({TRACE, logging.DEBUG, logging.ERROR, logging.CRITICAL})

_ALIASES = {"WARN": logging.WARNING, "FATAL": logging.CRITICAL}

_handler: Optional[logging.Handler] = None


class SinkFormatter(logging.Formatter):
    """Formats records as ``(date level) file:line message``."""

    def __init__(self, color: bool = True):
        super().__init__(datefmt="%y-%m-%d %H:%M:%S")
        self.color = color

    def _level(self, levelno: int) -> str:
        name = _LEVEL_NAMES.get(levelno, logging.getLevelName(levelno).lower())
        name = f"{name:>5}"
        if self.color and levelno in _LEVEL_COLORS:
            return f"{_LEVEL_COLORS[levelno]}{name}{_RESET}"
        return name

    def format(self, record: logging.LogRecord) -> str:
        date = self.formatTime(record, self.datefmt)
        message = record.getMessage()
        if record.levelno in _LOCATED_LEVELS:
            message = f"{record.filename}:{record.lineno} {message}"

        line = f"({date} {self._level(record.levelno)}) {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def parse_level(level: Union[int, str]) -> int:
    """
    Turn a level name or number into a logging level number.

    Accepts the standard names plus TRACE, ALL, WARN and FATAL.
    """
    if isinstance(level, int):
        return level

    name = level.strip().upper()
    if name in _ALIASES:
        return _ALIASES[name]

    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def start(
    target: Union[None, str, Path, TextIO] = None,
    level: Union[int, str] = "INFO",
    color: Optional[bool] = None,
) -> logging.Handler:
    """
    Attach the sink to the ``netsock`` logger.

    Args:
        target: None for stdout, a path to append to, or an open text stream.
        level: Minimum level to emit.
        color: Force colours on or off. By default streams that are
               terminals get colours and files do not.

    Returns:
        The installed handler.

    Calling start() again replaces the previous sink.
    """
    global _handler

    if _handler is not None:
        end()

    if target is None:
        stream = sys.stdout
        handler: logging.Handler = logging.StreamHandler(stream)
    elif isinstance(target, (str, Path)):
        stream = None
        handler = logging.FileHandler(target, mode="a", encoding="utf-8")
    else:
        stream = target
        handler = logging.StreamHandler(stream)

    if color is None:
        isatty = getattr(stream, "isatty", None)
        color = bool(isatty and isatty())

    handler.setFormatter(SinkFormatter(color=color))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(parse_level(level))
    logger.addHandler(handler)

    _handler = handler
    return handler


def end() -> None:
    """Detach and close the sink installed by start(). Safe if none is."""
    global _handler

    if _handler is None:
        return

    logger = logging.getLogger(ROOT_LOGGER)
    logger.removeHandler(_handler)
    logger.setLevel(logging.NOTSET)
    _handler.close()
    _handler = None


def is_started() -> bool:
    return _handler is not None
