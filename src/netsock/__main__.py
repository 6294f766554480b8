"""
=============================================================================
NETSOCK CLI ENTRY POINT
=============================================================================

A small command-line tool for poking at sockets with the netsock layer.

=============================================================================
USAGE
=============================================================================

    # Stream: send lines typed on stdin to a listener
    python -m netsock send 127.0.0.1 11234

    # Stream: accept one client and print three 12-byte records
    python -m netsock listen 11234 --records 3 --size 12

    # Datagram: one message each way
    python -m netsock dgram-recv 9999
    python -m netsock dgram-send 127.0.0.1 9999 "hello world!"

    # Give up after 2 seconds of silence, log everything
    python -m netsock --timeout 2000 --log-level ALL listen 11234

Settings not given on the command line come from NETSOCK_* environment
variables (see config.py).
=============================================================================
"""

import argparse
import dataclasses
import sys
from typing import List, Optional, TextIO

from . import __version__, log
from .config import NetSockConfig
from .core import (
    Direction,
    SockType,
    accept,
    close,
    recv_exact,
    recv_from,
    resolve_and_connect,
    resolve_and_listen,
    send_to,
    set_timeout,
    write_all,
)
from .errors import NetSockError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="netsock",
        description="Blocking TCP/UDP socket tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  netsock send 127.0.0.1 11234                 # stdin lines → stream
  netsock listen 11234 --records 3 --size 12   # print 3 fixed-size records
  netsock dgram-recv 9999                      # wait for one datagram
  netsock dgram-send 127.0.0.1 9999 hello      # send one datagram
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # GLOBAL OPTIONS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["ALL", "TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (default: NETSOCK_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Append log lines to this file instead of stdout",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Plain log level names even on a terminal",
    )
    parser.add_argument(
        "--timeout", "-t",
        type=int,
        default=None,
        metavar="MS",
        help="Receive and send timeout in milliseconds (0 = none)",
    )
    parser.add_argument(
        "--family", "-f",
        choices=["4", "6", "any"],
        default=None,
        help="Address family (default: NETSOCK_FAMILY or 4)",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"netsock {__version__}",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    send = commands.add_parser("send", help="Connect and send stdin lines")
    send.add_argument("host")
    send.add_argument("port")
    send.add_argument("--lines", "-n", type=int, default=12,
                      help="Maximum number of lines to send (default: 12)")

    listen = commands.add_parser("listen", help="Accept one client and print records")
    listen.add_argument("port")
    listen.add_argument("--host", default=None, help="Local address (default: all)")
    listen.add_argument("--records", "-n", type=int, default=3,
                        help="Number of records to read (default: 3)")
    listen.add_argument("--size", "-s", type=int, default=12,
                        help="Bytes per record (default: 12)")

    dgram_send = commands.add_parser("dgram-send", help="Send one datagram")
    dgram_send.add_argument("host")
    dgram_send.add_argument("port")
    dgram_send.add_argument("message")

    dgram_recv = commands.add_parser("dgram-recv", help="Receive one datagram")
    dgram_recv.add_argument("port")
    dgram_recv.add_argument("--host", default=None, help="Local address (default: all)")

    return parser


def load_config(args: argparse.Namespace) -> NetSockConfig:
    """Environment first, then command-line overrides."""
    config = NetSockConfig.from_env()
    overrides = {}

    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.log_file is not None:
        overrides["log_file"] = args.log_file
    if args.no_color:
        overrides["log_color"] = False
    if args.family is not None:
        overrides["family"] = args.family
    if args.timeout is not None:
        overrides["recv_timeout_ms"] = args.timeout
        overrides["send_timeout_ms"] = args.timeout

    config = dataclasses.replace(config, **overrides)
    config.validate()
    return config


def _apply_timeouts(sock, config: NetSockConfig) -> None:
    if config.recv_timeout_ms:
        set_timeout(sock, Direction.RECEIVE, config.recv_timeout_ms)
    if config.send_timeout_ms:
        set_timeout(sock, Direction.SEND, config.send_timeout_ms)


# =========================================================================
# COMMANDS
# =========================================================================

def cmd_send(args, config: NetSockConfig, stdin: TextIO, stdout: TextIO) -> int:
    sock = resolve_and_connect(args.host, args.port, config.family_selector, SockType.TCP)
    try:
        _apply_timeouts(sock, config)
        for _ in range(args.lines):
            line = stdin.readline()
            if not line:
                break
            write_all(sock, line.encode("utf-8"))
    finally:
        close(sock)
    return 0


def cmd_listen(args, config: NetSockConfig, stdin: TextIO, stdout: TextIO) -> int:
    listener = resolve_and_listen(args.host, args.port, config.family_selector, SockType.TCP)
    try:
        _apply_timeouts(listener, config)
        client = accept(listener)
        try:
            _apply_timeouts(client, config)
            for _ in range(args.records):
                record = recv_exact(client, args.size)
                if not record:
                    break
                text = record.decode("utf-8", errors="replace")
                print(f'client: "{text}"', file=stdout)
        finally:
            close(client)
    finally:
        close(listener)
    return 0


def cmd_dgram_send(args, config: NetSockConfig, stdin: TextIO, stdout: TextIO) -> int:
    # An ephemeral local socket, so the family matches what we resolve
    sock = resolve_and_listen(None, 0, config.family_selector, SockType.UDP)
    try:
        _apply_timeouts(sock, config)
        sent = send_to(sock, args.message.encode("utf-8"), args.host, args.port)
        print(f"sent {sent} bytes", file=stdout)
    finally:
        close(sock)
    return 0


def cmd_dgram_recv(args, config: NetSockConfig, stdin: TextIO, stdout: TextIO) -> int:
    sock = resolve_and_listen(args.host, args.port, config.family_selector, SockType.UDP)
    try:
        _apply_timeouts(sock, config)
        buffer = bytearray(config.buffer_size)
        size, host, service = recv_from(sock, buffer)
        text = bytes(buffer[:size]).decode("utf-8", errors="replace")
        print(f"{host}:{service}: {text}", file=stdout)
    finally:
        close(sock)
    return 0


COMMANDS = {
    "send": cmd_send,
    "listen": cmd_listen,
    "dgram-send": cmd_dgram_send,
    "dgram-recv": cmd_dgram_recv,
}


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    """
    Run the CLI and return the exit status.

    Any NetSockError is reported on stderr with exit status 1. Invalid
    settings (bad environment variables) exit with status 2.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except ValueError as exc:
        parser.error(str(exc))

    log.start(config.log_file, config.log_level, config.log_color)
    try:
        return COMMANDS[args.command](args, config, stdin, stdout)
    except NetSockError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        log.end()


# =============================================================================
# ENTRY POINT
# =============================================================================

if __name__ == "__main__":
    sys.exit(main())
