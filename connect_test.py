#!/usr/bin/env python3
"""Simple HLL RCON connectivity tester.

Usage:
  python connect_test.py <host> [port]

Opens a TCP connection and waits for the XOR key. When RCON_PASSWORD is set
it also logs in, which checks the password without sending any command.

Example:
  RCON_PASSWORD=secret python connect_test.py example.com 7779
"""
import sys
import time

from config import get_env
from rcon_errors import AuthenticationFailed, RconConnectionError
from rcon_session import RconSession


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print("Usage: python connect_test.py <host> [port]")
        sys.exit(2)

    host = argv[0]
    try:
        port = int(argv[1]) if len(argv) >= 2 else 7779
    except ValueError:
        print(f"FAIL: invalid port {argv[1]!r}")
        sys.exit(2)
    password = get_env("RCON_PASSWORD")

    session = RconSession(host, port, timeout=10)
    start = time.time()
    try:
        session.connect()
        elapsed = time.time() - start
        print(f"SUCCESS: connected to {host}:{port}, received {len(session.key)} byte key (took {elapsed:.2f}s)")
        if password:
            session.login(password)
            print(f"SUCCESS: authenticated to {host}:{port}")
    except AuthenticationFailed:
        print(f"FAIL: {host}:{port} rejected the RCON password")
        sys.exit(1)
    except RconConnectionError as e:
        print(f"FAIL: could not connect to {host}:{port}: {e}")
        sys.exit(1)
    finally:
        session.close()
    sys.exit(0)


if __name__ == '__main__':
    main()
