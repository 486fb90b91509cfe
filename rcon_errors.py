"""Exceptions raised by the RCON session, pool, client and response grammars."""


class RconError(Exception):
    """Base class for every RCON failure."""


class RconConfigError(RconError):
    """Raised when host, port or password are not configured."""


class RconConnectionError(RconError, ConnectionError):
    """Raised when dialing, writing to or reading from the server fails.

    The session that raised it is closed and must be discarded.
    """


class AuthenticationFailed(RconError):
    """Raised when the server does not answer ``login`` with ``SUCCESS``."""

    def __init__(self, address, response=None):
        self.address = address
        self.response = response
        super().__init__(f"rcon authentication failed for {address}")


class CommandFailed(RconError):
    """Raised when the server answers a command with the ``FAIL`` sentinel."""

    def __init__(self, command):
        self.command = command
        super().__init__(f"got FAIL response from server for {command!r}")


class ParseError(RconError, ValueError):
    """Raised when a response does not match the grammar used to decode it."""

    def __init__(self, grammar, fragment, reason=None):
        self.grammar = grammar
        self.fragment = fragment
        self.reason = reason
        message = f"failed to parse {grammar}: {fragment!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class PoolClosed(RconError):
    """Raised by ``acquire`` once the pool has started shutting down."""
