# HLL RCON v2 client
# XOR + handshake + pooled command execution

import logging
from typing import Optional

from config import get_float_setting, get_int_setting, get_setting
from rcon_cipher import command_line
from rcon_errors import RconConfigError
from rcon_pool import SessionPool
from rcon_session import RconSession, check_response

log = logging.getLogger(__name__)

DEFAULT_PORT = 7779

__all__ = ["RconV2", "check_response", "command_line", "quote"]


def quote(arg: str) -> str:
    """Wrap ``arg`` in double quotes unless it already is.

    Embedded quotes are not escaped; the server has no escaping rules.
    """
    if len(arg) >= 2 and arg.startswith('"') and arg.endswith('"'):
        return arg
    return f'"{arg}"'


class RconV2:
    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        password: Optional[str] = None,
        pool_size: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        self.host = host or get_setting("RCON_HOST", "RCON_HOST")
        self.port = int(port or get_int_setting("RCON_PORT", "RCON_PORT", DEFAULT_PORT))
        self.password = password or get_setting("RCON_PASSWORD", "RCON_PASSWORD")
        if pool_size is None:
            pool_size = get_int_setting("RCON_POOL_SIZE", "RCON_POOL_SIZE", 0)
        if timeout is None:
            timeout = get_float_setting("RCON_TIMEOUT", "RCON_TIMEOUT")
        self.timeout = timeout
        self.pool = SessionPool(self._open_session, capacity=pool_size)

    def __repr__(self):
        return f"<RconV2 {self.host}:{self.port}>"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _open_session(self) -> RconSession:
        if not self.host or not self.port or not self.password:
            raise RconConfigError("Missing RCON_HOST, RCON_PORT or RCON_PASSWORD")
        return RconSession.open(self.host, self.port, self.password, timeout=self.timeout)

    def connect(self) -> "RconV2":
        """Open and authenticate one session up front so bad settings fail fast."""
        with self.pool.checkout():
            pass
        log.info("Connected to HLL RCON at %s:%s", self.host, self.port)
        return self

    def send(self, *tokens: str) -> str:
        """Send one command and return the decoded response text.

        Raises CommandFailed on the ``FAIL`` sentinel, RconConnectionError on
        transport errors (the session is discarded) and AuthenticationFailed
        when a new session cannot log in. Nothing is retried.
        """
        if not tokens:
            raise ValueError("send requires at least one token")
        log.debug("RCON send %s", tokens[0])
        with self.pool.checkout() as session:
            return session.send(*tokens)

    def close(self):
        self.pool.close_all()
