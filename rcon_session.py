# One authenticated HLL RCON v2 connection.
# A session owns its socket and XOR key and runs one command at a time:
# write the XOR'd command line, then a single read of at most MSGLEN bytes.

import logging
import socket
import threading
from typing import Optional

from rcon_cipher import MSGLEN, command_line, decode_response, encode_command
from rcon_errors import AuthenticationFailed, CommandFailed, RconConnectionError

log = logging.getLogger(__name__)

SUCCESS = "SUCCESS"
FAIL = "FAIL"

DISCONNECTED = "disconnected"
KEY_EXCHANGED = "key_exchanged"
READY = "ready"
CLOSED = "closed"


def check_response(command: str, text: str) -> str:
    """Return ``text`` unless it is exactly the ``FAIL`` sentinel."""
    if text == FAIL:
        raise CommandFailed(command)
    return text


class RconSession:
    def __init__(self, host: str, port: int, timeout: Optional[float] = None):
        self.host = host
        self.port = int(port)
        self.timeout = timeout
        self.key = b""
        self.state = DISCONNECTED
        self.truncated = False
        self._sock: Optional[socket.socket] = None
        self._lock = threading.Lock()

    @classmethod
    def open(cls, host: str, port: int, password: str, timeout: Optional[float] = None) -> "RconSession":
        """Connect, exchange the key and log in; returns a ready session."""
        session = cls(host, port, timeout=timeout)
        session.connect()
        session.login(password)
        return session

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def usable(self) -> bool:
        return self.state == READY

    @property
    def closed(self) -> bool:
        return self.state == CLOSED

    def __repr__(self):
        return f"<RconSession {self.address} {self.state}>"

    def connect(self):
        if self.state != DISCONNECTED:
            raise RconConnectionError(f"session to {self.address} is {self.state}, cannot connect")

        log.debug("Opening RCON connection to %s", self.address)
        try:
            self._sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
            # The whole first read is the key; the protocol has no length prefix.
            key = self._sock.recv(MSGLEN)
        except OSError as exc:
            self.close()
            log.error("RCON connection to %s failed: %s", self.address, exc)
            raise RconConnectionError(f"failed to connect to {self.address}: {exc}") from exc

        if not key:
            self.close()
            raise RconConnectionError(f"{self.address} closed the connection before sending a key")

        self.key = key
        self.state = KEY_EXCHANGED
        log.debug("Received %d byte XOR key from %s", len(key), self.address)

    def login(self, password: str):
        if self.state != KEY_EXCHANGED:
            raise RconConnectionError(f"session to {self.address} is {self.state}, cannot log in")

        # The password goes on the wire as is, never quoted.
        result = self._exchange(("login", password))
        if result != SUCCESS:
            self.close()
            log.error("RCON authentication failed for %s", self.address)
            raise AuthenticationFailed(self.address, response=result)

        self.state = READY
        log.info("RCON session authenticated to %s", self.address)

    def send(self, *tokens: str) -> str:
        command = command_line(*tokens)
        if not self.usable:
            raise RconConnectionError(f"session to {self.address} is {self.state}, cannot send {command!r}")
        return check_response(command, self._exchange(tokens))

    def _exchange(self, tokens) -> str:
        with self._lock:
            sock = self._sock
            if sock is None:
                raise RconConnectionError(f"session to {self.address} is not connected")
            try:
                sock.sendall(encode_command(tokens, self.key))
                data = sock.recv(MSGLEN)
            except OSError as exc:
                self.close()
                log.error("RCON exchange with %s failed: %s", self.address, exc)
                raise RconConnectionError(f"lost connection to {self.address}: {exc}") from exc

            if not data:
                self.close()
                raise RconConnectionError(f"{self.address} closed the connection")

            self.truncated = len(data) >= MSGLEN
            if self.truncated:
                log.warning("Response from %s filled the %d byte buffer and may be truncated", self.address, MSGLEN)
            return decode_response(data, self.key)

    def close(self):
        if self.state == CLOSED:
            return
        self.state = CLOSED
        sock, self._sock = self._sock, None
        if sock is not None:
            log.debug("Closing RCON connection to %s", self.address)
            sock.close()
