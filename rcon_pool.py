import logging
import threading
from contextlib import contextmanager
from typing import Callable, Optional

from rcon_errors import PoolClosed, RconConnectionError
from rcon_session import RconSession

log = logging.getLogger(__name__)


class SessionPool:
    """Thread-safe pool of authenticated RCON sessions.

    Sessions are created lazily by ``factory`` when no idle one is available
    and handed out exclusively: a session is never checked out by two callers
    at once. ``capacity`` bounds the number of sessions (``acquire`` then
    blocks until one is released); ``0`` leaves the pool demand-driven, and
    ``1`` behaves like a single shared connection.
    """

    def __init__(self, factory: Callable[[], RconSession], capacity: int = 0):
        if capacity < 0:
            raise ValueError("capacity must be >= 0")
        self._factory = factory
        self.capacity = capacity
        self._cond = threading.Condition()
        self._sessions = set()
        self._idle = []
        self._busy = set()
        self._pending = 0
        self._closing = False

    @property
    def active(self) -> int:
        with self._cond:
            return len(self._sessions)

    @property
    def idle(self) -> int:
        with self._cond:
            return len(self._idle)

    @property
    def in_use(self) -> int:
        with self._cond:
            return len(self._busy)

    @property
    def closing(self) -> bool:
        with self._cond:
            return self._closing

    def _has_room(self) -> bool:
        return not self.capacity or len(self._sessions) + self._pending < self.capacity

    def acquire(self) -> RconSession:
        with self._cond:
            while True:
                if self._closing:
                    raise PoolClosed("session pool is closed")
                if self._idle:
                    session = self._idle.pop()
                    self._busy.add(session)
                    return session
                if self._has_room():
                    self._pending += 1
                    break
                self._cond.wait()

        # Handshakes run outside the lock so one slow server reply does not
        # stall callers that could reuse an idle session.
        try:
            session = self._factory()
        except Exception:
            with self._cond:
                self._pending -= 1
                self._cond.notify_all()
            raise

        with self._cond:
            self._pending -= 1
            if self._closing:
                self._cond.notify_all()
                closing = True
            else:
                self._sessions.add(session)
                self._busy.add(session)
                closing = False

        if closing:
            session.close()
            raise PoolClosed("session pool closed while connecting")

        log.debug("Created RCON session %s (%d active)", session, self.active)
        return session

    def release(self, session: RconSession):
        with self._cond:
            if session not in self._busy:
                raise ValueError(f"{session!r} is not checked out of this pool")
            self._busy.discard(session)
            if session.usable:
                self._idle.append(session)
            else:
                # Failed sessions are never handed out again.
                self._sessions.discard(session)
                log.info("Discarding unusable RCON session %s", session)
            self._cond.notify_all()

        if not session.usable:
            session.close()

    @contextmanager
    def checkout(self):
        session = self.acquire()
        try:
            yield session
        finally:
            self.release(session)

    def close_all(self, timeout: Optional[float] = None):
        """Stop growth, wait for checked-out sessions, then close every session.

        In-flight commands are allowed to finish their write/read unit.
        Returns False if ``timeout`` expired before the pool drained.
        """
        with self._cond:
            self._closing = True
            self._cond.notify_all()
            drained = self._cond.wait_for(lambda: not self._busy and not self._pending, timeout=timeout)
            if not drained:
                log.warning("Timed out waiting for %d RCON sessions to be released", len(self._busy))
                return False
            sessions = list(self._sessions)
            self._sessions.clear()
            self._idle.clear()

        errors = []
        for session in sessions:
            try:
                session.close()
            except OSError as exc:
                log.error("Failed to close RCON session %s: %s", session, exc)
                errors.append(exc)

        log.info("Closed %d RCON sessions", len(sessions))
        if errors:
            raise RconConnectionError(
                f"failed to close {len(errors)} of {len(sessions)} RCON sessions: {errors[0]}"
            ) from errors[0]
        return True
