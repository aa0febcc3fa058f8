import logging
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    session_id: str
    user_id: str
    expires_at: float


class SessionStore:
    """In-memory login sessions.

    Expired sessions are never returned. They are swept out of the map at
    most once per check period, on the next access.
    """

    def __init__(
        self,
        ttl_seconds: int,
        check_period_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._check_period_seconds = check_period_seconds
        self._clock = clock
        self._lock = Lock()
        self._sessions: dict[str, Session] = {}
        self._last_prune = clock()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, user_id: str) -> Session:
        self._maybe_prune()
        session = Session(
            session_id=secrets.token_urlsafe(32),
            user_id=user_id,
            expires_at=self._clock() + self._ttl_seconds,
        )
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> Session | None:
        self._maybe_prune()
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if session.expires_at <= self._clock():
            self.delete(session_id)
            return None
        return session

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def prune(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, session in self._sessions.items() if session.expires_at <= now]
            for key in expired:
                del self._sessions[key]
            self._last_prune = now
        if expired:
            logger.info("Pruned %d expired sessions", len(expired))
        return len(expired)

    def _maybe_prune(self) -> None:
        if self._clock() - self._last_prune >= self._check_period_seconds:
            self.prune()
