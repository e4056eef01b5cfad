"""
In-memory session state for the FastAPI application.

Holds at most one GenerationState per UI session. Nothing is persisted:
restarting the process forgets every session.

Sessions are bounded: creating a session evicts sessions idle for longer than
SESSION_IDLE_TTL_SECONDS, then the least recently used ones beyond
MAX_SESSIONS. An evicted session behaves like one that never existed.
"""
# stdlib imports
import logging
import time
import uuid
from collections import OrderedDict
from collections.abc import Callable
from functools import lru_cache

# local imports
from constants import MAX_SESSIONS, SESSION_IDLE_TTL_SECONDS
from models import GenerationState, PromoRequest


__all__ = ("SessionStore", "SessionNotFoundError", "GenerationInProgressError", "get_session_store")

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """Raised for a user_session_id that was never created (or was evicted)."""


class GenerationInProgressError(ValueError):
    """Raised when a session submits while its previous run is still pending."""


class SessionStore:
    """
    Maps user_session_id -> current GenerationState (or None after reset).

    All mutations are plain synchronous dict operations. Callers on the event
    loop never await between checking and setting, so "one pending run per
    session" holds without a lock.

    _states is kept in least-recently-used order: every access moves the
    session to the end, so the oldest idle session is always first.
    """

    def __init__(
        self,
        max_sessions: int = MAX_SESSIONS,
        idle_ttl_seconds: float = SESSION_IDLE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_sessions = max_sessions
        self.idle_ttl_seconds = idle_ttl_seconds
        self.clock = clock
        self._states: OrderedDict[str, GenerationState | None] = OrderedDict()
        self._last_seen: dict[str, float] = {}


    def __len__(self) -> int:
        return len(self._states)


    def create(self) -> str:
        self._evict()
        user_session_id = uuid.uuid4().hex
        self._states[user_session_id] = None
        self._touch(user_session_id)
        return user_session_id


    def get(self, user_session_id: str) -> GenerationState | None:
        if user_session_id not in self._states:
            raise SessionNotFoundError(user_session_id)
        self._touch(user_session_id)
        return self._states[user_session_id]


    def start(self, user_session_id: str, request: PromoRequest) -> GenerationState:
        """
        Begin a new run in the pending state.

        Raises:
            SessionNotFoundError: Unknown session.
            GenerationInProgressError: The session already has a pending run.
        """
        current = self.get(user_session_id)
        if current is not None and current.status == "pending":
            raise GenerationInProgressError("An image is already being generated for this session.")

        state = GenerationState(status="pending", run_id=uuid.uuid4().hex, request=request)
        self._states[user_session_id] = state
        return state


    def finish(self, user_session_id: str, run_id: str, **changes) -> GenerationState | None:
        """
        Move a pending run to its terminal state.

        Returns:
            The updated state, or None when the run is stale (the session was
            reset, resubmitted or evicted meanwhile). Stale results are dropped.
        """
        current = self._states.get(user_session_id)
        if current is None or current.run_id != run_id or current.status != "pending":
            return None

        updated = current.model_copy(update=changes)
        self._states[user_session_id] = updated
        self._touch(user_session_id)
        return updated


    def reset(self, user_session_id: str) -> None:
        """Forget the session's current run. The session itself stays valid."""
        self.get(user_session_id)
        self._states[user_session_id] = None


    def _touch(self, user_session_id: str) -> None:
        self._last_seen[user_session_id] = self.clock()
        self._states.move_to_end(user_session_id)


    def _evict(self) -> None:
        """Drop idle sessions, then the oldest ones until a new session fits."""
        now = self.clock()
        evicted = 0

        while self._states:
            oldest = next(iter(self._states))
            idle = now - self._last_seen[oldest] > self.idle_ttl_seconds
            full = len(self._states) >= self.max_sessions
            if not (idle or full):
                break
            del self._states[oldest]
            del self._last_seen[oldest]
            evicted += 1

        if evicted:
            logger.info(f"Evicted {evicted} session(s); {len(self._states)} remain")


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    """Process-wide store shared by all requests."""
    return SessionStore()
