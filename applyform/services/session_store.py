import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from applyform.core.config import get_settings
from applyform.core.enums import SubmissionStatus
from applyform.core.errors import SessionNotFoundError
from applyform.core.logging import get_logger
from applyform.forms.state import ApplicationDraft, SessionState
from applyform.services.form_machine import begin_submit, finish_submit, start_session
from applyform.services.submission_service import NETWORK_NOTICE, SubmissionResult

logger = get_logger(__name__)


@dataclass
class ApplicationSession:
    id: str
    state: SessionState
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_seen: float = field(default_factory=time.monotonic)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class SessionStore:
    """Holds open application sessions in process memory.

    Nothing here outlives the process. A session that has not been touched for
    ``ttl_seconds`` (``session_ttl_seconds`` from settings when not given) is
    dropped together with its attachments, unless a submission is in flight.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sessions: dict[str, ApplicationSession] = {}
        self._lock = threading.Lock()
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _evict_expired(self, now: float) -> None:
        ttl = self._ttl_seconds if self._ttl_seconds is not None else get_settings().session_ttl_seconds
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if now - session.last_seen > ttl and session.state.submission != SubmissionStatus.SUBMITTING
        ]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.info("Expired application sessions evicted", extra={"extra": {"count": len(expired)}})

    def create(self) -> ApplicationSession:
        now = self._clock()
        session = ApplicationSession(id=uuid.uuid4().hex, state=start_session(), last_seen=now)
        with self._lock:
            self._evict_expired(now)
            self._sessions[session.id] = session
        logger.info("Application session started", extra={"extra": {"session_id": session.id}})
        return session

    def get(self, session_id: str) -> ApplicationSession:
        now = self._clock()
        with self._lock:
            self._evict_expired(now)
            session = self._sessions.get(session_id)
            if session is not None:
                session.last_seen = now
        if session is None:
            raise SessionNotFoundError(f"Application session {session_id} not found")
        return session

    def get_state(self, session_id: str) -> SessionState:
        return self.get(session_id).state

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def apply(self, session_id: str, transition: Callable[..., SessionState], *args: Any) -> SessionState:
        session = self.get(session_id)
        with session.lock:
            session.state = transition(session.state, *args)
            return session.state

    def submit(
        self,
        session_id: str,
        sender: Callable[[ApplicationDraft], SubmissionResult],
    ) -> SessionState:
        """Run one submission for the session.

        The in-flight claim happens under the session lock, so a concurrent
        second submit raises ``SubmissionInFlightError`` instead of sending.
        The request itself runs outside the lock and the claim is released
        whatever the outcome.
        """
        session = self.get(session_id)
        with session.lock:
            session.state = begin_submit(session.state)
            if session.state.submission != SubmissionStatus.SUBMITTING:
                return session.state
            draft = session.state.draft

        result: SubmissionResult | None = None
        try:
            result = sender(draft)
        finally:
            if result is None:
                result = SubmissionResult(status="failed", reason="unexpected_error", notice=NETWORK_NOTICE)
            with session.lock:
                session.state = finish_submit(session.state, result)
                session.last_seen = self._clock()

        logger.info(
            "Application submission finished",
            extra={"extra": {"session_id": session_id, "status": result.status, "reason": result.reason}},
        )
        return session.state


session_store = SessionStore()
