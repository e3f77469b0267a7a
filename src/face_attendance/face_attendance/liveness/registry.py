from __future__ import annotations

import logging
import threading
from typing import Optional

from ..core.exceptions import UnknownLivenessSession
from .model import LivenessStatus
from .verifier import LivenessSession, LivenessVerifier

logger = logging.getLogger(__name__)


class LivenessSessionRegistry:
    """Live sessions keyed by id, for clients that sample over HTTP.

    Sessions are dropped once consumed, cancelled, or older than their
    deadline plus the verdict TTL.
    """

    def __init__(self, verifier: LivenessVerifier):
        self._verifier = verifier
        self._sessions: dict[str, LivenessSession] = {}
        self._lock = threading.Lock()

    def open(self, *, frame_width: Optional[float] = None) -> LivenessSession:
        self.purge_expired()
        session = self._verifier.start_session(frame_width=frame_width)
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> LivenessSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise UnknownLivenessSession()
        return session

    def sample(self, session_id: str, x: float, y: float) -> LivenessStatus:
        session = self.get(session_id)
        session.add_sample(x, y)
        return session.status()

    def no_face(self, session_id: str) -> LivenessStatus:
        session = self.get(session_id)
        session.record_no_face()
        return session.status()

    def status(self, session_id: str) -> LivenessStatus:
        session = self.get(session_id)
        session.poll()
        return session.status()

    def cancel(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise UnknownLivenessSession()
        session.cancel()

    def discard_finished(self, session_id: str) -> None:
        """Drop a session that can no longer be sampled (terminal or consumed)."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None or session.is_sampling:
                return
            self._sessions.pop(session_id)
        session.release()

    def purge_expired(self) -> int:
        now = self._verifier.now()
        ttl = self._verifier.config.verdict_ttl_seconds
        with self._lock:
            stale = []
            for session_id, session in self._sessions.items():
                session.poll()
                if session.consumed:
                    stale.append(session_id)
                elif session.finished_at is not None and now - session.finished_at > ttl:
                    stale.append(session_id)
            for session_id in stale:
                self._sessions.pop(session_id).release()
        if stale:
            logger.debug("Purged %d liveness sessions", len(stale))
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
