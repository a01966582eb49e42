"""
Analysis session controller.

A session holds at most one MediaFile / AnalysisResult pair and moves
through idle -> loading -> {result | error}; reset() returns to idle from
any state. Only one analysis may be in flight per session.

begin() hands out a generation token. complete()/fail() are applied only
while that token is current, so an outcome arriving after a reset (or after
a newer submission) is dropped instead of resurfacing stale artifacts.
"""

import logging
import time
from typing import Dict, Optional

from verisight.config import settings
from verisight.core.exceptions import SessionBusyError
from verisight.schemas.analysis import AnalysisResult, MediaFile
from verisight.schemas.session import MediaSummary, SessionSnapshot, SessionState

logger = logging.getLogger(__name__)


class AnalysisSession:
    def __init__(self, session_id: str):
        self.session_id = session_id
        self.state = SessionState.IDLE
        self.media: Optional[MediaFile] = None
        self.result: Optional[AnalysisResult] = None
        self.error: Optional[str] = None
        self._generation = 0
        self.last_touched = time.time()

    def touch(self) -> None:
        self.last_touched = time.time()

    @property
    def is_busy(self) -> bool:
        return self.state == SessionState.LOADING

    def ensure_idle(self) -> None:
        """Reject new submissions while an analysis is in flight."""
        if self.is_busy:
            logger.info(f"[SESSION] {self.session_id}: rejected submission while loading")
            raise SessionBusyError()

    def begin(self, media: MediaFile) -> int:
        self.ensure_idle()
        self._generation += 1
        self.state = SessionState.LOADING
        self.media = media
        self.result = None
        self.error = None
        logger.info(f"[SESSION] {self.session_id}: loading {media.file.name} (gen {self._generation})")
        return self._generation

    def complete(self, token: int, result: AnalysisResult) -> bool:
        if not self._is_current(token):
            logger.info(f"[SESSION] {self.session_id}: dropped stale result (gen {token})")
            return False
        self.state = SessionState.RESULT
        self.result = result
        self.touch()
        return True

    def fail(self, token: int, message: str) -> bool:
        if not self._is_current(token):
            logger.info(f"[SESSION] {self.session_id}: dropped stale error (gen {token})")
            return False
        self.state = SessionState.ERROR
        self.error = message
        self.touch()
        return True

    def fail_ingestion(self, message: str) -> None:
        """A file that could not be read leaves no media behind, only the message."""
        if self.is_busy:
            return
        self._generation += 1
        self.state = SessionState.ERROR
        self.media = None
        self.result = None
        self.error = message

    def reset(self) -> None:
        self._generation += 1
        self.state = SessionState.IDLE
        self.media = None
        self.result = None
        self.error = None
        logger.info(f"[SESSION] {self.session_id}: reset")

    def _is_current(self, token: int) -> bool:
        return self.state == SessionState.LOADING and token == self._generation

    def snapshot(self) -> SessionSnapshot:
        media = None
        if self.media is not None:
            media = MediaSummary(
                file_name=self.media.file.name,
                mime_type=self.media.file.type,
                size=self.media.file.size,
                type=self.media.type,
                preview=self.media.preview,
            )
        return SessionSnapshot(state=self.state, media=media, result=self.result, error=self.error)


class SessionRegistry:
    """
    In-memory sessions keyed by X-Session-ID. Nothing is persisted.

    Finished sessions still hold their whole preview, so once the registry
    reaches `max_sessions` it drops sessions idle for longer than
    `idle_ttl_sec`, then the least recently touched ones. Loading sessions
    are never evicted.
    """

    def __init__(self, max_sessions: int = None, idle_ttl_sec: int = None):
        self.max_sessions = max_sessions or settings.max_sessions
        self.idle_ttl_sec = idle_ttl_sec or settings.session_idle_ttl_sec
        self._sessions: Dict[str, AnalysisSession] = {}

    def find(self, session_id: str) -> Optional[AnalysisSession]:
        """Look up without creating."""
        session = self._sessions.get(session_id)
        if session is not None:
            session.touch()
        return session

    def get(self, session_id: str) -> AnalysisSession:
        session = self.find(session_id)
        if session is None:
            if len(self._sessions) >= self.max_sessions:
                self._evict(time.time())
            session = AnalysisSession(session_id)
            self._sessions[session_id] = session
        return session

    def _evict(self, now: float) -> None:
        expired = [
            sid for sid, s in self._sessions.items()
            if not s.is_busy and now - s.last_touched > self.idle_ttl_sec
        ]
        for sid in expired:
            del self._sessions[sid]

        overflow = len(self._sessions) - self.max_sessions + 1
        evicted = 0
        if overflow > 0:
            idle = sorted(
                (s for s in self._sessions.values() if not s.is_busy),
                key=lambda s: s.last_touched,
            )
            for s in idle[:overflow]:
                del self._sessions[s.session_id]
                evicted += 1

        logger.info(f"[SESSION] Cleanup: removed {len(expired)} expired and {evicted} least recent sessions.")

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
