"""
Session Store - Sales Readiness Engine
readiness_engine/services/session_store.py

In-process conversation sessions. Each session owns its append-only
transcript and the latest analysis of it, so concurrent conversations never
share score state.

Every append or clear bumps the session revision. A result is recorded only
if it was computed from the newest revision seen so far, so an analysis
that finishes late cannot replace the result of a longer transcript.
"""
import threading
import structlog
from typing import Callable, Dict, Iterable, List, Optional, Tuple
from uuid import uuid4

from readiness_engine.core.exceptions import (
    SessionLimitExceededException,
    SessionNotFoundException,
)
from readiness_engine.models.transcript import TranscriptChunk
from readiness_engine.scoring.analysis_engine import AnalysisResult, epoch_millis
from readiness_engine.scoring.indicator_scorer import IndicatorScore

logger = structlog.get_logger(__name__)


def new_session_id(now_ms: int) -> str:
    return f"session_{now_ms}_{uuid4().hex[:9]}"


class ConversationSession:
    """One live conversation: transcript plus the latest scores for it."""

    def __init__(self, session_id: str, created_at: int):
        self.session_id = session_id
        self.created_at = created_at
        self._chunks: List[TranscriptChunk] = []
        self._scores: Dict[int, IndicatorScore] = {}
        self._latest: Optional[AnalysisResult] = None
        self._revision = 0
        self._recorded_revision = -1
        self._lock = threading.Lock()

    def append(self, chunks: Iterable[TranscriptChunk]) -> int:
        """Append chunks in order; returns the new transcript length."""
        with self._lock:
            self._chunks.extend(chunks)
            self._revision += 1
            return len(self._chunks)

    def transcript(self) -> Tuple[TranscriptChunk, ...]:
        with self._lock:
            return tuple(self._chunks)

    def snapshot(self) -> Tuple[int, Tuple[TranscriptChunk, ...]]:
        """Current revision together with the transcript at that revision."""
        with self._lock:
            return self._revision, tuple(self._chunks)

    def clear(self) -> None:
        """Drop the transcript and every score derived from it."""
        with self._lock:
            self._chunks.clear()
            self._scores.clear()
            self._latest = None
            self._revision += 1
            self._recorded_revision = self._revision

    def record(self, result: AnalysisResult, revision: int) -> bool:
        """
        Store `result`, computed from the transcript at `revision`.

        Returns False and keeps the current scores when a newer revision has
        already been recorded or the transcript was cleared after `revision`.
        """
        with self._lock:
            if revision < self._recorded_revision:
                return False
            self._scores = {s.id: s for s in result.indicators}
            self._latest = result
            self._recorded_revision = revision
            return True

    @property
    def latest_result(self) -> Optional[AnalysisResult]:
        return self._latest

    def get_indicator_score(self, indicator_id: int) -> Optional[IndicatorScore]:
        return self._scores.get(indicator_id)

    def get_all_scores(self) -> List[IndicatorScore]:
        return list(self._scores.values())


class SessionStore:
    """Create, fetch and remove sessions; bounded by max_sessions."""

    def __init__(self, max_sessions: int = 1000, clock: Callable[[], int] = epoch_millis):
        self.max_sessions = max_sessions
        self.clock = clock
        self._sessions: Dict[str, ConversationSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> ConversationSession:
        with self._lock:
            if len(self._sessions) >= self.max_sessions:
                logger.warning("session_limit_reached", limit=self.max_sessions)
                raise SessionLimitExceededException(self.max_sessions)

            now = self.clock()
            session_id = new_session_id(now)
            while session_id in self._sessions:
                session_id = new_session_id(now)

            session = ConversationSession(session_id, created_at=now)
            self._sessions[session_id] = session

        logger.info("session_created", session_id=session_id, active_sessions=len(self._sessions))
        return session

    def get(self, session_id: str) -> ConversationSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundException(session_id)
        return session

    def append(self, session_id: str, chunks: Iterable[TranscriptChunk]) -> int:
        length = self.get(session_id).append(chunks)
        logger.debug("transcript_appended", session_id=session_id, conversation_length=length)
        return length

    def clear(self, session_id: str) -> None:
        self.get(session_id).clear()
        logger.info("transcript_cleared", session_id=session_id)

    def delete(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFoundException(session_id)
        logger.info("session_deleted", session_id=session_id, active_sessions=len(self._sessions))
