"""
routers/analysis.py - Readiness Analysis Endpoints

Endpoints (mounted under API_V1_PREFIX):
  POST   /analysis                                   - Full pipeline over a transcript
  POST   /analysis/incremental                       - Baseline below the minimum length
  POST   /analysis/close-check                       - Close-blocker gating
  GET    /objections/{objection_id}/script           - Rebuttal script for an objection
  POST   /sessions                                   - Start a conversation session
  POST   /sessions/{session_id}/transcript           - Append transcript chunks
  POST   /sessions/{session_id}/analyze              - Incremental analysis of a session
  GET    /sessions/{session_id}/indicators/{ind_id}  - Latest score for one indicator
  DELETE /sessions/{session_id}/transcript           - Clear a session transcript
  DELETE /sessions/{session_id}                      - Remove a session
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from readiness_engine.config import Settings, get_settings
from readiness_engine.core.dependencies import get_analysis_engine, get_session_store
from readiness_engine.models.analysis import (
    AnalysisResponse,
    AppendTranscriptRequest,
    CloseCheckResponse,
    IndicatorScoreResponse,
    ObjectionScriptResponse,
    SessionCreatedResponse,
    TranscriptAppendedResponse,
    TranscriptRequest,
)
from readiness_engine.scoring.analysis_engine import AnalysisEngine
from readiness_engine.scoring.objection_ranker import ObjectionRanker
from readiness_engine.services.session_store import SessionStore

router = APIRouter(tags=["Analysis"])
sessions_router = APIRouter(prefix="/sessions", tags=["Sessions"])


# =====================================================================
# Stateless analysis
# =====================================================================

@router.post("/analysis", response_model=AnalysisResponse, summary="Analyze a transcript")
def analyze_transcript(
    body: TranscriptRequest,
    engine: AnalysisEngine = Depends(get_analysis_engine),
):
    return AnalysisResponse.from_result(engine.analyze(body.transcript))


@router.post(
    "/analysis/incremental",
    response_model=AnalysisResponse,
    summary="Analyze a transcript (baseline while the conversation is short)",
)
def analyze_transcript_incremental(
    body: TranscriptRequest,
    engine: AnalysisEngine = Depends(get_analysis_engine),
):
    return AnalysisResponse.from_result(engine.analyze_incremental(body.transcript))


@router.post("/analysis/close-check", response_model=CloseCheckResponse, summary="Close blockers")
def close_check(
    body: TranscriptRequest,
    engine: AnalysisEngine = Depends(get_analysis_engine),
):
    return CloseCheckResponse.from_check(engine.check_close_blockers(body.transcript))


@router.get(
    "/objections/{objection_id}/script",
    response_model=ObjectionScriptResponse,
    summary="Rebuttal script for an objection",
)
def get_objection_script(
    objection_id: str,
    customer_name: Optional[str] = Query(default=None, min_length=1, max_length=100),
    settings: Settings = Depends(get_settings),
):
    script = ObjectionRanker.generate_script(
        objection_id, customer_name or settings.DEFAULT_CUSTOMER_NAME
    )
    if script is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No script template for objection '{objection_id}'",
        )
    return ObjectionScriptResponse.from_script(objection_id, script)


# =====================================================================
# Sessions
# =====================================================================

@sessions_router.post(
    "",
    response_model=SessionCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a conversation session",
)
def create_session(store: SessionStore = Depends(get_session_store)):
    session = store.create()
    return SessionCreatedResponse(session_id=session.session_id, created_at=session.created_at)


@sessions_router.post(
    "/{session_id}/transcript",
    response_model=TranscriptAppendedResponse,
    summary="Append transcript chunks",
)
def append_transcript(
    session_id: str,
    body: AppendTranscriptRequest,
    store: SessionStore = Depends(get_session_store),
):
    length = store.append(session_id, body.chunks)
    return TranscriptAppendedResponse(session_id=session_id, conversation_length=length)


@sessions_router.post(
    "/{session_id}/analyze",
    response_model=AnalysisResponse,
    summary="Analyze a session transcript",
)
def analyze_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    engine: AnalysisEngine = Depends(get_analysis_engine),
):
    session = store.get(session_id)
    return AnalysisResponse.from_result(engine.analyze_session(session))


@sessions_router.get(
    "/{session_id}/indicators/{indicator_id}",
    response_model=IndicatorScoreResponse,
    summary="Latest score for one indicator",
)
def get_indicator_score(
    session_id: str,
    indicator_id: int,
    store: SessionStore = Depends(get_session_store),
):
    score = store.get(session_id).get_indicator_score(indicator_id)
    if score is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Indicator {indicator_id} has not been scored in session {session_id}",
        )
    return IndicatorScoreResponse.from_score(score)


@sessions_router.delete(
    "/{session_id}/transcript",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear a session transcript",
)
def clear_transcript(session_id: str, store: SessionStore = Depends(get_session_store)):
    store.clear(session_id)


@sessions_router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a session",
)
def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    store.delete(session_id)
