"""
Dependencies - Sales Readiness Engine
readiness_engine/core/dependencies.py

Process-wide providers for FastAPI dependency injection. The taxonomy is
write-once/read-many; the engine is stateless; conversation state lives in
the session store.
"""

from functools import lru_cache

from readiness_engine.config import get_settings
from readiness_engine.scoring.analysis_engine import AnalysisEngine
from readiness_engine.services.session_store import SessionStore
from readiness_engine.taxonomy.provider import JsonTaxonomyProvider


@lru_cache()
def get_taxonomy_provider() -> JsonTaxonomyProvider:
    """Get cached taxonomy provider (loads lazily on first use)."""
    return JsonTaxonomyProvider(get_settings().TAXONOMY_PATH)


@lru_cache()
def get_analysis_engine() -> AnalysisEngine:
    """Get cached AnalysisEngine bound to the process taxonomy."""
    settings = get_settings()
    return AnalysisEngine(
        get_taxonomy_provider(),
        min_transcript_chunks=settings.MIN_TRANSCRIPT_CHUNKS,
        price_sensitivity_pillar_id=settings.PRICE_SENSITIVITY_PILLAR_ID,
    )


@lru_cache()
def get_session_store() -> SessionStore:
    """Get cached SessionStore instance."""
    return SessionStore(max_sessions=get_settings().MAX_SESSIONS)
