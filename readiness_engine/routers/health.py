"""
Health Check Router - Sales Readiness Engine
readiness_engine/routers/health.py

Reports service status and whether the taxonomy could be loaded.
"""
from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from readiness_engine.config import Settings, get_settings
from readiness_engine.core.dependencies import get_session_store, get_taxonomy_provider
from readiness_engine.core.exceptions import TaxonomyException
from readiness_engine.services.session_store import SessionStore
from readiness_engine.taxonomy.provider import JsonTaxonomyProvider

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    dependencies: Dict[str, str]
    taxonomy: Dict[str, int]
    active_sessions: int


@router.get("/health", response_model=HealthResponse, summary="Service health")
def health_check(
    settings: Settings = Depends(get_settings),
    provider: JsonTaxonomyProvider = Depends(get_taxonomy_provider),
    store: SessionStore = Depends(get_session_store),
):
    counts: Dict[str, int] = {}
    try:
        counts = {
            "pillars": len(provider.list_pillars()),
            "indicators": len(provider.list_indicators()),
        }
        taxonomy_status = "healthy"
    except TaxonomyException as e:
        taxonomy_status = f"unhealthy: {e}"

    body = HealthResponse(
        status="healthy" if taxonomy_status == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        dependencies={"taxonomy": taxonomy_status},
        taxonomy=counts,
        active_sessions=len(store),
    )
    if body.status != "healthy":
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(mode="json"),
        )
    return body
