from datetime import datetime, timezone

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

from readiness_engine.config import get_settings
from readiness_engine.core.dependencies import get_taxonomy_provider
from readiness_engine.core.exceptions import (
    SessionLimitExceededException,
    SessionNotFoundException,
    TaxonomyException,
)
from readiness_engine.core.logging import configure_logging

# IMPORT ROUTERS
from readiness_engine.routers.health import router as health_router
from readiness_engine.routers.analysis import router as analysis_router
from readiness_engine.routers.analysis import sessions_router

logger = structlog.get_logger(__name__)

settings = get_settings()

# SWAGGER UI - tag display order
_OPENAPI_TAGS = [
    {"name": "Root"},
    {"name": "Health"},
    {"name": "Analysis"},
    {"name": "Sessions"},
]

# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=_OPENAPI_TAGS,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


# EXCEPTION HANDLERS
def _error(status_code: int, error_code: str, message: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


@app.exception_handler(SessionNotFoundException)
async def session_not_found_handler(request: Request, exc: SessionNotFoundException):
    return _error(
        status.HTTP_404_NOT_FOUND,
        "SESSION_NOT_FOUND",
        str(exc),
        {"session_id": exc.session_id},
    )


@app.exception_handler(SessionLimitExceededException)
async def session_limit_handler(request: Request, exc: SessionLimitExceededException):
    return _error(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "SESSION_LIMIT_EXCEEDED",
        str(exc),
        {"limit": exc.limit},
    )


@app.exception_handler(TaxonomyException)
async def taxonomy_unavailable_handler(request: Request, exc: TaxonomyException):
    logger.error("taxonomy_unavailable", path=request.url.path, error=str(exc))
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "TAXONOMY_UNAVAILABLE", str(exc))


# REGISTER ROUTERS (order matches _OPENAPI_TAGS / Swagger UI display order)
app.include_router(health_router)                                       # Health
app.include_router(analysis_router, prefix=settings.API_V1_PREFIX)      # Analysis
app.include_router(sessions_router, prefix=settings.API_V1_PREFIX)      # Sessions


# ROOT ENDPOINT
@app.get("/", tags=["Root"], summary="Root endpoint")
async def root():
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "status": "running"
    }


# STARTUP EVENT
@app.on_event("startup")
async def startup_event():
    configure_logging(settings)
    logger.info("startup", app=settings.APP_NAME, env=settings.APP_ENV)

    # Warm the taxonomy so the first analysis does not pay for the load.
    # A failure here leaves the service up; /health reports it and
    # analysis requests answer 503 until the taxonomy loads.
    try:
        get_taxonomy_provider().load()
    except TaxonomyException as e:
        logger.error("taxonomy_warmup_failed", error=str(e))


# RUN WITH UVICORN
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "readiness_engine.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
