"""
Compliance Engine Service - Main Application
============================================

FastAPI application for charity compliance scoring and annual-return
reporting.

Version: 0.1.0
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from services.compliance_engine import __version__
from services.compliance_engine.exceptions import (
    ComplianceEngineError,
    InvalidRequestError,
    NotFoundError,
    UpstreamReadError,
)
from services.compliance_engine.routes import annual_return, scores
from shared.config import settings
from shared.database.postgres import PostgresClient
from shared.logging import bind_context, clear_context, get_logger, setup_logging
from shared.models.common import ErrorResponse, HealthResponse


# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="compliance-engine",
)

logger = get_logger(__name__)

GENERIC_READ_FAILURE = "Failed to generate data"


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "compliance_engine_starting",
        environment=settings.environment.value,
        port=settings.ports.compliance_engine,
    )

    try:
        PostgresClient.get_engine()
        logger.info("postgres_engine_ready")
    except Exception as e:
        logger.error("startup_failed", error=str(e))
        raise

    yield

    logger.info("compliance_engine_shutting_down")
    await PostgresClient.close()


app = FastAPI(
    title="Charity Compliance Engine",
    description="Compliance scoring and annual-return reporting",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next: Any) -> Any:
    """Bind the request path to every log line emitted while handling it."""
    clear_context()
    bind_context(method=request.method, path=request.url.path)
    try:
        return await call_next(request)
    finally:
        clear_context()


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Returns health status of the service and the record store.
    """
    components: dict[str, dict[str, Any]] = {
        "postgres": await PostgresClient.health_check(),
    }
    all_healthy = all(c.get("status") == "healthy" for c in components.values())

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        service="compliance-engine",
        version=__version__,
        components=components,
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Charity Compliance Engine",
        "version": __version__,
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    scores.router,
    prefix="/api/v1/organizations",
    tags=["Compliance Scores"],
)

app.include_router(
    annual_return.router,
    prefix="/api/v1/organizations",
    tags=["Annual Return"],
)


# ============================================================================
# Error Handlers
# ============================================================================


_STATUS_CODES: dict[type[ComplianceEngineError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidRequestError: 422,
    UpstreamReadError: status.HTTP_502_BAD_GATEWAY,
}


def _error_response(status_code: int, error: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error.model_dump(mode="json"))


@app.exception_handler(ComplianceEngineError)
async def compliance_error_handler(request: Request, exc: ComplianceEngineError) -> JSONResponse:
    """Map engine errors onto HTTP statuses."""
    status_code = next(
        (code for kind, code in _STATUS_CODES.items() if isinstance(exc, kind)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )

    logger.warning(
        "compliance_engine_error",
        error_type=type(exc).__name__,
        error=exc.message,
        status_code=status_code,
        path=request.url.path,
    )

    # Upstream details stay in the logs
    if isinstance(exc, UpstreamReadError):
        return _error_response(
            status_code,
            ErrorResponse(error=GENERIC_READ_FAILURE, error_code="upstream_read_failed"),
        )

    return _error_response(
        status_code,
        ErrorResponse(
            error=exc.message,
            error_code=type(exc).__name__,
            details=exc.details or None,
        ),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return _error_response(exc.status_code, ErrorResponse(error=str(exc.detail)))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(error="Internal server error"),
    )


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.compliance_engine.main:app",
        host="0.0.0.0",
        port=settings.ports.compliance_engine,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
