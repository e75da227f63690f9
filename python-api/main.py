"""
FastAPI application entry point.

Initializes the FastAPI app with:
- CORS configuration
- Login rate limiting
- Global exception handlers rendering {"error": message}
- ZeroDB connection lifecycle
- Health check endpoint
"""

import logging
import sys
from typing import Any

from api.routes import announcements, events, projects, questions, ratings, teams, users
from config import settings
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from integrations.zerodb.dependencies import connect_store, disconnect_store, is_store_ready
from middleware.rate_limit import RateLimitMiddleware
from services.timestamps import utcnow_iso
from starlette.exceptions import HTTPException as StarletteHTTPException


def setup_logging() -> None:
    """Configure root logging to stdout at the configured level."""
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL),
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


setup_logging()
logger = logging.getLogger(__name__)


# Initialize FastAPI app
app = FastAPI(
    title="DotHack Backend API",
    description="Hackathon management: events, teams, project submissions and judging",
    version=settings.API_VERSION,
    docs_url=f"/{settings.API_VERSION}/docs",
    redoc_url=f"/{settings.API_VERSION}/redoc",
    openapi_url="/openapi.json",
)


# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info(f"CORS configured with allowed origins: {settings.cors_origins}")

app.add_middleware(
    RateLimitMiddleware,
    limit=settings.LOGIN_RATE_LIMIT,
    window=settings.LOGIN_RATE_WINDOW,
)


# Register API Routes
app.include_router(users.router)
app.include_router(events.router)
app.include_router(projects.router)
app.include_router(ratings.router)
app.include_router(teams.router)
app.include_router(announcements.router)
app.include_router(questions.router)
logger.info("Registered user, event, project, rating, team and messaging routes")


# Global Exception Handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Render HTTP exceptions as ``{"error": detail}``.

    Args:
        request: The incoming request
        exc: The HTTP exception

    Returns:
        JSONResponse with the error message
    """
    if exc.status_code >= 500:
        logger.error(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}")
    else:
        logger.info(f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Render malformed request bodies and parameters as 400.

    Args:
        request: The incoming request
        exc: The validation error

    Returns:
        JSONResponse with the field-level errors under ``details``
    """
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation error",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler: 500 carrying the exception message.
    """
    logger.exception(f"Unhandled exception on {request.url.path}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc) or "Internal server error"},
    )


# Health Check Endpoint
@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, Any]:
    """
    Health check endpoint.

    Response Schema:
        {
            "status": "healthy",
            "timestamp": "2026-01-01T00:00:00.000+00:00",
            "database": "connected" | "disconnected"
        }
    """
    return {
        "status": "healthy",
        "timestamp": utcnow_iso(),
        "database": "connected" if is_store_ready(app) else "disconnected",
    }


# Startup event
@app.on_event("startup")
async def startup_event() -> None:
    """
    Log configuration and connect to ZeroDB.

    A failed connection is logged; requests retry it through the
    ``get_zerodb_client`` dependency.
    """
    logger.info("=" * 60)
    logger.info("DotHack Backend API Starting")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"API Version: {settings.API_VERSION}")
    logger.info(f"Log Level: {settings.LOG_LEVEL}")
    logger.info("=" * 60)

    if not await connect_store(app):
        logger.warning("Starting without a database connection")


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event() -> None:
    await disconnect_store(app)
    logger.info("DotHack Backend API Shutting Down")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
