"""
FastAPI Dependencies for ZeroDB Client

The store client is created once during application startup and kept on
``app.state``. Routes obtain it through ``get_zerodb_client``, which acts as
the readiness gate: traffic is rejected until the store has answered a probe.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status

from config import settings
from .client import ZeroDBClient
from .exceptions import ZeroDBError

logger = logging.getLogger(__name__)


def build_zerodb_client() -> ZeroDBClient:
    """
    Build a ZeroDB client from application settings.

    Raises:
        ValueError: If ZERODB_API_KEY or ZERODB_PROJECT_ID is not configured
    """
    return ZeroDBClient(
        api_key=settings.ZERODB_API_KEY,
        project_id=settings.ZERODB_PROJECT_ID,
        base_url=settings.ZERODB_BASE_URL,
        timeout=settings.ZERODB_TIMEOUT,
    )


async def connect_store(app: FastAPI) -> bool:
    """
    Create the store client, probe it, and mark the app ready.

    Returns:
        True if the store answered the probe
    """
    app.state.store_ready = False
    try:
        client = build_zerodb_client()
    except ValueError as e:
        logger.error(f"ZeroDB client not configured: {str(e)}")
        return False

    try:
        project = await client.get_project_info()
    except ZeroDBError as e:
        logger.error(f"ZeroDB connection probe failed: {e.message}")
        await client.close()
        return False

    app.state.zerodb = client
    app.state.store_ready = True
    logger.info(f"Connected to ZeroDB project {project.get('project_id', client.project_id)}")
    return True


async def disconnect_store(app: FastAPI) -> None:
    """Close the store client if one was established."""
    client = getattr(app.state, "zerodb", None)
    if client is not None:
        await client.close()
    app.state.zerodb = None
    app.state.store_ready = False


def is_store_ready(app: FastAPI) -> bool:
    return bool(getattr(app.state, "store_ready", False))


async def get_zerodb_client(request: Request) -> ZeroDBClient:
    """
    Dependency providing the connected ZeroDB client.

    Retries the connection once when the startup probe failed.

    Raises:
        HTTPException: 500 if the store is not connected

    Example:
        >>> @router.get("/events")
        >>> async def list_events(zerodb: ZeroDBClient = Depends(get_zerodb_client)):
        ...     return await zerodb.tables.query_rows("events")
    """
    app = request.app
    if not is_store_ready(app):
        logger.warning("Store not ready, retrying connection")
        if not await connect_store(app):
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Database not connected",
            )
    return app.state.zerodb
