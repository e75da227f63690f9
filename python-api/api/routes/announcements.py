"""
Announcement API Routes
"""

import logging
from typing import Any, Dict, List, Optional

from api.schemas.common import ErrorResponse, InsertResponse
from api.schemas.messaging import AnnouncementCreateRequest, AnnouncementResponse
from fastapi import APIRouter, Depends, Query
from integrations.zerodb.client import ZeroDBClient
from integrations.zerodb.dependencies import get_zerodb_client
from services.messaging_service import create_announcement, list_announcements

# Configure logger
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(prefix="/announcements", tags=["Announcements"])


@router.post(
    "",
    response_model=InsertResponse,
    responses={
        200: {"description": "Announcement published"},
        400: {"model": ErrorResponse, "description": "Invalid request data"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Publish Announcement",
)
async def create_announcement_endpoint(
    request: AnnouncementCreateRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    announcement = await create_announcement(zerodb_client, request.model_dump())
    return {"id": announcement["announcement_id"]}


@router.get(
    "",
    response_model=List[AnnouncementResponse],
    responses={
        200: {"description": "Announcements retrieved"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="List Announcements",
    description="Announcements newest first, optionally for exactly one event.",
)
async def list_announcements_endpoint(
    event_id: Optional[str] = Query(None, description="Filter by event"),
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> List[Dict[str, Any]]:
    return await list_announcements(zerodb_client, event_id=event_id)


@router.get(
    "/{event_id}",
    response_model=List[AnnouncementResponse],
    responses={
        200: {"description": "Announcements retrieved"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Announcements for an Event",
    description="Announcements for the event plus global ones, newest first.",
)
async def event_announcements_endpoint(
    event_id: str,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> List[Dict[str, Any]]:
    return await list_announcements(zerodb_client, event_id=event_id, include_global=True)
