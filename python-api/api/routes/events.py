"""
Event API Routes

Event creation and listing, the participation gate, and per-event
statistics, analytics and leaderboard.
"""

import logging
from typing import Any, Dict, List, Optional

from api.schemas.common import ErrorResponse, InsertResponse, SuccessResponse
from api.schemas.events import (
    EventAnalyticsResponse,
    EventCreateRequest,
    EventResponse,
    EventStatsResponse,
    JoinEventRequest,
    LeaderboardEntry,
)
from fastapi import APIRouter, Depends, Query
from integrations.zerodb.client import ZeroDBClient
from integrations.zerodb.dependencies import get_zerodb_client
from services.event_service import (
    create_event,
    get_event,
    get_event_analytics,
    get_event_stats,
    join_event,
    list_events,
)
from services.judging_service import get_leaderboard

# Configure logger
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(prefix="/events", tags=["Events"])


@router.post(
    "",
    response_model=InsertResponse,
    responses={
        200: {"description": "Event created"},
        400: {"model": ErrorResponse, "description": "Invalid request data"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create Event",
    description="""
    Create a hackathon event.

    - Status is derived from the current time and the start/end window
    - The participant list starts empty
    """,
)
async def create_event_endpoint(
    request: EventCreateRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    event = await create_event(
        zerodb_client=zerodb_client,
        title=request.title,
        description=request.description,
        start_date=request.start_date,
        end_date=request.end_date,
        organizer_id=request.organizer_id,
        location=request.location,
        max_participants=request.max_participants,
        prize_pool=request.prize_pool,
        judges=request.judges,
        tracks=request.tracks,
        submission_deadline=request.submission_deadline,
    )
    return {"id": event["event_id"]}


@router.get(
    "",
    response_model=List[EventResponse],
    responses={
        200: {"description": "Events retrieved"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="List Events",
    description="""
    List events. Stored statuses are reconciled with the current time first,
    so every returned event carries its up-to-date status.
    """,
)
async def list_events_endpoint(
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> List[Dict[str, Any]]:
    return await list_events(zerodb_client, skip=skip, limit=limit)


@router.get(
    "/{event_id}",
    response_model=EventResponse,
    responses={
        200: {"description": "Event found"},
        404: {"model": ErrorResponse, "description": "Event not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Get Event",
)
async def get_event_endpoint(
    event_id: str,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    return await get_event(zerodb_client, event_id)


@router.post(
    "/{event_id}/join",
    response_model=SuccessResponse,
    responses={
        200: {"description": "Joined event"},
        400: {"model": ErrorResponse, "description": "Completed, full, or already joined"},
        404: {"model": ErrorResponse, "description": "Event not found"},
        409: {"model": ErrorResponse, "description": "Event changed during join"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Join Event",
    description="""
    Add a user to the event's participants.

    Checks, in order: event exists, event not completed, capacity not
    reached, user not already a participant.
    """,
)
async def join_event_endpoint(
    event_id: str,
    request: JoinEventRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    return await join_event(zerodb_client, event_id=event_id, user_id=request.user_id)


@router.get(
    "/{event_id}/stats",
    response_model=EventStatsResponse,
    responses={
        200: {"description": "Stats computed"},
        404: {"model": ErrorResponse, "description": "Event not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Event Stats",
)
async def event_stats_endpoint(
    event_id: str,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    return await get_event_stats(zerodb_client, event_id)


@router.get(
    "/{event_id}/analytics",
    response_model=EventAnalyticsResponse,
    responses={
        200: {"description": "Analytics computed"},
        404: {"model": ErrorResponse, "description": "Event not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Event Analytics",
)
async def event_analytics_endpoint(
    event_id: str,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    return await get_event_analytics(zerodb_client, event_id)


@router.get(
    "/{event_id}/leaderboard",
    response_model=List[LeaderboardEntry],
    responses={
        200: {"description": "Leaderboard generated"},
        404: {"model": ErrorResponse, "description": "Event not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Event Leaderboard",
    description="""
    Rank the event's projects by mean overall rating, ties broken by the
    number of ratings. Unrated projects score 0.
    """,
)
async def leaderboard_endpoint(
    event_id: str,
    top_n: Optional[int] = Query(None, ge=1, description="Return only the first N entries"),
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> List[Dict[str, Any]]:
    leaderboard = await get_leaderboard(zerodb_client, event_id, top_n=top_n)
    logger.debug(f"Leaderboard for event {event_id}: {len(leaderboard)} entries")
    return leaderboard
