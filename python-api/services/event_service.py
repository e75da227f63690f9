"""
Event Service

Event creation, lifecycle status reconciliation, participation gate, and
per-event statistics. Uses ZeroDB tables API for data persistence.
"""

import logging
import uuid
from collections import Counter
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from fastapi import HTTPException
from fastapi import status as http_status
from integrations.zerodb.client import ZeroDBClient
from integrations.zerodb.exceptions import ZeroDBError
from services.errors import store_failure, unexpected_failure
from services.timestamps import parse_timestamp, to_iso, utcnow, utcnow_iso

# Configure logger
logger = logging.getLogger(__name__)

EventStatus = Literal["upcoming", "active", "completed"]

# Lifecycle order; statuses only ever move forward.
_STATUS_ORDER = {"upcoming": 0, "active": 1, "completed": 2}


def resolve_event_status(start: datetime, end: datetime, now: datetime) -> EventStatus:
    """
    Derive an event's status from its window and the current time.

    ``upcoming`` before start, ``active`` inside [start, end], ``completed``
    after end.
    """
    if now < start:
        return "upcoming"
    if now <= end:
        return "active"
    return "completed"


def effective_status(event: Dict[str, Any], now: Optional[datetime] = None) -> str:
    """
    Stored status advanced by the clock.

    Never moves an event backwards: a stored ``completed`` stays completed
    even if its dates were edited into the future.
    """
    stored = event.get("status", "upcoming")
    start = parse_timestamp(event.get("start_date"))
    end = parse_timestamp(event.get("end_date"))
    if start is None or end is None:
        return stored

    derived = resolve_event_status(start, end, now or utcnow())
    if _STATUS_ORDER.get(derived, 0) > _STATUS_ORDER.get(stored, 0):
        return derived
    return stored


async def create_event(
    zerodb_client: ZeroDBClient,
    title: str,
    description: str,
    start_date: datetime,
    end_date: datetime,
    organizer_id: str,
    location: Optional[str] = None,
    max_participants: Optional[int] = None,
    prize_pool: Optional[str] = None,
    judges: Optional[List[str]] = None,
    tracks: Optional[List[str]] = None,
    submission_deadline: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Create a new event with its status computed from the current time.

    Args:
        zerodb_client: ZeroDB client instance
        title: Event title
        description: Event description
        start_date: When the event window opens
        end_date: When the event window closes
        organizer_id: User ID of the organizer
        location: Optional venue or "online"
        max_participants: Optional participant cap
        prize_pool: Optional prize description
        judges: User IDs assigned as judges
        tracks: Track names
        submission_deadline: Optional deadline shown to participants

    Returns:
        Dict with the stored event including event_id

    Raises:
        HTTPException: 400 if end_date is not after start_date
        HTTPException: 500 for database errors

    Example:
        >>> event = await create_event(
        ...     client,
        ...     title="Spring Hack",
        ...     description="48h build sprint",
        ...     start_date=datetime(2026, 3, 1, tzinfo=timezone.utc),
        ...     end_date=datetime(2026, 3, 3, tzinfo=timezone.utc),
        ...     organizer_id="user-1",
        ... )
        >>> event["status"]
        'upcoming'
    """
    try:
        if end_date <= start_date:
            raise HTTPException(
                status_code=http_status.HTTP_400_BAD_REQUEST,
                detail="end_date must be after start_date",
            )

        event_id = str(uuid.uuid4())
        event_status = resolve_event_status(
            parse_timestamp(start_date), parse_timestamp(end_date), utcnow()
        )

        event_row = {
            "event_id": event_id,
            "title": title.strip(),
            "description": description,
            "start_date": to_iso(start_date),
            "end_date": to_iso(end_date),
            "submission_deadline": to_iso(submission_deadline) if submission_deadline else None,
            "location": location,
            "max_participants": max_participants,
            "prize_pool": prize_pool,
            "status": event_status,
            "participants": [],
            "judges": list(judges or []),
            "tracks": list(tracks or []),
            "organizer_id": organizer_id,
            "created_at": utcnow_iso(),
        }

        await zerodb_client.tables.insert_rows("events", rows=[event_row])

        logger.info(f"Created event {event_id} with status '{event_status}'")
        return event_row

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, "creating event", e)
    except Exception as e:
        raise unexpected_failure(logger, "creating event", e)


async def reconcile_event_statuses(
    zerodb_client: ZeroDBClient,
    now: Optional[datetime] = None,
) -> Dict[str, int]:
    """
    Bring stored statuses in line with the clock.

    Two guarded bulk updates: upcoming events whose window is open become
    ``active``; upcoming or active events whose end has passed become
    ``completed``. Runs before every event listing; there is no background
    scheduler.

    Returns:
        Dict with counts of events moved to each status
    """
    now_iso = to_iso(now or utcnow())

    activated = await zerodb_client.tables.update_rows(
        "events",
        filter={
            "status": "upcoming",
            "start_date": {"$lte": now_iso},
            "end_date": {"$gte": now_iso},
        },
        update={"$set": {"status": "active"}},
    )
    completed = await zerodb_client.tables.update_rows(
        "events",
        filter={
            "status": {"$in": ["upcoming", "active"]},
            "end_date": {"$lt": now_iso},
        },
        update={"$set": {"status": "completed"}},
    )

    counts = {
        "active": int(activated.get("modified_count", 0) or 0),
        "completed": int(completed.get("modified_count", 0) or 0),
    }
    if counts["active"] or counts["completed"]:
        logger.info(
            f"Reconciled event statuses: {counts['active']} activated, "
            f"{counts['completed']} completed"
        )
    return counts


async def list_events(
    zerodb_client: ZeroDBClient,
    skip: int = 0,
    limit: int = 100,
) -> List[Dict[str, Any]]:
    """
    List events after reconciling their statuses.

    Raises:
        HTTPException: 500 for database errors
    """
    try:
        now = utcnow()
        await reconcile_event_statuses(zerodb_client, now=now)
        events = await zerodb_client.tables.query_rows("events", skip=skip, limit=limit)
        return [{**event, "status": effective_status(event, now)} for event in events]

    except ZeroDBError as e:
        raise store_failure(logger, "listing events", e)
    except Exception as e:
        raise unexpected_failure(logger, "listing events", e)


async def fetch_event(zerodb_client: ZeroDBClient, event_id: str) -> Dict[str, Any]:
    """
    Load one event or raise 404. Store errors propagate to the caller.
    """
    events = await zerodb_client.tables.query_rows(
        "events",
        filter={"event_id": event_id},
        limit=1,
    )
    if not events:
        logger.warning(f"Event not found: {event_id}")
        raise HTTPException(
            status_code=http_status.HTTP_404_NOT_FOUND,
            detail="Event not found",
        )
    return events[0]


async def get_event(zerodb_client: ZeroDBClient, event_id: str) -> Dict[str, Any]:
    """
    Get a single event, persisting any forward status transition it is due.

    Raises:
        HTTPException: 404 if event not found
        HTTPException: 500 for database errors
    """
    try:
        event = await fetch_event(zerodb_client, event_id)

        current = effective_status(event)
        if current != event.get("status"):
            await zerodb_client.tables.update_rows(
                "events",
                filter={"event_id": event_id, "status": event.get("status")},
                update={"$set": {"status": current}},
            )
            logger.info(f"Event {event_id} moved from '{event.get('status')}' to '{current}'")
            event = {**event, "status": current}

        return event

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"getting event {event_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"getting event {event_id}", e)


def check_join_eligibility(event: Dict[str, Any], user_id: str) -> None:
    """
    Participation gate. Checks run in order and the first failure wins.

    Raises:
        HTTPException: 400 if the event is completed, full, or already joined
    """
    if effective_status(event) == "completed":
        raise HTTPException(
            status_code=http_status.HTTP_400_BAD_REQUEST,
            detail="Cannot join completed event",
        )

    participants = event.get("participants") or []
    max_participants = event.get("max_participants")
    if max_participants and len(participants) >= max_participants:
        raise HTTPException(
            status_code=http_status.HTTP_400_BAD_REQUEST,
            detail="Event is full",
        )

    if user_id in participants:
        raise HTTPException(
            status_code=http_status.HTTP_400_BAD_REQUEST,
            detail="Already joined this event",
        )


async def join_event(
    zerodb_client: ZeroDBClient,
    event_id: str,
    user_id: str,
) -> Dict[str, Any]:
    """
    Add a user to an event's participant set.

    The gate is evaluated against a fresh read so the caller gets a precise
    error, then the insert is issued with the same conditions folded into
    the store filter. If another request won the race the event is re-read
    and the gate re-evaluated.

    Raises:
        HTTPException: 404 if event not found
        HTTPException: 400 if the event is completed, full, or already joined
        HTTPException: 409 if the event changed between check and write
        HTTPException: 500 for database errors

    Example:
        >>> await join_event(client, event_id="evt-1", user_id="user-9")
        {'success': True, 'message': 'Successfully joined event'}
    """
    try:
        event = await fetch_event(zerodb_client, event_id)
        check_join_eligibility(event, user_id)

        guard: Dict[str, Any] = {
            "event_id": event_id,
            "status": {"$ne": "completed"},
            "participants": {"$ne": user_id},
        }
        max_participants = event.get("max_participants")
        if max_participants:
            # List shorter than the cap: element at index cap-1 must not exist.
            guard[f"participants.{max_participants - 1}"] = {"$exists": False}

        result = await zerodb_client.tables.update_rows(
            "events",
            filter=guard,
            update={"$addToSet": {"participants": user_id}},
        )

        if not result.get("matched_count"):
            logger.warning(f"Join of event {event_id} by {user_id} lost a race, re-checking")
            check_join_eligibility(await fetch_event(zerodb_client, event_id), user_id)
            raise HTTPException(
                status_code=http_status.HTTP_409_CONFLICT,
                detail="Event changed while joining. Please try again.",
            )

        logger.info(f"User {user_id} joined event {event_id}")
        return {"success": True, "message": "Successfully joined event"}

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"joining event {event_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"joining event {event_id}", e)


async def get_event_stats(zerodb_client: ZeroDBClient, event_id: str) -> Dict[str, Any]:
    """
    Participation and submission counts for an event.

    Returns:
        Dict with participants, max_participants, submissions, total_ratings,
        judges and submission_rate (percent of participants who submitted)

    Raises:
        HTTPException: 404 if event not found
        HTTPException: 500 for database errors
    """
    try:
        event = await fetch_event(zerodb_client, event_id)
        projects = await zerodb_client.tables.query_all_rows(
            "projects", filter={"event_id": event_id}
        )
        ratings = await zerodb_client.tables.query_all_rows(
            "ratings", filter={"event_id": event_id}
        )

        participant_count = len(event.get("participants") or [])
        submission_rate = (
            round(len(projects) / participant_count * 100, 1) if participant_count else 0
        )

        return {
            "participants": participant_count,
            "max_participants": event.get("max_participants"),
            "submissions": len(projects),
            "total_ratings": len(ratings),
            "judges": len(event.get("judges") or []),
            "submission_rate": submission_rate,
        }

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"computing stats for event {event_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"computing stats for event {event_id}", e)


async def get_event_analytics(zerodb_client: ZeroDBClient, event_id: str) -> Dict[str, Any]:
    """
    Organizer analytics: totals, mean overall rating, submissions per track
    and ratings per judge.

    Raises:
        HTTPException: 404 if event not found
        HTTPException: 500 for database errors
    """
    try:
        event = await fetch_event(zerodb_client, event_id)
        projects = await zerodb_client.tables.query_all_rows(
            "projects", filter={"event_id": event_id}
        )
        ratings = await zerodb_client.tables.query_all_rows(
            "ratings", filter={"event_id": event_id}
        )

        overall_scores = [r.get("overall", 0) for r in ratings]
        average_rating = sum(overall_scores) / len(overall_scores) if overall_scores else 0

        return {
            "total_participants": len(event.get("participants") or []),
            "total_submissions": len(projects),
            "total_ratings": len(ratings),
            "average_rating": average_rating,
            "submissions_by_track": dict(Counter(p.get("track") or "unassigned" for p in projects)),
            "judge_progress": dict(Counter(r.get("judge_id") for r in ratings)),
        }

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"computing analytics for event {event_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"computing analytics for event {event_id}", e)
