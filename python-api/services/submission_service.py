"""
Submission Service

Project submission with the event eligibility gate, plus project lookups.
Uses ZeroDB tables API for data persistence.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from fastapi import status as http_status
from integrations.zerodb.client import ZeroDBClient
from integrations.zerodb.exceptions import ZeroDBError
from services.errors import store_failure, unexpected_failure
from services.event_service import effective_status, fetch_event
from services.timestamps import utcnow_iso

# Configure logger
logger = logging.getLogger(__name__)


def check_submission_eligibility(event: Dict[str, Any], submitted_by: str) -> None:
    """
    Event-side checks of the submission gate, in order.

    Raises:
        HTTPException: 400 if the event is not active
        HTTPException: 403 if the submitter has not joined the event
    """
    if effective_status(event) != "active":
        raise HTTPException(
            status_code=http_status.HTTP_400_BAD_REQUEST,
            detail="Can only submit to active events",
        )

    if submitted_by not in (event.get("participants") or []):
        raise HTTPException(
            status_code=http_status.HTTP_403_FORBIDDEN,
            detail="Must join event before submitting",
        )


async def submit_project(
    zerodb_client: ZeroDBClient,
    project_data: Dict[str, Any],
    require_links: bool = False,
) -> Dict[str, Any]:
    """
    Submit a project, enforcing one submission per participant per event.

    Gate order when the project references an event:
    1. Event exists (404)
    2. Event is active (400)
    3. Submitter joined the event (403)
    4. No earlier project for (event_id, submitted_by) (400)

    Args:
        zerodb_client: ZeroDB client instance
        project_data: Project fields (title, description, submitted_by, event_id, ...)
        require_links: Submission-form variant; at least one of github_url or
            demo_url must be non-empty

    Returns:
        Dict with the stored project including project_id

    Raises:
        HTTPException: 400/403/404 per the gate above
        HTTPException: 500 for database errors

    Example:
        >>> project = await submit_project(
        ...     client,
        ...     {"title": "Greenlight", "description": "...",
        ...      "submitted_by": "user-1", "event_id": "evt-1"},
        ... )
        >>> project["project_id"]
        '6a1f...'
    """
    event_id = project_data.get("event_id")
    submitted_by = project_data.get("submitted_by")

    try:
        if require_links and not (
            (project_data.get("github_url") or "").strip()
            or (project_data.get("demo_url") or "").strip()
        ):
            raise HTTPException(
                status_code=http_status.HTTP_400_BAD_REQUEST,
                detail="Provide a GitHub repository URL or a live demo URL",
            )

        if event_id:
            event = await fetch_event(zerodb_client, event_id)
            check_submission_eligibility(event, submitted_by)

            existing = await zerodb_client.tables.query_rows(
                "projects",
                filter={"event_id": event_id, "submitted_by": submitted_by},
                limit=1,
            )
            if existing:
                logger.warning(f"User {submitted_by} already submitted to event {event_id}")
                raise HTTPException(
                    status_code=http_status.HTTP_400_BAD_REQUEST,
                    detail="Already submitted to this event",
                )

        now = utcnow_iso()
        project_row = {
            **project_data,
            "project_id": str(uuid.uuid4()),
            "status": "submitted",
            "submission_date": now,
            "created_at": now,
        }

        await zerodb_client.tables.insert_rows("projects", rows=[project_row])

        logger.info(
            f"Project {project_row['project_id']} submitted by {submitted_by}"
            + (f" to event {event_id}" if event_id else "")
        )
        return project_row

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, "submitting project", e)
    except Exception as e:
        raise unexpected_failure(logger, "submitting project", e)


async def list_projects(
    zerodb_client: ZeroDBClient,
    event_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Dict[str, Any]]:
    """List projects, optionally restricted to one event."""
    try:
        return await zerodb_client.tables.query_rows(
            "projects",
            filter={"event_id": event_id} if event_id else None,
            skip=skip,
            limit=limit,
        )
    except ZeroDBError as e:
        raise store_failure(logger, "listing projects", e)
    except Exception as e:
        raise unexpected_failure(logger, "listing projects", e)


async def fetch_project(zerodb_client: ZeroDBClient, project_id: str) -> Dict[str, Any]:
    """Load one project or raise 404. Store errors propagate to the caller."""
    projects = await zerodb_client.tables.query_rows(
        "projects",
        filter={"project_id": project_id},
        limit=1,
    )
    if not projects:
        logger.warning(f"Project not found: {project_id}")
        raise HTTPException(
            status_code=http_status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )
    return projects[0]


async def get_project(zerodb_client: ZeroDBClient, project_id: str) -> Dict[str, Any]:
    try:
        return await fetch_project(zerodb_client, project_id)
    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"getting project {project_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"getting project {project_id}", e)
