"""
Judging Service

Rating submission and revision for hackathon projects, plus the per-event
leaderboard. One rating per (project, judge): a second submission is
rejected and revisions go through ``update_rating``.
"""

import logging
import uuid
from collections import defaultdict
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from integrations.zerodb.client import ZeroDBClient
from integrations.zerodb.exceptions import ZeroDBError
from services.errors import store_failure, unexpected_failure
from services.event_service import fetch_event
from services.submission_service import fetch_project
from services.timestamps import utcnow_iso

# Configure logger
logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 10


def validate_scores(scores: Optional[Dict[str, float]]) -> Dict[str, float]:
    """
    Check every supplied sub-score lies in [1, 10].

    Raises:
        HTTPException: 400 if scores are missing or out of range
    """
    if not scores:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Scores object is required",
        )

    for criterion, score in scores.items():
        if score is None or score < MIN_SCORE or score > MAX_SCORE:
            logger.warning(f"Rejected out-of-range score for '{criterion}': {score}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Ratings must be between 1 and 10",
            )
    return scores


def compute_overall(scores: Dict[str, float]) -> float:
    """Unweighted mean of the sub-scores, rounded to one decimal place."""
    return round(sum(scores.values()) / len(scores), 1)


async def submit_rating(
    zerodb_client: ZeroDBClient,
    project_id: str,
    judge_id: str,
    scores: Dict[str, float],
    feedback: Optional[str] = None,
    event_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Submit a judge's rating for a project.

    Workflow:
    1. Validate sub-scores are within [1, 10]
    2. Verify the project exists
    3. If an event is given, verify it exists and that the judge is one of
       its assigned judges
    4. Reject a second rating from the same judge for the same project
    5. Insert the rating with its computed overall score

    Args:
        zerodb_client: ZeroDB client instance
        project_id: Project being rated
        judge_id: Judge user ID
        scores: Sub-scores (innovation, technical, feasibility, presentation, impact)
        feedback: Optional written feedback
        event_id: Optional event the rating belongs to

    Returns:
        Dict with the stored rating including rating_id and overall

    Raises:
        HTTPException: 400 for invalid scores or duplicate rating
        HTTPException: 403 if the judge is not assigned to the event
        HTTPException: 404 if project or event not found
        HTTPException: 500 for database errors

    Example:
        >>> rating = await submit_rating(
        ...     client,
        ...     project_id="proj-1",
        ...     judge_id="judge-7",
        ...     scores={"innovation": 8, "technical": 9, "feasibility": 7, "presentation": 8},
        ... )
        >>> rating["overall"]
        8.0
    """
    try:
        validate_scores(scores)

        await fetch_project(zerodb_client, project_id)

        if event_id:
            event = await fetch_event(zerodb_client, event_id)
            if judge_id not in (event.get("judges") or []):
                logger.warning(f"Judge {judge_id} is not assigned to event {event_id}")
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Not assigned as judge for this event",
                )

        existing = await zerodb_client.tables.query_rows(
            "ratings",
            filter={"project_id": project_id, "judge_id": judge_id},
            limit=1,
        )
        if existing:
            logger.warning(f"Judge {judge_id} already rated project {project_id}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Already rated this project",
            )

        now = utcnow_iso()
        rating_row = {
            "rating_id": str(uuid.uuid4()),
            "project_id": project_id,
            "judge_id": judge_id,
            "event_id": event_id,
            "scores": dict(scores),
            "overall": compute_overall(scores),
            "feedback": feedback or "",
            "rated_at": now,
            "created_at": now,
        }

        await zerodb_client.tables.insert_rows("ratings", rows=[rating_row])

        logger.info(
            f"Judge {judge_id} rated project {project_id}: overall {rating_row['overall']}"
        )
        return rating_row

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"rating project {project_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"rating project {project_id}", e)


async def update_rating(
    zerodb_client: ZeroDBClient,
    rating_id: str,
    judge_id: str,
    scores: Optional[Dict[str, float]] = None,
    feedback: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Revise an existing rating. Only the judge who wrote it may revise it.

    Raises:
        HTTPException: 400 for invalid scores
        HTTPException: 403 if judge_id does not own the rating
        HTTPException: 404 if rating not found
        HTTPException: 500 for database errors
    """
    try:
        if scores is not None:
            validate_scores(scores)

        ratings = await zerodb_client.tables.query_rows(
            "ratings",
            filter={"rating_id": rating_id},
            limit=1,
        )
        if not ratings:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Rating not found",
            )

        rating = ratings[0]
        if rating.get("judge_id") != judge_id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only the judge who submitted this rating can revise it",
            )

        changes: Dict[str, Any] = {"updated_at": utcnow_iso()}
        if scores is not None:
            changes["scores"] = dict(scores)
            changes["overall"] = compute_overall(scores)
        if feedback is not None:
            changes["feedback"] = feedback

        await zerodb_client.tables.update_rows(
            "ratings",
            filter={"rating_id": rating_id},
            update={"$set": changes},
        )

        logger.info(f"Rating {rating_id} revised by judge {judge_id}")
        return {**rating, **changes}

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"updating rating {rating_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"updating rating {rating_id}", e)


async def list_ratings(
    zerodb_client: ZeroDBClient,
    project_id: Optional[str] = None,
    event_id: Optional[str] = None,
    judge_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """List ratings, narrowed by any of project, event, or judge."""
    query = {
        key: value
        for key, value in (
            ("project_id", project_id),
            ("event_id", event_id),
            ("judge_id", judge_id),
        )
        if value
    }
    try:
        return await zerodb_client.tables.query_all_rows("ratings", filter=query or None)
    except ZeroDBError as e:
        raise store_failure(logger, "listing ratings", e)
    except Exception as e:
        raise unexpected_failure(logger, "listing ratings", e)


def rank_projects(
    projects: List[Dict[str, Any]],
    ratings: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Rank projects by mean overall rating, then by number of ratings.

    Projects without ratings score 0. The sort is stable, so ties on both
    keys keep their input order.
    """
    by_project: Dict[str, List[float]] = defaultdict(list)
    for rating in ratings:
        by_project[rating.get("project_id")].append(rating.get("overall", 0))

    entries = []
    for project in projects:
        overall_scores = by_project.get(project.get("project_id"), [])
        entries.append(
            {
                **project,
                "average_score": (
                    sum(overall_scores) / len(overall_scores) if overall_scores else 0
                ),
                "rating_count": len(overall_scores),
            }
        )

    entries.sort(key=lambda e: (e["average_score"], e["rating_count"]), reverse=True)

    for idx, entry in enumerate(entries, start=1):
        entry["rank"] = idx

    return entries


async def get_leaderboard(
    zerodb_client: ZeroDBClient,
    event_id: str,
    top_n: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Leaderboard for an event: every project joined to its ratings.

    Args:
        zerodb_client: ZeroDB client instance
        event_id: Event to rank
        top_n: Optional limit to the first N entries

    Returns:
        List of project dicts with average_score, rating_count and rank

    Raises:
        HTTPException: 404 if event not found
        HTTPException: 500 for database errors
    """
    try:
        await fetch_event(zerodb_client, event_id)

        projects = await zerodb_client.tables.query_all_rows(
            "projects", filter={"event_id": event_id}
        )
        project_ids = [p["project_id"] for p in projects if p.get("project_id")]

        ratings: List[Dict[str, Any]] = []
        if project_ids:
            ratings = await zerodb_client.tables.query_all_rows(
                "ratings", filter={"project_id": {"$in": project_ids}}
            )

        leaderboard = rank_projects(projects, ratings)
        if top_n is not None:
            leaderboard = leaderboard[:top_n]

        logger.info(
            f"Generated leaderboard with {len(leaderboard)} entries for event {event_id}"
        )
        return leaderboard

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"generating leaderboard for event {event_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"generating leaderboard for event {event_id}", e)
