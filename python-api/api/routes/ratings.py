"""
Rating API Routes

Judges rate projects once and revise through PUT. Score ranges, judge
assignment and the one-rating-per-judge rule are enforced by the judging
service.
"""

import logging
from typing import Any, Dict, List, Optional

from api.schemas.common import ErrorResponse, InsertResponse
from api.schemas.ratings import RatingCreateRequest, RatingResponse, RatingUpdateRequest
from fastapi import APIRouter, Depends, Query
from integrations.zerodb.client import ZeroDBClient
from integrations.zerodb.dependencies import get_zerodb_client
from services.judging_service import list_ratings, submit_rating, update_rating

# Configure logger
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(prefix="/ratings", tags=["Ratings"])


@router.post(
    "",
    response_model=InsertResponse,
    responses={
        200: {"description": "Rating submitted"},
        400: {"model": ErrorResponse, "description": "Scores out of range or duplicate rating"},
        403: {"model": ErrorResponse, "description": "Judge not assigned to the event"},
        404: {"model": ErrorResponse, "description": "Project or event not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Submit Rating",
    description="""
    Submit a judge's rating for a project.

    - Every sub-score must be within 1..10
    - When the event lists judges, only they may rate
    - A judge rates a project once; use PUT /ratings/{rating_id} to revise
    """,
)
async def submit_rating_endpoint(
    request: RatingCreateRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    rating = await submit_rating(
        zerodb_client=zerodb_client,
        project_id=request.project_id,
        judge_id=request.judge_id,
        scores=request.scores.as_dict(),
        feedback=request.feedback,
        event_id=request.event_id,
    )
    return {"id": rating["rating_id"]}


@router.put(
    "/{rating_id}",
    response_model=RatingResponse,
    responses={
        200: {"description": "Rating revised"},
        400: {"model": ErrorResponse, "description": "Scores out of range"},
        403: {"model": ErrorResponse, "description": "Not the judge who submitted the rating"},
        404: {"model": ErrorResponse, "description": "Rating not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Revise Rating",
)
async def update_rating_endpoint(
    rating_id: str,
    request: RatingUpdateRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    return await update_rating(
        zerodb_client=zerodb_client,
        rating_id=rating_id,
        judge_id=request.judge_id,
        scores=request.scores.as_dict() if request.scores else None,
        feedback=request.feedback,
    )


@router.get(
    "",
    response_model=List[RatingResponse],
    responses={
        200: {"description": "Ratings retrieved"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="List Ratings",
)
async def list_ratings_endpoint(
    event_id: Optional[str] = Query(None, description="Filter by event"),
    judge_id: Optional[str] = Query(None, description="Filter by judge"),
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> List[Dict[str, Any]]:
    return await list_ratings(zerodb_client, event_id=event_id, judge_id=judge_id)


@router.get(
    "/project/{project_id}",
    response_model=List[RatingResponse],
    responses={
        200: {"description": "Ratings retrieved"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Ratings for a Project",
)
async def project_ratings_endpoint(
    project_id: str,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> List[Dict[str, Any]]:
    return await list_ratings(zerodb_client, project_id=project_id)
