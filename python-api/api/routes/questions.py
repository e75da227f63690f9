"""
Question API Routes

Participants ask, organizers and judges answer. A question is answered once.
"""

import logging
from typing import Any, Dict, List, Optional

from api.schemas.common import ErrorResponse, InsertResponse, SuccessResponse
from api.schemas.messaging import AnswerRequest, QuestionCreateRequest, QuestionResponse
from fastapi import APIRouter, Depends, Query
from integrations.zerodb.client import ZeroDBClient
from integrations.zerodb.dependencies import get_zerodb_client
from services.messaging_service import answer_question, create_question, list_questions

# Configure logger
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(prefix="/questions", tags=["Questions"])


@router.post(
    "",
    response_model=InsertResponse,
    responses={
        200: {"description": "Question created"},
        400: {"model": ErrorResponse, "description": "Invalid request data"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Ask Question",
)
async def create_question_endpoint(
    request: QuestionCreateRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    question = await create_question(zerodb_client, request.model_dump())
    return {"id": question["question_id"]}


@router.get(
    "",
    response_model=List[QuestionResponse],
    responses={
        200: {"description": "Questions retrieved"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="List Questions",
)
async def list_questions_endpoint(
    event_id: Optional[str] = Query(None, description="Filter by event"),
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> List[Dict[str, Any]]:
    return await list_questions(zerodb_client, event_id=event_id)


@router.get(
    "/{event_id}",
    response_model=List[QuestionResponse],
    responses={
        200: {"description": "Questions retrieved"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Questions for an Event",
    description="Questions for the event plus global ones, newest first.",
)
async def event_questions_endpoint(
    event_id: str,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> List[Dict[str, Any]]:
    return await list_questions(zerodb_client, event_id=event_id, include_global=True)


@router.put(
    "/{question_id}/answer",
    response_model=SuccessResponse,
    responses={
        200: {"description": "Question answered"},
        400: {"model": ErrorResponse, "description": "Question has already been answered"},
        404: {"model": ErrorResponse, "description": "Question not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Answer Question",
)
async def answer_question_endpoint(
    question_id: str,
    request: AnswerRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    return await answer_question(
        zerodb_client,
        question_id=question_id,
        answer=request.answer,
        answered_by=request.answered_by,
    )
