"""
Project API Routes

Project submission through the event submission gate, and project lookups.
"""

import logging
from typing import Any, Dict, List, Optional

from api.schemas.common import ErrorResponse, InsertResponse
from api.schemas.projects import ProjectCreateRequest, ProjectResponse, SubmissionFormRequest
from fastapi import APIRouter, Depends, Query
from integrations.zerodb.client import ZeroDBClient
from integrations.zerodb.dependencies import get_zerodb_client
from services.submission_service import get_project, list_projects, submit_project

# Configure logger
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(prefix="/projects", tags=["Projects"])

SUBMIT_RESPONSES = {
    200: {"description": "Project submitted"},
    400: {"model": ErrorResponse, "description": "Inactive event or duplicate submission"},
    403: {"model": ErrorResponse, "description": "Submitter has not joined the event"},
    404: {"model": ErrorResponse, "description": "Event not found"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


@router.post(
    "",
    response_model=InsertResponse,
    responses=SUBMIT_RESPONSES,
    summary="Submit Project",
    description="""
    Submit a project. When it references an event: the event must exist and
    be active, the submitter must have joined it, and each participant may
    submit once per event.
    """,
)
async def submit_project_endpoint(
    request: ProjectCreateRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    project = await submit_project(zerodb_client, request.model_dump())
    return {"id": project["project_id"]}


@router.post(
    "/submissions",
    response_model=InsertResponse,
    responses=SUBMIT_RESPONSES,
    summary="Submit Project (Submission Form)",
    description="""
    Submission-form variant of project submission. The event is required, and
    either a GitHub repository URL or a live demo URL must be given.
    """,
)
async def submission_form_endpoint(
    request: SubmissionFormRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    project = await submit_project(zerodb_client, request.model_dump(), require_links=True)
    return {"id": project["project_id"]}


@router.get(
    "",
    response_model=List[ProjectResponse],
    responses={
        200: {"description": "Projects retrieved"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="List Projects",
)
async def list_projects_endpoint(
    event_id: Optional[str] = Query(None, description="Filter by event"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> List[Dict[str, Any]]:
    return await list_projects(zerodb_client, event_id=event_id, skip=skip, limit=limit)


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    responses={
        200: {"description": "Project found"},
        404: {"model": ErrorResponse, "description": "Project not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Get Project",
)
async def get_project_endpoint(
    project_id: str,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    return await get_project(zerodb_client, project_id)
