"""
Team Management API Routes

Team creation and lookup, the invite lifecycle (send, accept, decline), and
direct member management by the team leader.
"""

import logging
from typing import Any, Dict, List, Optional

from api.schemas.common import ErrorResponse, InsertResponse, SuccessResponse
from api.schemas.teams import (
    AddMemberRequest,
    InviteRequest,
    JoinTeamRequest,
    RemoveMemberRequest,
    TeamCreateRequest,
    TeamResponse,
)
from fastapi import APIRouter, Depends, HTTPException, Query, status
from integrations.zerodb.client import ZeroDBClient
from integrations.zerodb.dependencies import get_zerodb_client
from services.team_service import (
    add_member,
    create_team,
    decline_invite,
    get_team,
    join_team,
    list_teams,
    remove_member,
    send_invite,
)

# Configure logger
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(prefix="/teams", tags=["Teams"])


@router.post(
    "",
    response_model=InsertResponse,
    responses={
        200: {"description": "Team created"},
        400: {"model": ErrorResponse, "description": "Invalid request data"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create Team",
    description="""
    Create a team. The creator becomes its leader and first member.
    """,
)
async def create_team_endpoint(
    request: TeamCreateRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    try:
        team = await create_team(
            zerodb_client=zerodb_client,
            name=request.name,
            leader_id=request.leader_id,
            event_id=request.event_id,
            description=request.description,
        )
        return {"id": team["team_id"]}

    except ValueError as e:
        logger.warning(f"Validation error creating team: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get(
    "",
    response_model=List[TeamResponse],
    responses={
        200: {"description": "Teams retrieved"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="List Teams",
)
async def list_teams_endpoint(
    event_id: Optional[str] = Query(None, description="Filter by event"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> List[Dict[str, Any]]:
    return await list_teams(zerodb_client, event_id=event_id, skip=skip, limit=limit)


@router.get(
    "/event/{event_id}",
    response_model=List[TeamResponse],
    responses={
        200: {"description": "Teams retrieved"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="List Teams for an Event",
)
async def event_teams_endpoint(
    event_id: str,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> List[Dict[str, Any]]:
    return await list_teams(zerodb_client, event_id=event_id)


@router.get(
    "/{team_id}",
    response_model=TeamResponse,
    responses={
        200: {"description": "Team found"},
        404: {"model": ErrorResponse, "description": "Team not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Get Team",
)
async def get_team_endpoint(
    team_id: str,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    return await get_team(zerodb_client, team_id)


@router.post(
    "/{team_id}/invite",
    response_model=SuccessResponse,
    responses={
        200: {"description": "Invite sent"},
        400: {"model": ErrorResponse, "description": "Already a member or already invited"},
        403: {"model": ErrorResponse, "description": "Inviter is not a team member"},
        404: {"model": ErrorResponse, "description": "Team or user not found"},
        409: {"model": ErrorResponse, "description": "Team changed during invite"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Invite to Team",
    description="""
    Invite a registered user by email. Any team member may invite; an email
    holds at most one pending invite per team.
    """,
)
async def send_invite_endpoint(
    team_id: str,
    request: InviteRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    return await send_invite(
        zerodb_client,
        team_id=team_id,
        email=request.email,
        invited_by=request.invited_by,
    )


@router.post(
    "/{team_id}/join",
    response_model=SuccessResponse,
    responses={
        200: {"description": "Joined team"},
        400: {"model": ErrorResponse, "description": "Invalid or expired invite"},
        404: {"model": ErrorResponse, "description": "Team not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Join Team",
    description="""
    Accept a pending invite (with invite_id) or join directly (without).
    An accepted or declined invite cannot be used again.
    """,
)
async def join_team_endpoint(
    team_id: str,
    request: JoinTeamRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    return await join_team(
        zerodb_client,
        team_id=team_id,
        user_id=request.user_id,
        invite_id=request.invite_id,
    )


@router.put(
    "/{team_id}/decline-invite/{invite_id}",
    response_model=SuccessResponse,
    responses={
        200: {"description": "Invite declined"},
        400: {"model": ErrorResponse, "description": "Invite is no longer pending"},
        404: {"model": ErrorResponse, "description": "Team or invite not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Decline Invite",
)
async def decline_invite_endpoint(
    team_id: str,
    invite_id: str,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    return await decline_invite(zerodb_client, team_id=team_id, invite_id=invite_id)


@router.post(
    "/{team_id}/add-member",
    response_model=SuccessResponse,
    responses={
        200: {"description": "Member added"},
        400: {"model": ErrorResponse, "description": "User is already a team member"},
        403: {"model": ErrorResponse, "description": "Only the team leader may add members"},
        404: {"model": ErrorResponse, "description": "Team or user not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Add Team Member",
)
async def add_member_endpoint(
    team_id: str,
    request: AddMemberRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    return await add_member(
        zerodb_client,
        team_id=team_id,
        email=request.email,
        added_by=request.added_by,
    )


@router.delete(
    "/{team_id}/members/{user_id}",
    response_model=SuccessResponse,
    responses={
        200: {"description": "Member removed"},
        400: {"model": ErrorResponse, "description": "Team leader cannot be removed"},
        403: {"model": ErrorResponse, "description": "Not the leader or the member themself"},
        404: {"model": ErrorResponse, "description": "Team or member not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Remove Team Member",
    description="""
    Remove a member. The leader may remove any other member; a member may
    remove themself. The leader can never be removed.
    """,
)
async def remove_member_endpoint(
    team_id: str,
    user_id: str,
    request: RemoveMemberRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    return await remove_member(
        zerodb_client,
        team_id=team_id,
        user_id=user_id,
        removed_by=request.removed_by,
    )
