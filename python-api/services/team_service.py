"""
Team Management Service

Team creation, the invite lifecycle (pending -> accepted | declined) and
member management. Uses ZeroDB tables API for data persistence.

Invites live inside the team document. Invite and membership writes target
single array elements with guarded filters instead of replacing the document.
"""

import logging
import uuid
from typing import Any, Dict, List, Literal, Optional

from fastapi import HTTPException
from fastapi import status as http_status
from integrations.zerodb.client import ZeroDBClient
from integrations.zerodb.exceptions import ZeroDBError
from services.errors import store_failure, unexpected_failure
from services.timestamps import utcnow_iso
from services.user_service import fetch_user_by_email

# Configure logger
logger = logging.getLogger(__name__)

# Type for invite status
InviteStatus = Literal["pending", "accepted", "declined"]


def find_invite(team: Dict[str, Any], invite_id: str) -> Optional[Dict[str, Any]]:
    for invite in team.get("invites") or []:
        if str(invite.get("invite_id")) == str(invite_id):
            return invite
    return None


def has_pending_invite(team: Dict[str, Any], email: str) -> bool:
    return any(
        invite.get("email") == email and invite.get("status") == "pending"
        for invite in team.get("invites") or []
    )


async def fetch_team(zerodb_client: ZeroDBClient, team_id: str) -> Dict[str, Any]:
    """Load one team or raise 404. Store errors propagate to the caller."""
    teams = await zerodb_client.tables.query_rows(
        "teams",
        filter={"team_id": team_id},
        limit=1,
    )
    if not teams:
        logger.warning(f"Team not found: {team_id}")
        raise HTTPException(
            status_code=http_status.HTTP_404_NOT_FOUND,
            detail="Team not found",
        )
    return teams[0]


async def create_team(
    zerodb_client: ZeroDBClient,
    name: str,
    leader_id: str,
    event_id: Optional[str] = None,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a new team. The leader is its sole initial member.

    Args:
        zerodb_client: ZeroDB client instance
        name: Team name (required, non-empty)
        leader_id: User ID of the creator, who leads the team
        event_id: Optional event the team competes in
        description: Optional team description

    Returns:
        Dict with team details including team_id

    Raises:
        ValueError: If name is empty
        HTTPException: 500 if database error occurs

    Example:
        >>> team = await create_team(client, name="Team Alpha", leader_id="user-456")
        >>> team["members"]
        ['user-456']
    """
    try:
        if not name or not name.strip():
            raise ValueError("Team name cannot be empty")

        team_row = {
            "team_id": str(uuid.uuid4()),
            "name": name.strip(),
            "description": description or "",
            "leader_id": leader_id,
            "members": [leader_id],
            "invites": [],
            "event_id": event_id,
            "created_at": utcnow_iso(),
        }

        await zerodb_client.tables.insert_rows("teams", rows=[team_row])

        logger.info(f"Created team {team_row['team_id']} led by {leader_id}")
        return team_row

    except ValueError:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, "creating team", e)
    except Exception as e:
        raise unexpected_failure(logger, "creating team", e)


async def list_teams(
    zerodb_client: ZeroDBClient,
    event_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Dict[str, Any]]:
    """List teams, optionally for one event."""
    try:
        return await zerodb_client.tables.query_rows(
            "teams",
            filter={"event_id": event_id} if event_id else None,
            skip=skip,
            limit=limit,
        )
    except ZeroDBError as e:
        raise store_failure(logger, "listing teams", e)
    except Exception as e:
        raise unexpected_failure(logger, "listing teams", e)


async def get_team(zerodb_client: ZeroDBClient, team_id: str) -> Dict[str, Any]:
    try:
        return await fetch_team(zerodb_client, team_id)
    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"getting team {team_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"getting team {team_id}", e)


def _check_invitable(team: Dict[str, Any], user_id: str, email: str) -> None:
    if user_id in (team.get("members") or []):
        raise HTTPException(
            status_code=http_status.HTTP_400_BAD_REQUEST,
            detail="User is already a team member",
        )
    if has_pending_invite(team, email):
        raise HTTPException(
            status_code=http_status.HTTP_400_BAD_REQUEST,
            detail="User already has a pending invitation",
        )


async def send_invite(
    zerodb_client: ZeroDBClient,
    team_id: str,
    email: str,
    invited_by: str,
) -> Dict[str, Any]:
    """
    Invite a registered user to a team by email.

    Any current member may invite. At most one pending invite per email.

    Raises:
        HTTPException: 404 if team or invited user not found
        HTTPException: 403 if the inviter is not a member
        HTTPException: 400 if the user is already a member or already invited
        HTTPException: 500 for database errors

    Example:
        >>> await send_invite(client, "team-1", "grace@example.com", invited_by="user-456")
        {'success': True, 'invite_id': '0c5e...'}
    """
    normalized_email = email.strip().lower()
    try:
        team = await fetch_team(zerodb_client, team_id)

        if invited_by not in (team.get("members") or []):
            raise HTTPException(
                status_code=http_status.HTTP_403_FORBIDDEN,
                detail="Only team members can send invites",
            )

        user = await fetch_user_by_email(zerodb_client, normalized_email)
        if not user:
            raise HTTPException(
                status_code=http_status.HTTP_404_NOT_FOUND,
                detail="User with this email not found",
            )

        _check_invitable(team, user["user_id"], normalized_email)

        invite = {
            "invite_id": str(uuid.uuid4()),
            "email": normalized_email,
            "invited_by": invited_by,
            "status": "pending",
            "created_at": utcnow_iso(),
        }

        result = await zerodb_client.tables.update_rows(
            "teams",
            filter={
                "team_id": team_id,
                "members": {"$ne": user["user_id"]},
                "invites": {
                    "$not": {"$elemMatch": {"email": normalized_email, "status": "pending"}}
                },
            },
            update={"$push": {"invites": invite}},
        )
        if not result.get("matched_count"):
            fresh = await fetch_team(zerodb_client, team_id)
            _check_invitable(fresh, user["user_id"], normalized_email)
            raise HTTPException(
                status_code=http_status.HTTP_409_CONFLICT,
                detail="Team changed while sending invite. Please try again.",
            )

        logger.info(f"Invite {invite['invite_id']} sent to {normalized_email} for team {team_id}")
        return {"success": True, "invite_id": invite["invite_id"]}

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"sending invite for team {team_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"sending invite for team {team_id}", e)


async def join_team(
    zerodb_client: ZeroDBClient,
    team_id: str,
    user_id: str,
    invite_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Join a team, by accepting an invite or directly.

    With an invite id the invite must still be pending; the user is added to
    members and the invite flips to ``accepted`` in the same write. Without
    one the user is added to members (a repeat join is a no-op).

    Raises:
        HTTPException: 404 if team not found
        HTTPException: 400 if the invite is unknown or no longer pending
        HTTPException: 500 for database errors
    """
    try:
        team = await fetch_team(zerodb_client, team_id)

        if invite_id:
            invite = find_invite(team, invite_id)
            if not invite or invite.get("status") != "pending":
                logger.warning(f"Rejected invite {invite_id} for team {team_id}")
                raise HTTPException(
                    status_code=http_status.HTTP_400_BAD_REQUEST,
                    detail="Invalid or expired invite",
                )

            result = await zerodb_client.tables.update_rows(
                "teams",
                filter={
                    "team_id": team_id,
                    "invites": {"$elemMatch": {"invite_id": invite_id, "status": "pending"}},
                },
                update={
                    "$addToSet": {"members": user_id},
                    "$set": {
                        "invites.$.status": "accepted",
                        "invites.$.responded_at": utcnow_iso(),
                    },
                },
            )
            if not result.get("matched_count"):
                raise HTTPException(
                    status_code=http_status.HTTP_400_BAD_REQUEST,
                    detail="Invalid or expired invite",
                )
            logger.info(f"User {user_id} accepted invite {invite_id} to team {team_id}")
        else:
            await zerodb_client.tables.update_rows(
                "teams",
                filter={"team_id": team_id},
                update={"$addToSet": {"members": user_id}},
            )
            logger.info(f"User {user_id} joined team {team_id}")

        return {"success": True}

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"joining team {team_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"joining team {team_id}", e)


async def decline_invite(
    zerodb_client: ZeroDBClient,
    team_id: str,
    invite_id: str,
) -> Dict[str, Any]:
    """
    Decline a pending invite. Accepted and declined are terminal.

    Raises:
        HTTPException: 404 if team or invite not found
        HTTPException: 400 if the invite is no longer pending
        HTTPException: 500 for database errors
    """
    try:
        team = await fetch_team(zerodb_client, team_id)

        invite = find_invite(team, invite_id)
        if not invite:
            raise HTTPException(
                status_code=http_status.HTTP_404_NOT_FOUND,
                detail="Invite not found",
            )
        if invite.get("status") != "pending":
            raise HTTPException(
                status_code=http_status.HTTP_400_BAD_REQUEST,
                detail="Invite is no longer pending",
            )

        result = await zerodb_client.tables.update_rows(
            "teams",
            filter={
                "team_id": team_id,
                "invites": {"$elemMatch": {"invite_id": invite_id, "status": "pending"}},
            },
            update={
                "$set": {
                    "invites.$.status": "declined",
                    "invites.$.responded_at": utcnow_iso(),
                }
            },
        )
        if not result.get("matched_count"):
            raise HTTPException(
                status_code=http_status.HTTP_400_BAD_REQUEST,
                detail="Invite is no longer pending",
            )

        logger.info(f"Invite {invite_id} to team {team_id} declined")
        return {"success": True, "message": "Invitation declined"}

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"declining invite {invite_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"declining invite {invite_id}", e)


async def add_member(
    zerodb_client: ZeroDBClient,
    team_id: str,
    email: str,
    added_by: str,
) -> Dict[str, Any]:
    """
    Leader adds a registered user directly, bypassing the invite flow.

    Raises:
        HTTPException: 404 if team or user not found
        HTTPException: 403 if the requester is not the leader
        HTTPException: 400 if the user is already a member
        HTTPException: 500 for database errors
    """
    try:
        team = await fetch_team(zerodb_client, team_id)

        if team.get("leader_id") != added_by:
            raise HTTPException(
                status_code=http_status.HTTP_403_FORBIDDEN,
                detail="Only team leader can add members directly",
            )

        user = await fetch_user_by_email(zerodb_client, email)
        if not user:
            raise HTTPException(
                status_code=http_status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )

        user_id = user["user_id"]
        if user_id in (team.get("members") or []):
            raise HTTPException(
                status_code=http_status.HTTP_400_BAD_REQUEST,
                detail="User is already a team member",
            )

        result = await zerodb_client.tables.update_rows(
            "teams",
            filter={"team_id": team_id, "members": {"$ne": user_id}},
            update={"$addToSet": {"members": user_id}},
        )
        if not result.get("matched_count"):
            raise HTTPException(
                status_code=http_status.HTTP_400_BAD_REQUEST,
                detail="User is already a team member",
            )

        logger.info(f"Leader {added_by} added {user_id} to team {team_id}")
        return {"success": True, "message": "Member added successfully", "user_id": user_id}

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"adding member to team {team_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"adding member to team {team_id}", e)


async def remove_member(
    zerodb_client: ZeroDBClient,
    team_id: str,
    user_id: str,
    removed_by: str,
) -> Dict[str, Any]:
    """
    Remove a member. The leader may remove anyone but themself; members may
    remove themselves. The leader is never removed.

    Raises:
        HTTPException: 404 if team not found or user not a member
        HTTPException: 403 if the requester is neither leader nor the member
        HTTPException: 400 if the target is the leader
        HTTPException: 500 for database errors
    """
    try:
        team = await fetch_team(zerodb_client, team_id)
        leader_id = team.get("leader_id")

        if removed_by != leader_id and removed_by != user_id:
            raise HTTPException(
                status_code=http_status.HTTP_403_FORBIDDEN,
                detail="Only team leader or the member themselves can remove from team",
            )

        if user_id == leader_id:
            raise HTTPException(
                status_code=http_status.HTTP_400_BAD_REQUEST,
                detail="Team leader cannot be removed",
            )

        if user_id not in (team.get("members") or []):
            raise HTTPException(
                status_code=http_status.HTTP_404_NOT_FOUND,
                detail="Member not found in team",
            )

        await zerodb_client.tables.update_rows(
            "teams",
            filter={"team_id": team_id, "leader_id": {"$ne": user_id}},
            update={"$pull": {"members": user_id}},
        )

        logger.info(f"Removed {user_id} from team {team_id} (by {removed_by})")
        return {"success": True, "message": "Member removed successfully"}

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"removing member from team {team_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"removing member from team {team_id}", e)
