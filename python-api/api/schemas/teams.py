"""
Pydantic schemas for team management endpoints.

Defines request models for team creation, invites, joining and member
management, and the stored team shape returned to clients.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

InviteStatus = Literal["pending", "accepted", "declined"]


class TeamCreateRequest(BaseModel):
    """
    Request schema for creating a new team.

    Attributes:
        name: Team name (required, non-empty)
        leader_id: User ID of the creator, who becomes leader and first member
        event_id: Optional event the team competes in
        description: Optional team description
    """
    name: str = Field(..., min_length=1, max_length=200, description="Team name")
    leader_id: str = Field(..., min_length=1, description="Leader user ID")
    event_id: Optional[str] = Field(None, description="Event ID")
    description: Optional[str] = Field(None, max_length=2000, description="Team description")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Ensure name is not just whitespace."""
        if not v.strip():
            raise ValueError("Team name cannot be empty or whitespace")
        return v.strip()


class InviteRequest(BaseModel):
    email: EmailStr = Field(..., description="Email of the registered user to invite")
    invited_by: str = Field(..., min_length=1, description="Inviting member's user ID")


class JoinTeamRequest(BaseModel):
    """
    Join a team, either by accepting an invite or directly.

    Attributes:
        user_id: User joining the team
        invite_id: Pending invite being accepted; omit to join directly
    """
    user_id: str = Field(..., min_length=1)
    invite_id: Optional[str] = None


class AddMemberRequest(BaseModel):
    email: EmailStr = Field(..., description="Email of the user to add")
    added_by: str = Field(..., min_length=1, description="Team leader's user ID")


class RemoveMemberRequest(BaseModel):
    removed_by: str = Field(..., min_length=1, description="Acting user ID")


class TeamInvite(BaseModel):
    invite_id: str
    email: str
    invited_by: str
    status: InviteStatus
    created_at: str


class TeamResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    team_id: str
    name: str
    description: str = ""
    leader_id: str
    members: List[str] = Field(default_factory=list)
    invites: List[TeamInvite] = Field(default_factory=list)
    event_id: Optional[str] = None
    created_at: Optional[str] = None
