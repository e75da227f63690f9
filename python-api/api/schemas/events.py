"""
Pydantic schemas for event endpoints.

Defines request and response models for event creation, joining,
statistics and the leaderboard.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

EventStatus = Literal["upcoming", "active", "completed"]


class EventCreateRequest(BaseModel):
    """
    Request schema for creating an event.

    Status is not accepted from the client; it is derived from the dates.
    """
    title: str = Field(..., min_length=1, max_length=200, description="Event title")
    description: str = Field(default="", max_length=5000, description="Event description")
    start_date: datetime = Field(..., description="Event window start")
    end_date: datetime = Field(..., description="Event window end")
    submission_deadline: Optional[datetime] = Field(None, description="Submission deadline")
    location: Optional[str] = Field(None, max_length=500, description="Venue or 'online'")
    max_participants: Optional[int] = Field(None, ge=1, description="Participant cap")
    prize_pool: Optional[str] = Field(None, max_length=500, description="Prize description")
    judges: List[str] = Field(default_factory=list, description="Judge user IDs")
    tracks: List[str] = Field(default_factory=list, description="Track names")
    organizer_id: str = Field(..., min_length=1, description="Organizer user ID")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty or whitespace")
        return v.strip()

    @field_validator("judges", "tracks")
    @classmethod
    def dedupe(cls, v: List[str]) -> List[str]:
        """Keep first occurrence of each entry."""
        return list(dict.fromkeys(item.strip() for item in v if item.strip()))


class JoinEventRequest(BaseModel):
    user_id: str = Field(..., min_length=1, description="User joining the event")


class EventResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    event_id: str
    title: str
    description: str = ""
    start_date: str
    end_date: str
    status: EventStatus
    participants: List[str] = Field(default_factory=list)
    judges: List[str] = Field(default_factory=list)
    tracks: List[str] = Field(default_factory=list)
    max_participants: Optional[int] = None
    organizer_id: Optional[str] = None


class EventStatsResponse(BaseModel):
    participants: int
    max_participants: Optional[int] = None
    submissions: int
    total_ratings: int
    judges: int
    submission_rate: float


class EventAnalyticsResponse(BaseModel):
    total_participants: int
    total_submissions: int
    total_ratings: int
    average_rating: float
    submissions_by_track: Dict[str, int]
    judge_progress: Dict[str, int]


class LeaderboardEntry(BaseModel):
    """
    Single entry in the event leaderboard: the project plus its aggregate.

    Attributes:
        rank: Position (1-based)
        project_id: Project identifier
        title: Project title
        average_score: Mean overall rating, 0 when unrated
        rating_count: Number of ratings received
    """
    model_config = ConfigDict(extra="allow")

    rank: int = Field(..., ge=1)
    project_id: str
    title: Optional[str] = None
    average_score: float
    rating_count: int = Field(..., ge=0)