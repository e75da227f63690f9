"""
Pydantic schemas for announcements and questions.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Priority = Literal["low", "medium", "high"]
Audience = Literal["all", "participants", "judges", "organizers"]


class AnnouncementCreateRequest(BaseModel):
    """
    Request schema for publishing an announcement.

    ``priority`` also accepts ``normal``, stored as ``medium``. Without an
    event_id the announcement is global.
    """
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=10000)
    event_id: Optional[str] = None
    priority: Priority = "medium"
    target_audience: Audience = "all"
    action_required: bool = False
    created_by: str = Field(..., min_length=1, description="Author user ID")

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v):
        if isinstance(v, str) and v.lower() == "normal":
            return "medium"
        return v


class AnnouncementResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    announcement_id: str
    title: str
    content: str
    event_id: Optional[str] = None
    priority: Priority
    created_at: str


class QuestionCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=10000)
    author_id: str = Field(..., min_length=1)
    author_type: Literal["participant", "organizer", "judge"] = "participant"
    event_id: Optional[str] = None
    target_audience: Literal["organizers", "judges", "all"] = "organizers"
    is_public: bool = True


class AnswerRequest(BaseModel):
    answer: str = Field(..., min_length=1, max_length=10000)
    answered_by: str = Field(..., min_length=1)


class QuestionResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    question_id: str
    title: str
    content: str
    author_id: str
    event_id: Optional[str] = None
    answer: Optional[str] = None
    answered_by: Optional[str] = None
    answered_at: Optional[str] = None
    is_answered: bool = False
    created_at: str
