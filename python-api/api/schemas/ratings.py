"""
Pydantic schemas for rating endpoints.

Sub-score ranges are checked by the judging service so every path reports
the same error message.
"""

from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class RatingScores(BaseModel):
    """
    Judge sub-scores, each expected in [1, 10].

    ``feasibility`` also accepts the key ``design``; ``impact`` is optional.
    """
    innovation: float
    technical: float
    feasibility: float = Field(..., validation_alias=AliasChoices("feasibility", "design"))
    presentation: float
    impact: Optional[float] = None

    def as_dict(self) -> Dict[str, float]:
        """Sub-scores that were supplied."""
        return self.model_dump(exclude_none=True)


class RatingCreateRequest(BaseModel):
    project_id: str = Field(..., min_length=1, description="Project being rated")
    judge_id: str = Field(..., min_length=1, description="Judge user ID")
    event_id: Optional[str] = Field(None, description="Event the project belongs to")
    scores: RatingScores
    feedback: Optional[str] = Field(None, max_length=5000, description="Written feedback")


class RatingUpdateRequest(BaseModel):
    """Revision of an existing rating by the judge who wrote it."""
    judge_id: str = Field(..., min_length=1)
    scores: Optional[RatingScores] = None
    feedback: Optional[str] = Field(None, max_length=5000)


class RatingResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    rating_id: str
    project_id: str
    judge_id: str
    event_id: Optional[str] = None
    scores: Dict[str, float]
    overall: float
    feedback: str = ""


class RatingListResponse(BaseModel):
    ratings: List[RatingResponse]
    total: int
