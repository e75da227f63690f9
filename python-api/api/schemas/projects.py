"""
Pydantic schemas for project submission endpoints.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProjectCreateRequest(BaseModel):
    """
    Request schema for submitting a project.

    Attributes:
        title: Project title
        description: What the project does
        submitted_by: User ID of the submitter
        event_id: Event the project is submitted to (optional for standalone projects)
        team_name: Display name of the team
        team_members: Member names
        github_url: Repository URL
        demo_url: Live demo URL
        video_url: Demo video URL
        document_url: Supporting document URL
        technologies: Technologies used
        track: Event track
    """
    title: str = Field(..., min_length=1, max_length=200, description="Project title")
    description: str = Field(default="", max_length=5000, description="Project description")
    submitted_by: str = Field(..., min_length=1, description="Submitter user ID")
    event_id: Optional[str] = Field(None, description="Event ID")
    team_name: Optional[str] = Field(None, max_length=200)
    team_members: List[str] = Field(default_factory=list)
    github_url: Optional[str] = Field(None, max_length=500)
    demo_url: Optional[str] = Field(None, max_length=500)
    video_url: Optional[str] = Field(None, max_length=500)
    document_url: Optional[str] = Field(None, max_length=500)
    technologies: List[str] = Field(default_factory=list)
    track: Optional[str] = Field(None, max_length=200)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Ensure title is not just whitespace."""
        if not v.strip():
            raise ValueError("Title cannot be empty or whitespace")
        return v.strip()


class SubmissionFormRequest(ProjectCreateRequest):
    """Submission form variant: the event is mandatory."""
    event_id: str = Field(..., min_length=1, description="Event ID")


class ProjectResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    project_id: str
    title: str
    submitted_by: str
    event_id: Optional[str] = None
    status: str = "submitted"
    submission_date: Optional[str] = None
