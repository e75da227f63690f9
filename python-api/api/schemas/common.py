"""
Response schemas shared by every router.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """
    Standard error body.

    Attributes:
        error: Human-readable error message
        details: Field-level validation errors, when the request body was invalid
    """
    error: str
    details: Optional[List[Any]] = None


class InsertResponse(BaseModel):
    """Identifier of a newly created document."""
    id: str


class SuccessResponse(BaseModel):
    """Acknowledgement of a state change; extra keys pass through."""
    model_config = ConfigDict(extra="allow")

    success: bool = True
    message: Optional[str] = None
