"""
Pydantic schemas for user registration and login.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

UserRole = Literal["participant", "organizer", "judge"]


class UserCreateRequest(BaseModel):
    """
    Request schema for registering a user.

    Attributes:
        name: Display name
        email: Login email (unique)
        password: Plain password, hashed before storage
        role: participant, organizer or judge
    """
    name: str = Field(..., min_length=1, max_length=200, description="Display name")
    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=6, max_length=128, description="Password")
    role: UserRole = Field(default="participant", description="User role")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Ensure name is not just whitespace."""
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(BaseModel):
    """Public view of a user; credential fields are never included."""
    model_config = ConfigDict(extra="ignore")

    user_id: str
    name: str
    email: str
    role: UserRole
    created_at: str
