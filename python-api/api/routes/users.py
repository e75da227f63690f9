"""
User API Routes

Registration, login and user lookups. Responses never carry the stored
password hash.
"""

import logging
from typing import Any, Dict, List, Optional

from api.schemas.common import ErrorResponse, InsertResponse
from api.schemas.users import LoginRequest, UserCreateRequest, UserResponse
from fastapi import APIRouter, Depends, Query, status
from integrations.zerodb.client import ZeroDBClient
from integrations.zerodb.dependencies import get_zerodb_client
from services.user_service import authenticate_user, get_user, list_users, register_user

# Configure logger
logger = logging.getLogger(__name__)

# Initialize router
router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=InsertResponse,
    responses={
        200: {"description": "User registered"},
        400: {"model": ErrorResponse, "description": "Invalid request data"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Register User",
    description="""
    Register a participant, organizer or judge.

    - Email is stored lower-cased and must be unique
    - Password is stored only as a salted bcrypt hash
    """,
)
async def register_user_endpoint(
    request: UserCreateRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    user = await register_user(
        zerodb_client=zerodb_client,
        name=request.name,
        email=request.email,
        password=request.password,
        role=request.role,
    )
    return {"id": user["user_id"]}


@router.post(
    "/login",
    response_model=UserResponse,
    responses={
        200: {"description": "Credentials accepted"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        429: {"model": ErrorResponse, "description": "Too many login attempts"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Log In",
)
async def login_endpoint(
    request: LoginRequest,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    """
    Verify email and password and return the public user.

    Unknown email and wrong password are indistinguishable to the caller.
    """
    return await authenticate_user(
        zerodb_client=zerodb_client,
        email=request.email,
        password=request.password,
    )


@router.get(
    "",
    response_model=List[UserResponse],
    responses={
        200: {"description": "Users retrieved"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="List Users",
)
async def list_users_endpoint(
    role: Optional[str] = Query(None, description="Filter by role"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> List[Dict[str, Any]]:
    return await list_users(zerodb_client, role=role, skip=skip, limit=limit)


@router.get(
    "/{email}",
    response_model=UserResponse,
    responses={
        200: {"description": "User found"},
        404: {"model": ErrorResponse, "description": "User not found"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Get User by Email",
)
async def get_user_endpoint(
    email: str,
    zerodb_client: ZeroDBClient = Depends(get_zerodb_client),
) -> Dict[str, Any]:
    return await get_user(zerodb_client, email)
