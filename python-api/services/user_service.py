"""
User Service

Registration, credential verification and user lookups. Passwords are hashed
with bcrypt; the hash never leaves this module.
"""

import logging
import uuid
from typing import Any, Dict, List, Literal, Optional

import bcrypt
from fastapi import HTTPException
from fastapi import status as http_status

from config import settings
from integrations.zerodb.client import ZeroDBClient
from integrations.zerodb.exceptions import ZeroDBError
from services.errors import store_failure, unexpected_failure
from services.timestamps import utcnow_iso

# Configure logger
logger = logging.getLogger(__name__)

UserRole = Literal["participant", "organizer", "judge"]

PRIVATE_FIELDS = ("password_hash", "password")


def hash_password(password: str) -> str:
    """Salted bcrypt hash of a password, as text."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def to_public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """Strip credential fields from a stored user."""
    return {key: value for key, value in user.items() if key not in PRIVATE_FIELDS}


async def fetch_user_by_email(
    zerodb_client: ZeroDBClient, email: str
) -> Optional[Dict[str, Any]]:
    """Stored user for an email (case-insensitive), or None."""
    users = await zerodb_client.tables.query_rows(
        "users",
        filter={"email": email.strip().lower()},
        limit=1,
    )
    return users[0] if users else None


async def register_user(
    zerodb_client: ZeroDBClient,
    name: str,
    email: str,
    password: str,
    role: UserRole,
) -> Dict[str, Any]:
    """
    Register a new user.

    Args:
        zerodb_client: ZeroDB client instance
        name: Display name
        email: Login email, stored lower-cased
        password: Plain password, stored only as a bcrypt hash
        role: participant, organizer or judge

    Returns:
        Public user dict including user_id

    Raises:
        HTTPException: 409 if the email is already registered
        HTTPException: 500 for database errors

    Example:
        >>> user = await register_user(client, "Ada", "ada@example.com", "s3cret!", "judge")
        >>> "password_hash" in user
        False
    """
    normalized_email = email.strip().lower()
    try:
        if await fetch_user_by_email(zerodb_client, normalized_email):
            logger.warning(f"Registration rejected, email already in use: {normalized_email}")
            raise HTTPException(
                status_code=http_status.HTTP_409_CONFLICT,
                detail="User already exists",
            )

        user_row = {
            "user_id": str(uuid.uuid4()),
            "name": name.strip(),
            "email": normalized_email,
            "password_hash": hash_password(password),
            "role": role,
            "created_at": utcnow_iso(),
        }

        await zerodb_client.tables.insert_rows("users", rows=[user_row])

        logger.info(f"Registered user {user_row['user_id']} with role '{role}'")
        return to_public_user(user_row)

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, "registering user", e)
    except Exception as e:
        raise unexpected_failure(logger, "registering user", e)


async def authenticate_user(
    zerodb_client: ZeroDBClient,
    email: str,
    password: str,
) -> Dict[str, Any]:
    """
    Verify credentials and return the public user.

    Unknown email and wrong password produce the same error.

    Raises:
        HTTPException: 401 for invalid credentials
        HTTPException: 500 for database errors
    """
    try:
        user = await fetch_user_by_email(zerodb_client, email)
        if not user or not verify_password(password, user.get("password_hash")):
            logger.warning("Login failed: invalid credentials")
            raise HTTPException(
                status_code=http_status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials",
            )

        logger.info(f"User {user.get('user_id')} logged in")
        return to_public_user(user)

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, "authenticating user", e)
    except Exception as e:
        raise unexpected_failure(logger, "authenticating user", e)


async def get_user(zerodb_client: ZeroDBClient, email: str) -> Dict[str, Any]:
    """
    Raises:
        HTTPException: 404 if no user has this email
    """
    try:
        user = await fetch_user_by_email(zerodb_client, email)
        if not user:
            raise HTTPException(
                status_code=http_status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        return to_public_user(user)

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, "getting user", e)
    except Exception as e:
        raise unexpected_failure(logger, "getting user", e)


async def list_users(
    zerodb_client: ZeroDBClient,
    role: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Dict[str, Any]]:
    try:
        users = await zerodb_client.tables.query_rows(
            "users",
            filter={"role": role} if role else None,
            skip=skip,
            limit=limit,
        )
        return [to_public_user(u) for u in users]

    except ZeroDBError as e:
        raise store_failure(logger, "listing users", e)
    except Exception as e:
        raise unexpected_failure(logger, "listing users", e)
