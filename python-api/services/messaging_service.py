"""
Messaging Service

Organizer announcements and participant Q&A. Both can be scoped to an event
or left global; event-scoped listings include the global items.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from fastapi import status as http_status
from integrations.zerodb.client import ZeroDBClient
from integrations.zerodb.exceptions import ZeroDBError
from services.errors import store_failure, unexpected_failure
from services.timestamps import utcnow_iso

# Configure logger
logger = logging.getLogger(__name__)


def newest_first(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(rows, key=lambda row: row.get("created_at") or "", reverse=True)


def _scope_filter(event_id: Optional[str], include_global: bool) -> Optional[Dict[str, Any]]:
    if not event_id:
        return None
    if include_global:
        return {"$or": [{"event_id": event_id}, {"event_id": None}]}
    return {"event_id": event_id}


async def create_announcement(
    zerodb_client: ZeroDBClient,
    announcement_data: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Publish an announcement. Announcements are immutable once created.

    Raises:
        HTTPException: 500 for database errors
    """
    try:
        row = {
            **announcement_data,
            "announcement_id": str(uuid.uuid4()),
            "created_at": utcnow_iso(),
        }
        await zerodb_client.tables.insert_rows("announcements", rows=[row])

        logger.info(
            f"Announcement {row['announcement_id']} published by {row.get('created_by')}"
        )
        return row

    except ZeroDBError as e:
        raise store_failure(logger, "creating announcement", e)
    except Exception as e:
        raise unexpected_failure(logger, "creating announcement", e)


async def list_announcements(
    zerodb_client: ZeroDBClient,
    event_id: Optional[str] = None,
    include_global: bool = False,
) -> List[Dict[str, Any]]:
    """
    Announcements newest first.

    Args:
        event_id: Restrict to one event
        include_global: With event_id, also return announcements with no event
    """
    try:
        rows = await zerodb_client.tables.query_all_rows(
            "announcements", filter=_scope_filter(event_id, include_global)
        )
        return newest_first(rows)

    except ZeroDBError as e:
        raise store_failure(logger, "listing announcements", e)
    except Exception as e:
        raise unexpected_failure(logger, "listing announcements", e)


async def create_question(
    zerodb_client: ZeroDBClient,
    question_data: Dict[str, Any],
) -> Dict[str, Any]:
    """Ask a question. It starts unanswered."""
    try:
        row = {
            **question_data,
            "question_id": str(uuid.uuid4()),
            "answer": None,
            "answered_by": None,
            "answered_at": None,
            "is_answered": False,
            "created_at": utcnow_iso(),
        }
        await zerodb_client.tables.insert_rows("questions", rows=[row])

        logger.info(f"Question {row['question_id']} asked by {row.get('author_id')}")
        return row

    except ZeroDBError as e:
        raise store_failure(logger, "creating question", e)
    except Exception as e:
        raise unexpected_failure(logger, "creating question", e)


async def list_questions(
    zerodb_client: ZeroDBClient,
    event_id: Optional[str] = None,
    include_global: bool = False,
) -> List[Dict[str, Any]]:
    """Questions newest first, scoped like ``list_announcements``."""
    try:
        rows = await zerodb_client.tables.query_all_rows(
            "questions", filter=_scope_filter(event_id, include_global)
        )
        return newest_first(rows)

    except ZeroDBError as e:
        raise store_failure(logger, "listing questions", e)
    except Exception as e:
        raise unexpected_failure(logger, "listing questions", e)


async def answer_question(
    zerodb_client: ZeroDBClient,
    question_id: str,
    answer: str,
    answered_by: str,
) -> Dict[str, Any]:
    """
    Answer a question. A question is answered once and not changed after.

    Raises:
        HTTPException: 404 if question not found
        HTTPException: 400 if it was already answered
        HTTPException: 500 for database errors
    """
    try:
        questions = await zerodb_client.tables.query_rows(
            "questions",
            filter={"question_id": question_id},
            limit=1,
        )
        if not questions:
            raise HTTPException(
                status_code=http_status.HTTP_404_NOT_FOUND,
                detail="Question not found",
            )
        if questions[0].get("is_answered"):
            raise HTTPException(
                status_code=http_status.HTTP_400_BAD_REQUEST,
                detail="Question has already been answered",
            )

        result = await zerodb_client.tables.update_rows(
            "questions",
            filter={"question_id": question_id, "is_answered": False},
            update={
                "$set": {
                    "answer": answer,
                    "answered_by": answered_by,
                    "answered_at": utcnow_iso(),
                    "is_answered": True,
                }
            },
        )
        if not result.get("matched_count"):
            raise HTTPException(
                status_code=http_status.HTTP_400_BAD_REQUEST,
                detail="Question has already been answered",
            )

        logger.info(f"Question {question_id} answered by {answered_by}")
        return {"success": True}

    except HTTPException:
        raise
    except ZeroDBError as e:
        raise store_failure(logger, f"answering question {question_id}", e)
    except Exception as e:
        raise unexpected_failure(logger, f"answering question {question_id}", e)
