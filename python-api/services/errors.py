"""
Error translation shared by the services.

Store failures and unexpected exceptions both surface to the caller as 500
with the underlying message; the full traceback goes to the log.
"""

import logging

from fastapi import HTTPException
from fastapi import status as http_status
from integrations.zerodb.exceptions import ZeroDBError


def store_failure(log: logging.Logger, action: str, e: ZeroDBError) -> HTTPException:
    """Log a ZeroDB failure and build the 500 response for it."""
    log.error(f"ZeroDB error {action}: {e.describe()}", exc_info=True)
    return HTTPException(
        status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=e.message,
    )


def unexpected_failure(log: logging.Logger, action: str, e: Exception) -> HTTPException:
    """Log an unexpected exception and build the 500 response for it."""
    log.error(f"Unexpected error {action}: {str(e)}", exc_info=True)
    return HTTPException(
        status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e),
    )
