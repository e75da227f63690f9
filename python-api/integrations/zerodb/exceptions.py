"""
ZeroDB Custom Exceptions

Typed errors raised by the store client. Each error remembers the request
that failed (method and API path) so the table involved can be reported.
Services catch ``ZeroDBError`` (the base class) and translate it into a 500
response.
"""

from typing import Any, Optional

TABLES_SEGMENT = "tables"


class ZeroDBError(Exception):
    """Base exception for all ZeroDB errors"""

    default_message = "ZeroDB request failed"
    default_status: Optional[int] = None

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        response: Optional[dict[str, Any]] = None,
        method: Optional[str] = None,
        path: Optional[str] = None,
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.status_code = status_code if status_code is not None else self.default_status
        self.response = response
        self.method = method
        self.path = path

    @property
    def table(self) -> Optional[str]:
        """
        Table named in the failing path, if the request targeted one.

        Example:
            >>> ZeroDBError("x", path="/v1/public/projects/p/database/tables/events/rows").table
            'events'
        """
        if not self.path:
            return None
        segments = [s for s in self.path.split("/") if s]
        if TABLES_SEGMENT in segments:
            idx = segments.index(TABLES_SEGMENT)
            if idx + 1 < len(segments):
                return segments[idx + 1]
        return None

    def describe(self) -> str:
        """Message prefixed with the request and table, for logs."""
        parts = []
        if self.method and self.path:
            parts.append(f"{self.method} {self.path}")
        if self.table:
            parts.append(f"table={self.table}")
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        context = f"[{', '.join(parts)}] " if parts else ""
        return f"{context}{self.message}"


class ZeroDBAuthError(ZeroDBError):
    """Store rejected the API key (401, 403)"""

    default_message = "Authentication failed"
    default_status = 401


class ZeroDBNotFound(ZeroDBError):
    """Table, row path or project does not exist (404)"""

    default_message = "Resource not found"
    default_status = 404


class ZeroDBRateLimitError(ZeroDBError):
    """Store throttled the project (429)"""

    default_message = "Rate limit exceeded"
    default_status = 429


class ZeroDBTimeoutError(ZeroDBError):
    """Request did not complete within the configured timeout"""

    default_message = "Request timed out"
    default_status = 408
