"""
ZeroDB Integration Package

Document store client used by every service: tables API, typed errors, and
the FastAPI readiness-gated dependency.
"""

from .client import ZeroDBClient
from .exceptions import (
    ZeroDBAuthError,
    ZeroDBError,
    ZeroDBNotFound,
    ZeroDBRateLimitError,
    ZeroDBTimeoutError,
)

__all__ = [
    "ZeroDBClient",
    "ZeroDBError",
    "ZeroDBAuthError",
    "ZeroDBNotFound",
    "ZeroDBRateLimitError",
    "ZeroDBTimeoutError",
]
