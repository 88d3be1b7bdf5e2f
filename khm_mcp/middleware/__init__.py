"""khm-mcp middleware components."""

from khm_mcp.middleware.base import KhmMiddleware
from khm_mcp.middleware.errors import ErrorHandlingMiddleware
from khm_mcp.middleware.logging import LoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "KhmMiddleware",
    "LoggingMiddleware",
]
