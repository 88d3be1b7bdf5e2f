"""Error handling middleware for consistent error logging."""

import logging
import traceback
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from fastmcp.server.middleware import MiddlewareContext

from khm_mcp.knownhosts import KnownHostsError
from khm_mcp.middleware.base import KhmMiddleware

ErrorCallback = Callable[[Exception, MiddlewareContext], None]


class ErrorHandlingMiddleware(KhmMiddleware):
    """Middleware that logs and counts exceptions escaping a handler.

    known_hosts errors are logged as warnings without traceback; anything
    else is logged as an error. The exception is always re-raised.

    Example:
        >>> middleware = ErrorHandlingMiddleware(include_traceback=True)
        >>> mcp.add_middleware(middleware)
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_traceback: bool = False,
        error_callback: ErrorCallback | None = None,
    ) -> None:
        """Initialize error handling middleware.

        Args:
            logger: Optional custom logger.
            include_traceback: Whether to include full traceback in logs.
            error_callback: Optional callback called with (exception, context).
        """
        super().__init__(logger=logger)
        self.include_traceback = include_traceback
        self.error_callback = error_callback
        self._error_counts: dict[str, int] = defaultdict(int)

    def get_error_stats(self) -> dict[str, int]:
        """Get error counts keyed by exception type name."""
        return dict(self._error_counts)

    def reset_stats(self) -> None:
        """Reset error statistics."""
        self._error_counts.clear()

    async def on_message(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Log, count and re-raise errors during request processing."""
        try:
            return await call_next(context)

        except Exception as e:
            error_type = type(e).__name__
            self._error_counts[error_type] += 1

            if isinstance(e, KnownHostsError):
                self.logger.warning("Error in %s: %s: %s", context.method, error_type, e)
            elif self.include_traceback:
                self.logger.error(
                    "Error in %s: %s: %s\n%s",
                    context.method,
                    error_type,
                    e,
                    traceback.format_exc(),
                )
            else:
                self.logger.error("Error in %s: %s: %s", context.method, error_type, e)

            if self.error_callback:
                try:
                    self.error_callback(e, context)
                except Exception as callback_error:
                    self.logger.warning("Error callback failed: %s", callback_error)

            raise
