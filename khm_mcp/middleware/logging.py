"""Logging middleware for request/response tracking."""

import json
import logging
import time
from typing import Any

from fastmcp.server.middleware import MiddlewareContext

from khm_mcp.middleware.base import KhmMiddleware


class LoggingMiddleware(KhmMiddleware):
    """Middleware that logs tool calls, resource reads and listings with timing.

    Example:
        >>> middleware = LoggingMiddleware(include_payloads=True)
        >>> mcp.add_middleware(middleware)
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_payloads: bool = False,
        max_payload_length: int = 1000,
        slow_threshold_ms: float = 1000.0,
    ) -> None:
        """Initialize logging middleware.

        Args:
            logger: Optional custom logger.
            include_payloads: Whether to log request/response payloads.
            max_payload_length: Maximum payload length before truncation.
            slow_threshold_ms: Threshold in ms for slow request warnings.
        """
        super().__init__(logger=logger)
        self.include_payloads = include_payloads
        self.max_payload_length = max_payload_length
        self.slow_threshold_ms = slow_threshold_ms

    def _truncate(self, data: Any) -> str:
        """Truncate data to max payload length."""
        try:
            text = json.dumps(data, default=str)
        except (TypeError, ValueError):
            text = str(data)

        if len(text) > self.max_payload_length:
            return text[: self.max_payload_length] + "... [truncated]"
        return text

    def _format_args(self, args: dict[str, Any] | None) -> str:
        """Format tool arguments, skipping unset optionals."""
        if not args:
            return "()"
        parts = [f"{key}={value!r}" for key, value in args.items() if value is not None]
        return f"({', '.join(parts)})"

    def _format_duration(self, duration_ms: float) -> str:
        if duration_ms >= self.slow_threshold_ms:
            return f"{duration_ms:.1f}ms SLOW!"
        return f"{duration_ms:.1f}ms"

    async def _timed(
        self,
        kind: str,
        name: str | None,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Run the next handler, logging its outcome and duration.

        Args:
            kind: Fixed request kind (TOOL, RESOURCE, LIST TOOLS, ...)
            name: Tool name or URI, if the request has one
        """
        # kind goes into the format string, so it must never carry user text
        prefix = f"{kind}: %s" if name is not None else kind
        name_args = (name,) if name is not None else ()

        start = time.perf_counter()
        try:
            result = await call_next(context)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            self.logger.error(
                f"!!! {prefix} -> %s: %s [%s]",
                *name_args,
                type(e).__name__,
                e,
                self._format_duration(duration_ms),
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        log_level = logging.WARNING if duration_ms >= self.slow_threshold_ms else logging.INFO
        self.logger.log(
            log_level,
            f"<<< {prefix} -> %s [%s]",
            *name_args,
            self._summarize_result(result),
            self._format_duration(duration_ms),
        )
        if self.include_payloads and result is not None:
            self.logger.debug("    Result: %s", self._truncate(result))
        return result

    async def on_call_tool(self, context: MiddlewareContext, call_next: Any) -> Any:
        """Log tool calls with name, arguments, and timing."""
        tool_name = getattr(context.message, "name", "unknown")
        args = getattr(context.message, "arguments", None)

        self.logger.info(">>> TOOL: %s%s", tool_name, self._format_args(args))
        if self.include_payloads and args:
            self.logger.debug("    Args: %s", self._truncate(args))

        return await self._timed("TOOL", tool_name, context, call_next)

    async def on_read_resource(self, context: MiddlewareContext, call_next: Any) -> Any:
        """Log resource reads with URI and timing."""
        uri = getattr(context.message, "uri", "unknown")
        self.logger.info(">>> RESOURCE: %s", uri)
        return await self._timed("RESOURCE", uri, context, call_next)

    async def on_list_tools(self, context: MiddlewareContext, call_next: Any) -> Any:
        """Log tool listing requests."""
        self.logger.info(">>> LIST TOOLS")
        return await self._timed("LIST TOOLS", None, context, call_next)

    async def on_list_resources(self, context: MiddlewareContext, call_next: Any) -> Any:
        """Log resource listing requests."""
        self.logger.info(">>> LIST RESOURCES")
        return await self._timed("LIST RESOURCES", None, context, call_next)

    def _summarize_result(self, result: Any) -> str:
        """Create a brief summary of a result for logging."""
        if result is None:
            return "null"

        if isinstance(result, str):
            if result.startswith("Error:"):
                return "error text"
            lines = result.count("\n") + 1
            if lines > 1:
                return f"{len(result)} chars, {lines} lines"
            return f"{len(result)} chars"

        if isinstance(result, (list, tuple)):
            return f"{len(result)} items"

        if hasattr(result, "tools"):
            return f"{len(result.tools)} tool(s)"
        if hasattr(result, "resources"):
            return f"{len(result.resources)} resource(s)"

        # MCP responses
        if hasattr(result, "content"):
            content = result.content
            if isinstance(content, (list, tuple)):
                return f"{len(content)} content item(s)"
            return "content"

        return type(result).__name__
