"""khm-mcp FastMCP server.

This is a thin wrapper that wires together the MCP server with tools and resources.
All known_hosts logic is delegated to the services/ and knownhosts/ modules.
"""

import logging
import os
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from khm_mcp.knownhosts import KnownHostsError
from khm_mcp.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from khm_mcp.resources import host_resource, list_hosts_resource, stash_resource
from khm_mcp.services import get_settings, load_collection
from khm_mcp.tools import (
    backup_known_hosts,
    copy_known_hosts,
    delete_host,
    list_hosts,
    list_stash,
    move_host,
    save_known_hosts_as,
    show_host,
    stash_host,
    unstash_host,
)
from khm_mcp.utils.console import MCPRequestFormatter


def _configure_logging() -> None:
    """Configure colorful logging for the khm_mcp package.

    Called at module load time so logging is configured before any
    loggers are used, regardless of how the server is started.
    """
    log_level = os.getenv("KHM_LOG_LEVEL", "INFO").upper()
    use_colors = os.getenv("KHM_LOG_COLORS", "true").lower() != "false"

    if not sys.stderr.isatty():
        use_colors = False

    khm_logger = logging.getLogger("khm_mcp")
    khm_logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Only add handler if not already configured
    if not khm_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(MCPRequestFormatter(use_colors=use_colors))
        khm_logger.addHandler(handler)
        khm_logger.propagate = False

    # stdio transport owns stdout; keep third-party chatter down
    for noisy_logger in [
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "httpx",
        "httpcore",
        "fastmcp",
        "starlette",
        "anyio",
    ]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)


_configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Log the managed files at startup.

    Args:
        server: The FastMCP server instance

    Yields:
        Dict with the known_hosts and stash paths
    """
    settings = get_settings()
    logger.info("khm-mcp server starting up")

    try:
        collection = load_collection(settings.known_hosts_path)
        logger.info(
            "Managing %s: %d host(s), %d key(s)",
            settings.known_hosts_path,
            len(collection),
            collection.entry_count,
        )
    except KnownHostsError as e:
        logger.warning("Cannot read %s at startup: %s", settings.known_hosts_path, e)
    logger.info("Stash file: %s", settings.stash_path)
    logger.info("khm-mcp server ready to accept connections")

    try:
        yield {
            "known_hosts": settings.known_hosts_path,
            "stash": settings.stash_path,
        }
    finally:
        logger.info("khm-mcp server shutting down")


def configure_middleware(server: FastMCP) -> None:
    """Configure middleware stack for the server.

    Adds middleware in order: ErrorHandling -> Logging (with integrated timing)

    Args:
        server: The FastMCP server to configure.
    """
    settings = get_settings()

    # First added = innermost
    server.add_middleware(
        ErrorHandlingMiddleware(include_traceback=settings.include_traceback)
    )
    server.add_middleware(
        LoggingMiddleware(
            include_payloads=settings.log_payloads,
            slow_threshold_ms=float(settings.slow_threshold_ms),
        )
    )


def create_server() -> FastMCP:
    """Create and configure the MCP server with middleware, tools and resources.

    Returns:
        Configured FastMCP server instance
    """
    server = FastMCP(
        "khm_mcp",
        lifespan=app_lifespan,
    )

    configure_middleware(server)

    for tool in (
        list_hosts,
        show_host,
        delete_host,
        move_host,
        stash_host,
        unstash_host,
        list_stash,
        backup_known_hosts,
        save_known_hosts_as,
        copy_known_hosts,
    ):
        server.tool()(tool)

    server.resource("hosts://list")(list_hosts_resource)
    server.resource("hosts://stash")(stash_resource)
    server.resource("hosts://host/{address}")(host_resource)

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        """Health check endpoint."""
        client_host = request.client.host if request.client else "unknown"
        logger.debug("Health check from %s", client_host)
        return PlainTextResponse("OK")

    return server


# Default server instance
mcp = create_server()
