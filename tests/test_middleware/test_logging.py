"""Tests for logging middleware."""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from khm_mcp.middleware.logging import LoggingMiddleware


@pytest.fixture
def mock_tool_context() -> MagicMock:
    """Create a mock middleware context for tool calls."""
    context = MagicMock()
    context.method = "tools/call"
    context.source = "client"
    context.message = MagicMock()
    context.message.name = "delete_host"
    context.message.arguments = {"address": "old.example", "index": None}
    return context


@pytest.fixture
def mock_resource_context() -> MagicMock:
    """Create a mock middleware context for resource reads."""
    context = MagicMock()
    context.method = "resources/read"
    context.source = "client"
    context.message = MagicMock()
    context.message.uri = "hosts://host/old.example"
    return context


@pytest.mark.asyncio
async def test_logging_middleware_logs_tool_call(
    mock_tool_context: MagicMock,
) -> None:
    """LoggingMiddleware logs tool calls with name and set arguments."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(return_value="Deleted 1 key(s) for host: old.example")

    await middleware.on_call_tool(mock_tool_context, call_next)

    all_info_calls = str(mock_logger.info.call_args_list)
    all_log_calls = str(mock_logger.log.call_args_list)
    assert ">>> TOOL" in all_info_calls
    assert "delete_host" in all_info_calls
    assert "address='old.example'" in all_info_calls
    assert "index=" not in all_info_calls
    assert "<<< TOOL" in all_log_calls


@pytest.mark.asyncio
async def test_logging_middleware_summarizes_error_text(
    mock_tool_context: MagicMock,
) -> None:
    """Error strings returned by tools are summarized as error text."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(return_value="Error: delete old.example failed: Host not found")

    await middleware.on_call_tool(mock_tool_context, call_next)

    assert "error text" in str(mock_logger.log.call_args_list)


@pytest.mark.asyncio
async def test_logging_middleware_logs_resource_read(
    mock_resource_context: MagicMock,
) -> None:
    """LoggingMiddleware logs resource reads with URI."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(return_value="old.example  [ssh-rsa]")

    await middleware.on_read_resource(mock_resource_context, call_next)

    all_info_calls = str(mock_logger.info.call_args_list)
    assert ">>> RESOURCE" in all_info_calls
    assert "hosts://host/old.example" in all_info_calls
    assert "<<< RESOURCE" in str(mock_logger.log.call_args_list)


@pytest.mark.asyncio
async def test_logging_middleware_truncates_long_payloads(
    mock_tool_context: MagicMock,
) -> None:
    """Payload logging is truncated past max_payload_length."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(
        logger=mock_logger,
        include_payloads=True,
        max_payload_length=20,
    )
    mock_tool_context.message.arguments = {"query": "x" * 100}
    call_next = AsyncMock(return_value="result")

    await middleware.on_call_tool(mock_tool_context, call_next)

    assert "[truncated]" in str(mock_logger.debug.call_args_list)


@pytest.mark.asyncio
async def test_logging_middleware_logs_tool_errors(
    mock_tool_context: MagicMock,
) -> None:
    """LoggingMiddleware logs tool errors at error level."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(side_effect=ValueError("test error"))

    with pytest.raises(ValueError):
        await middleware.on_call_tool(mock_tool_context, call_next)

    mock_logger.error.assert_called_once()
    error_call = str(mock_logger.error.call_args)
    assert "!!! TOOL: %s" in error_call
    assert "delete_host" in error_call
    assert "ValueError" in error_call


@pytest.mark.asyncio
async def test_logging_middleware_logs_list_tools() -> None:
    """LoggingMiddleware logs tool listings with a count."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    context = MagicMock()
    context.method = "tools/list"
    result = MagicMock()
    result.tools = [MagicMock(), MagicMock()]

    await middleware.on_list_tools(context, AsyncMock(return_value=result))

    assert "LIST TOOLS" in str(mock_logger.info.call_args_list)
    assert "2 tool(s)" in str(mock_logger.log.call_args_list)


@pytest.mark.asyncio
async def test_logging_middleware_logs_list_resources() -> None:
    """LoggingMiddleware logs resource listings with a count."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    context = MagicMock()
    context.method = "resources/list"
    result = MagicMock(spec=["resources"])
    result.resources = [MagicMock(), MagicMock(), MagicMock()]

    await middleware.on_list_resources(context, AsyncMock(return_value=result))

    assert "LIST RESOURCES" in str(mock_logger.info.call_args_list)
    assert "3 resource(s)" in str(mock_logger.log.call_args_list)


@pytest.mark.asyncio
async def test_logging_middleware_summarizes_string_results(
    mock_tool_context: MagicMock,
) -> None:
    """Multi-line string results show char and line counts."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    call_next = AsyncMock(return_value="line1\nline2\nline3")

    await middleware.on_call_tool(mock_tool_context, call_next)

    all_log_calls = str(mock_logger.log.call_args_list)
    assert "17 chars, 3 lines" in all_log_calls
    assert "ms" in all_log_calls


@pytest.mark.asyncio
async def test_logging_middleware_slow_threshold(mock_tool_context: MagicMock) -> None:
    """Slow requests are logged at WARNING and flagged."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger, slow_threshold_ms=1.0)

    async def slow_handler(_: MagicMock) -> str:
        await asyncio.sleep(0.01)
        return "result"

    await middleware.on_call_tool(mock_tool_context, slow_handler)

    call_args = mock_logger.log.call_args_list
    assert call_args[0][0][0] == logging.WARNING
    assert "SLOW!" in str(call_args)


@pytest.mark.asyncio
async def test_logging_middleware_passes_names_as_arguments(
    mock_resource_context: MagicMock,
) -> None:
    """Tool names and URIs are log arguments, never part of the format string."""
    mock_logger = MagicMock()
    middleware = LoggingMiddleware(logger=mock_logger)
    mock_resource_context.message.uri = "hosts://host/100%25.example"

    await middleware.on_read_resource(mock_resource_context, AsyncMock(return_value="ok"))

    args = mock_logger.log.call_args[0]
    assert args[1] == "<<< RESOURCE: %s -> %s [%s]"
    assert args[2] == "hosts://host/100%25.example"
    assert (args[1] % args[2:]).startswith("<<< RESOURCE: hosts://host/100%25.example -> 2 chars")
