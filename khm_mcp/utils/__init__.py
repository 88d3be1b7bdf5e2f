"""Utilities for khm-mcp."""

from khm_mcp.utils.console import ColorfulFormatter, MCPRequestFormatter
from khm_mcp.utils.formatting import (
    collect_key_types,
    format_host_details,
    format_host_list,
    format_host_title,
)

__all__ = [
    "ColorfulFormatter",
    "MCPRequestFormatter",
    "collect_key_types",
    "format_host_details",
    "format_host_list",
    "format_host_title",
]
