"""MCP resources for khm-mcp."""

from khm_mcp.resources.hosts import host_resource, list_hosts_resource, stash_resource

__all__ = [
    "host_resource",
    "list_hosts_resource",
    "stash_resource",
]
