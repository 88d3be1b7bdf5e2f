"""MCP tools for khm-mcp."""

from khm_mcp.tools.known_hosts import (
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

__all__ = [
    "backup_known_hosts",
    "copy_known_hosts",
    "delete_host",
    "list_hosts",
    "list_stash",
    "move_host",
    "save_known_hosts_as",
    "show_host",
    "stash_host",
    "unstash_host",
]
