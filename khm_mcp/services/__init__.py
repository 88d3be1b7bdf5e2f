"""Services for khm-mcp."""

from khm_mcp.services.known_hosts import (
    backup_known_hosts,
    copy_known_hosts,
    delete_host,
    get_host,
    list_hosts,
    load_collection,
    load_stash,
    move_host,
    move_key,
    remove_key,
    save_as,
    stash_host,
    unstash_host,
)
from khm_mcp.services.state import get_settings, reset_state, set_settings

__all__ = [
    "backup_known_hosts",
    "copy_known_hosts",
    "delete_host",
    "get_host",
    "get_settings",
    "list_hosts",
    "load_collection",
    "load_stash",
    "move_host",
    "move_key",
    "remove_key",
    "reset_state",
    "save_as",
    "set_settings",
    "stash_host",
    "unstash_host",
]
