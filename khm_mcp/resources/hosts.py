"""Resources for browsing known_hosts and the stash."""

from khm_mcp.knownhosts import KnownHostsError
from khm_mcp.services import load_collection, load_stash
from khm_mcp.utils.formatting import (
    format_host_details,
    format_host_list,
    format_host_title,
)


async def list_hosts_resource() -> str:
    """List every host in the configured known_hosts file.

    Returns:
        Numbered listing with key types and comments
    """
    try:
        collection = load_collection()
    except KnownHostsError as e:
        return f"Error: {e}"
    return format_host_list(collection)


async def stash_resource() -> str:
    """List every host in the configured stash file."""
    try:
        stash = load_stash()
    except KnownHostsError as e:
        return f"Error: {e}"
    return format_host_list(stash, title="Stashed Hosts")


async def host_resource(address: str) -> str:
    """Show the keys recorded for one address."""
    try:
        entries = load_collection().hosts_for_address(address)
    except KnownHostsError as e:
        return f"Error: {e}"

    if not entries:
        return f"Host not found: {address}"
    return f"{format_host_title(address, entries)}\n\n{format_host_details(entries)}"
