"""known_hosts tools for the MCP server.

Every tool returns text. Expected failures (missing host, unwritable
file, empty path) are reported as "Error: ..." strings; anything else
propagates to the error handling middleware.
"""

import logging

from khm_mcp.knownhosts import KnownHostsError
from khm_mcp.services import known_hosts as commands
from khm_mcp.utils.formatting import (
    format_host_details,
    format_host_list,
    format_host_title,
)

logger = logging.getLogger(__name__)


def _error(operation: str, error: Exception) -> str:
    logger.warning("%s failed: %s", operation, error)
    return f"Error: {operation} failed: {error}"


async def list_hosts(query: str = "", known_hosts: str | None = None) -> str:
    """List hosts in the known_hosts file.

    Args:
        query: Optional search terms. Every term must match an address,
            key type, comment or hash (case-insensitive).
        known_hosts: Path to the known_hosts file (default: configured path)

    Examples:
        list_hosts() - Every host
        list_hosts("github ed25519") - Hosts matching both terms
    """
    try:
        collection = commands.load_collection(known_hosts)
    except KnownHostsError as e:
        return _error("list", e)
    return format_host_list(collection, query)


async def show_host(address: str, known_hosts: str | None = None) -> str:
    """Show every key recorded for an address."""
    try:
        entries = commands.get_host(address, known_hosts)
    except KnownHostsError as e:
        return _error(f"show {address}", e)
    return f"{format_host_title(address, entries)}\n\n{format_host_details(entries)}"


async def delete_host(
    address: str,
    index: int | None = None,
    known_hosts: str | None = None,
) -> str:
    """Delete keys for an address from known_hosts.

    Args:
        address: Address key exactly as listed
        index: Delete only the key at this 0-based position. When omitted,
            every key under the address is deleted.
        known_hosts: Path to the known_hosts file (default: configured path)

    Entries that also list other addresses remain under those addresses.
    """
    try:
        if index is None:
            removed = commands.delete_host(address, known_hosts)
            return f"Deleted {len(removed)} key(s) for host: {address}"
        entry = commands.remove_key(address, index, known_hosts)
    except KnownHostsError as e:
        return _error(f"delete {address}", e)
    return f"Deleted {entry.key_type} key {index} for host: {address}"


async def move_host(
    address: str,
    target: str,
    index: int | None = None,
    known_hosts: str | None = None,
) -> str:
    """Move keys for an address into another file.

    Args:
        address: Address key exactly as listed
        target: File to append the keys to (created if missing)
        index: Move only the key at this 0-based position
        known_hosts: Path to the known_hosts file (default: configured path)
    """
    try:
        if index is None:
            moved = commands.move_host(address, target, known_hosts)
            return f"Moved {len(moved)} key(s) for {address} to: {target}"
        entry = commands.move_key(address, index, target, known_hosts)
    except KnownHostsError as e:
        return _error(f"move {address}", e)
    return f"Moved {entry.key_type} key {index} for {address} to: {target}"


async def stash_host(
    address: str,
    stash_file: str | None = None,
    known_hosts: str | None = None,
) -> str:
    """Stash all keys for an address into the stash file.

    Keys already present in the stash are not written twice.

    Args:
        address: Address key exactly as listed
        stash_file: Stash file (default: stash_hosts next to known_hosts)
        known_hosts: Path to the known_hosts file (default: configured path)
    """
    try:
        result = commands.stash_host(address, known_hosts, stash_file)
    except KnownHostsError as e:
        return _error(f"stash {address}", e)

    message = f"Stashed {result.written} key(s) for {address} to: {result.stash_path}"
    if result.skipped:
        message += f" ({result.skipped} already stashed)"
    return message


async def unstash_host(
    address: str,
    stash_file: str | None = None,
    known_hosts: str | None = None,
) -> str:
    """Restore all stashed keys for an address back into known_hosts."""
    try:
        result = commands.unstash_host(address, known_hosts, stash_file)
    except KnownHostsError as e:
        return _error(f"unstash {address}", e)

    message = f"Restored {result.written} key(s) for {address} from stash to known_hosts"
    if result.skipped:
        message += f" ({result.skipped} already present)"
    return message


async def list_stash(
    query: str = "",
    stash_file: str | None = None,
    known_hosts: str | None = None,
) -> str:
    """List hosts in the stash file."""
    try:
        stash = commands.load_stash(known_hosts, stash_file)
    except KnownHostsError as e:
        return _error("list stash", e)
    return format_host_list(stash, query, title="Stashed Hosts")


async def backup_known_hosts(known_hosts: str | None = None) -> str:
    """Create a timestamped backup of the known_hosts file."""
    try:
        backup_path = commands.backup_known_hosts(known_hosts)
    except KnownHostsError as e:
        return _error("backup", e)
    return f"Backup created: {backup_path}"


async def save_known_hosts_as(target: str, known_hosts: str | None = None) -> str:
    """Write a normalized copy of known_hosts to another file."""
    try:
        collection = commands.save_as(target, known_hosts)
    except KnownHostsError as e:
        return _error("save as", e)
    return f"Saved {collection.entry_count} key(s) to: {target}"


async def copy_known_hosts(destination: str, known_hosts: str | None = None) -> str:
    """Copy the known_hosts file byte for byte to another path.

    Args:
        destination: File to create or overwrite
        known_hosts: File to copy (default: configured path)
    """
    try:
        source = commands.copy_known_hosts(known_hosts, destination)
    except KnownHostsError as e:
        return _error("copy", e)
    return f"Copied {source} to: {destination}"
