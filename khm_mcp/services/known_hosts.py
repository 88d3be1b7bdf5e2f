"""known_hosts commands.

Each command loads the collection for a path, performs one operation,
persists the result and returns. Paths default to the configured
settings; failures raise KnownHostsError subclasses with a message
naming the cause.
"""

import logging

from khm_mcp.config import stash_path_for
from khm_mcp.knownhosts import (
    HostCollection,
    InvalidPathError,
    NotFoundError,
    backup_file,
    copy_file,
    filter_addresses,
    parse_file,
)
from khm_mcp.models import HostEntry, StashResult
from khm_mcp.services.state import get_settings

logger = logging.getLogger(__name__)


def _known_hosts_path(path: str | None) -> str:
    return path or get_settings().known_hosts_path


def _stash_path(known_hosts_path: str, stash_path: str | None) -> str:
    """Pick the stash file for a command.

    The configured stash only belongs to the configured known_hosts; any
    other file gets the stash_hosts next to it.
    """
    if stash_path:
        return stash_path
    settings = get_settings()
    if settings.stash_path and known_hosts_path == settings.known_hosts_path:
        return settings.stash_path
    return stash_path_for(known_hosts_path)


def load_collection(path: str | None = None, create_missing: bool = True) -> HostCollection:
    """Parse a known_hosts file.

    Args:
        path: File to load (default: configured known_hosts path)
        create_missing: Return an empty collection bound to the path when
            the file does not exist yet

    Returns:
        HostCollection bound to the path

    Raises:
        NotFoundError: If the file is missing and create_missing is False
        KnownHostsIOError: If the file cannot be opened
        ParseError: If reading fails
    """
    path = _known_hosts_path(path)
    try:
        return parse_file(path)
    except NotFoundError:
        if not create_missing:
            raise
        logger.warning("known_hosts not found at %s, starting empty", path)
        return HostCollection(path)


def list_hosts(path: str | None = None, query: str = "") -> dict[str, list[HostEntry]]:
    """List matching addresses with their entries, sorted by address."""
    collection = load_collection(path)
    return {
        address: collection.hosts_for_address(address)
        for address in filter_addresses(collection, query)
    }


def get_host(address: str, path: str | None = None) -> list[HostEntry]:
    """Get entries for one address.

    Raises:
        NotFoundError: If the address is not in the file
    """
    entries = load_collection(path).hosts_for_address(address)
    if not entries:
        raise NotFoundError(f"Host not found: {address}")
    return entries


def remove_key(address: str, index: int, path: str | None = None) -> HostEntry:
    """Remove one key of an address and save."""
    collection = load_collection(path, create_missing=False)
    entry = collection.remove_at(address, index)
    collection.save()
    return entry


def delete_host(address: str, path: str | None = None) -> list[HostEntry]:
    """Remove all keys of an address and save.

    Entries that also list other addresses stay under those addresses.
    """
    collection = load_collection(path, create_missing=False)
    removed = collection.remove_all(address)
    collection.save()
    return removed


def move_key(address: str, index: int, target: str, path: str | None = None) -> HostEntry:
    """Append one key of an address to another file, remove it and save."""
    collection = load_collection(path, create_missing=False)
    entry = collection.move_one_to_file(address, index, target)
    collection.save()
    return entry


def move_host(address: str, target: str, path: str | None = None) -> list[HostEntry]:
    """Append all keys of an address to another file, remove them and save."""
    collection = load_collection(path, create_missing=False)
    moved = collection.move_all_to_file(address, target)
    collection.save()
    return moved


def stash_host(
    address: str,
    path: str | None = None,
    stash_path: str | None = None,
) -> StashResult:
    """Move an address's keys into the stash file, skipping duplicates."""
    known_hosts = _known_hosts_path(path)
    collection = load_collection(known_hosts, create_missing=False)
    return collection.stash(address, _stash_path(known_hosts, stash_path))


def unstash_host(
    address: str,
    path: str | None = None,
    stash_path: str | None = None,
) -> StashResult:
    """Restore an address's keys from the stash file into known_hosts."""
    known_hosts = _known_hosts_path(path)
    collection = HostCollection(known_hosts)
    return collection.unstash(address, _stash_path(known_hosts, stash_path))


def load_stash(path: str | None = None, stash_path: str | None = None) -> HostCollection:
    """Parse the stash file (empty collection when it does not exist yet)."""
    known_hosts = _known_hosts_path(path)
    resolved = _stash_path(known_hosts, stash_path)
    if not resolved:
        raise InvalidPathError("Stash path not available")
    try:
        return parse_file(resolved)
    except NotFoundError:
        return HostCollection(resolved)


def save_as(target: str, path: str | None = None) -> HostCollection:
    """Write the current known_hosts contents to another file."""
    if not target:
        raise InvalidPathError("Target file path is empty")
    collection = load_collection(path)
    collection.save_as(target)
    return collection


def backup_known_hosts(path: str | None = None) -> str:
    """Write a timestamped snapshot of known_hosts.

    Returns:
        Snapshot path (<path>.backup.<unix-seconds>)
    """
    return backup_file(_known_hosts_path(path))


def copy_known_hosts(src: str | None, dst: str) -> str:
    """Copy a known_hosts file byte for byte to another path.

    Args:
        src: File to copy (default: configured known_hosts path)
        dst: Destination, created or overwritten

    Returns:
        The source path that was copied
    """
    src = _known_hosts_path(src)
    if not dst:
        raise InvalidPathError("Destination path is required")
    copy_file(src, dst)
    logger.info("Copied %s to %s", src, dst)
    return src
