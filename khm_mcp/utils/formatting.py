"""Text rendering for hosts, details and listings."""

from collections.abc import Sequence

from khm_mcp.knownhosts import HostCollection, filter_addresses
from khm_mcp.models import HostEntry

HASH_TITLE_LENGTH = 20


def collect_key_types(entries: Sequence[HostEntry]) -> str:
    """Join the distinct key types of entries, in first-seen order."""
    seen: dict[str, None] = {}
    for entry in entries:
        if entry.key_type:
            seen.setdefault(entry.key_type, None)
    return ",".join(seen)


def format_host_title(address: str, entries: Sequence[HostEntry]) -> str:
    """Format a one-line title for an address slot.

    Hashed hosts show a truncated hash; plain hosts show the address.
    Key types and the key count (when more than one) are appended.
    """
    if not entries:
        return address

    first = entries[0]
    if first.is_hashed and first.hash_value:
        title = first.hash_value
        if len(title) > HASH_TITLE_LENGTH:
            title = title[:HASH_TITLE_LENGTH] + "..."
    else:
        title = address or first.addresses[0]

    types = collect_key_types(entries)
    if types:
        title += f"  [{types}]"
    if len(entries) > 1:
        title += f" ({len(entries)} keys)"
    return title


def format_host_details(entries: Sequence[HostEntry]) -> str:
    """Format every distinct key of an address slot.

    Entries with the same key type, key and comment are shown once.
    """
    seen: set[tuple[str, str, str]] = set()
    blocks: list[str] = []

    for entry in entries:
        identity = (entry.key_type, entry.key, entry.comment)
        if identity in seen:
            continue
        seen.add(identity)

        lines = []
        if entry.is_hashed and entry.hash_value:
            lines.append(f"Hashed host: {entry.hash_value}")
        elif entry.addresses:
            lines.append(f"Hosts: {', '.join(entry.addresses)}")
        if entry.key_type:
            lines.append(f"Type: {entry.key_type}")
        if entry.key:
            lines.append(f"Key: {entry.key}")
        if entry.comment:
            lines.append(f"Comment: {entry.comment}")
        blocks.append("\n".join(lines))

    content = "\n\n".join(block for block in blocks if block)
    return content or "No details available for this host."


def format_host_list(
    collection: HostCollection,
    query: str = "",
    title: str = "SSH Known Hosts",
) -> str:
    """Format a numbered listing of every matching address.

    Args:
        collection: Collection to list
        query: Optional search terms (see knownhosts.search.matches)
        title: Heading line

    Returns:
        Multi-line listing
    """
    addresses = filter_addresses(collection, query)
    if not addresses:
        if query:
            return f"No hosts match '{query}' in {collection.file_path}"
        return f"No hosts in {collection.file_path}"

    lines = [title, "=" * len(title), ""]
    for address in addresses:
        entries = collection.hosts_for_address(address)
        lines.append(format_host_title(address, entries))
        for i, entry in enumerate(entries, start=1):
            line = f"  {i}. {entry.key_type}"
            if entry.comment:
                line += f"  # {entry.comment}"
            lines.append(line)
        lines.append("")

    lines.append(f"{len(addresses)} of {len(collection)} host(s) shown")
    return "\n".join(lines)
