"""Free-text host filtering."""

from collections.abc import Iterable

from khm_mcp.knownhosts.collection import HostCollection
from khm_mcp.models import HostEntry


def _search_fields(address: str, entries: Iterable[HostEntry]) -> list[str]:
    fields = [address.lower()]
    for entry in entries:
        fields.extend(a.lower() for a in entry.addresses)
        if entry.key_type:
            fields.append(entry.key_type.lower())
        if entry.comment:
            fields.append(entry.comment.lower())
        if entry.is_hashed and entry.hash_value:
            fields.append(entry.hash_value.lower())
    return fields


def matches(address: str, entries: Iterable[HostEntry], query: str) -> bool:
    """Check whether an address slot matches a search query.

    Every whitespace-separated term must appear (case-insensitive) in at
    least one field: the address label, any declared address, key type,
    comment or hash value. An empty query matches everything.
    """
    terms = query.lower().split()
    if not terms:
        return True

    fields = _search_fields(address, entries)
    return all(any(term in f for f in fields) for term in terms)


def filter_addresses(collection: HostCollection, query: str = "") -> list[str]:
    """Get sorted addresses whose slot matches the query."""
    return [
        address
        for address in sorted(collection.all_addresses())
        if matches(address, collection.hosts_for_address(address), query)
    ]
