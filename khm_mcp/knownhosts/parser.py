"""known_hosts file parser.

Turns raw lines into HostEntry records. Malformed lines are skipped
silently; only an unreadable file fails the parse.
"""

import logging

from khm_mcp.config.paths import resolve_known_hosts_path
from khm_mcp.knownhosts.collection import HostCollection
from khm_mcp.knownhosts.errors import KnownHostsIOError, NotFoundError, ParseError
from khm_mcp.knownhosts.files import ENCODING
from khm_mcp.models import HostEntry

logger = logging.getLogger(__name__)

# address-list, key type, key material
MIN_FIELDS = 3


def parse_line(raw: str, line_number: int = 0) -> HostEntry | None:
    """Parse one known_hosts line.

    Args:
        raw: Line as read from the file
        line_number: 1-based position in the file

    Returns:
        HostEntry, or None for blank, comment and malformed lines
    """
    line = raw.strip()
    if not line or line.startswith("#"):
        return None

    parts = line.split()
    if len(parts) < MIN_FIELDS:
        return None

    addresses = [token.strip() for token in parts[0].split(",")]
    addresses = [token for token in addresses if token]
    if not addresses:
        return None

    return HostEntry.create(
        addresses=addresses,
        key_type=parts[1],
        key=parts[2],
        comment=" ".join(parts[3:]),
        line_number=line_number,
    )


def parse_file(path: str | None = None) -> HostCollection:
    """Parse a known_hosts file into a collection.

    Args:
        path: File to read (default: resolved known_hosts path)

    Returns:
        HostCollection bound to the file

    Raises:
        NotFoundError: If the file does not exist
        KnownHostsIOError: If the file cannot be opened
        ParseError: If reading fails part way through
    """
    if not path:
        path = resolve_known_hosts_path()

    try:
        f = open(path, encoding=ENCODING)
    except FileNotFoundError as e:
        raise NotFoundError(f"known_hosts file not found: {path}") from e
    except OSError as e:
        raise KnownHostsIOError("open known_hosts file", path, e) from e

    collection = HostCollection(path)
    skipped = 0
    with f:
        try:
            for line_number, raw in enumerate(f, start=1):
                entry = parse_line(raw, line_number)
                if entry is None:
                    stripped = raw.strip()
                    if stripped and not stripped.startswith("#"):
                        skipped += 1
                        logger.debug("Skipping malformed line %d in %s", line_number, path)
                    continue
                collection.add(entry)
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(path, e) from e

    logger.debug(
        "Parsed %d entries under %d address(es) from %s (%d skipped)",
        collection.entry_count,
        len(collection),
        path,
        skipped,
    )
    return collection
