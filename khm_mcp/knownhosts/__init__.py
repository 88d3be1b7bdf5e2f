"""known_hosts parsing and collection management.

- parse_line / parse_file: raw lines to HostEntry records
- HostCollection: address index with remove, move, stash, unstash and save
- copy_file / backup_file: file-level helpers
"""

from khm_mcp.knownhosts.collection import HostCollection
from khm_mcp.knownhosts.errors import (
    InvalidPathError,
    KnownHostsError,
    KnownHostsIOError,
    NotFoundError,
    ParseError,
)
from khm_mcp.knownhosts.files import append_lines, backup_file, copy_file
from khm_mcp.knownhosts.parser import parse_file, parse_line
from khm_mcp.knownhosts.search import filter_addresses, matches

__all__ = [
    "HostCollection",
    "InvalidPathError",
    "KnownHostsError",
    "KnownHostsIOError",
    "NotFoundError",
    "ParseError",
    "append_lines",
    "backup_file",
    "copy_file",
    "filter_addresses",
    "matches",
    "parse_file",
    "parse_line",
]
