"""Data models for khm-mcp."""

from khm_mcp.models.host import HASHED_MARKER, HostEntry, StashResult

__all__ = [
    "HASHED_MARKER",
    "HostEntry",
    "StashResult",
]
