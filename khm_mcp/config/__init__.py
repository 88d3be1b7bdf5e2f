"""Configuration module for khm-mcp.

- Settings: Environment variable configuration
- resolve_known_hosts_path / resolve_stash_path: file location precedence
"""

from khm_mcp.config.paths import (
    default_known_hosts_path,
    resolve_known_hosts_path,
    resolve_stash_path,
    stash_path_for,
)
from khm_mcp.config.settings import Settings

__all__ = [
    "Settings",
    "default_known_hosts_path",
    "resolve_known_hosts_path",
    "resolve_stash_path",
    "stash_path_for",
]
