"""known_hosts and stash file location resolution.

Precedence for the primary file: explicit path, KHM_KNOWN_HOSTS,
SSH_KNOWN_HOSTS, then ~/.ssh/known_hosts.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

KNOWN_HOSTS_ENV_VARS = ("KHM_KNOWN_HOSTS", "SSH_KNOWN_HOSTS")
STASH_ENV_VAR = "KHM_STASH_FILE"
STASH_FILE_NAME = "stash_hosts"


def default_known_hosts_path() -> str:
    """Get the platform default known_hosts location.

    Returns:
        ~/.ssh/known_hosts, or "known_hosts" when no home directory exists
    """
    try:
        home = Path.home()
    except RuntimeError:
        logger.warning("Cannot determine home directory, using ./known_hosts")
        return "known_hosts"
    return str(home / ".ssh" / "known_hosts")


def resolve_known_hosts_path(path: str | None = None) -> str:
    """Resolve the primary known_hosts path.

    Args:
        path: Explicit path (highest precedence)

    Returns:
        Expanded path string
    """
    if path:
        return os.path.expanduser(path)

    for env_var in KNOWN_HOSTS_ENV_VARS:
        env_value = os.getenv(env_var, "").strip()
        if env_value:
            logger.debug("Using known_hosts from %s: %s", env_var, env_value)
            return os.path.expanduser(env_value)

    return default_known_hosts_path()


def stash_path_for(known_hosts_path: str) -> str:
    """Get the default stash file next to a known_hosts file.

    Args:
        known_hosts_path: Primary file path

    Returns:
        Path of stash_hosts in the same directory, or "" if no primary path
    """
    if not known_hosts_path:
        return ""
    return os.path.join(os.path.dirname(known_hosts_path), STASH_FILE_NAME)


def resolve_stash_path(known_hosts_path: str, stash_path: str | None = None) -> str:
    """Resolve the stash file path.

    Precedence: explicit path, KHM_STASH_FILE, stash_hosts next to the
    primary file.

    Returns:
        Expanded path string, or "" when nothing is derivable
    """
    if stash_path:
        return os.path.expanduser(stash_path)

    env_value = os.getenv(STASH_ENV_VAR, "").strip()
    if env_value:
        return os.path.expanduser(env_value)

    return stash_path_for(known_hosts_path)
