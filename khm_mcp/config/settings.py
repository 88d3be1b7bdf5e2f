"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field

from khm_mcp.config.paths import resolve_known_hosts_path, resolve_stash_path

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # Files
    known_hosts_path: str = field(default_factory=resolve_known_hosts_path)
    stash_path: str = field(default="")

    # Transport
    transport: str = field(default="stdio")
    http_host: str = field(default="127.0.0.1")
    http_port: int = field(default=8000)

    # Logging
    log_level: str = field(default="INFO")
    log_payloads: bool = field(default=False)
    slow_threshold_ms: int = field(default=1000)
    include_traceback: bool = field(default=False)

    def __post_init__(self) -> None:
        if not self.stash_path:
            self.stash_path = resolve_stash_path(self.known_hosts_path)

    @classmethod
    def from_env(cls, known_hosts_path: str | None = None) -> "Settings":
        """Load settings from environment variables.

        Args:
            known_hosts_path: Explicit known_hosts path, overriding
                KHM_KNOWN_HOSTS and SSH_KNOWN_HOSTS

        Returns:
            Settings instance with values from environment
        """
        known_hosts = resolve_known_hosts_path(known_hosts_path)
        return cls(
            known_hosts_path=known_hosts,
            stash_path=resolve_stash_path(known_hosts),
            transport=cls._get_transport(),
            http_host=os.getenv("KHM_HTTP_HOST", "127.0.0.1"),
            http_port=cls._get_int("KHM_HTTP_PORT", 8000),
            log_level=os.getenv("KHM_LOG_LEVEL", "INFO").upper(),
            log_payloads=cls._get_bool("KHM_LOG_PAYLOADS", False),
            slow_threshold_ms=cls._get_int("KHM_SLOW_THRESHOLD_MS", 1000),
            include_traceback=cls._get_bool("KHM_INCLUDE_TRACEBACK", False),
        )

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_transport() -> str:
        """Get transport from environment with validation.

        Returns:
            Transport type ("http" or "stdio")
        """
        transport = os.getenv("KHM_TRANSPORT", "").lower()
        if transport in ("http", "stdio"):
            return transport
        return "stdio"
