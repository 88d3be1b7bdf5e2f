"""Global state management for khm-mcp."""

from khm_mcp.config import Settings

# Global state (initialized on first access)
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create settings."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_state() -> None:
    """Reset global state for testing.

    Clears the settings singleton so the next access re-reads the
    environment. Should only be used in test fixtures.
    """
    global _settings
    _settings = None


def set_settings(settings: Settings) -> None:
    """Set the global settings instance.

    Allows tests to inject custom settings without modifying module internals.

    Args:
        settings: Settings instance to use globally.
    """
    global _settings
    _settings = settings
