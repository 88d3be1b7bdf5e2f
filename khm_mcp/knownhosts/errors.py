"""Exceptions raised by the known_hosts core."""


class KnownHostsError(Exception):
    """Base class for known_hosts failures."""

    pass


class NotFoundError(KnownHostsError):
    """Address, index or required file does not exist."""

    pass


class InvalidPathError(KnownHostsError, ValueError):
    """Target path is empty or cannot be determined."""

    pass


class KnownHostsIOError(KnownHostsError):
    """Open, read, write or flush failure on a known_hosts file."""

    def __init__(self, operation: str, path: str, original_error: Exception):
        """Initialize I/O error.

        Args:
            operation: Human-readable name of the failed step
            path: File the step operated on
            original_error: Underlying OSError
        """
        self.operation = operation
        self.path = path
        self.original_error = original_error
        super().__init__(f"Failed to {operation} {path}: {original_error}")


class ParseError(KnownHostsError):
    """Source file could not be read during a parse pass."""

    def __init__(self, path: str, original_error: Exception):
        self.path = path
        self.original_error = original_error
        super().__init__(f"Error reading known_hosts file {path}: {original_error}")
