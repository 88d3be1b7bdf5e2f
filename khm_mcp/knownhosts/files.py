"""File helpers for known_hosts persistence.

Every helper opens and closes its own handles within the call.
"""

import logging
import shutil
import time
from collections.abc import Iterable

from khm_mcp.knownhosts.errors import KnownHostsIOError, NotFoundError

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


def copy_file(src: str, dst: str) -> None:
    """Copy a file's contents to another path.

    Args:
        src: Source file
        dst: Destination file (created or truncated)

    Raises:
        NotFoundError: If src does not exist
        KnownHostsIOError: On any other failure
    """
    try:
        shutil.copyfile(src, dst)
    except FileNotFoundError as e:
        # Destination lives wherever the caller put it; only a missing source is NotFound
        if e.filename == src:
            raise NotFoundError(f"Source file not found: {src}") from e
        raise KnownHostsIOError("copy to", dst, e) from e
    except OSError as e:
        raise KnownHostsIOError("copy", src, e) from e

    logger.debug("Copied %s -> %s", src, dst)


def append_lines(path: str, lines: Iterable[str]) -> int:
    """Append lines to a file, creating it when missing.

    Args:
        path: Target file
        lines: Lines without trailing newline

    Returns:
        Number of lines written

    Raises:
        KnownHostsIOError: If the file cannot be opened or written
    """
    count = 0
    try:
        with open(path, "a", encoding=ENCODING) as f:
            for line in lines:
                f.write(line + "\n")
                count += 1
    except OSError as e:
        raise KnownHostsIOError("append to", path, e) from e

    logger.debug("Appended %d line(s) to %s", count, path)
    return count


def ensure_file(path: str) -> None:
    """Create an empty file if it does not exist yet."""
    try:
        with open(path, "a", encoding=ENCODING):
            pass
    except OSError as e:
        raise KnownHostsIOError("create", path, e) from e


def backup_file(path: str, now: float | None = None) -> str:
    """Write a timestamped snapshot of a file.

    Args:
        path: File to snapshot
        now: Unix time to stamp with (default: current time)

    Returns:
        Snapshot path (<path>.backup.<unix-seconds>)

    Raises:
        NotFoundError: If path does not exist
        KnownHostsIOError: If the copy fails
    """
    stamp = int(time.time() if now is None else now)
    backup_path = f"{path}.backup.{stamp}"
    copy_file(path, backup_path)
    logger.info("Backup created: %s", backup_path)
    return backup_path
