"""In-memory index over known_hosts entries.

Entries are stored once in an arena keyed by a stable integer id. The
address index maps every address token to the ids of the entries that
declare it, so a multi-address entry is shared across its slots and is
written exactly once on save.
"""

import logging
import os
from collections.abc import Iterator

from khm_mcp.config.paths import stash_path_for
from khm_mcp.knownhosts.errors import (
    InvalidPathError,
    KnownHostsError,
    KnownHostsIOError,
    NotFoundError,
)
from khm_mcp.knownhosts.files import ENCODING, append_lines, copy_file, ensure_file
from khm_mcp.models import HostEntry, StashResult

logger = logging.getLogger(__name__)

HEADER_LINES = (
    "# SSH Known Hosts File",
    "# Managed by khm-mcp",
)
BACKUP_SUFFIX = ".backup"


class HostCollection:
    """Index of known_hosts entries for one file.

    The file path is carried on the instance, so a primary collection and
    a stash collection can coexist in one process.
    """

    def __init__(self, file_path: str = ""):
        """Initialize an empty collection.

        Args:
            file_path: File this collection was parsed from and saves to
        """
        self.file_path = file_path
        self._entries: dict[int, HostEntry] = {}
        self._index: dict[str, list[int]] = {}
        self._next_id = 0

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, address: object) -> bool:
        return address in self._index

    def __repr__(self) -> str:
        return (
            f"HostCollection(file_path={self.file_path!r}, "
            f"addresses={len(self._index)}, entries={len(self._entries)})"
        )

    @property
    def entry_count(self) -> int:
        """Number of distinct entries currently indexed."""
        return len(self._entries)

    # Indexing & query

    def add(self, entry: HostEntry | None) -> int | None:
        """Index an entry under every address it declares.

        Args:
            entry: Entry to add (None and address-less entries are ignored)

        Returns:
            Arena id of the entry, or None if nothing was added
        """
        if entry is None or not entry.addresses:
            return None

        entry_id = self._next_id
        self._next_id += 1
        self._entries[entry_id] = entry

        for address in dict.fromkeys(entry.addresses):
            self._index.setdefault(address, []).append(entry_id)
        return entry_id

    def hosts_for_address(self, address: str) -> list[HostEntry]:
        """Get entries indexed under an address (empty list if none)."""
        return [self._entries[i] for i in self._index.get(address, [])]

    def all_addresses(self) -> set[str]:
        """Get every address currently indexed."""
        return set(self._index)

    def entries(self) -> list[HostEntry]:
        """Get distinct entries in save order."""
        return [self._entries[i] for i in self._distinct_ids()]

    def _distinct_ids(self) -> Iterator[int]:
        """Yield each referenced entry id once, by sorted address then slot order."""
        seen: set[int] = set()
        for address in sorted(self._index):
            for entry_id in self._index[address]:
                if entry_id in seen:
                    continue
                seen.add(entry_id)
                yield entry_id

    def _slot(self, address: str) -> list[int]:
        """Get the id list for an address.

        Raises:
            NotFoundError: If the address is not indexed or its slot is empty
        """
        slot = self._index.get(address)
        if not slot:
            raise NotFoundError(f"Host not found: {address}")
        return slot

    def _slot_entry_id(self, address: str, index: int) -> int:
        slot = self._index.get(address)
        if slot is None or index < 0 or index >= len(slot):
            raise NotFoundError(f"Host not found: {address} (index {index})")
        return slot[index]

    def _drop_address(self, address: str) -> list[int]:
        """Remove an address slot and prune entries no longer referenced."""
        removed = self._index.pop(address, [])
        self._prune(removed)
        return removed

    def _prune(self, entry_ids: list[int]) -> None:
        still_referenced = {i for slot in self._index.values() for i in slot}
        for entry_id in entry_ids:
            if entry_id not in still_referenced:
                self._entries.pop(entry_id, None)

    # Mutation

    def remove_at(self, address: str, index: int) -> HostEntry:
        """Remove one entry reference from an address slot.

        The entry stays indexed under any other address it declares.

        Args:
            address: Address key
            index: Position within the address slot

        Returns:
            The removed entry

        Raises:
            NotFoundError: If address is absent or index is out of range
        """
        entry_id = self._slot_entry_id(address, index)
        entry = self._entries[entry_id]

        slot = self._index[address]
        del slot[index]
        if not slot:
            del self._index[address]
        self._prune([entry_id])

        logger.debug("Removed entry %d from %s", index, address)
        return entry

    def remove_all(self, address: str) -> list[HostEntry]:
        """Drop an address slot entirely.

        Only the requested address is cleared. Entries that also declare
        other addresses remain reachable under those.

        Returns:
            Entries that were indexed under the address

        Raises:
            NotFoundError: If the address is not indexed
        """
        if address not in self._index:
            raise NotFoundError(f"Host not found: {address}")

        removed = [self._entries[i] for i in self._index[address]]
        self._drop_address(address)
        logger.info("Removed %d key(s) for %s", len(removed), address)
        return removed

    def move_one_to_file(self, address: str, index: int, target_path: str) -> HostEntry:
        """Append one entry to another file, then remove it from the slot.

        Raises:
            NotFoundError: If address is absent or index is out of range
            InvalidPathError: If target_path is empty
            KnownHostsIOError: If the append fails (index left unchanged)
        """
        entry_id = self._slot_entry_id(address, index)
        if not target_path:
            raise InvalidPathError("Target file path is empty")

        append_lines(target_path, [self._entries[entry_id].to_line()])
        entry = self.remove_at(address, index)
        logger.info("Moved key %d for %s to %s", index, address, target_path)
        return entry

    def move_all_to_file(self, address: str, target_path: str) -> list[HostEntry]:
        """Append every distinct entry of an address to another file, then drop it.

        Lines appended before a write failure are not rolled back; the index
        is only changed once every line was written.

        Raises:
            NotFoundError: If the address is absent or empty
            InvalidPathError: If target_path is empty
            KnownHostsIOError: If the append fails
        """
        slot = self._slot(address)
        if not target_path:
            raise InvalidPathError("Target file path is empty")

        distinct = list(dict.fromkeys(slot))
        moved = [self._entries[i] for i in distinct]
        append_lines(target_path, [entry.to_line() for entry in moved])

        self._drop_address(address)
        logger.info("Moved %d key(s) for %s to %s", len(moved), address, target_path)
        return moved

    # Stash / unstash

    def stash_file_path(self) -> str:
        """Get the default stash file next to this collection's file."""
        return stash_path_for(self.file_path)

    def stash(self, address: str, stash_path: str | None = None) -> StashResult:
        """Move an address's entries into the stash file.

        Entries whose identity key is already in the stash are skipped.
        The address is then dropped and this collection saved.

        Args:
            address: Address key to stash
            stash_path: Stash file (default: stash_hosts next to file_path)

        Returns:
            StashResult with written/skipped counts

        Raises:
            NotFoundError: If the address is absent or empty
            InvalidPathError: If no stash path can be determined
            KnownHostsIOError: On stash write or primary save failure
        """
        from khm_mcp.knownhosts.parser import parse_file

        slot = self._slot(address)
        stash_path = stash_path or self.stash_file_path()
        if not stash_path:
            raise InvalidPathError("Stash path not available")

        ensure_file(stash_path)
        stash = parse_file(stash_path)
        existing = {
            key for entry in stash.entries() if (key := entry.identity_key) is not None
        }

        result = StashResult(address=address, stash_path=stash_path)
        lines: list[str] = []
        for entry_id in dict.fromkeys(slot):
            entry = self._entries[entry_id]
            key = entry.identity_key
            if key is not None:
                if key in existing:
                    result.skipped += 1
                    continue
                existing.add(key)
            lines.append(entry.to_line())

        result.written = append_lines(stash_path, lines) if lines else 0

        self._drop_address(address)
        logger.info(
            "Stashed %s to %s (%d written, %d already stashed)",
            address,
            stash_path,
            result.written,
            result.skipped,
        )
        self.save()
        return result

    def unstash(self, address: str, stash_path: str | None = None) -> StashResult:
        """Restore an address's entries from the stash file.

        The primary file is re-read from disk, stashed entries not already
        present are added, and both files are saved. The primary file is
        written first; a failed stash save leaves the restored entries in
        both files.

        Args:
            address: Address key to restore
            stash_path: Stash file (default: stash_hosts next to file_path)

        Returns:
            StashResult with written/skipped counts

        Raises:
            InvalidPathError: If no stash path can be determined
            NotFoundError: If the stash file is missing, the primary file
                cannot be parsed, or nothing is stashed under the address
            KnownHostsIOError: If either save fails
        """
        from khm_mcp.knownhosts.parser import parse_file

        stash_path = stash_path or self.stash_file_path()
        if not stash_path:
            raise InvalidPathError("Stash path not available")
        if not os.path.exists(stash_path):
            raise NotFoundError(f"Stash file not found: {stash_path}")
        if not self.file_path:
            raise InvalidPathError("known_hosts path not available")

        try:
            primary = parse_file(self.file_path)
        except KnownHostsError as e:
            raise NotFoundError(f"Failed to parse known_hosts: {e}") from e
        stash = parse_file(stash_path)

        stashed = stash.hosts_for_address(address)
        if not stashed:
            raise NotFoundError(f"No stashed entries for {address}")

        existing = {
            key
            for entry in primary.hosts_for_address(address)
            if (key := entry.identity_key) is not None
        }

        result = StashResult(address=address, stash_path=stash_path)
        for entry in stashed:
            key = entry.identity_key
            if key is not None:
                if key in existing:
                    result.skipped += 1
                    continue
                existing.add(key)
            primary.add(entry)
            result.written += 1

        stash._drop_address(address)

        primary.save()
        self._adopt(primary)
        stash.save()

        logger.info(
            "Unstashed %s from %s (%d restored, %d already present)",
            address,
            stash_path,
            result.written,
            result.skipped,
        )
        return result

    def _adopt(self, other: "HostCollection") -> None:
        """Replace this collection's index with another's."""
        self._entries = other._entries
        self._index = other._index
        self._next_id = other._next_id

    # Persistence

    def save(self, path: str | None = None) -> None:
        """Write the collection to disk, backing up the previous file first.

        Args:
            path: Target file (default: file_path)

        Raises:
            InvalidPathError: If no path is available
            KnownHostsIOError: If the backup or any write fails
        """
        path = path or self.file_path
        if not path:
            raise InvalidPathError("No file path to save to")

        self._backup(path)

        written = 0
        try:
            with open(path, "w", encoding=ENCODING) as f:
                f.write("\n".join(HEADER_LINES) + "\n\n")
                for entry in self.entries():
                    f.write(entry.to_line() + "\n")
                    written += 1
        except OSError as e:
            raise KnownHostsIOError("write", path, e) from e

        logger.info("Saved %d entries to %s", written, path)

    def save_as(self, path: str) -> None:
        """Save to another file and bind this collection to it."""
        if not path:
            raise InvalidPathError("Target file path is empty")
        self.save(path)
        self.file_path = path

    @staticmethod
    def _backup(path: str) -> None:
        """Copy the current file to <path>.backup.

        A missing source means a first-time save and is skipped; every
        other failure aborts the save.
        """
        backup_path = path + BACKUP_SUFFIX
        try:
            copy_file(path, backup_path)
        except NotFoundError:
            logger.debug("No existing file at %s, skipping backup", path)
        except KnownHostsIOError as e:
            raise KnownHostsIOError("create backup", backup_path, e.original_error) from e
