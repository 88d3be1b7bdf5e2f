"""known_hosts entry data models."""

from dataclasses import dataclass, field

HASHED_MARKER = "|"


@dataclass(frozen=True)
class HostEntry:
    """One parsed known_hosts line.

    Entries are immutable once parsed. A collection may reference the same
    entry under every address it declares.
    """

    addresses: tuple[str, ...]
    key_type: str
    key: str
    comment: str = ""
    line_number: int = 0
    is_hashed: bool = field(default=False, compare=False)
    hash_value: str = field(default="", compare=False)

    @classmethod
    def create(
        cls,
        addresses: list[str] | tuple[str, ...],
        key_type: str,
        key: str,
        comment: str = "",
        line_number: int = 0,
    ) -> "HostEntry":
        """Build an entry, deriving the hashed-host fields from the first address.

        Args:
            addresses: Address tokens as written on the line
            key_type: Key algorithm identifier (e.g. ssh-ed25519)
            key: Base64 key material
            comment: Optional trailing comment
            line_number: 1-based line number in the source file

        Returns:
            HostEntry instance
        """
        addresses = tuple(addresses)
        is_hashed = bool(addresses) and addresses[0].startswith(HASHED_MARKER)
        return cls(
            addresses=addresses,
            key_type=key_type,
            key=key,
            comment=comment,
            line_number=line_number,
            is_hashed=is_hashed,
            hash_value=addresses[0] if is_hashed else "",
        )

    @property
    def address_field(self) -> str:
        """Comma-joined address list as it appears on disk."""
        return ",".join(self.addresses)

    @property
    def identity_key(self) -> str | None:
        """Deduplication fingerprint shared by stash and unstash.

        Returns:
            "addresses key_type key", or None when any part is missing.
            Entries without an identity key are never treated as duplicates.
        """
        addr_field = self.address_field
        if not addr_field and self.is_hashed and self.hash_value:
            addr_field = self.hash_value
        if not addr_field or not self.key_type or not self.key:
            return None
        return f"{addr_field} {self.key_type} {self.key}"

    def to_line(self) -> str:
        """Format as a known_hosts line (without trailing newline).

        Format: <addr1,addr2,...> <key_type> <key>[ <comment>]
        """
        line = f"{self.address_field} {self.key_type} {self.key}"
        if self.comment:
            line += f" {self.comment}"
        return line

    def __str__(self) -> str:
        return self.to_line()


@dataclass
class StashResult:
    """Outcome of a stash or unstash operation."""

    address: str
    stash_path: str
    written: int = 0
    skipped: int = 0
