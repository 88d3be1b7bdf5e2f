"""Tests for stash and unstash between known_hosts and stash_hosts."""

from pathlib import Path

import pytest

from khm_mcp.knownhosts import (
    HostCollection,
    InvalidPathError,
    KnownHostsIOError,
    NotFoundError,
    parse_file,
    parse_line,
)

RSA_KEY = "AAAAB3NzaC1yc2EAAAADAQABAAABAQC7"
ED_KEY = "AAAAC3NzaC1lZDI1NTE5AAAAIG4rT3vTt99Ox5kndS4Hmg"


@pytest.fixture
def known_hosts(tmp_path: Path) -> Path:
    """known_hosts with a two-key host, a shared entry and a bystander."""
    path = tmp_path / "known_hosts"
    path.write_text(
        f"web.example ssh-rsa {RSA_KEY}\n"
        f"web.example ssh-ed25519 {ED_KEY} deploy\n"
        f"db.example,10.0.0.5 ssh-ed25519 {ED_KEY}\n"
        f"other.example ssh-rsa {RSA_KEY}\n"
    )
    return path


def _stash_lines(path: Path) -> list[str]:
    return [line for line in path.read_text().splitlines() if line and not line.startswith("#")]


class TestStash:
    """Tests for HostCollection.stash."""

    def test_default_stash_path_is_next_to_file(self, known_hosts: Path) -> None:
        """stash_hosts lives in the known_hosts directory."""
        collection = parse_file(str(known_hosts))
        assert collection.stash_file_path() == str(known_hosts.parent / "stash_hosts")

    def test_stash_without_file_path_has_no_default(self) -> None:
        """A collection with no file has no stash path."""
        assert HostCollection().stash_file_path() == ""

    def test_stash_moves_entries_and_saves(self, known_hosts: Path) -> None:
        """Stashed entries land in stash_hosts and leave known_hosts."""
        collection = parse_file(str(known_hosts))

        result = collection.stash("web.example")

        stash = known_hosts.parent / "stash_hosts"
        assert result.written == 2
        assert result.skipped == 0
        assert result.stash_path == str(stash)
        assert _stash_lines(stash) == [
            f"web.example ssh-rsa {RSA_KEY}",
            f"web.example ssh-ed25519 {ED_KEY} deploy",
        ]
        assert "web.example" not in collection
        assert "web.example" not in parse_file(str(known_hosts))
        assert (known_hosts.parent / "known_hosts.backup").exists()

    def test_stash_skips_entries_already_stashed(self, known_hosts: Path, tmp_path: Path) -> None:
        """Identity keys present in the stash are not written again."""
        stash = tmp_path / "custom_stash"
        stash.write_text(f"web.example ssh-rsa {RSA_KEY}\n")
        collection = parse_file(str(known_hosts))

        result = collection.stash("web.example", str(stash))

        assert result.written == 1
        assert result.skipped == 1
        assert len(_stash_lines(stash)) == 2

    def test_stash_unknown_address_raises(self, known_hosts: Path) -> None:
        """Stashing an unknown address raises NotFoundError."""
        collection = parse_file(str(known_hosts))

        with pytest.raises(NotFoundError):
            collection.stash("missing.example")

        assert not (known_hosts.parent / "stash_hosts").exists()

    def test_stash_without_path_raises_invalid_path(self) -> None:
        """No file path and no explicit stash path is InvalidPathError."""
        collection = HostCollection()
        collection.add(parse_line(f"h ssh-rsa {RSA_KEY}"))

        with pytest.raises(InvalidPathError):
            collection.stash("h")

    def test_stash_write_failure_leaves_index_unchanged(
        self, known_hosts: Path, tmp_path: Path
    ) -> None:
        """Failure writing the stash keeps the address indexed."""
        collection = parse_file(str(known_hosts))

        with pytest.raises(KnownHostsIOError):
            collection.stash("web.example", str(tmp_path / "missing" / "stash"))

        assert len(collection.hosts_for_address("web.example")) == 2

    def test_primary_save_failure_after_stash_write(self, known_hosts: Path) -> None:
        """A failed primary save leaves the lines stashed and known_hosts untouched."""
        original = known_hosts.read_text()
        stash = known_hosts.parent / "stash_hosts"
        # a directory in the way of the backup copy fails the save
        (known_hosts.parent / "known_hosts.backup").mkdir()
        collection = parse_file(str(known_hosts))

        with pytest.raises(KnownHostsIOError, match="create backup"):
            collection.stash("web.example")

        assert _stash_lines(stash) == [
            f"web.example ssh-rsa {RSA_KEY}",
            f"web.example ssh-ed25519 {ED_KEY} deploy",
        ]
        assert "web.example" not in collection
        assert known_hosts.read_text() == original

    def test_shared_entry_stays_under_other_address(self, known_hosts: Path) -> None:
        """Stashing one address of a shared entry keeps the other address."""
        collection = parse_file(str(known_hosts))

        collection.stash("db.example")

        reloaded = parse_file(str(known_hosts))
        assert reloaded.hosts_for_address("10.0.0.5")[0].addresses == (
            "db.example",
            "10.0.0.5",
        )


class TestUnstash:
    """Tests for HostCollection.unstash."""

    def test_round_trip_restores_entries(self, known_hosts: Path) -> None:
        """Unstash brings back every stashed key and clears the stash."""
        collection = parse_file(str(known_hosts))
        collection.stash("web.example")

        result = collection.unstash("web.example")

        assert result.written == 2
        assert len(collection.hosts_for_address("web.example")) == 2
        assert len(parse_file(str(known_hosts)).hosts_for_address("web.example")) == 2
        stash = parse_file(str(known_hosts.parent / "stash_hosts"))
        assert "web.example" not in stash

    def test_unstash_skips_keys_already_present(self, known_hosts: Path) -> None:
        """Keys already in known_hosts are not duplicated."""
        stash = known_hosts.parent / "stash_hosts"
        stash.write_text(f"other.example ssh-rsa {RSA_KEY}\n")
        collection = parse_file(str(known_hosts))

        result = collection.unstash("other.example")

        assert result.written == 0
        assert result.skipped == 1
        assert len(parse_file(str(known_hosts)).hosts_for_address("other.example")) == 1

    def test_unstash_adds_under_every_address(self, known_hosts: Path) -> None:
        """A restored multi-address entry is indexed under all its addresses."""
        stash = known_hosts.parent / "stash_hosts"
        stash.write_text(f"new.example,10.9.9.9 ssh-rsa {RSA_KEY}\n")
        collection = parse_file(str(known_hosts))

        collection.unstash("new.example")

        assert collection.hosts_for_address("10.9.9.9")[0] is (
            collection.hosts_for_address("new.example")[0]
        )

    def test_unstash_missing_stash_file_raises(self, known_hosts: Path) -> None:
        """Absent stash file raises NotFoundError."""
        collection = parse_file(str(known_hosts))

        with pytest.raises(NotFoundError, match="Stash file not found"):
            collection.unstash("web.example")

    def test_unstash_unknown_address_raises(self, known_hosts: Path) -> None:
        """Nothing stashed under the address raises NotFoundError."""
        (known_hosts.parent / "stash_hosts").write_text(f"a ssh-rsa {RSA_KEY}\n")
        collection = parse_file(str(known_hosts))

        with pytest.raises(NotFoundError, match="No stashed entries"):
            collection.unstash("web.example")

    def test_unstash_missing_primary_raises(self, tmp_path: Path) -> None:
        """A primary file that cannot be parsed raises NotFoundError."""
        (tmp_path / "stash_hosts").write_text(f"a ssh-rsa {RSA_KEY}\n")
        collection = HostCollection(str(tmp_path / "known_hosts"))

        with pytest.raises(NotFoundError, match="Failed to parse known_hosts"):
            collection.unstash("a")

    def test_unstash_without_path_raises_invalid_path(self) -> None:
        """No derivable stash path raises InvalidPathError."""
        with pytest.raises(InvalidPathError):
            HostCollection().unstash("a")

    def test_repeated_stash_never_duplicates(self, known_hosts: Path) -> None:
        """Stash, unstash, stash again leaves one line per identity key."""
        collection = parse_file(str(known_hosts))
        stash = known_hosts.parent / "stash_hosts"

        collection.stash("web.example")
        # stale stash copy still holding the restored keys
        stale = stash.read_text()
        collection.unstash("web.example")
        stash.write_text(stale)
        result = collection.stash("web.example")

        lines = _stash_lines(stash)
        assert result.skipped == 2
        assert len(lines) == len(set(lines)) == 2

    def test_stash_save_failure_after_primary_save(self, known_hosts: Path) -> None:
        """A failed stash save leaves the entries restored and still stashed."""
        collection = parse_file(str(known_hosts))
        stash = known_hosts.parent / "stash_hosts"
        collection.stash("web.example")
        (known_hosts.parent / "stash_hosts.backup").mkdir()

        with pytest.raises(KnownHostsIOError, match="create backup"):
            collection.unstash("web.example")

        assert len(parse_file(str(known_hosts)).hosts_for_address("web.example")) == 2
        assert len(collection.hosts_for_address("web.example")) == 2
        assert "web.example" in parse_file(str(stash))
