"""Tests for PackageLock with injected lock path."""

import json
import tempfile
from pathlib import Path

from run_that import GitPackageSource
from run_that import LocalPackageSource
from run_that import PackageLock
from run_that import source_from_address
from run_that import source_from_path


def test_lock_with_injected_path():
    """Lock uses the injected path and creates nothing until the first write."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "custom.lock"

        lock = PackageLock(lock_path=lock_path)

        assert lock.lock_path == lock_path
        assert not lock_path.exists()
        assert lock.entries() == []


def test_record_git_source():
    """Recording a git source keys it by package id and keeps the parsed source."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock = PackageLock(lock_path=Path(tmpdir) / "packages.lock")
        source = source_from_address("ur-fault/run-that@v1")

        entry = lock.record(source, path=Path(tmpdir) / "ur-fault" / "run-that", commit="abc123")

        assert entry.package_id == "ur-fault/run-that"
        assert lock.get("ur-fault/run-that") == entry
        assert entry.source == source
        assert entry.source.uri == "github.com:ur-fault/run-that@v1"
        assert entry.installed_at.tzinfo is not None


def test_record_escaped_user():
    """A remote _local user is locked under its escaped on-disk id."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock = PackageLock(lock_path=Path(tmpdir) / "packages.lock")

        lock.record(source_from_address("_local/game"), path=Path(tmpdir) / "__local" / "game", commit="abc")

        assert lock.is_installed("__local/game")
        assert not lock.is_installed("_local/game")


def test_record_replaces_entry():
    """Recording the same package again replaces the old entry."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock = PackageLock(lock_path=Path(tmpdir) / "packages.lock")
        path = Path(tmpdir) / "ur-fault" / "run-that"

        lock.record(source_from_address("ur-fault/run-that"), path=path, commit="old")
        lock.record(source_from_address("ur-fault/run-that$dev"), path=path, commit="new")

        assert [entry.commit for entry in lock.entries()] == ["new"]
        assert lock.get("ur-fault/run-that").source.git.spec.value == "dev"


def test_forget():
    """Forgetting drops the entry; forgetting an unknown id reports False."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock = PackageLock(lock_path=Path(tmpdir) / "packages.lock")
        lock.record(source_from_address("a/test"), path=Path(tmpdir) / "a" / "test")

        assert lock.forget("a/test") is True

        assert not lock.is_installed("a/test")
        assert lock.get("a/test") is None
        assert lock.forget("a/test") is False


def test_entries_sorted_by_id():
    """Entries come back sorted by package id."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock = PackageLock(lock_path=Path(tmpdir) / "packages.lock")

        lock.record(source_from_address("zed/tool"), path=Path(tmpdir) / "zed" / "tool", commit="1")
        lock.record(source_from_path(Path(tmpdir) / "game"), path=Path(tmpdir) / "_local" / "game")
        lock.record(source_from_address("ur-fault/run-that"), path=Path(tmpdir) / "ur-fault" / "run-that", commit="2")

        assert [entry.package_id for entry in lock.entries()] == ["_local/game", "ur-fault/run-that", "zed/tool"]


def test_lock_persistence():
    """Sources validate back to their own kind in a fresh instance."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "nested" / "packages.lock"
        git_source = source_from_address("gitlab.com:ur-fault/lil-game#deadbeef")
        local_source = source_from_path(Path(tmpdir) / "projects" / "game")

        first = PackageLock(lock_path=lock_path)
        first.record(git_source, path=Path(tmpdir) / "ur-fault" / "lil-game", commit="deadbeef")
        first.record(local_source, path=Path(tmpdir) / "_local" / "game")

        second = PackageLock(lock_path=lock_path)

        git_entry = second.get("ur-fault/lil-game")
        local_entry = second.get("_local/game")
        assert isinstance(git_entry.source, GitPackageSource)
        assert isinstance(local_entry.source, LocalPackageSource)
        assert git_entry == first.get("ur-fault/lil-game")
        assert local_entry.source == local_source
        assert local_entry.commit is None
        assert local_entry.path == Path(tmpdir) / "_local" / "game"


def test_lock_file_format():
    """The lock file is versioned JSON with the source stored by kind."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "packages.lock"
        lock = PackageLock(lock_path=lock_path)

        lock.record(source_from_address("ur-fault/run-that@v1"), path=Path(tmpdir), commit="abc123")

        data = json.loads(lock_path.read_text())
        assert data["version"] == "2"
        entry = data["packages"]["ur-fault/run-that"]
        assert entry["source"]["kind"] == "git"
        assert entry["source"]["git"]["spec"] == {"kind": "tag", "value": "v1"}
        assert entry["commit"] == "abc123"
        assert list(Path(tmpdir).glob("*.tmp")) == []


def test_pinned_source_uses_commit():
    """A git entry with a commit reproduces the install at that commit."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock = PackageLock(lock_path=Path(tmpdir) / "packages.lock")

        entry = lock.record(source_from_address("ur-fault/run-that@v1"), path=Path(tmpdir), commit="abc123")

        assert entry.pinned_source().uri == "github.com:ur-fault/run-that#abc123"
        assert entry.source.uri == "github.com:ur-fault/run-that@v1"


def test_pinned_source_without_commit():
    """Local entries and git entries without a commit are returned unchanged."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock = PackageLock(lock_path=Path(tmpdir) / "packages.lock")
        local_source = source_from_path(Path(tmpdir) / "game")
        git_source = source_from_address("ur-fault/run-that$main")

        local_entry = lock.record(local_source, path=Path(tmpdir) / "_local" / "game")
        git_entry = lock.record(git_source, path=Path(tmpdir) / "ur-fault" / "run-that")

        assert local_entry.pinned_source() == local_source
        assert git_entry.pinned_source() == git_source


def test_corrupt_lock_file_treated_as_empty():
    """An unreadable lock file is logged and treated as empty."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "packages.lock"
        lock_path.write_text("{not json")

        lock = PackageLock(lock_path=lock_path)

        assert lock.entries() == []


def test_lock_with_unknown_source_kind_treated_as_empty():
    """Entries whose source doesn't validate make the whole file unreadable."""
    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "packages.lock"
        lock_path.write_text(
            json.dumps(
                {
                    "version": "2",
                    "packages": {"a/b": {"package_id": "a/b", "source": {"kind": "svn"}, "path": "/a/b"}},
                }
            )
        )

        assert PackageLock(lock_path=lock_path).entries() == []
