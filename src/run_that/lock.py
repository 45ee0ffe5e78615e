"""Installed packages lock file.

Records, per package id, the parsed source a package was fetched from, the
commit that ended up checked out, and where it lives. Entries validate back
through the ``PackageSource`` union, so a lock entry can be turned into a
source that reproduces the install exactly (``pinned_source``).

The lock path is injected by the app (see ``RunThatConfig.lock_path``).
"""

import logging
from datetime import UTC
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError

from .address import GitSpecifier
from .source import GitPackageSource
from .source import LocalPackageSource
from .source import PackageSource
from .source import package_id_for

logger = logging.getLogger(__name__)

LOCK_VERSION = "2"


class PackageLockEntry(BaseModel):
    """One installed package."""

    model_config = ConfigDict(frozen=True)

    package_id: str
    source: PackageSource
    commit: str | None = None
    path: Path
    installed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def pinned_source(self) -> GitPackageSource | LocalPackageSource:
        """Source that reproduces this install.

        Git sources with a recorded commit are pinned to it (``#<sha>``),
        replacing any branch or tag; local sources are returned unchanged.
        """
        if isinstance(self.source, GitPackageSource) and self.commit:
            git = self.source.git.model_copy(update={"spec": GitSpecifier.commit(self.commit)})
            return GitPackageSource(git=git)
        return self.source


class _LockDocument(BaseModel):
    version: str = LOCK_VERSION
    packages: dict[str, PackageLockEntry] = Field(default_factory=dict)


class PackageLock:
    """
    Lock file manager (with injected lock path).

    Lock format (JSON):
    {
      "version": "2",
      "packages": {
        "ur-fault/run-that": {
          "package_id": "ur-fault/run-that",
          "source": {
            "kind": "git",
            "git": {"domain": "github.com", "user": "ur-fault", "name": "run-that",
                    "spec": {"kind": "tag", "value": "v1"}}
          },
          "commit": "abc123...",
          "path": "/home/me/.run-that/repos/ur-fault/run-that",
          "installed_at": "2025-10-26T12:00:00Z"
        }
      }
    }
    """

    def __init__(self, lock_path: Path):
        self.lock_path = lock_path
        self._document = self._read()

    def _read(self) -> _LockDocument:
        if not self.lock_path.exists():
            return _LockDocument()

        try:
            document = _LockDocument.model_validate_json(self.lock_path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.error(f"Ignoring unreadable lock file {self.lock_path}: {e}")
            return _LockDocument()

        logger.debug(f"Loaded {len(document.packages)} packages from {self.lock_path}")
        return document

    def _write(self) -> None:
        # Atomic replace: readers never see a partially written lock
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        staging = self.lock_path.with_name(self.lock_path.name + ".tmp")
        staging.write_text(self._document.model_dump_json(indent=2), encoding="utf-8")
        staging.replace(self.lock_path)

    def record(
        self,
        source: GitPackageSource | LocalPackageSource,
        path: Path,
        commit: str | None = None,
    ) -> PackageLockEntry:
        """
        Record (or replace) the entry for a freshly fetched package.

        Args:
            source: Source the package was fetched from
            path: Installation directory
            commit: Checked-out commit SHA (None for local sources)

        Returns:
            The stored entry
        """
        entry = PackageLockEntry(package_id=package_id_for(source), source=source, commit=commit, path=path)
        self._document.packages[entry.package_id] = entry
        self._write()

        logger.debug(f"Locked {entry.package_id} at {commit or 'no commit'}")
        return entry

    def forget(self, package_id: str) -> bool:
        """Drop a package's entry; returns False if there was none."""
        if self._document.packages.pop(package_id, None) is None:
            return False
        self._write()
        logger.debug(f"Removed {package_id} from lock file")
        return True

    def get(self, package_id: str) -> PackageLockEntry | None:
        return self._document.packages.get(package_id)

    def entries(self) -> list[PackageLockEntry]:
        """All entries, sorted by package id."""
        return [self._document.packages[package_id] for package_id in sorted(self._document.packages)]

    def is_installed(self, package_id: str) -> bool:
        return package_id in self._document.packages
