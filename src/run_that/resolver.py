"""Package resolver - Resolve installed package ids to paths.

The package root is app policy and is injected, never hardcoded. Direct
filesystem checks, no caching.
"""

import logging
from pathlib import Path

from .exceptions import PackageNotFoundError
from .manifest import MANIFEST_FILENAME
from .manifest import Package
from .manifest import load_package
from .source import GitPackageSource
from .source import LocalPackageSource
from .source import package_id_for
from .utils import package_id_from_path
from .utils import split_package_id

logger = logging.getLogger(__name__)


class PackageResolver:
    """
    Resolve installed packages under a package root (``root/<user-dir>/<name>/run.yml``).

    Example:
        >>> resolver = PackageResolver(root=RunThatConfig.from_env().repos_path)
        >>> resolver.resolve("ur-fault/run-that")
        PosixPath('/home/me/.run-that/repos/ur-fault/run-that')
    """

    def __init__(self, root: Path):
        """Initialize resolver with app-provided package root.

        Args:
            root: Directory packages are fetched into
        """
        self.root = root

    def resolve(self, package_id: str) -> Path | None:
        """
        Resolve a package id to its installed directory.

        Args:
            package_id: "<user-dir>/<name>" (e.g., "ur-fault/run-that", "_local/game")

        Returns:
            Package directory (containing run.yml) if installed, None otherwise
        """
        if split_package_id(package_id) is None:
            logger.debug(f"Not a package id: {package_id!r}")
            return None

        candidate = self.root / package_id
        if (candidate / MANIFEST_FILENAME).is_file():
            return candidate.resolve()
        return None

    def resolve_source(self, source: GitPackageSource | LocalPackageSource) -> Path | None:
        """Resolve the installed directory a source was (or would be) fetched into."""
        return self.resolve(package_id_for(source))

    def resolve_path(self, path: Path) -> str | None:
        """Package id of the installed package containing path (e.g. the working directory), or None."""
        package_id = package_id_from_path(path, self.root)
        if package_id is None or self.resolve(package_id) is None:
            return None
        return package_id

    def load(self, package_id: str) -> Package:
        """
        Load the manifest of an installed package.

        Raises:
            PackageNotFoundError: If the package is not installed
            ManifestError: If its run.yml can't be read or parsed
        """
        path = self.resolve(package_id)
        if path is None:
            raise PackageNotFoundError(
                f"Package '{package_id}' not found under {self.root}",
                context={"package_id": package_id, "root": str(self.root)},
            )
        return load_package(path)

    def list_packages(self) -> list[tuple[str, Path]]:
        """
        List installed packages.

        Returns:
            Sorted list of (package_id, package_path) tuples for every
            directory under the root that holds a run.yml

        Example:
            >>> for package_id, path in resolver.list_packages():
            ...     print(f"{package_id}: {path}")
            _local/lil-game: /home/me/.run-that/repos/_local/lil-game
            ur-fault/run-that: /home/me/.run-that/repos/ur-fault/run-that
        """
        if not self.root.is_dir():
            return []

        packages = []
        for user_dir in sorted(self.root.iterdir()):
            if not user_dir.is_dir() or user_dir.name.startswith("."):
                continue
            for package_path in sorted(user_dir.iterdir()):
                if package_path.is_dir() and (package_path / MANIFEST_FILENAME).is_file():
                    packages.append((f"{user_dir.name}/{package_path.name}", package_path.resolve()))
                else:
                    logger.debug(f"Skipping {package_path}: no {MANIFEST_FILENAME}")

        return packages
