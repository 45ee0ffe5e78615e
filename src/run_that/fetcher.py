"""Package fetching - materialize a source under the package root.

Per package root layout:
- git sources land in ``root/<escaped user>/<name>/`` (clone, then ref checkout)
- local sources land in ``root/_local/<name>/`` (copy)

Fetching is idempotent: an existing destination is left alone unless
``force`` is set, in which case it is removed and fetched again.

Not safe against concurrent fetches of the same destination; fetches into
disjoint destinations may run in parallel.
"""

import logging
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import assert_never

from .address import GitSource
from .exceptions import CannotCloneError
from .exceptions import FetchError
from .exceptions import FetchIOError
from .exceptions import PackageNotFoundError
from .git import SubprocessGitTransport
from .lock import PackageLock
from .manifest import MANIFEST_FILENAME
from .manifest import Package
from .manifest import load_package
from .protocols import GitTransportProtocol
from .source import GitPackageSource
from .source import LocalPackageSource
from .source import package_dir
from .source import package_id_for
from .utils import split_package_id

logger = logging.getLogger(__name__)


def _call_transport(operation: Callable[..., object], *args: object) -> None:
    try:
        operation(*args)
    except Exception as e:
        if isinstance(e, FetchError):
            raise
        if isinstance(e, OSError):
            raise FetchIOError(f"Filesystem error during git operation: {e}") from e
        raise CannotCloneError(f"Git operation failed: {e}") from e


def _remove_partial_clone(destination: Path) -> None:
    try:
        shutil.rmtree(destination)
    except OSError as e:
        logger.warning(f"Could not remove partial clone at {destination}: {e}")


def _clone(git: GitSource, destination: Path, transport: GitTransportProtocol) -> None:
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FetchIOError(
            f"Could not create {destination.parent}: {e}",
            context={"destination": str(destination)},
        ) from e

    logger.info(f"Cloning {git.url} into {destination}")
    _call_transport(transport.clone, git.url, destination)

    if git.spec is None:
        return

    logger.debug(f"Checking out {git.spec.kind.value} {git.spec.value}")
    try:
        _call_transport(transport.checkout, destination, git.spec.ref)
    except CannotCloneError as e:
        # Leave nothing behind, otherwise the next fetch would be a silent no-op
        _remove_partial_clone(destination)
        raise CannotCloneError(
            f"Could not check out {git.spec.kind.value} '{git.spec.value}' of {git.address}: {e.message}",
            context={"address": git.address, "ref": git.spec.ref},
        ) from e


def _copy(path: Path, destination: Path) -> None:
    if not path.exists():
        raise FetchIOError(f"Local package path does not exist: {path}", context={"path": str(path)})

    logger.info(f"Copying {path} into {destination}")
    try:
        if path.is_dir():
            shutil.copytree(path, destination)
        else:
            # A single file is a standalone manifest
            destination.mkdir(parents=True)
            shutil.copy2(path, destination / MANIFEST_FILENAME)
    except OSError as e:
        raise FetchIOError(
            f"Failed to copy {path} to {destination}: {e}",
            context={"path": str(path), "destination": str(destination)},
        ) from e


def fetch_package(
    source: GitPackageSource | LocalPackageSource,
    root: Path,
    force: bool = False,
    transport: GitTransportProtocol | None = None,
) -> bool:
    """
    Fetch package contents into the package root.

    Args:
        source: Git or local package source
        root: Package root directory (app policy, e.g. RunThatConfig.repos_path)
        force: Replace an existing destination instead of keeping it
        transport: Git transport (defaults to SubprocessGitTransport)

    Returns:
        True if the package was fetched, False if it already existed and
        force was not set (nothing is modified in that case)

    Raises:
        CannotCloneError: If cloning or checking out the pinned ref failed
        FetchIOError: If copying, removing or creating directories failed

    Example:
        >>> root = RunThatConfig.from_env().repos_path
        >>> fetch_package(source_from_address("ur-fault/run-that@v1"), root)
        True
    """
    destination = package_dir(source, root)

    if destination.exists():
        if not force:
            logger.debug(f"Package already present at {destination}, skipping fetch")
            return False

        if isinstance(source, LocalPackageSource) and source.path.resolve().is_relative_to(destination.resolve()):
            raise FetchIOError(
                f"Cannot replace {destination} with a copy of itself ({source.path})",
                context={"path": str(source.path), "destination": str(destination)},
            )

        logger.info(f"Removing existing package at {destination}")
        try:
            shutil.rmtree(destination)
        except OSError as e:
            raise FetchIOError(
                f"Failed to remove {destination}: {e}",
                context={"destination": str(destination)},
            ) from e

    if isinstance(source, GitPackageSource):
        _clone(source.git, destination, transport or SubprocessGitTransport())
    elif isinstance(source, LocalPackageSource):
        _copy(source.path, destination)
    else:
        assert_never(source)

    return True


def install_package(
    source: GitPackageSource | LocalPackageSource,
    root: Path,
    force: bool = False,
    lock: PackageLock | None = None,
    transport: GitTransportProtocol | None = None,
) -> Package | None:
    """
    Fetch a package, load its manifest and record it in the lock file.

    Process:
    1. Fetch source into the package root (see fetch_package)
    2. Load run.yml from the destination
    3. Add entry to lock file (if provided)

    Args:
        source: Git or local package source
        root: Package root directory
        force: Replace an existing installation
        lock: Optional lock file manager
        transport: Git transport (defaults to SubprocessGitTransport)

    Returns:
        Loaded Package, or None if the package was already installed

    Raises:
        FetchError: If fetching failed
        ManifestError: If the fetched package has no readable, valid run.yml
    """
    transport = transport or SubprocessGitTransport()

    if not fetch_package(source, root, force=force, transport=transport):
        logger.info(f"Package {package_id_for(source)} is already installed")
        return None

    destination = package_dir(source, root)
    package = load_package(destination)
    logger.debug(f"Loaded manifest for {package.name}")

    if lock is not None:
        commit = transport.head_commit(destination) if isinstance(source, GitPackageSource) else None
        lock.record(source, path=destination, commit=commit)

    logger.info(f"Successfully installed package: {package.name}")
    return package


def uninstall_package(
    package_id: str,
    root: Path,
    lock: PackageLock | None = None,
) -> None:
    """
    Remove an installed package and its lock entry.

    Args:
        package_id: Package id ("<user-dir>/<name>", e.g. "ur-fault/run-that")
        root: Package root directory
        lock: Optional lock file manager

    Raises:
        PackageNotFoundError: If no package is installed under that id
        FetchIOError: If the package directory could not be removed
    """
    package_path = root / package_id if split_package_id(package_id) else None

    if package_path is None or not package_path.is_dir():
        raise PackageNotFoundError(
            f"Package '{package_id}' not found under {root}",
            context={"package_id": package_id, "root": str(root)},
        )

    logger.info(f"Uninstalling package: {package_id}")
    try:
        shutil.rmtree(package_path)
    except OSError as e:
        raise FetchIOError(f"Failed to uninstall package '{package_id}': {e}") from e

    if lock is not None:
        lock.forget(package_id)

    logger.info(f"Successfully uninstalled: {package_id}")
