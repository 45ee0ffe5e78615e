"""Protocols for git transports.

The fetcher doesn't know HOW a repository gets cloned; apps (and tests) can
provide any implementation of this interface. The default is
``SubprocessGitTransport``, which shells out to the ``git`` executable.
"""

from pathlib import Path
from typing import Protocol


class GitTransportProtocol(Protocol):
    """Protocol for cloning repositories and checking out refs."""

    def clone(self, url: str, target_dir: Path) -> None:
        """Clone repository at url into target_dir.

        Args:
            url: Repository URL (e.g., https://github.com/ur-fault/run-that)
            target_dir: Directory to clone into (must not exist)

        Raises:
            CannotCloneError: If the clone fails
        """
        ...

    def checkout(self, repo_dir: Path, ref: str) -> None:
        """Check out a branch, tag ref or commit in an existing clone.

        Raises:
            CannotCloneError: If the ref cannot be resolved
        """
        ...

    def head_commit(self, repo_dir: Path) -> str | None:
        """Return the commit SHA checked out in repo_dir, or None if unknown."""
        ...
