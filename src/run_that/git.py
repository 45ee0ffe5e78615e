"""Default git transport backed by the ``git`` executable."""

import logging
import subprocess
from pathlib import Path

from .exceptions import CannotCloneError

logger = logging.getLogger(__name__)


class SubprocessGitTransport:
    """Clone and check out repositories by running ``git`` in a subprocess."""

    def __init__(self, git_executable: str = "git"):
        self.git_executable = git_executable

    def _run(self, args: list[str], cwd: Path | None = None) -> str:
        cmd = [self.git_executable, *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, cwd=cwd, check=True, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise CannotCloneError(
                f"git executable not found: {self.git_executable}",
                context={"command": cmd},
            ) from e
        except subprocess.CalledProcessError as e:
            raise CannotCloneError(
                f"git {args[0]} failed: {e.stderr.strip() or e}",
                context={"command": cmd, "returncode": e.returncode},
            ) from e
        return result.stdout

    def clone(self, url: str, target_dir: Path) -> None:
        self._run(["clone", "--quiet", url, str(target_dir)])

    def checkout(self, repo_dir: Path, ref: str) -> None:
        self._run(["checkout", "--quiet", ref], cwd=repo_dir)

    def head_commit(self, repo_dir: Path) -> str | None:
        try:
            return self._run(["rev-parse", "HEAD"], cwd=repo_dir).strip() or None
        except CannotCloneError as e:
            logger.debug(f"Could not read HEAD commit in {repo_dir}: {e}")
            return None
