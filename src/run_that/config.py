"""Library paths configuration.

Paths are app policy: nothing in the library reads this implicitly, callers
build a config and pass its paths to the fetcher, resolver and lock.
"""

import os
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

HOME_ENV_VAR = "RUN_THAT_HOME"


class RunThatConfig(BaseModel):
    """Where packages and the lock file live."""

    model_config = ConfigDict(frozen=True)

    home: Path = Field(default_factory=lambda: Path.home() / ".run-that")

    @property
    def repos_path(self) -> Path:
        """Package root: packages are stored as repos/<user>/<name>/."""
        return self.home / "repos"

    @property
    def lock_path(self) -> Path:
        return self.home / "packages.lock"

    @classmethod
    def from_env(cls) -> "RunThatConfig":
        """Build config, honoring RUN_THAT_HOME when set."""
        home = os.environ.get(HOME_ENV_VAR)
        if home:
            return cls(home=Path(home).expanduser())
        return cls()
