"""Command resolution - effective commands for a platform.

Pure mapping from ``(package, platform)`` to commands; nothing here raises
for a valid package. "Cannot run here" is a normal outcome (``None``).

Two rules:
- Additive (``init``, ``checks``): global commands, then the platform's own.
- Override (``run``): the platform entry decides, the default is used only
  when the platform says ``default``.
"""

import sys
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import assert_never

from .manifest import Command
from .manifest import CommandSet
from .manifest import CustomRun
from .manifest import DefaultRun
from .manifest import NullRun
from .manifest import Package
from .manifest import RunCommands


class Platform(str, Enum):
    """Platforms a manifest can target."""

    WIN = "win"
    LINUX = "linux"
    MAC = "mac"

    @classmethod
    def current(cls) -> "Platform":
        """Platform of the running interpreter (anything unrecognized counts as linux)."""
        if sys.platform.startswith(("win32", "cygwin")):
            return cls.WIN
        if sys.platform == "darwin":
            return cls.MAC
        return cls.LINUX


def resolve_checks(command_set: CommandSet, platform: Platform) -> list[Command]:
    """Global commands followed by the platform's commands, order kept, duplicates kept."""
    return [*command_set.global_, *getattr(command_set, platform.value)]


def resolve_init(package: Package, platform: Platform) -> list[Command]:
    """Initialization commands for a platform (additive, like checks)."""
    return resolve_checks(package.init, platform)


def resolve_run(run_commands: RunCommands, platform: Platform) -> Command | None:
    """
    Run command for a platform.

    Returns:
        ``None`` for ``null``; the default command (possibly ``None`` when the
        manifest declares none) for ``default``; the custom command otherwise.
    """
    entry = getattr(run_commands, platform.value)
    if isinstance(entry, NullRun):
        return None
    if isinstance(entry, DefaultRun):
        return run_commands.default
    if isinstance(entry, CustomRun):
        return entry.command
    assert_never(entry)


@dataclass(frozen=True)
class ExecutionPlan:
    """Everything to execute for a package on one platform, in order."""

    platform: Platform
    checks: list[Command] = field(default_factory=list)
    init: list[Command] = field(default_factory=list)
    run: Command | None = None

    @property
    def can_run(self) -> bool:
        return self.run is not None


def build_plan(package: Package, platform: Platform | None = None) -> ExecutionPlan:
    """
    Resolve all of a package's groupings for a platform.

    Checks come first (they verify tools needed by init), then init, then run.

    Args:
        package: Loaded package manifest
        platform: Target platform (defaults to the current one)

    Returns:
        ExecutionPlan for the platform
    """
    platform = platform or Platform.current()
    return ExecutionPlan(
        platform=platform,
        checks=resolve_checks(package.checks, platform),
        init=resolve_init(package, platform),
        run=resolve_run(package.run, platform),
    )
