"""Package manifest schema - Parse run.yml files.

A manifest names the commands that initialize a package, run it, and check
that its prerequisite tools exist, with per-platform variants:

    name: Lil Game
    description: Tiny terminal game
    authors:
      - ur-fault
    init:
      global:
        - program: cargo
          args: [build, --release]
    run:
      default:
        program: cargo
        args: [run, --release]
      win: !custom
        program: cargo.exe
        args: [run, --release]
      mac: null
    checks:
      global:
        - program: cargo
          args: [--version]

``init`` and ``checks`` are additive (global plus platform entries), ``run``
is an override (each platform is ``null``, ``default`` or ``!custom``).
"""

import logging
import re
from pathlib import Path
from typing import Annotated
from typing import Any
from typing import Literal

import yaml
from pydantic import BaseModel
from pydantic import BeforeValidator
from pydantic import ConfigDict
from pydantic import Discriminator
from pydantic import Field
from pydantic import PlainSerializer
from pydantic import ValidationError

from .exceptions import ManifestParseError
from .exceptions import ManifestReadError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "run.yml"

PLATFORM_FIELDS = ("win", "linux", "mac")


class Command(BaseModel):
    """Single program invocation; args are passed in order."""

    model_config = ConfigDict(frozen=True)

    program: str
    args: list[str] = Field(default_factory=list)

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def __str__(self) -> str:
        parts = [self.program]
        parts.extend(f'"{arg}"' if " " in arg else arg for arg in self.args)
        return " ".join(parts)


class CommandSet(BaseModel):
    """Additive command grouping: ``global`` always runs, then the platform's own list."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    global_: list[Command] = Field(default_factory=list, alias="global")
    win: list[Command] = Field(default_factory=list)
    linux: list[Command] = Field(default_factory=list)
    mac: list[Command] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.global_ or self.win or self.linux or self.mac)


class NullRun(BaseModel):
    """Package cannot run on this platform."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["null"] = "null"


class DefaultRun(BaseModel):
    """Platform uses the default run command."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["default"] = "default"


class CustomRun(BaseModel):
    """Platform-specific run command, replacing the default."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["custom"] = "custom"
    command: Command


def _coerce_run_command(value: Any) -> Any:
    # YAML forms: null / "null", "default", {"custom": {...}} (from the !custom tag)
    if value is None:
        return {"kind": "null"}
    if value in ("null", "default"):
        return {"kind": value}
    if isinstance(value, dict) and set(value) == {"custom"}:
        return {"kind": "custom", "command": value["custom"]}
    return value


def _serialize_run_command(value: NullRun | DefaultRun | CustomRun) -> str | dict:
    if isinstance(value, CustomRun):
        return {"custom": value.command.model_dump()}
    return value.kind


RunCommand = Annotated[
    Annotated[NullRun | DefaultRun | CustomRun, Discriminator("kind")],
    BeforeValidator(_coerce_run_command),
    PlainSerializer(_serialize_run_command),
]


class RunCommands(BaseModel):
    """Override command grouping: each platform resolves to exactly one command or none."""

    model_config = ConfigDict(frozen=True)

    default: Command | None = None
    win: RunCommand = Field(default_factory=DefaultRun)
    linux: RunCommand = Field(default_factory=DefaultRun)
    mac: RunCommand = Field(default_factory=DefaultRun)


class Package(BaseModel):
    """
    Package manifest from run.yml.

    Immutable once loaded. Unknown fields are ignored. ``name``, ``description``, ``authors`` and
    ``run`` are required; ``init`` and ``checks`` default to empty groupings.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    authors: list[str]
    init: CommandSet = Field(default_factory=CommandSet)
    run: RunCommands
    checks: CommandSet = Field(default_factory=CommandSet)

    @classmethod
    def from_yaml(cls, text: str, source: Path | None = None) -> "Package":
        """
        Parse a manifest document.

        Args:
            text: YAML document
            source: Optional path the text was read from (for error context)

        Returns:
            Package instance

        Raises:
            ManifestParseError: If the YAML is invalid or doesn't match the package shape
        """
        context = {"path": str(source)} if source is not None else {}
        where = f" in {source}" if source is not None else ""

        try:
            data = yaml.load(text, Loader=_ManifestLoader)
        except yaml.YAMLError as e:
            raise ManifestParseError(f"Invalid YAML{where}: {e}", context=context) from e

        if not isinstance(data, dict):
            raise ManifestParseError(f"Manifest{where} must be a mapping, got {type(data).__name__}", context=context)

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ManifestParseError(f"Invalid manifest{where}: {e}", context=context) from e


class _ManifestLoader(yaml.SafeLoader):
    """Safe loader that understands the run command tags."""


# YAML 1.2 booleans only: yes/no/on/off stay strings (e.g. in args)
_ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:bool"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_ManifestLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def _construct_custom(loader: yaml.SafeLoader, node: yaml.Node) -> dict:
    return {"custom": loader.construct_mapping(node, deep=True)}


_ManifestLoader.add_constructor("!custom", _construct_custom)
_ManifestLoader.add_constructor("!null", lambda loader, node: "null")
_ManifestLoader.add_constructor("!default", lambda loader, node: "default")


class _CustomNode:
    def __init__(self, mapping: dict):
        self.mapping = mapping


class _ManifestDumper(yaml.SafeDumper):
    """Safe dumper that writes custom run commands with the !custom tag."""


_ManifestDumper.add_representer(
    _CustomNode, lambda dumper, node: dumper.represent_mapping("!custom", node.mapping)
)


def dump_package(package: Package) -> str:
    """Serialize a package to a run.yml document that load_package reads back unchanged."""
    data = package.model_dump(mode="json", by_alias=True)
    for platform in PLATFORM_FIELDS:
        value = data["run"][platform]
        if isinstance(value, dict):
            data["run"][platform] = _CustomNode(value["custom"])
    return yaml.dump(data, Dumper=_ManifestDumper, sort_keys=False, allow_unicode=True)


def find_manifest(path: Path) -> Path:
    """Manifest file for a path: the file itself, or run.yml inside a directory."""
    if path.is_file():
        return path
    return path / MANIFEST_FILENAME


def load_package(path: str | Path) -> Package:
    """
    Load a package manifest.

    Args:
        path: Manifest file, or package directory containing run.yml

    Returns:
        Package instance

    Raises:
        ManifestReadError: If the manifest doesn't exist or can't be read
        ManifestParseError: If the manifest content is malformed
    """
    manifest_path = find_manifest(Path(path))
    logger.debug(f"Loading manifest: {manifest_path}")

    try:
        text = manifest_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestReadError(
            f"Could not read manifest {manifest_path}: {e}",
            context={"path": str(manifest_path)},
        ) from e

    return Package.from_yaml(text, source=manifest_path)
