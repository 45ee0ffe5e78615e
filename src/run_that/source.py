"""Package sources: where a package's files come from.

A source is either a parsed git address or a local filesystem path. The
two variants form a discriminated union so a serialized source can be
validated back into the right class.
"""

from pathlib import Path
from typing import Annotated
from typing import Literal
from typing import assert_never

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from .address import GitSource
from .address import parse_git_address
from .utils import LOCAL_NAMESPACE
from .utils import escape_user


class GitPackageSource(BaseModel):
    """Package cloned from a remote git repository."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["git"] = "git"
    git: GitSource

    @property
    def uri(self) -> str:
        return self.git.address


class LocalPackageSource(BaseModel):
    """Package copied from a local file or directory."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["local"] = "local"
    path: Path

    @property
    def uri(self) -> str:
        return str(self.path)


PackageSource = Annotated[GitPackageSource | LocalPackageSource, Field(discriminator="kind")]


def source_from_address(address: str) -> GitPackageSource:
    """Create a git source from an address string.

    Raises:
        InvalidAddressError: If the address does not match the grammar
    """
    return GitPackageSource(git=parse_git_address(address))


def source_from_path(path: str | Path) -> LocalPackageSource:
    """Create a local source; always succeeds, existence is checked at fetch time."""
    return LocalPackageSource(path=Path(path).expanduser())


def parse_source(value: str) -> GitPackageSource | LocalPackageSource:
    """Interpret a user-supplied value as a local path if it exists, else as an address.

    Raises:
        InvalidAddressError: If the value is neither an existing path nor a valid address
    """
    if Path(value).expanduser().exists():
        return source_from_path(value)
    return source_from_address(value)


def package_id_for(source: GitPackageSource | LocalPackageSource) -> str:
    """Package id ("<user-dir>/<name>") a source is stored under.

    Examples:
        >>> package_id_for(source_from_address("_local/game"))
        '__local/game'
        >>> package_id_for(source_from_path("~/games/lil-game"))
        '_local/lil-game'
    """
    if isinstance(source, GitPackageSource):
        return f"{escape_user(source.git.user)}/{source.git.name}"
    if isinstance(source, LocalPackageSource):
        path = source.path.resolve()
        name = path.stem if path.is_file() else path.name
        return f"{LOCAL_NAMESPACE}/{name}"
    assert_never(source)


def package_dir(source: GitPackageSource | LocalPackageSource, root: Path) -> Path:
    """Destination directory of a source under the package root."""
    return root / package_id_for(source)
