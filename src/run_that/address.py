"""Source address parsing.

Turns a compact repository reference into a structured ``GitSource``:

    [domain:]user/name[specchar spec]

where ``specchar`` is ``$`` (branch), ``@`` (tag) or ``#`` (commit).

Examples:
    ur-fault/run-that                 # github.com, default branch
    gitlab.com:ur-fault/run-that#abc  # commit abc on gitlab.com
    codeberg.org:ur-fault/game$dev    # branch dev on codeberg.org
"""

import re
from enum import Enum

from pydantic import BaseModel
from pydantic import ConfigDict

from .exceptions import InvalidAddressError

DEFAULT_DOMAIN = "github.com"

_DOMAIN = (
    r"(?:[a-zA-Z]|[a-zA-Z]{2}|[a-zA-Z][0-9]|[0-9][a-zA-Z]|[a-zA-Z0-9][a-zA-Z0-9_-]{1,61}[a-zA-Z0-9])"
    r"\.(?:[a-zA-Z]{2,6}|[a-zA-Z0-9-]{2,30}\.[a-zA-Z]{2,3})"
)

ADDRESS_PATTERN = re.compile(
    rf"(?:(?P<domain>{_DOMAIN}):)?"
    r"(?P<user>[\w-]+)/(?P<name>[\w-]+)"
    r"(?:(?P<spectype>[$@#])(?P<spec>\w+))?"
)


class SpecifierKind(str, Enum):
    """Kind of ref pinned by an address."""

    BRANCH = "branch"
    TAG = "tag"
    COMMIT = "commit"


_SYMBOLS = {
    "$": SpecifierKind.BRANCH,
    "@": SpecifierKind.TAG,
    "#": SpecifierKind.COMMIT,
}


class GitSpecifier(BaseModel):
    """Branch, tag or commit pin attached to a git source."""

    model_config = ConfigDict(frozen=True)

    kind: SpecifierKind
    value: str

    @classmethod
    def branch(cls, name: str) -> "GitSpecifier":
        return cls(kind=SpecifierKind.BRANCH, value=name)

    @classmethod
    def tag(cls, name: str) -> "GitSpecifier":
        return cls(kind=SpecifierKind.TAG, value=name)

    @classmethod
    def commit(cls, sha: str) -> "GitSpecifier":
        return cls(kind=SpecifierKind.COMMIT, value=sha)

    @property
    def symbol(self) -> str:
        """Address character that introduces this specifier."""
        return next(symbol for symbol, kind in _SYMBOLS.items() if kind == self.kind)

    @property
    def ref(self) -> str:
        """Ref name to hand to ``git checkout``."""
        if self.kind == SpecifierKind.TAG:
            return f"refs/tags/{self.value}"
        return self.value


class GitSource(BaseModel):
    """
    Remote repository identified by a source address.

    ``domain``, ``user`` and ``name`` are always present; ``spec`` only when the
    address carried an explicit specifier suffix.
    """

    model_config = ConfigDict(frozen=True)

    domain: str = DEFAULT_DOMAIN
    user: str
    name: str
    spec: GitSpecifier | None = None

    @property
    def url(self) -> str:
        """HTTPS clone URL."""
        return f"https://{self.domain}/{self.user}/{self.name}"

    @property
    def address(self) -> str:
        """Canonical address string (always includes the domain)."""
        address = f"{self.domain}:{self.user}/{self.name}"
        if self.spec is not None:
            address += f"{self.spec.symbol}{self.spec.value}"
        return address

    def __str__(self) -> str:
        return self.address


def parse_git_address(address: str) -> GitSource:
    """
    Parse a source address into a GitSource.

    The whole string must match; there are no partial results.

    Args:
        address: Address such as "user/name" or "host.tld:user/name@v1"

    Returns:
        Parsed GitSource (domain defaults to DEFAULT_DOMAIN)

    Raises:
        InvalidAddressError: If the address does not match the grammar

    Example:
        >>> parse_git_address("ur-fault/run-that@tag").spec
        GitSpecifier(kind=<SpecifierKind.TAG: 'tag'>, value='tag')
    """
    match = ADDRESS_PATTERN.fullmatch(address)
    if match is None:
        raise InvalidAddressError(f"Invalid git address: {address!r}", context={"address": address})

    spec = None
    if match.group("spectype"):
        spec = GitSpecifier(kind=_SYMBOLS[match.group("spectype")], value=match.group("spec"))

    return GitSource(
        domain=match.group("domain") or DEFAULT_DOMAIN,
        user=match.group("user"),
        name=match.group("name"),
        spec=spec,
    )
