"""Package root layout helpers.

Packages live under a root directory as ``root/<user>/<name>/``. Locally
sourced packages share the reserved ``_local`` user directory, so remote
users whose name could collide with it are escaped. A package id is the
``<user-dir>/<name>`` part of that path.
"""

import re
from pathlib import Path

LOCAL_NAMESPACE = "_local"

_RESERVED_USER = re.compile(r"_+local")


def escape_user(user: str) -> str:
    """Map a remote user name to its directory name under the package root.

    A user made of one or more underscores followed by ``local`` gains one more
    leading underscore. The mapping is injective, so no remote user ever lands
    in the local namespace.

    Examples:
        >>> escape_user("ur-fault")
        'ur-fault'
        >>> escape_user("_local")
        '__local'
        >>> escape_user("__local")
        '___local'
    """
    if _RESERVED_USER.fullmatch(user):
        return f"_{user}"
    return user


def split_package_id(package_id: str) -> tuple[str, str] | None:
    """Split "<user-dir>/<name>" into its parts, or None if it isn't a package id."""
    parts = package_id.split("/")
    if len(parts) != 2 or any(part in ("", ".", "..") for part in parts):
        return None
    return parts[0], parts[1]


def package_id_from_path(package_path: Path, root: Path) -> str | None:
    """Extract the package id from a path under the root.

    Args:
        package_path: Any path inside an installed package
                      (e.g., ~/.run-that/repos/ur-fault/run-that/src/main.rs)
        root: Package root directory

    Returns:
        Package id such as "ur-fault/run-that" or "_local/game",
        or None if the path is not inside a package directory
    """
    try:
        relative = package_path.resolve().relative_to(root.resolve())
    except ValueError:
        return None

    if len(relative.parts) < 2:
        return None

    return f"{relative.parts[0]}/{relative.parts[1]}"
