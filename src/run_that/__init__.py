"""run-that - Fetch runnable projects and resolve their commands per platform.

Library mechanism only: apps inject policy (package root, lock path, force flag)
and own process execution of the resolved commands.
"""

from .address import DEFAULT_DOMAIN
from .address import GitSource
from .address import GitSpecifier
from .address import SpecifierKind
from .address import parse_git_address
from .commands import ExecutionPlan
from .commands import Platform
from .commands import build_plan
from .commands import resolve_checks
from .commands import resolve_init
from .commands import resolve_run
from .config import RunThatConfig
from .exceptions import CannotCloneError
from .exceptions import FetchError
from .exceptions import FetchIOError
from .exceptions import InvalidAddressError
from .exceptions import ManifestError
from .exceptions import ManifestParseError
from .exceptions import ManifestReadError
from .exceptions import PackageNotFoundError
from .exceptions import RunThatError
from .fetcher import fetch_package
from .fetcher import install_package
from .fetcher import uninstall_package
from .git import SubprocessGitTransport
from .lock import PackageLock
from .lock import PackageLockEntry
from .manifest import MANIFEST_FILENAME
from .manifest import Command
from .manifest import CommandSet
from .manifest import CustomRun
from .manifest import DefaultRun
from .manifest import NullRun
from .manifest import Package
from .manifest import RunCommand
from .manifest import RunCommands
from .manifest import dump_package
from .manifest import load_package
from .protocols import GitTransportProtocol
from .resolver import PackageResolver
from .source import GitPackageSource
from .source import LocalPackageSource
from .source import PackageSource
from .source import package_dir
from .source import package_id_for
from .source import parse_source
from .source import source_from_address
from .source import source_from_path
from .utils import LOCAL_NAMESPACE
from .utils import escape_user

__all__ = [
    # Addresses
    "DEFAULT_DOMAIN",
    "GitSource",
    "GitSpecifier",
    "SpecifierKind",
    "parse_git_address",
    # Sources
    "PackageSource",
    "GitPackageSource",
    "LocalPackageSource",
    "source_from_address",
    "source_from_path",
    "parse_source",
    "package_id_for",
    "package_dir",
    "LOCAL_NAMESPACE",
    "escape_user",
    # Fetching
    "fetch_package",
    "install_package",
    "uninstall_package",
    "GitTransportProtocol",
    "SubprocessGitTransport",
    # Manifest
    "MANIFEST_FILENAME",
    "Package",
    "Command",
    "CommandSet",
    "RunCommands",
    "RunCommand",
    "NullRun",
    "DefaultRun",
    "CustomRun",
    "load_package",
    "dump_package",
    # Resolution
    "Platform",
    "ExecutionPlan",
    "resolve_checks",
    "resolve_init",
    "resolve_run",
    "build_plan",
    "PackageResolver",
    # Lock file
    "PackageLock",
    "PackageLockEntry",
    # Config
    "RunThatConfig",
    # Exceptions
    "RunThatError",
    "InvalidAddressError",
    "FetchError",
    "CannotCloneError",
    "FetchIOError",
    "ManifestError",
    "ManifestReadError",
    "ManifestParseError",
    "PackageNotFoundError",
]

__version__ = "0.1.0"
