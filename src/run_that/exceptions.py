"""run-that exceptions.

Every failure carries a human-readable message plus optional context
(addresses, paths) so front ends can decide how to present it.
"""


class RunThatError(Exception):
    """Base exception for run-that operations."""

    def __init__(self, message: str, context: dict | None = None):
        """Initialize with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dict with additional context (addresses, paths, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class InvalidAddressError(RunThatError):
    """Source address does not match the address grammar."""


class FetchError(RunThatError):
    """Fetching package contents failed."""


class CannotCloneError(FetchError):
    """Remote clone or ref checkout failed (network, auth, unknown ref)."""


class FetchIOError(FetchError):
    """Local filesystem failure while copying, removing or staging a package."""


class ManifestError(RunThatError):
    """Package manifest could not be loaded."""


class ManifestReadError(ManifestError):
    """Manifest file is missing or unreadable."""


class ManifestParseError(ManifestError):
    """Manifest content is malformed or does not match the package shape."""


class PackageNotFoundError(RunThatError):
    """Package is not installed under the package root."""
