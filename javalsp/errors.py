"""Exceptions raised while resolving, installing and launching the server."""

from typing import Optional


class JavaLspError(Exception):
    """Base class for every error raised by javalsp."""


class NetworkError(JavaLspError):
    """A remote request failed at the transport or HTTP level."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        """Initialize the error.

        Args:
            url: The URL that was being fetched.
            message: Human readable description of the failure.
            status_code: HTTP status code, if a response was received.
        """
        super().__init__(f"{message} ({url})")
        self.url = url
        self.status_code = status_code


class VersionResolutionError(JavaLspError):
    """No usable version could be extracted from the milestone index."""


class ArtifactNotFoundError(JavaLspError):
    """A release detail page did not contain the expected download link."""


class UnsupportedPlatformError(JavaLspError):
    """The CPU architecture or operating system is not supported."""


class InstallationError(JavaLspError):
    """Downloading, decompressing or extracting an artifact failed."""
