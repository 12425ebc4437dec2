"""Download locations for the Java runtime and the JDT server build."""

import enum
import logging
import re
from dataclasses import dataclass
from typing import Dict

from javalsp.errors import ArtifactNotFoundError, UnsupportedPlatformError
from javalsp.resolver import ResolvedRelease
from javalsp.utils.http import IndexClient
from javalsp.utils.platform import Arch, OperatingSystem, PlatformKey

logger = logging.getLogger("javalsp.artifacts")

CORRETTO_URL = "https://corretto.aws/downloads/latest"

_DOWNLOAD_BUILD_RE = re.compile(
    r"""<a href=['"]https://www\.eclipse\.org/downloads/download\.php\?file=([^'"]*\.tar\.gz)['"]"""
)


class ArtifactKind(str, enum.Enum):
    """The two archives an installation consists of."""

    RUNTIME = "runtime"
    SERVER = "server"


@dataclass(frozen=True)
class PlatformProfile:
    """Everything that differs between supported platforms.

    Attributes:
        runtime_url: Download URL of the Corretto 21 JDK archive.
        java_home: Java home relative to the extracted runtime root.
        config_dir: Name of the server's configuration directory.
    """

    runtime_url: str
    java_home: str
    config_dir: str


PLATFORMS: Dict[PlatformKey, PlatformProfile] = {
    PlatformKey(Arch.AARCH64, OperatingSystem.MACOS): PlatformProfile(
        runtime_url=f"{CORRETTO_URL}/amazon-corretto-21-aarch64-macos-jdk.tar.gz",
        java_home="Contents/Home",
        config_dir="config_mac_arm",
    ),
    PlatformKey(Arch.X86_64, OperatingSystem.MACOS): PlatformProfile(
        runtime_url=f"{CORRETTO_URL}/amazon-corretto-21-x64-macos-jdk.tar.gz",
        java_home="Contents/Home",
        config_dir="config_mac",
    ),
    PlatformKey(Arch.AARCH64, OperatingSystem.LINUX): PlatformProfile(
        runtime_url=f"{CORRETTO_URL}/amazon-corretto-21-aarch64-linux-jdk.tar.gz",
        java_home="",
        config_dir="config_linux_arm",
    ),
    PlatformKey(Arch.X86_64, OperatingSystem.LINUX): PlatformProfile(
        runtime_url=f"{CORRETTO_URL}/amazon-corretto-21-x64-linux-jdk.tar.gz",
        java_home="",
        config_dir="config_linux",
    ),
}


def platform_profile(platform: PlatformKey) -> PlatformProfile:
    """Look up the profile of a supported platform.

    Raises:
        UnsupportedPlatformError: If ``platform`` is not in :data:`PLATFORMS`.
    """
    try:
        return PLATFORMS[platform]
    except KeyError:
        raise UnsupportedPlatformError(f"No Java runtime available for {platform}") from None


def runtime_url(platform: PlatformKey) -> str:
    return platform_profile(platform).runtime_url


def parse_server_archive(body: str) -> str:
    """Extract the archive path from a release detail page.

    Raises:
        ArtifactNotFoundError: If the page has no ``.tar.gz`` download link.
    """
    match = _DOWNLOAD_BUILD_RE.search(body)
    if match is None:
        raise ArtifactNotFoundError("No server download link found on the release page")
    return match.group(1)


def server_archive_url(client: IndexClient, release: ResolvedRelease, index_url: str) -> str:
    """Fetch the detail page of ``release`` and derive the archive URL.

    Args:
        client: Client used for the request.
        release: The release to download.
        index_url: Base URL of the download host.

    Returns:
        Absolute URL of the server ``.tar.gz`` archive.
    """
    body = client.fetch_text(release.detail_url)
    try:
        build = parse_server_archive(body)
    except ArtifactNotFoundError:
        raise ArtifactNotFoundError(f"No server download link found on {release.detail_url}") from None

    if not build.startswith("/"):
        build = f"/{build}"
    url = f"{index_url.rstrip('/')}{build}"
    logger.debug(f"Server archive for {release.version}: {url}")
    return url
