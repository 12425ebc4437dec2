import pytest

from javalsp.artifacts import (
    PLATFORMS,
    parse_server_archive,
    platform_profile,
    runtime_url,
    server_archive_url,
)
from javalsp.errors import ArtifactNotFoundError, UnsupportedPlatformError
from javalsp.resolver import ResolvedRelease
from javalsp.utils.platform import Arch, OperatingSystem, PlatformKey
from tests.helpers import INDEX_URL, MILESTONES_URL, detail_page


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        (
            PlatformKey(Arch.AARCH64, OperatingSystem.MACOS),
            "https://corretto.aws/downloads/latest/amazon-corretto-21-aarch64-macos-jdk.tar.gz",
        ),
        (
            PlatformKey(Arch.X86_64, OperatingSystem.MACOS),
            "https://corretto.aws/downloads/latest/amazon-corretto-21-x64-macos-jdk.tar.gz",
        ),
        (
            PlatformKey(Arch.AARCH64, OperatingSystem.LINUX),
            "https://corretto.aws/downloads/latest/amazon-corretto-21-aarch64-linux-jdk.tar.gz",
        ),
        (
            PlatformKey(Arch.X86_64, OperatingSystem.LINUX),
            "https://corretto.aws/downloads/latest/amazon-corretto-21-x64-linux-jdk.tar.gz",
        ),
    ],
)
def test_runtime_url(key: PlatformKey, expected: str) -> None:
    assert runtime_url(key) == expected


@pytest.mark.parametrize(
    ("key", "config_dir"),
    [
        (PlatformKey(Arch.AARCH64, OperatingSystem.MACOS), "config_mac_arm"),
        (PlatformKey(Arch.X86_64, OperatingSystem.MACOS), "config_mac"),
        (PlatformKey(Arch.AARCH64, OperatingSystem.LINUX), "config_linux_arm"),
        (PlatformKey(Arch.X86_64, OperatingSystem.LINUX), "config_linux"),
    ],
)
def test_config_dir_matches_architecture(key: PlatformKey, config_dir: str) -> None:
    assert platform_profile(key).config_dir == config_dir


def test_every_profile_has_a_runtime_url() -> None:
    for profile in PLATFORMS.values():
        assert profile.runtime_url.startswith("https://")
        assert profile.runtime_url.endswith(".tar.gz")


@pytest.mark.parametrize("arch", list(Arch))
def test_windows_is_unsupported(arch: Arch) -> None:
    with pytest.raises(UnsupportedPlatformError):
        runtime_url(PlatformKey(arch, OperatingSystem.WINDOWS))


def test_parse_server_archive() -> None:
    assert parse_server_archive(detail_page("1.9.0")) == (
        "/jdtls/milestones/1.9.0/jdt-language-server-1.9.0-202203031534.tar.gz"
    )


def test_parse_server_archive_takes_first_link_only() -> None:
    body = detail_page("1.9.0") + detail_page("1.8.0")
    assert "1.9.0" in parse_server_archive(body)


def test_parse_server_archive_missing_link() -> None:
    body = "<a href='https://www.eclipse.org/downloads/download.php?file=/jdtls/readme.txt'>readme</a>"
    with pytest.raises(ArtifactNotFoundError):
        parse_server_archive(body)


def test_server_archive_url(remote, client) -> None:
    release = ResolvedRelease("1.9.0", f"{MILESTONES_URL}/1.9.0")
    remote.add(release.detail_url, text=detail_page("1.9.0"))

    url = server_archive_url(client, release, INDEX_URL)

    assert url == f"{MILESTONES_URL}/1.9.0/jdt-language-server-1.9.0-202203031534.tar.gz"
    assert remote.requests == [release.detail_url]


def test_server_archive_url_without_link(remote, client) -> None:
    release = ResolvedRelease("1.9.0", f"{MILESTONES_URL}/1.9.0")
    remote.add(release.detail_url, text="<html>Build removed</html>")

    with pytest.raises(ArtifactNotFoundError, match="1.9.0"):
        server_archive_url(client, release, INDEX_URL)
