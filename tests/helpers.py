import io
import tarfile
from typing import Callable, Dict, List, Optional

import httpx

from javalsp.utils.platform import Arch, OperatingSystem, PlatformKey

INDEX_URL = "https://download.eclipse.org"
MILESTONES_URL = f"{INDEX_URL}/jdtls/milestones"
LAUNCHER = "org.eclipse.equinox.launcher_1.6.700.v20231214-2017.jar"
LINUX_X64 = PlatformKey(Arch.X86_64, OperatingSystem.LINUX)
LINUX_RUNTIME_URL = "https://corretto.aws/downloads/latest/amazon-corretto-21-x64-linux-jdk.tar.gz"


def make_tarball(files: Dict[str, Optional[bytes]]) -> bytes:
    """Build an in-memory .tar.gz; a None value adds a directory."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            if content is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
                continue
            info.size = len(content)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def index_page(*versions: str) -> str:
    links = "\n".join(f"<li><a href='/jdtls/milestones/{v}'>{v}</a></li>" for v in versions)
    return f"<html><body><ul>\n{links}\n</ul></body></html>"


def detail_page(version: str) -> str:
    return (
        "<html><body>"
        f"<a href='https://www.eclipse.org/downloads/download.php?file=/jdtls/milestones/{version}"
        f"/jdt-language-server-{version}-202203031534.tar.gz'>jdt-language-server-{version}.tar.gz</a>"
        "</body></html>"
    )


def server_archive_url(version: str) -> str:
    return f"{MILESTONES_URL}/{version}/jdt-language-server-{version}-202203031534.tar.gz"


def linux_runtime_tarball() -> bytes:
    return make_tarball(
        {
            "amazon-corretto-21.0.5.11.1-linux-x64": None,
            "amazon-corretto-21.0.5.11.1-linux-x64/bin/java": b"#!/bin/sh\n",
            "amazon-corretto-21.0.5.11.1-linux-x64/release": b'JAVA_VERSION="21.0.5"\n',
        }
    )


def mac_runtime_tarball() -> bytes:
    return make_tarball(
        {
            "amazon-corretto-21.jdk/Contents/Home/bin/java": b"#!/bin/sh\n",
            "amazon-corretto-21.jdk/Contents/Info.plist": b"<plist/>",
        }
    )


def server_tarball(launcher: str = LAUNCHER) -> bytes:
    return make_tarball(
        {
            f"plugins/{launcher}": b"PK",
            "plugins/org.eclipse.jdt.ls.core_1.9.0.jar": b"PK",
            "config_linux/config.ini": b"osgi.bundles=\n",
            "config_linux_arm/config.ini": b"osgi.bundles=\n",
            "config_mac/config.ini": b"osgi.bundles=\n",
            "config_mac_arm/config.ini": b"osgi.bundles=\n",
        }
    )


class FakeRemote:
    """Serves canned responses and records every requested URL."""

    def __init__(self) -> None:
        self.routes: Dict[str, Callable[[], httpx.Response]] = {}
        self.requests: List[str] = []

    def add(self, url: str, status: int = 200, content: bytes = b"", text: Optional[str] = None) -> None:
        body = text.encode("utf-8") if text is not None else content
        self.routes[url] = lambda: httpx.Response(status, content=body)

    def publish(self, *versions: str, runtime: Optional[bytes] = None, launcher: str = LAUNCHER) -> None:
        """Publish a milestone index listing ``versions`` with downloadable builds."""
        self.add(MILESTONES_URL, text=index_page(*versions))
        for version in versions:
            self.add(f"{MILESTONES_URL}/{version}", text=detail_page(version))
            self.add(server_archive_url(version), content=server_tarball(launcher))
        self.add(LINUX_RUNTIME_URL, content=runtime if runtime is not None else linux_runtime_tarball())

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, text="not found")
        return route()
