from collections.abc import Iterator
from pathlib import Path

import httpx
import pytest

from javalsp.config import InstallerSettings
from javalsp.installer import JavaServerInstaller
from javalsp.utils.http import IndexClient
from tests.helpers import INDEX_URL, LINUX_X64, FakeRemote


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def client(remote: FakeRemote) -> Iterator[IndexClient]:
    index_client = IndexClient(transport=httpx.MockTransport(remote.handler))
    try:
        yield index_client
    finally:
        index_client.close()


@pytest.fixture
def container(tmp_path: Path) -> Path:
    return tmp_path / "jdtls"


@pytest.fixture
def settings(container: Path) -> InstallerSettings:
    return InstallerSettings(index_url=INDEX_URL, container_dir=container)


@pytest.fixture
def installer(settings: InstallerSettings, client: IndexClient) -> JavaServerInstaller:
    return JavaServerInstaller(settings, client=client, platform=LINUX_X64)
