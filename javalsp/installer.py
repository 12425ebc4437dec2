"""Idempotent installation of the Java runtime and the JDT language server.

Both artifacts are unpacked into a staging directory inside the container and
moved into place with a rename. The installation-state record is only marked
complete after that rename, so an interrupted attempt is detected as partial
on the next run and reinstalled instead of being mistaken for a finished one.
"""

import enum
import json
import logging
import os
import shutil
import tarfile
import tempfile
import zlib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from javalsp.artifacts import ArtifactKind, runtime_url, server_archive_url
from javalsp.config import InstallerSettings
from javalsp.errors import InstallationError
from javalsp.launch import (
    RUNTIME_DIR,
    SERVER_DIR,
    LaunchSpec,
    build_launch_spec,
    find_launcher,
    java_home,
    launcher_jar,
)
from javalsp.resolver import ResolvedRelease, fetch_latest_release
from javalsp.utils.http import IndexClient
from javalsp.utils.platform import PlatformKey

STATE_FILE = "install-state.json"
VERSION_FILE = "version.txt"
STAGING_PREFIX = ".staging-"


class InstallState(str, enum.Enum):
    """Installation state of a single artifact."""

    ABSENT = "absent"
    PARTIAL = "partial"
    COMPLETE = "complete"


class InstallationRecord(BaseModel):
    """Persisted state of both artifacts in a container directory."""

    runtime: InstallState = InstallState.ABSENT
    server: InstallState = InstallState.ABSENT
    server_version: Optional[str] = None


class JavaServerInstaller:
    """Installs the runtime and the server into one container directory."""

    def __init__(
        self,
        settings: Optional[InstallerSettings] = None,
        client: Optional[IndexClient] = None,
        platform: Optional[PlatformKey] = None,
    ):
        """Initialize the installer.

        Args:
            settings: Installer settings. Defaults to the environment.
            client: Index client. One is created on first use if omitted.
            platform: Target platform. Defaults to the running host.
        """
        self.settings = settings or InstallerSettings.from_env()
        self.container_dir = Path(self.settings.container_dir)
        self.platform = platform or PlatformKey.detect()
        self.logger = logging.getLogger("javalsp.installer")
        self._client = client
        self._owns_client = client is None

    def __enter__(self) -> "JavaServerInstaller":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def _require_downloads(self) -> None:
        if self.settings.download_disabled:
            raise InstallationError(
                f"Downloads are disabled and {self.container_dir} is not fully installed"
            )

    @property
    def client(self) -> IndexClient:
        self._require_downloads()
        if self._client is None:
            self._client = IndexClient(timeout=self.settings.http_timeout)
        return self._client

    # State

    def _state_path(self) -> Path:
        return self.container_dir / STATE_FILE

    def _staging_dir(self, kind: ArtifactKind) -> Path:
        return self.container_dir / f"{STAGING_PREFIX}{kind.value}"

    def load_record(self) -> InstallationRecord:
        """Read the installation-state record, or an empty one if missing."""
        path = self._state_path()
        if not path.is_file():
            return InstallationRecord()
        try:
            return InstallationRecord.model_validate_json(path.read_text(encoding="utf-8"))
        except (ValidationError, OSError) as e:
            self.logger.warning(f"Ignoring unreadable install state {path}: {e}")
            return InstallationRecord()

    def _save_record(self, record: InstallationRecord) -> None:
        self.container_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.container_dir, prefix=f".{STATE_FILE}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record.model_dump(mode="json"), f, indent=2)
            os.replace(tmp, self._state_path())
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def _update_record(self, **changes) -> None:
        record = self.load_record().model_copy(update=changes)
        self._save_record(record)

    def _state(self, kind: ArtifactKind, recorded: InstallState, marker_present: bool) -> InstallState:
        target = self.container_dir / (RUNTIME_DIR if kind is ArtifactKind.RUNTIME else SERVER_DIR)
        if recorded is InstallState.COMPLETE and marker_present:
            return InstallState.COMPLETE
        if recorded is not InstallState.ABSENT or target.exists() or self._staging_dir(kind).exists():
            return InstallState.PARTIAL
        return InstallState.ABSENT

    def runtime_state(self) -> InstallState:
        """Return the installation state of the Java runtime."""
        marker = java_home(self.container_dir, self.platform)
        return self._state(ArtifactKind.RUNTIME, self.load_record().runtime, marker.is_dir())

    def server_state(self) -> InstallState:
        """Return the installation state of the language server."""
        try:
            marker_present = launcher_jar(self.container_dir).is_file()
        except InstallationError:
            marker_present = False
        return self._state(ArtifactKind.SERVER, self.load_record().server, marker_present)

    def installed_version(self) -> Optional[str]:
        """Return the server version written by the last successful install."""
        path = self.container_dir / VERSION_FILE
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8").strip() or None

    # Installation

    def _download_and_extract(self, url: str, kind: ArtifactKind) -> Path:
        """Download a ``.tar.gz`` archive and unpack it into a fresh staging directory."""
        staging = self._staging_dir(kind)
        if staging.exists():
            shutil.rmtree(staging)
        staging.mkdir(parents=True)

        try:
            with tempfile.TemporaryFile(dir=self.container_dir) as archive:
                self.client.download(url, archive)
                archive.seek(0)
                self.logger.info(f"Extracting {kind.value} archive into {staging}")
                with tarfile.open(fileobj=archive, mode="r:gz") as tar:
                    tar.extractall(staging, filter="data")
        except (tarfile.TarError, OSError, EOFError, zlib.error) as e:
            raise InstallationError(f"Failed to install {kind.value} from {url}: {e}") from e

        return staging

    def _clear(self, kind: ArtifactKind) -> None:
        target = self.container_dir / (RUNTIME_DIR if kind is ArtifactKind.RUNTIME else SERVER_DIR)
        for path in (target, self._staging_dir(kind)):
            if path.exists():
                self.logger.info(f"Removing incomplete {kind.value} files at {path}")
                shutil.rmtree(path)

    def install_runtime(self) -> None:
        """Download and unpack the Java runtime, replacing any partial copy."""
        url = runtime_url(self.platform)
        self._require_downloads()
        self.container_dir.mkdir(parents=True, exist_ok=True)
        self._clear(ArtifactKind.RUNTIME)
        self._update_record(runtime=InstallState.PARTIAL)

        staging = self._download_and_extract(url, ArtifactKind.RUNTIME)
        entries = list(staging.iterdir())
        root = entries[0] if len(entries) == 1 and entries[0].is_dir() else staging

        target = self.container_dir / RUNTIME_DIR
        try:
            root.rename(target)
            if staging.exists():
                shutil.rmtree(staging)
        except OSError as e:
            raise InstallationError(f"Failed to move runtime into {target}: {e}") from e

        if not java_home(self.container_dir, self.platform).is_dir():
            raise InstallationError(f"Runtime archive from {url} has no Java home for {self.platform}")

        self._update_record(runtime=InstallState.COMPLETE)
        self.logger.info(f"Installed Java runtime into {target}")

    def install_server(self, release: Optional[ResolvedRelease] = None) -> str:
        """Download and unpack the language server.

        The new tree is checked for a launcher before it replaces the
        installed one. An archive without a launcher leaves the existing
        server, its ``version.txt`` and its recorded state untouched.

        Args:
            release: Release to install. The latest one is resolved if omitted.

        Returns:
            The installed server version.
        """
        client = self.client
        if release is None:
            release = fetch_latest_release(client, self.settings.index_url)
        url = server_archive_url(client, release, self.settings.index_url)

        self.container_dir.mkdir(parents=True, exist_ok=True)
        staging = self._download_and_extract(url, ArtifactKind.SERVER)
        try:
            find_launcher(staging)
        except InstallationError:
            shutil.rmtree(staging, ignore_errors=True)
            raise

        target = self.container_dir / SERVER_DIR
        retired = self.container_dir / f"{STAGING_PREFIX}{ArtifactKind.SERVER.value}-old"
        self._update_record(server=InstallState.PARTIAL)
        try:
            if retired.exists():
                shutil.rmtree(retired)
            if target.exists():
                target.rename(retired)
            staging.rename(target)
            (self.container_dir / VERSION_FILE).write_text(release.version, encoding="utf-8")
        except OSError as e:
            raise InstallationError(f"Failed to move server into {target}: {e}") from e

        self._update_record(server=InstallState.COMPLETE, server_version=release.version)
        if retired.exists():
            shutil.rmtree(retired)
        self.logger.info(f"Installed JDT language server {release.version} into {target}")
        return release.version

    def ensure_installed(self, update: bool = False) -> LaunchSpec:
        """Make sure both artifacts are installed and return the launch spec.

        When both are already complete and ``update`` is false no network
        request is made.

        Args:
            update: Also check for a newer server release and install it.

        Returns:
            The command that starts the installed server.

        Raises:
            NetworkError: If the index, a detail page or an archive cannot be
                fetched, including an HTTP error status on an archive URL.
            InstallationError: If an archive cannot be unpacked, lacks the
                expected layout, or downloads are disabled. Callers that only
                care about failure can catch ``JavaLspError``, the base of both.
        """
        runtime = self.runtime_state()
        server = self.server_state()

        if runtime is not InstallState.COMPLETE:
            self.logger.info(f"Java runtime is {runtime.value}, installing")
            self.install_runtime()

        if server is InstallState.COMPLETE and not update:
            self.logger.debug(f"JDT language server already installed in {self.container_dir}")
        elif server is InstallState.COMPLETE:
            release = fetch_latest_release(self.client, self.settings.index_url)
            installed = self.installed_version()
            if release.version != installed:
                self.logger.info(f"Updating JDT language server from {installed} to {release.version}")
                self.install_server(release)
            else:
                self.logger.info(f"JDT language server {installed} is up to date")
        else:
            self.logger.info(f"JDT language server is {server.value}, installing")
            self.install_server()

        return self.launch_spec()

    # Launching

    def launch_spec(self) -> LaunchSpec:
        return build_launch_spec(
            self.container_dir,
            self.platform,
            max_heap=self.settings.max_heap,
            data_dir=self.settings.data_dir,
        )

    def cached_launch_spec(self) -> Optional[LaunchSpec]:
        """Return the launch spec if everything is installed, without any network access."""
        if self.runtime_state() is not InstallState.COMPLETE:
            return None
        if self.server_state() is not InstallState.COMPLETE:
            return None
        return self.launch_spec()
