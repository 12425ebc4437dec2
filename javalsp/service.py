#!/usr/bin/env python3
"""Main service module for javalsp.

This module ties the installer and the server process manager together behind
one object that entry points and host applications can use.
"""

import logging
import os
import time
from typing import Dict, Optional

import click

from javalsp.config import InstallerSettings
from javalsp.errors import JavaLspError
from javalsp.installer import JavaServerInstaller
from javalsp.launch import LaunchSpec
from javalsp.resolver import fetch_latest_release
from javalsp.servers.java_server import JavaLanguageServerManager
from javalsp.utils.http import IndexClient
from javalsp.utils.platform import PlatformKey


class JavaLanguageService:
    """Installs, inspects and runs the Java language server."""

    def __init__(
        self,
        settings: Optional[InstallerSettings] = None,
        client: Optional[IndexClient] = None,
        platform: Optional[PlatformKey] = None,
    ):
        """Initialize the service.

        Args:
            settings: Installer settings. Defaults to the environment.
            client: Index client shared by every network operation.
            platform: Target platform. Defaults to the running host.
        """
        self.settings = settings or InstallerSettings.from_env()
        self.installer = JavaServerInstaller(self.settings, client=client, platform=platform)
        self.logger = logging.getLogger("javalsp")
        self.manager: Optional[JavaLanguageServerManager] = None

        self.logger.info(f"Initialized javalsp for container: {self.settings.container_dir}")

    def close(self) -> None:
        self.stop()
        self.installer.close()

    def latest_version(self) -> str:
        """Resolve the latest server release available upstream.

        Returns:
            The latest version string.
        """
        return fetch_latest_release(self.installer.client, self.settings.index_url).version

    def install(self, update: bool = False) -> LaunchSpec:
        """Install whatever is missing.

        Args:
            update: Also replace the server if a newer release exists.

        Returns:
            The launch spec of the installed server.
        """
        return self.installer.ensure_installed(update=update)

    def launch_spec(self) -> Optional[LaunchSpec]:
        """Return the launch spec of a complete installation, or None."""
        return self.installer.cached_launch_spec()

    def status(self) -> Dict[str, Optional[str]]:
        """Describe the installation.

        Returns:
            Dictionary with the state of each artifact and the installed version.
        """
        return {
            "container": str(self.settings.container_dir),
            "platform": str(self.installer.platform),
            "runtime": self.installer.runtime_state().value,
            "server": self.installer.server_state().value,
            "version": self.installer.installed_version(),
        }

    def start(self, workspace_path: str, update: bool = False) -> JavaLanguageServerManager:
        """Install if needed and start the server in ``workspace_path``.

        Args:
            workspace_path: Directory the server process runs in.
            update: Check for a newer server release first.

        Returns:
            The manager of the running server.
        """
        if not os.path.isdir(workspace_path):
            raise ValueError(f"Workspace path is not a directory: {workspace_path}")

        self.stop()
        self.manager = JavaLanguageServerManager(workspace_path, self.installer, update=update)
        self.manager.start()
        return self.manager

    def stop(self) -> None:
        if self.manager is not None:
            self.manager.stop()
            self.manager = None


@click.command()
@click.option("--workspace", required=True, help="Path to the workspace directory")
@click.option("--container", default=None, help="Installation directory (default: ~/.javalsp/jdtls)")
@click.option("--update/--no-update", default=False, help="Check for a newer server release first")
@click.option("--debug/--no-debug", default=False, help="Enable debug logging")
def main(workspace: str, container: Optional[str], update: bool, debug: bool) -> None:
    """Install the Java language server if needed and run it.

    Args:
        workspace: Path to the workspace directory.
        container: Installation directory override.
        update: Whether to check for a newer server release.
        debug: Whether to enable debug logging.
    """
    # Configure logging
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    service = JavaLanguageService(InstallerSettings.from_env(container_dir=container))
    try:
        manager = service.start(workspace, update=update)
        click.echo(f"Java language server started for workspace: {workspace}")
        # Keep the service running until Ctrl+C
        click.echo("Press Ctrl+C to stop the service")
        while manager.is_running():
            time.sleep(1)
        click.echo("Java language server exited")
    except KeyboardInterrupt:
        click.echo("Stopping service...")
    except JavaLspError as e:
        raise click.ClickException(str(e)) from e
    finally:
        service.close()
        click.echo("Service stopped")


if __name__ == "__main__":
    main()  # pylint: disable=no-value-for-parameter
