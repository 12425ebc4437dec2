"""Java language server manager implementation."""

from javalsp.installer import JavaServerInstaller
from javalsp.launch import LaunchSpec
from javalsp.servers.base import BaseLanguageServerManager


class JavaLanguageServerManager(BaseLanguageServerManager):
    """Manages the Eclipse JDT language server."""

    @property
    def language(self) -> str:
        """Get the language managed by this server.

        Returns:
            The language name.
        """
        return "java"

    def __init__(self, workspace_path: str, installer: JavaServerInstaller, update: bool = False):
        """Initialize the Java language server manager.

        Args:
            workspace_path: Path to the workspace directory.
            installer: Installer owning the container directory.
            update: Check for a newer server release before starting.
        """
        super().__init__(workspace_path)
        self.installer = installer
        self.update = update

    def launch_spec(self) -> LaunchSpec:
        """Install the runtime and server if needed and return the launch spec.

        Returns:
            The launch spec of the installed server.
        """
        return self.installer.ensure_installed(update=self.update)
