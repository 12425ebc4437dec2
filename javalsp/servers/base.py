"""Base language server manager interface."""

import abc
import logging
import os
import subprocess
from typing import Optional

from javalsp.launch import LaunchSpec


class BaseLanguageServerManager(abc.ABC):
    """Abstract base class for language server managers.

    A manager owns one server subprocess. Speaking the language server
    protocol over its pipes is left to the host application.
    """

    def __init__(self, workspace_path: str):
        """Initialize the language server manager.

        Args:
            workspace_path: Path to the workspace directory.
        """
        self.workspace_path = os.path.abspath(workspace_path)
        self.logger = logging.getLogger(f"javalsp.servers.{self.language}")
        self.server_process: Optional[subprocess.Popen] = None

    @property
    @abc.abstractmethod
    def language(self) -> str:
        """Get the language managed by this server.

        Returns:
            The language name.
        """
        pass

    @abc.abstractmethod
    def launch_spec(self) -> LaunchSpec:
        """Return the command that starts the server."""
        pass

    def start(self) -> None:
        """Start the language server process.

        stdin and stdout are pipes carrying the LSP stream and the host must
        keep reading ``server_process.stdout``. stderr is inherited so server
        logs never fill an undrained pipe.
        """
        if self.is_running():
            self.logger.info(f"{self.language} language server is already running")
            return

        command = self.launch_spec().command()
        self.logger.info(f"Starting {self.language} language server with command: {' '.join(command)}")
        try:
            self.server_process = subprocess.Popen(
                command,
                cwd=self.workspace_path,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=None,
                bufsize=0
            )
        except OSError as e:
            self.logger.error(f"Failed to start {self.language} language server: {e}")
            raise
        self.logger.info(f"{self.language} language server started (pid {self.server_process.pid})")

    def stop(self) -> None:
        """Stop the language server process."""
        if self.server_process and self.server_process.poll() is None:
            self.logger.info(f"Stopping {self.language} language server")
            try:
                self.server_process.terminate()
                self.server_process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self.logger.warning(f"{self.language} language server did not terminate, forcing kill")
                self.server_process.kill()
                self.server_process.wait()

        self.server_process = None

    def is_running(self) -> bool:
        """Check if the language server is running.

        Returns:
            True if the server is running, False otherwise.
        """
        return self.server_process is not None and self.server_process.poll() is None
