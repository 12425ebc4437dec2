"""Command line of an installed JDT language server."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Union

from javalsp.artifacts import platform_profile
from javalsp.errors import InstallationError
from javalsp.utils.platform import PlatformKey

RUNTIME_DIR = "jdk"
SERVER_DIR = "server"
LAUNCHER_GLOB = "org.eclipse.equinox.launcher_*.jar"

PathLike = Union[str, Path]


@dataclass(frozen=True)
class LaunchSpec:
    """Executable and argument vector that start the server."""

    executable: Path
    arguments: Tuple[str, ...]

    def command(self) -> List[str]:
        """Return the full argv, executable first."""
        return [str(self.executable), *self.arguments]


def java_home(container_dir: PathLike, platform: PlatformKey) -> Path:
    home = Path(container_dir) / RUNTIME_DIR
    relative = platform_profile(platform).java_home
    return home / relative if relative else home


def java_executable(container_dir: PathLike, platform: PlatformKey) -> Path:
    return java_home(container_dir, platform) / "bin" / "java"


def find_launcher(server_dir: PathLike) -> Path:
    """Locate the Equinox launcher inside an unpacked server distribution.

    Args:
        server_dir: Root of the distribution, the directory holding ``plugins``.

    Raises:
        InstallationError: If the distribution has no launcher jar.
    """
    plugins = Path(server_dir) / "plugins"
    candidates = sorted(plugins.glob(LAUNCHER_GLOB))
    if not candidates:
        raise InstallationError(f"No Equinox launcher found in {plugins}")
    return candidates[-1]


def launcher_jar(container_dir: PathLike) -> Path:
    """Locate the launcher of the server installed in ``container_dir``."""
    return find_launcher(Path(container_dir) / SERVER_DIR)


def configuration_dir(container_dir: PathLike, platform: PlatformKey) -> Path:
    return Path(container_dir) / SERVER_DIR / platform_profile(platform).config_dir


def build_launch_spec(
    container_dir: PathLike,
    platform: PlatformKey,
    max_heap: str = "1G",
    data_dir: str = ".",
) -> LaunchSpec:
    """Assemble the command that starts the installed server.

    The order of the arguments matters to the launched JVM and is kept exactly
    as listed here.

    Args:
        container_dir: Root of the installation.
        platform: Platform the server runs on.
        max_heap: Value of the ``-Xmx`` flag.
        data_dir: Workspace data directory handed to ``-data``.

    Returns:
        The launch spec.

    Raises:
        UnsupportedPlatformError: If ``platform`` is not supported.
        InstallationError: If the server launcher is missing.
    """
    executable = java_executable(container_dir, platform)
    config = configuration_dir(container_dir, platform)
    jar = launcher_jar(container_dir)

    arguments = (
        "-jar",
        str(jar),
        "-Declipse.application=org.eclipse.jdt.ls.core.id1",
        "-Dosgi.bundles.defaultStartLevel=4",
        "-Dosgi.checkConfiguration=true",
        "-Declipse.product=org.eclipse.jdt.ls.core.product",
        "-Dosgi.sharedConfiguration.area.readOnly=true",
        "-Dosgi.configuration.cascaded=true",
        f"-Xmx{max_heap}",
        "--add-modules=ALL-SYSTEM",
        "--add-opens=java.base/java.util=ALL-UNNAMED",
        "--add-opens=java.base/java.lang=ALL-UNNAMED",
        "-configuration",
        str(config),
        "-data",
        data_dir,
    )
    return LaunchSpec(executable=executable, arguments=arguments)
