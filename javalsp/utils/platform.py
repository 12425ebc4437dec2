"""Host platform detection."""

import enum
import platform
from dataclasses import dataclass
from typing import Optional

from javalsp.errors import UnsupportedPlatformError


class Arch(str, enum.Enum):
    """CPU architectures javalsp knows about."""

    X86_64 = "x86_64"
    AARCH64 = "aarch64"


class OperatingSystem(str, enum.Enum):
    """Operating systems javalsp knows about."""

    MACOS = "macos"
    LINUX = "linux"
    WINDOWS = "windows"


_MACHINE_ALIASES = {
    "x86_64": Arch.X86_64,
    "amd64": Arch.X86_64,
    "aarch64": Arch.AARCH64,
    "arm64": Arch.AARCH64,
}

_SYSTEM_ALIASES = {
    "darwin": OperatingSystem.MACOS,
    "linux": OperatingSystem.LINUX,
    "windows": OperatingSystem.WINDOWS,
}


@dataclass(frozen=True)
class PlatformKey:
    """The (architecture, operating system) pair used to pick artifacts."""

    arch: Arch
    os: OperatingSystem

    def __str__(self) -> str:
        return f"{self.os.value}-{self.arch.value}"

    @classmethod
    def detect(cls, machine: Optional[str] = None, system: Optional[str] = None) -> "PlatformKey":
        """Build the key for the running host.

        Args:
            machine: Override for ``platform.machine()``.
            system: Override for ``platform.system()``.

        Returns:
            The detected platform key.

        Raises:
            UnsupportedPlatformError: If the architecture or OS is unknown.
        """
        machine = (machine if machine is not None else platform.machine()).lower()
        system = (system if system is not None else platform.system()).lower()

        arch = _MACHINE_ALIASES.get(machine)
        if arch is None:
            raise UnsupportedPlatformError(f"Unsupported CPU architecture: {machine!r}")

        os_key = _SYSTEM_ALIASES.get(system)
        if os_key is None:
            raise UnsupportedPlatformError(f"Unsupported operating system: {system!r}")

        return cls(arch=arch, os=os_key)
