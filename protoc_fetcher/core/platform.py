"""
Platform resolution for protoc releases.

Maps the running operating system and CPU architecture to the suffix the
protobuf project uses in its release archive names, e.g.:

- linux 64-bit: protoc-28.0-linux-x86_64.zip
- macOS ARM: protoc-28.0-osx-aarch_64.zip
- windows 32-bit: protoc-28.0-win32.zip

Detection is recomputed on every call; there is no process-wide cache.

Usage:
    from protoc_fetcher.core.platform import resolve

    key = resolve()
    print(f"Release suffix: {key.release_suffix}")
"""

import logging
import platform
import struct
from dataclasses import dataclass
from typing import Optional

from protoc_fetcher.core.exceptions import UnsupportedPlatform

logger = logging.getLogger(__name__)


# (os, arch) -> upstream release suffix
_RELEASE_SUFFIXES = {
    ("linux", "x86_64"): "linux-x86_64",
    ("linux", "aarch64"): "linux-aarch_64",
    ("linux", "x86"): "linux-x86_32",
    ("linux", "ppc64le"): "linux-ppcle_64",
    ("linux", "s390x"): "linux-s390_64",
    ("macos", "x86_64"): "osx-x86_64",
    ("macos", "aarch64"): "osx-aarch_64",
    ("windows", "x86_64"): "win64",
    ("windows", "x86"): "win32",
}


@dataclass(frozen=True)
class PlatformKey:
    """
    Operating system family and CPU architecture of the running process.

    Attributes:
        os: Operating system ('linux', 'macos', 'windows')
        arch: Normalized architecture ('x86_64', 'aarch64', 'x86', 'ppc64le', 's390x')
    """

    os: str
    arch: str

    @property
    def release_suffix(self) -> str:
        """
        Suffix used by upstream protoc release names.

        Raises:
            UnsupportedPlatform: If no release is published for this key

        Example:
            >>> PlatformKey("macos", "aarch64").release_suffix
            'osx-aarch_64'
        """
        try:
            return _RELEASE_SUFFIXES[(self.os, self.arch)]
        except KeyError:
            raise UnsupportedPlatform(self.os, self.arch) from None

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    def __str__(self) -> str:
        return f"{self.os}-{self.arch}"


def resolve(
    system: Optional[str] = None,
    machine: Optional[str] = None,
    pointer_bits: Optional[int] = None,
) -> PlatformKey:
    """
    Resolve the platform key of the running process.

    Arguments default to the values reported by the interpreter; passing them
    explicitly simulates another host.

    Args:
        system: OS name as reported by platform.system() (e.g. 'Linux', 'Darwin')
        machine: Machine name as reported by platform.machine() (e.g. 'x86_64', 'arm64')
        pointer_bits: Pointer width of the interpreter (32 or 64)

    Returns:
        PlatformKey for which an upstream release exists

    Raises:
        UnsupportedPlatform: If the OS/architecture pair has no published release
    """
    if system is None:
        system = platform.system()
    if machine is None:
        machine = platform.machine()
    if pointer_bits is None:
        pointer_bits = struct.calcsize("P") * 8

    os_name = _normalize_os(system)

    # Windows releases are picked by interpreter bitness, not by CPU
    if os_name == "windows":
        arch = "x86_64" if pointer_bits == 64 else "x86"
    else:
        arch = _normalize_architecture(machine)

    key = PlatformKey(os=os_name, arch=arch)
    if not is_supported_platform(key):
        raise UnsupportedPlatform(os_name, arch)

    logger.debug(f"Detected platform {key} ({key.release_suffix})")
    return key


def _normalize_os(system: str) -> str:
    """Normalize an OS name to 'linux', 'macos', 'windows' or itself lowercased."""
    system = system.lower()

    if system == "linux":
        return "linux"
    elif system == "darwin":
        return "macos"
    elif system == "windows" or system.startswith(("cygwin", "msys", "mingw")):
        return "windows"
    else:
        return system


def _normalize_architecture(machine: str) -> str:
    """Normalize a machine name; unknown names are returned lowercased."""
    machine = machine.lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x86_64"
    elif machine in ("aarch64", "arm64", "aarch64_be"):
        return "aarch64"
    elif machine in ("i386", "i486", "i586", "i686", "x86"):
        return "x86"
    elif machine in ("ppc64le", "powerpc64le"):
        return "ppc64le"
    elif machine == "s390x":
        return "s390x"
    else:
        return machine


def is_supported_platform(key: PlatformKey) -> bool:
    """Check whether upstream publishes a protoc release for ``key``."""
    return (key.os, key.arch) in _RELEASE_SUFFIXES


def get_supported_platforms() -> list[PlatformKey]:
    """
    Get every platform key with a published protoc release.

    Example:
        >>> [str(k) for k in get_supported_platforms()][:2]
        ['linux-x86_64', 'linux-aarch64']
    """
    return [PlatformKey(os=os_name, arch=arch) for os_name, arch in _RELEASE_SUFFIXES]


__all__ = [
    "PlatformKey",
    "resolve",
    "is_supported_platform",
    "get_supported_platforms",
]
