"""
On-disk layout of installed protoc releases.

Each release lives in its own entry directory::

    <install_root>/protoc-fetcher/<release_name>/
        bin/protoc          (bin/protoc.exe on Windows)
        include/...
        readme.txt

An entry counts as installed purely by the presence of the binary; no
registry, manifest or checksum is kept. Every call re-derives state from disk.
"""

import logging
import os
import stat
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from protoc_fetcher.core.exceptions import MissingBinaryInArchive
from protoc_fetcher.core.platform import PlatformKey

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "protoc-fetcher"
BINARY_NAME = "protoc"

_EXECUTE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def binary_relative_path(platform_key: Optional[PlatformKey] = None) -> PurePosixPath:
    """
    Get the fixed location of the binary inside an entry.

    Args:
        platform_key: Platform the entry was installed for. If None, the
            running interpreter's OS decides.
    """
    if platform_key is not None:
        windows = platform_key.is_windows
    else:
        windows = os.name == "nt"

    name = f"{BINARY_NAME}.exe" if windows else BINARY_NAME
    return PurePosixPath("bin") / name


def entry_path(install_root: Union[str, Path], release_name: str) -> Path:
    """Get the entry directory for a release under ``install_root``."""
    return Path(install_root) / CACHE_NAMESPACE / release_name


def binary_path(entry: Path, platform_key: Optional[PlatformKey] = None) -> Path:
    """Get the binary path inside an entry directory."""
    return Path(entry).joinpath(*binary_relative_path(platform_key).parts)


def is_installed(entry: Path, platform_key: Optional[PlatformKey] = None) -> bool:
    """Check whether the entry holds a binary at the fixed relative path."""
    return binary_path(entry, platform_key).is_file()


def finalize(
    entry: Path,
    extracted_root: Optional[Path] = None,
    platform_key: Optional[PlatformKey] = None,
) -> Path:
    """
    Confirm an extracted archive produced a usable entry.

    Args:
        entry: Entry directory the archive was extracted for
        extracted_root: Directory actually populated by extraction
            (defaults to ``entry``)
        platform_key: Platform the entry was installed for

    Returns:
        Path to the binary

    Raises:
        MissingBinaryInArchive: If the binary is not at the fixed relative path
    """
    root = Path(extracted_root) if extracted_root is not None else Path(entry)
    protoc_path = binary_path(root, platform_key)

    if not protoc_path.is_file():
        raise MissingBinaryInArchive(protoc_path)

    if os.name != "nt":
        _ensure_executable(protoc_path)

    logger.info(f"protoc installed successfully: {protoc_path}")
    return protoc_path


def _ensure_executable(path: Path) -> None:
    """Add execute bits when the archive did not record them."""
    mode = path.stat().st_mode
    if mode & _EXECUTE_BITS != _EXECUTE_BITS:
        path.chmod(mode | _EXECUTE_BITS)
        logger.debug(f"Marked as executable: {path}")


__all__ = [
    "CACHE_NAMESPACE",
    "BINARY_NAME",
    "binary_relative_path",
    "entry_path",
    "binary_path",
    "is_installed",
    "finalize",
]
