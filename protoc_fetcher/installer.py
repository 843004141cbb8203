"""
protoc install-or-reuse workflow.

This module sequences the cache check, download, extraction and version check
that turn a version string into the path of a runnable protoc binary.
"""

import logging
import subprocess
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from protoc_fetcher.config import FetcherConfig
from protoc_fetcher.core import cache
from protoc_fetcher.core.download import download
from protoc_fetcher.core.exceptions import ExecutionFailed
from protoc_fetcher.core.filesystem import extract
from protoc_fetcher.core.locking import entry_lock
from protoc_fetcher.core.platform import PlatformKey, resolve
from protoc_fetcher.core.release import build_archive_url, build_release_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallResult:
    """Result of an install operation."""

    binary_path: Path
    """Path to the protoc executable"""

    release_name: str
    """Upstream release name, e.g. 'protoc-28.0-linux-x86_64'"""

    entry_path: Path
    """Cache entry directory holding the release"""

    was_cached: bool
    """Whether the release was already installed (no download performed)"""

    version_output: str
    """Output of 'protoc --version'"""


class Installer:
    """
    Installs protoc releases into a caller-chosen directory.

    The workflow is a single hit/miss branch:
    1. Resolve the platform and the release name
    2. If the binary is already present, reuse it
    3. Otherwise download the archive, extract it into the entry and check
       the binary is where it should be
    4. Run 'protoc --version' to confirm the binary works

    Nothing is retried and nothing is cleaned up on failure; errors reach the
    caller unchanged.

    Example:
        >>> installer = Installer()
        >>> protoc_path = installer.install("28.0", Path("build/out"))
        >>> print(f"protoc at: {protoc_path}")
    """

    def __init__(self, config: Optional[FetcherConfig] = None):
        """
        Initialize installer.

        Args:
            config: Optional settings. If None, defaults are used.
        """
        self.config = config or FetcherConfig()

    def install(self, version: str, install_root: Union[str, Path]) -> Path:
        """
        Install protoc ``version`` under ``install_root`` and return its path.

        Raises:
            ValueError: If version is empty or 'v'-prefixed
            UnsupportedPlatform: If no release exists for this platform
            NetworkError: On transport failure
            DownloadFailed: If the release host answers with a non-2xx status
            ExtractionFailed: If the archive cannot be unpacked
            MissingBinaryInArchive: If the archive has no bin/protoc
            ExecutionFailed: If the binary cannot report its version
            EntryLockTimeout: If locking is enabled and times out
        """
        return self.install_detailed(version, install_root).binary_path

    def install_detailed(
        self, version: str, install_root: Union[str, Path]
    ) -> InstallResult:
        """Same as install(), but returns an InstallResult."""
        _validate_version(version)

        platform_key = resolve()
        release_name = build_release_name(version, platform_key)
        entry = cache.entry_path(install_root, release_name)
        protoc_path = cache.binary_path(entry, platform_key)

        logger.debug(f"Release {release_name}, entry {entry}")

        if cache.is_installed(entry, platform_key):
            logger.info("protoc with correct version is already installed.")
            was_cached = True
        else:
            logger.info(f"protoc v{version} not found, downloading...")
            was_cached = self._populate(version, release_name, entry, platform_key)

        version_output = get_protoc_version(
            protoc_path, timeout=self.config.version_timeout
        )
        logger.info(f"`protoc --version`: {version_output}")

        return InstallResult(
            binary_path=protoc_path,
            release_name=release_name,
            entry_path=entry,
            was_cached=was_cached,
            version_output=version_output,
        )

    def _populate(
        self,
        version: str,
        release_name: str,
        entry: Path,
        platform_key: PlatformKey,
    ) -> bool:
        """
        Download and extract a release into its entry.

        Returns:
            True if another process installed the entry while we waited for
            the lock, False if this call did the work
        """
        if self.config.use_lock:
            guard = entry_lock(entry, timeout=self.config.lock_timeout)
        else:
            guard = nullcontext()

        with guard:
            # Another process may have finished while we waited for the lock
            if self.config.use_lock and cache.is_installed(entry, platform_key):
                logger.info(f"protoc installed by another process: {entry}")
                return True

            archive_url = build_archive_url(release_name, version)
            logger.info(f"Release URL: {archive_url}")

            data = download(archive_url, timeout=self.config.download_timeout)

            entry.mkdir(parents=True, exist_ok=True)
            extract(data, entry)
            cache.finalize(entry, platform_key=platform_key)

        return False


def get_protoc_version(protoc_path: Path, timeout: Optional[float] = 30.0) -> str:
    """
    Run ``protoc --version`` and return its output.

    Args:
        protoc_path: Path to the binary
        timeout: Maximum seconds to wait

    Returns:
        Standard output, stripped (e.g. 'libprotoc 28.0')

    Raises:
        ExecutionFailed: If the binary can't be started, times out, or exits
            with a non-zero status
    """
    try:
        result = subprocess.run(
            [str(protoc_path), "--version"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise ExecutionFailed(protoc_path, f"timed out after {timeout}s") from e
    except OSError as e:
        raise ExecutionFailed(protoc_path, str(e)) from e

    if result.returncode != 0:
        detail = result.stderr.strip() or result.stdout.strip()
        reason = f"exited with status {result.returncode}"
        if detail:
            reason += f": {detail}"
        raise ExecutionFailed(protoc_path, reason)

    return result.stdout.strip()


def _validate_version(version: str) -> None:
    if not version or not version.strip():
        raise ValueError("Version cannot be empty")
    if version.startswith("v"):
        raise ValueError(
            f"Version '{version}' must not be prefixed with 'v' (use '{version[1:]}')"
        )


def install(
    version: str,
    install_root: Union[str, Path],
    config: Optional[FetcherConfig] = None,
) -> Path:
    """
    Download an official protoc release and return the path to the binary.

    The release archive matching ``version`` is downloaded and unpacked into a
    subdirectory of ``install_root``. Choose a version from
    https://github.com/protocolbuffers/protobuf/releases, for example "28.0",
    without a 'v' prefix. A previously installed binary of the same version
    is reused.

    The caller decides what to do with the path, typically exporting it as
    ``PROTOC`` for a code generator.

    Example:
        >>> from protoc_fetcher import install
        >>> protoc_path = install("28.0", Path("build"))
        >>> os.environ["PROTOC"] = str(protoc_path)
    """
    return Installer(config).install(version, install_root)


# Name of the original entry point
protoc = install


__all__ = [
    "Installer",
    "InstallResult",
    "install",
    "protoc",
    "get_protoc_version",
]
