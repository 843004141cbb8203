"""
Centralized exception hierarchy for protoc-fetcher.

Every failure of the install workflow is reported with one of these
exceptions. None of them is retried internally; callers decide whether to
call ``install()`` again, abort the build, or report to a human.
"""

from pathlib import Path
from typing import Optional


# ============================================================================
# Base Exception
# ============================================================================


class ProtocFetcherError(Exception):
    """Base exception for all protoc-fetcher errors."""

    pass


# ============================================================================
# Platform Exceptions
# ============================================================================


class UnsupportedPlatform(ProtocFetcherError):
    """Raised when no upstream protoc release exists for this OS/architecture."""

    def __init__(self, os_name: str, arch: str):
        self.os_name = os_name
        self.arch = arch
        super().__init__(
            f"Unsupported platform for protoc releases: {os_name}-{arch}"
        )


# ============================================================================
# Download Exceptions
# ============================================================================


class NetworkError(ProtocFetcherError):
    """Raised on transport-level failures (DNS, refused connection, timeout)."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Network error while downloading {url}: {reason}")


class DownloadFailed(ProtocFetcherError):
    """Raised when the release host answers with a non-success status."""

    # Keep messages readable when the host returns a whole HTML page
    MAX_BODY_IN_MESSAGE = 500

    def __init__(self, url: str, status: int, body: str = ""):
        self.url = url
        self.status = status
        self.body = body

        msg = f"Error downloading release archive {url}: HTTP {status}"
        if body:
            snippet = body.strip()
            if len(snippet) > self.MAX_BODY_IN_MESSAGE:
                snippet = snippet[: self.MAX_BODY_IN_MESSAGE] + "..."
            msg += f" {snippet}"
        super().__init__(msg)


# ============================================================================
# Installation Exceptions
# ============================================================================


class ExtractionFailed(ProtocFetcherError):
    """Raised when the downloaded bytes cannot be unpacked."""

    def __init__(self, message: str, target_dir: Optional[Path] = None):
        self.target_dir = target_dir
        super().__init__(message)


class MissingBinaryInArchive(ProtocFetcherError):
    """Raised when the archive extracted fine but has no bin/protoc."""

    def __init__(self, expected_path: Path):
        self.expected_path = expected_path
        super().__init__(
            f"Extracted protoc archive, but could not find {expected_path}. "
            "The release layout may have changed or the version may not exist."
        )


class ExecutionFailed(ProtocFetcherError):
    """Raised when the installed binary cannot report its version."""

    def __init__(self, binary_path: Path, reason: str):
        self.binary_path = binary_path
        self.reason = reason
        super().__init__(f"Failed to run '{binary_path} --version': {reason}")


class EntryLockTimeout(ProtocFetcherError):
    """Raised when the optional install lock cannot be acquired in time."""

    def __init__(self, entry_path: Path, timeout: float):
        self.entry_path = entry_path
        self.timeout = timeout
        super().__init__(
            f"Could not acquire install lock for {entry_path} after {timeout}s. "
            "Another process may be downloading this protoc release."
        )


__all__ = [
    "ProtocFetcherError",
    "UnsupportedPlatform",
    "NetworkError",
    "DownloadFailed",
    "ExtractionFailed",
    "MissingBinaryInArchive",
    "ExecutionFailed",
    "EntryLockTimeout",
]
