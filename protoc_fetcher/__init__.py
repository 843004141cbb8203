"""
protoc-fetcher: download official Protocol Buffers compiler (protoc) releases,
pegged to the version of your choice.

Usage:
    from protoc_fetcher import install

    protoc_path = install("28.0", out_dir)
"""

from protoc_fetcher.config import FetcherConfig, ConfigError, load_config
from protoc_fetcher.core.exceptions import (
    ProtocFetcherError,
    UnsupportedPlatform,
    NetworkError,
    DownloadFailed,
    ExtractionFailed,
    MissingBinaryInArchive,
    ExecutionFailed,
    EntryLockTimeout,
)
from protoc_fetcher.installer import Installer, InstallResult, install, protoc

__version__ = "0.1.1"

__all__ = [
    "install",
    "protoc",
    "Installer",
    "InstallResult",
    "FetcherConfig",
    "ConfigError",
    "load_config",
    "ProtocFetcherError",
    "UnsupportedPlatform",
    "NetworkError",
    "DownloadFailed",
    "ExtractionFailed",
    "MissingBinaryInArchive",
    "ExecutionFailed",
    "EntryLockTimeout",
]
