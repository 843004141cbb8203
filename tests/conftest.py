"""
Pytest configuration and shared fixtures for protoc-fetcher tests.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from protoc_fetcher.core.platform import PlatformKey
from protoc_fetcher.core.release import build_archive_url, build_release_name
from tests.utils.archives import make_protoc_archive


TEST_VERSION = "28.0"
TEST_PLATFORM = PlatformKey("linux", "x86_64")


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_platform(monkeypatch) -> PlatformKey:
    """Pin platform resolution in the installer to linux-x86_64."""
    monkeypatch.setattr("protoc_fetcher.installer.resolve", lambda: TEST_PLATFORM)
    return TEST_PLATFORM


@pytest.fixture
def release_name() -> str:
    """Release name of the test version on the pinned platform."""
    return build_release_name(TEST_VERSION, TEST_PLATFORM)


@pytest.fixture
def archive_url(release_name) -> str:
    """Archive URL of the test release."""
    return build_archive_url(release_name, TEST_VERSION)


@pytest.fixture
def protoc_archive() -> bytes:
    """Zip archive laid out like an upstream protoc release."""
    return make_protoc_archive(TEST_VERSION)
