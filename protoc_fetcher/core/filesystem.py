"""
Archive extraction for protoc release archives.

Extraction is written to be safe when several processes unpack the same
archive into the same directory at once:

- directories are created with ``exist_ok=True``
- every file is written to a temp file next to its destination and renamed
  over it, so a reader never sees a half-written file
- the archive is immutable, so whichever process renames last leaves the
  same content behind
"""

import io
import logging
import os
import shutil
import tempfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from protoc_fetcher.core.exceptions import ExtractionFailed

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"

# Used when the archive records no Unix permissions for a file
DEFAULT_FILE_MODE = 0o644

# Top-level directories of the release layout; never stripped as a wrapper
LAYOUT_DIRECTORIES = ("bin", "include")


def extract(
    data: bytes, target_dir: Union[str, Path], strip_root: bool = True
) -> Path:
    """
    Unpack a zip archive held in memory into ``target_dir``.

    If every member of the archive lives under one single wrapping directory
    and ``strip_root`` is true, that directory is dropped so its contents land
    directly in ``target_dir``.

    Args:
        data: Raw archive bytes
        target_dir: Destination directory (created if absent)
        strip_root: Whether to flatten a single top-level directory

    Returns:
        The destination directory

    Raises:
        ExtractionFailed: If the data is not a valid zip archive, a member
            escapes the destination, or writing fails

    Example:
        >>> extract(archive_bytes, Path("out/protoc-fetcher/protoc-28.0-linux-x86_64"))
    """
    target_dir = Path(target_dir)

    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as e:
        raise ExtractionFailed(
            f"Downloaded data is not a valid zip archive: {e}", target_dir
        ) from e

    try:
        target_dir.mkdir(parents=True, exist_ok=True)

        with archive:
            members = archive.infolist()
            root = _common_root(members) if strip_root else None
            if root:
                logger.debug(f"Stripping top-level archive directory: {root}")

            for info in members:
                relative = _member_path(info.filename, root)
                if relative is None:
                    continue

                _validate_archive_path(relative, target_dir)
                destination = target_dir.joinpath(*relative.parts)

                if info.is_dir():
                    destination.mkdir(parents=True, exist_ok=True)
                    continue

                destination.parent.mkdir(parents=True, exist_ok=True)
                _write_member(archive, info, destination)

    except ExtractionFailed:
        raise
    except Exception as e:
        raise ExtractionFailed(
            f"Failed to extract archive into {target_dir}: {e}", target_dir
        ) from e

    logger.info(f"Extracted archive into {target_dir}")
    return target_dir


def _common_root(members: list[zipfile.ZipInfo]) -> Optional[str]:
    """
    Return the single wrapping top-level directory shared by all members.

    Directories that are part of the release layout itself (``bin``,
    ``include``) are never returned, so a bin-only archive keeps
    ``bin/protoc`` in place.
    """
    roots = set()

    for info in members:
        name = info.filename.replace("\\", "/")
        parts = PurePosixPath(name).parts
        if not parts:
            continue

        # A file at the top level means there is nothing to strip
        if len(parts) == 1 and not info.is_dir():
            return None

        roots.add(parts[0])

    if len(roots) == 1:
        root = roots.pop()
        if root not in LAYOUT_DIRECTORIES:
            return root
    return None


def _member_path(filename: str, root: Optional[str]) -> Optional[PurePosixPath]:
    """Map an archive member name to its path relative to the destination."""
    parts = PurePosixPath(filename.replace("\\", "/")).parts

    if root is not None:
        parts = parts[1:]

    if not parts:
        return None
    return PurePosixPath(*parts)


def _validate_archive_path(relative: PurePosixPath, destination: Path) -> None:
    """
    Refuse members that would land outside the destination.

    Raises:
        ExtractionFailed: If the member is absolute or uses '..'
    """
    if relative.is_absolute() or ".." in relative.parts:
        raise ExtractionFailed(
            f"Archive member '{relative}' attempts directory traversal; "
            "extraction has been blocked.",
            destination,
        )

    member_path = destination.joinpath(*relative.parts).resolve()
    if not member_path.is_relative_to(destination.resolve()):
        raise ExtractionFailed(
            f"Archive member '{relative}' resolves outside {destination}; "
            "extraction has been blocked.",
            destination,
        )


def _write_member(
    archive: zipfile.ZipFile, info: zipfile.ZipInfo, destination: Path
) -> None:
    """Write one member via temp file + rename, restoring its Unix mode."""
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        with open(temp_fd, "wb") as out, archive.open(info) as src:
            shutil.copyfileobj(src, out)

        if not IS_WINDOWS:
            mode = (info.external_attr >> 16) & 0o777
            temp_path.chmod(mode or DEFAULT_FILE_MODE)

        _replace(temp_path, destination)

    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def _replace(source: Path, destination: Path) -> None:
    """Atomically move ``source`` over ``destination``."""
    try:
        os.replace(source, destination)
    except PermissionError:
        # Windows refuses to replace a binary another process is running.
        # That copy came from the same archive, so keep it.
        if IS_WINDOWS and destination.is_file():
            logger.debug(f"Destination in use, keeping existing file: {destination}")
            source.unlink(missing_ok=True)
            return
        raise


__all__ = ["extract", "IS_WINDOWS", "DEFAULT_FILE_MODE", "LAYOUT_DIRECTORIES"]
