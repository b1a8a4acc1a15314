"""
Archive engine for the tar snapshot method.

Writes the contents of a source directory into a tar archive, optionally
gzip-compressed, with entries named relative to the source root.
"""

import logging
import os
import tarfile
from pathlib import Path
from typing import Optional

from dirsnap.errors import ArchiveError, SnapshotExistsError
from .exclusions import ExcludeMatcher

logger = logging.getLogger(__name__)


def create_archive(
    source_dir: Path,
    archive_path: Path,
    compress: bool = True,
    matcher: Optional[ExcludeMatcher] = None
) -> Path:
    """
    Archive the contents of a directory.

    The archive is opened in exclusive-create mode so an existing file is
    never overwritten. A partially written archive is left in place on
    failure.

    Args:
        source_dir: Directory whose contents are archived
        archive_path: Full path of the archive to create
        compress: Gzip-compress the archive
        matcher: Exclusion matcher (optional)

    Returns:
        Path to the created archive

    Raises:
        SnapshotExistsError: If archive_path already exists
        ArchiveError: If the archive cannot be written
    """
    source_dir = Path(source_dir)
    archive_path = Path(archive_path)
    matcher = matcher or ExcludeMatcher()
    mode = 'x:gz' if compress else 'x'

    def exclude_filter(tarinfo: tarfile.TarInfo) -> Optional[tarfile.TarInfo]:
        # Never archive the archive itself when the destination lives under the source
        if (source_dir / tarinfo.name).absolute() == archive_path.absolute():
            return None
        if matcher.matches(tarinfo.name, is_dir=tarinfo.isdir()):
            logger.debug(f"Excluded: {tarinfo.name}")
            return None
        return tarinfo

    try:
        with tarfile.open(archive_path, mode) as tar:
            for child in sorted(source_dir.iterdir()):
                tar.add(child, arcname=child.name, recursive=True, filter=exclude_filter)
    except FileExistsError:
        raise SnapshotExistsError(f"Archive already exists: {archive_path}")
    except (OSError, tarfile.TarError) as e:
        raise ArchiveError(f"Failed to create archive {archive_path}: {e}")

    return archive_path


def get_archive_size(archive_path: Path) -> int:
    """
    Get the size of an archive file in bytes.

    Raises:
        ArchiveError: If the file doesn't exist or cannot be accessed
    """
    try:
        return os.path.getsize(archive_path)
    except FileNotFoundError:
        raise ArchiveError(f"Archive not found: {archive_path}")
    except OSError as e:
        raise ArchiveError(f"Failed to get archive size: {e}")


def get_tree_size(path: Path) -> int:
    """Total size in bytes of the regular files under a directory."""
    total = 0
    for root, _dirs, files in os.walk(path):
        for name in files:
            file_path = os.path.join(root, name)
            if not os.path.islink(file_path):
                total += os.path.getsize(file_path)
    return total


def format_size(size_bytes: int) -> str:
    """Human readable size, e.g. '1.50 MB'."""
    size = float(size_bytes)
    for unit in ('B', 'KB', 'MB', 'GB', 'TB'):
        if size < 1024 or unit == 'TB':
            return f"{size:.0f} {unit}" if unit == 'B' else f"{size:.2f} {unit}"
        size /= 1024
