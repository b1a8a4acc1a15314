"""
Exclusion patterns shared by both snapshot methods.

The exclude file holds one glob pattern per line, the same file handed to
``rsync --exclude-from``. Blank lines and ``#`` comments are ignored. The
archive producer matches entries with ExcludeMatcher, which follows the
rsync conventions closely enough that both methods skip the same entries:

- ``*.tmp``      matches a basename at any depth
- ``cache/``     trailing slash: directories only
- ``/build``     leading slash: anchored at the source root
- ``logs/*.log`` contains a slash: matched against the relative path
- ``**/x``       matches basename ``x`` at any depth
"""

import logging
from fnmatch import fnmatch
from pathlib import Path, PurePosixPath
from typing import List, Optional

logger = logging.getLogger(__name__)


def load_exclude_patterns(exclude_file: Optional[Path]) -> List[str]:
    """
    Read exclusion patterns from a file.

    Args:
        exclude_file: Path to the pattern file, or None

    Returns:
        List of patterns (empty if no file was given)

    Raises:
        OSError: If the file cannot be read
    """
    if exclude_file is None:
        return []

    patterns = []
    # Undecodable bytes survive as surrogates, the same way os.fsdecode treats file names
    with open(exclude_file, 'r', encoding='utf-8', errors='surrogateescape') as f:
        for line in f:
            pattern = line.rstrip('\n').rstrip('\r').strip()
            if not pattern or pattern.startswith('#'):
                continue
            patterns.append(pattern)

    logger.debug(f"Loaded {len(patterns)} exclude pattern(s) from {exclude_file}")
    return patterns


class ExcludeMatcher:
    """Decides whether a path relative to the source root is excluded."""

    def __init__(self, patterns: List[str] = None):
        self.patterns = patterns or []

    def matches(self, relative_path: str, is_dir: bool = False) -> bool:
        """
        Check a path against every pattern.

        Args:
            relative_path: POSIX path relative to the source root
            is_dir: Whether the entry is a directory

        Returns:
            True if any pattern excludes the path
        """
        path = PurePosixPath(relative_path)
        path_str = str(path)

        for raw in self.patterns:
            pattern = raw

            if pattern.endswith('/'):
                if not is_dir:
                    continue
                pattern = pattern.rstrip('/')

            if pattern.startswith('**/'):
                if fnmatch(path.name, pattern[3:]):
                    return True
                continue

            if pattern.startswith('/'):
                if fnmatch(path_str, pattern.lstrip('/')):
                    return True
                continue

            if '/' in pattern:
                if fnmatch(path_str, pattern) or fnmatch(path_str, f"*/{pattern}"):
                    return True
            elif fnmatch(path.name, pattern):
                return True

        return False
