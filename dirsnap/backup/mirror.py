"""
Mirror engine for the rsync snapshot method.

rsync is invoked with an explicit argument vector; nothing is passed
through a shell.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from dirsnap.config import Config
from dirsnap.errors import MirrorError

logger = logging.getLogger(__name__)


def build_rsync_command(
    source: Path,
    target: Path,
    exclude_file: Optional[Path] = None,
    dry_run: bool = False
) -> List[str]:
    """
    Build the rsync argument vector.

    Trailing slashes make rsync copy the contents of source into target
    rather than source itself. ``--delete`` removes target entries that are
    not present in the filtered source.

    Args:
        source: Source directory
        target: Snapshot directory
        exclude_file: Pattern file passed as --exclude-from (optional)
        dry_run: Preview only; itemize what would change

    Returns:
        Command as a list of arguments
    """
    cmd = [Config.RSYNC_BINARY, '-a', '-h', '--delete']

    if dry_run:
        cmd.extend(['--dry-run', '--itemize-changes'])
    else:
        cmd.append('--verbose')

    if exclude_file is not None:
        cmd.append(f"--exclude-from={exclude_file}")

    cmd.extend([f"{str(source).rstrip('/')}/", f"{str(target).rstrip('/')}/"])
    return cmd


def run_rsync(cmd: List[str]) -> List[str]:
    """
    Run rsync and return its output lines.

    Raises:
        MirrorError: If rsync cannot be started or exits non-zero
    """
    logger.debug(f"Running: {cmd}")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise MirrorError(f"Failed to execute rsync: {e}")

    if result.returncode != 0:
        stderr = (result.stderr or '').strip()
        raise MirrorError(f"rsync exited with status {result.returncode}: {stderr}")

    lines = [line for line in (result.stdout or '').splitlines() if line.strip()]
    for line in lines:
        logger.debug(f"rsync: {line}")
    return lines
