"""
Snapshot naming.

Every artifact produced by a run is named after one identifier of the form
``backup_YYYYMMDD_HHMMSS``, derived from the moment the run started.
"""

from datetime import datetime
from typing import Optional

from dirsnap.config import Config


def generate_snapshot_id(now: Optional[datetime] = None) -> str:
    """
    Generate the snapshot identifier for a run.

    Args:
        now: Run start time (default: current local time)

    Returns:
        Identifier such as 'backup_20240115_120000'
    """
    now = now or datetime.now()
    return f"{Config.SNAPSHOT_PREFIX}{now.strftime(Config.TIMESTAMP_FORMAT)}"


def archive_filename(snapshot_id: str, compress: bool) -> str:
    """Archive filename for a snapshot: '<id>.tar.gz' or '<id>.tar'."""
    extension = 'tar.gz' if compress else 'tar'
    return f"{snapshot_id}.{extension}"


def is_snapshot_name(name: str) -> bool:
    """Return True if a destination entry name belongs to a snapshot."""
    return name.startswith(Config.SNAPSHOT_PREFIX)
