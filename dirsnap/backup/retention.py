"""
Retention policy enforcement for snapshots.

Removes snapshot artifacts older than the retention period from the
destination directory. Only direct entries whose names start with the
snapshot prefix are considered; anything else in the destination is left
alone whatever its age.
"""

import logging
import shutil
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

from dirsnap.errors import SweepError
from dirsnap.models import SweepReport
from .naming import is_snapshot_name

logger = logging.getLogger(__name__)


class RetentionSweeper:
    """
    Enforces the retention policy on a destination directory.

    A deletion failure is logged as a warning and recorded in the report;
    the sweep continues with the remaining entries.
    """

    def sweep(
        self,
        destination: Path,
        retention_days: int,
        dry_run: bool = False,
        now: Optional[datetime] = None
    ) -> SweepReport:
        """
        Remove (or, in dry-run, list) expired snapshots.

        Args:
            destination: Directory holding the snapshots
            retention_days: Snapshots older than this many days are expired
            dry_run: Only report what would be removed
            now: Reference time (default: current local time)

        Returns:
            SweepReport with removed and failed paths
        """
        now = now or datetime.now()
        cutoff = now - timedelta(days=retention_days)
        report = SweepReport(dry_run=dry_run)

        logger.info(f"Cleaning up backups older than {retention_days} days...")

        expired = self.find_expired(Path(destination), cutoff)

        if dry_run:
            logger.info(f"DRY RUN: Would delete backups older than {retention_days} days:")
            for entry in expired:
                logger.info(f"  - {entry['path']}")
                report.removed_paths.append(entry['path'])
            return report

        for entry in expired:
            try:
                logger.info(f"Removing old backup: {entry['path']}")
                self.delete(entry['path'])
                report.removed_paths.append(entry['path'])
            except SweepError as e:
                logger.warning(str(e))
                report.failed_paths.append((entry['path'], str(e)))

        if report.removed_count == 0:
            logger.info("No old backups to remove")
        else:
            logger.info(f"Removed {report.removed_count} old backup(s)")

        return report

    def list_snapshots(self, destination: Path) -> List[Dict[str, Any]]:
        """
        List the snapshot entries directly under a destination.

        Args:
            destination: Directory holding the snapshots

        Returns:
            List of dicts with 'path' and 'modified' keys
        """
        if not destination.is_dir():
            return []

        snapshots = []
        for entry in destination.iterdir():
            if not is_snapshot_name(entry.name):
                continue
            try:
                stat = entry.lstat()
            except FileNotFoundError:
                continue
            snapshots.append({
                'path': entry,
                'modified': datetime.fromtimestamp(stat.st_mtime)
            })

        return sorted(snapshots, key=lambda s: s['modified'])

    def find_expired(self, destination: Path, cutoff: datetime) -> List[Dict[str, Any]]:
        """Snapshots last modified strictly before the cutoff."""
        return [s for s in self.list_snapshots(destination) if s['modified'] < cutoff]

    def delete(self, path: Path):
        """
        Delete a snapshot file or directory tree.

        Raises:
            SweepError: If deletion fails
        """
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise SweepError(f"Failed to remove old backup {path}: {e}")
