"""
Snapshot producers.

Supports:
- ArchiveProducer: tar archive of the source contents (optionally gzipped)
- MirrorProducer: rsync replica of the source contents in a new directory

Both take the run context and return a SnapshotResult, or raise a
ProducerError subclass.
"""

import logging
import os
from pathlib import Path

from dirsnap.errors import MirrorError, SnapshotExistsError
from dirsnap.models import BackupMethod, RunContext, SnapshotResult
from .compression import create_archive, format_size, get_archive_size, get_tree_size
from .exclusions import ExcludeMatcher, load_exclude_patterns
from .mirror import build_rsync_command, run_rsync
from .naming import archive_filename

logger = logging.getLogger(__name__)


class SnapshotProducer:
    """Base class for snapshot producers."""

    method = None

    def target_path(self, context: RunContext) -> Path:
        """Path of the artifact this producer creates for a run."""
        raise NotImplementedError

    def produce(self, context: RunContext) -> SnapshotResult:
        """
        Produce one snapshot artifact under the destination.

        Args:
            context: Run context holding the validated configuration

        Returns:
            SnapshotResult describing the artifact

        Raises:
            ProducerError: If the snapshot cannot be produced
        """
        raise NotImplementedError


class ArchiveProducer(SnapshotProducer):
    """
    Produces a tar archive of the source directory's contents.

    The archive is named '<snapshot_id>.tar.gz' when compressing and
    '<snapshot_id>.tar' otherwise.
    """

    method = BackupMethod.ARCHIVE

    def target_path(self, context: RunContext) -> Path:
        config = context.config
        return config.destination / archive_filename(context.snapshot_id, config.compress)

    def produce(self, context: RunContext) -> SnapshotResult:
        config = context.config
        backup_path = self.target_path(context)
        patterns = load_exclude_patterns(config.exclude_file)

        if config.compress:
            logger.info("Using gzip compression")

        logger.info("Starting tar backup...")
        logger.info(f"Source: {config.source}")
        logger.info(f"Destination: {backup_path}")

        if config.dry_run:
            logger.info(f"DRY RUN: Would archive contents of {config.source} into {backup_path}")
            if patterns:
                logger.info(f"DRY RUN: Would exclude patterns from {config.exclude_file}: {', '.join(patterns)}")
            return SnapshotResult(path=backup_path, dry_run=True)

        create_archive(
            config.source,
            backup_path,
            compress=config.compress,
            matcher=ExcludeMatcher(patterns)
        )

        size = get_archive_size(backup_path)
        logger.info("Backup completed successfully")
        logger.info(f"Backup size: {format_size(size)}")
        return SnapshotResult(path=backup_path, size_bytes=size)


class MirrorProducer(SnapshotProducer):
    """
    Produces a new directory replicating the source directory with rsync.

    Each run writes into its own '<snapshot_id>/' directory; earlier
    snapshot directories are never touched.
    """

    method = BackupMethod.MIRROR

    def target_path(self, context: RunContext) -> Path:
        return context.config.destination / context.snapshot_id

    def produce(self, context: RunContext) -> SnapshotResult:
        config = context.config
        backup_path = self.target_path(context)

        logger.info("Starting rsync backup...")
        logger.info(f"Source: {config.source}")
        logger.info(f"Destination: {backup_path}")

        cmd = build_rsync_command(
            config.source,
            backup_path,
            exclude_file=config.exclude_file,
            dry_run=config.dry_run
        )

        if config.dry_run:
            changes = run_rsync(cmd)
            for line in changes:
                logger.info(f"DRY RUN: {line}")
            logger.info("DRY RUN completed")
            return SnapshotResult(path=backup_path, dry_run=True, planned_changes=changes)

        try:
            backup_path.mkdir(parents=False, exist_ok=False)
        except FileExistsError:
            raise SnapshotExistsError(f"Snapshot directory already exists: {backup_path}")
        except OSError as e:
            raise MirrorError(f"Failed to create snapshot directory {backup_path}: {e}")

        run_rsync(cmd)

        # rsync -a copies the source root's mtime; the snapshot must age from this run
        os.utime(backup_path)

        size = get_tree_size(backup_path)
        logger.info("Backup completed successfully")
        logger.info(f"Backup size: {format_size(size)}")
        return SnapshotResult(path=backup_path, size_bytes=size)


def create_producer(method: BackupMethod) -> SnapshotProducer:
    """
    Factory function to create the producer for a backup method.

    Raises:
        ValueError: If method is not a BackupMethod
    """
    for producer_cls in (ArchiveProducer, MirrorProducer):
        if producer_cls.method is method:
            return producer_cls()
    raise ValueError(f"Invalid backup method: {method}")
