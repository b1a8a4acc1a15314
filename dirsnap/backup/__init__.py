"""
Backup module for dirsnap.

This module handles the core backup functionality including:
- Snapshot naming
- Snapshot production (tar archive or rsync mirror)
- Retention policy enforcement
- Run orchestration
"""

from .executor import BackupExecutor, RunOutcome, RunState, run_backup
from .producers import ArchiveProducer, MirrorProducer, create_producer
from .compression import create_archive
from .retention import RetentionSweeper
from .naming import generate_snapshot_id

__all__ = [
    'BackupExecutor',
    'RunOutcome',
    'RunState',
    'run_backup',
    'ArchiveProducer',
    'MirrorProducer',
    'create_producer',
    'create_archive',
    'RetentionSweeper',
    'generate_snapshot_id'
]
