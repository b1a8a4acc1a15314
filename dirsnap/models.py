from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple


class BackupMethod(Enum):
    """Snapshot method"""
    ARCHIVE = 'tar'
    MIRROR = 'rsync'

    @classmethod
    def parse(cls, value: str) -> 'BackupMethod':
        """Resolve a CLI spelling ('tar', 'rsync', 'archive', 'mirror')."""
        normalized = (value or '').strip().lower()
        aliases = {'archive': cls.ARCHIVE, 'mirror': cls.MIRROR}
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


@dataclass(frozen=True)
class RawOptions:
    """Unvalidated user input, as strings"""
    source: Optional[str] = None
    destination: Optional[str] = None
    method: Optional[str] = 'tar'
    retention_days: Optional[str] = '7'
    exclude_file: Optional[str] = None
    log_file: Optional[str] = None
    compress: bool = True
    dry_run: bool = False


@dataclass(frozen=True)
class Configuration:
    """Validated configuration for one run"""
    source: Path
    destination: Path
    method: BackupMethod
    retention_days: int
    exclude_file: Optional[Path] = None
    compress: bool = True  # Archive method only
    dry_run: bool = False
    log_file: Optional[Path] = None

    def __repr__(self):
        return f'<Configuration {self.method.value} {self.source} -> {self.destination}>'


@dataclass(frozen=True)
class RunContext:
    """Per-run state shared by every component, built once at run start"""
    config: Configuration
    now: datetime
    snapshot_id: str


@dataclass
class SnapshotResult:
    """Outcome of a snapshot producer"""
    path: Path
    size_bytes: Optional[int] = None  # None in dry-run
    dry_run: bool = False
    planned_changes: List[str] = field(default_factory=list)  # rsync itemized output


@dataclass
class SweepReport:
    """Outcome of a retention sweep"""
    removed_paths: List[Path] = field(default_factory=list)
    failed_paths: List[Tuple[Path, str]] = field(default_factory=list)  # (path, error message)
    dry_run: bool = False

    @property
    def removed_count(self) -> int:
        return len(self.removed_paths)

    def __repr__(self):
        return f'<SweepReport removed={self.removed_count} failed={len(self.failed_paths)} dry_run={self.dry_run}>'
