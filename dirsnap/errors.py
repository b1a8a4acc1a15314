"""
Exception types raised by dirsnap.

Configuration problems are collected and raised together so the operator can
fix every mistake in one pass. Producer failures abort the run before the
retention sweep. Sweep failures are recorded and logged but never fail a run.
"""

from typing import List


class DirsnapError(Exception):
    """Base class for all dirsnap errors."""
    pass


class ConfigurationError(DirsnapError):
    """Raised when one or more configuration checks fail."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__('; '.join(self.errors))


class ProducerError(DirsnapError):
    """Raised when a snapshot could not be produced."""
    pass


class ArchiveError(ProducerError):
    """Raised when archive creation fails."""
    pass


class MirrorError(ProducerError):
    """Raised when rsync exits with a non-zero status."""
    pass


class SnapshotExistsError(ProducerError):
    """Raised when an artifact with the run's snapshot name already exists."""
    pass


class SweepError(DirsnapError):
    """Raised when an expired snapshot cannot be removed."""
    pass
