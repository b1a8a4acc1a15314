"""
Backup executor - orchestrates one backup run.

Workflow:
1. Validate the configuration (all errors reported together)
2. Prepare the destination directory
3. Produce the snapshot (archive or mirror)
4. Sweep expired snapshots (only after a successful snapshot)

Sweep problems are logged as warnings and never change the run's exit
status once the snapshot has been produced.
"""

import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from dirsnap.errors import ConfigurationError, ProducerError
from dirsnap.models import Configuration, RawOptions, RunContext, SnapshotResult, SweepReport
from dirsnap.validation import validate_config
from .naming import generate_snapshot_id
from .producers import create_producer
from .retention import RetentionSweeper

logger = logging.getLogger(__name__)

BANNER = '=' * 42


class RunState(Enum):
    START = 'start'
    VALIDATE = 'validate'
    PREPARE_DESTINATION = 'prepare_destination'
    PRODUCE = 'produce'
    SWEEP = 'sweep'
    DONE = 'done'
    FAILED = 'failed'


@dataclass
class RunOutcome:
    """Result of a backup run"""
    exit_code: int
    state: RunState  # DONE on success, otherwise the phase that failed
    snapshot: Optional[SnapshotResult] = None
    sweep_report: Optional[SweepReport] = None
    errors: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class BackupExecutor:
    """
    Orchestrates the complete backup workflow for one run.
    """

    def __init__(
        self,
        options: RawOptions,
        producer_factory: Callable = create_producer,
        sweeper: Optional[RetentionSweeper] = None,
        which: Callable[[str], Optional[str]] = shutil.which,
        clock: Callable[[], datetime] = datetime.now
    ):
        """
        Initialize backup executor.

        Args:
            options: Raw user options for this run
            producer_factory: Returns the producer for a BackupMethod
            sweeper: Retention sweeper (default: RetentionSweeper())
            which: Executable lookup used during validation
            clock: Source of the run's start time
        """
        self.options = options
        self.producer_factory = producer_factory
        self.sweeper = sweeper if sweeper is not None else RetentionSweeper()
        self.which = which
        self.clock = clock
        self.state = RunState.START
        self.context: Optional[RunContext] = None

    def execute(self) -> RunOutcome:
        """
        Execute the backup run.

        Returns:
            RunOutcome; exit_code is 0 on success and 1 on failure
        """
        now = self.clock()
        snapshot_id = generate_snapshot_id(now)

        logger.info(BANNER)
        logger.info("Backup Script Started")
        logger.info(BANNER)

        # Step 1: Validate
        self.state = RunState.VALIDATE
        try:
            config = validate_config(self.options, which=self.which)
        except ConfigurationError as e:
            for message in e.errors:
                logger.error(message)
            return self._fail(e.errors)

        self.context = RunContext(config=config, now=now, snapshot_id=snapshot_id)
        logger.debug(f"Snapshot: {snapshot_id} ({config!r})")

        # Step 2: Prepare destination
        self.state = RunState.PREPARE_DESTINATION
        try:
            self._prepare_destination(config)
        except OSError as e:
            message = f"Failed to create destination directory {config.destination}: {e}"
            logger.error(message)
            return self._fail([message])

        # Step 3: Produce snapshot
        self.state = RunState.PRODUCE
        producer = self.producer_factory(config.method)
        try:
            snapshot = producer.produce(self.context)
        except (ProducerError, OSError) as e:
            message = f"Backup failed: {e}"
            logger.error(message)
            return self._fail([message])

        # Step 4: Retention sweep
        self.state = RunState.SWEEP
        sweep_report = None
        try:
            sweep_report = self.sweeper.sweep(
                config.destination,
                config.retention_days,
                dry_run=config.dry_run,
                now=now
            )
        except Exception as e:
            logger.warning(f"Retention sweep failed: {e}")

        self.state = RunState.DONE
        logger.info(BANNER)
        logger.info("Backup Process Completed Successfully")
        logger.info(BANNER)

        return RunOutcome(
            exit_code=0,
            state=RunState.DONE,
            snapshot=snapshot,
            sweep_report=sweep_report
        )

    def _prepare_destination(self, config: Configuration):
        """Create the destination directory if it doesn't exist."""
        if config.dry_run:
            logger.info(f"DRY RUN: Would create destination directory: {config.destination}")
            return

        if not config.destination.is_dir():
            logger.info(f"Creating destination directory: {config.destination}")
            config.destination.mkdir(parents=True, exist_ok=True)

    def _fail(self, errors: List[str]) -> RunOutcome:
        failed_in = self.state
        self.state = RunState.FAILED

        logger.error(BANNER)
        logger.error("Backup Process Failed")
        logger.error(BANNER)

        return RunOutcome(exit_code=1, state=failed_in, errors=list(errors))


def run_backup(options: RawOptions) -> RunOutcome:
    """
    Run one backup with the default collaborators.

    Args:
        options: Raw user options

    Returns:
        RunOutcome of the run
    """
    executor = BackupExecutor(options)
    return executor.execute()
