"""
Command-line interface for dirsnap.

Flags override the DIRSNAP_* environment defaults from Config. Values are
passed to the validator as given so that every problem is reported in one
run.
"""

import argparse
import sys
from typing import List, Optional, Tuple

from dirsnap import __version__, configure_logging
from dirsnap.backup.executor import run_backup
from dirsnap.config import Config
from dirsnap.models import RawOptions

EPILOG = """\
examples:
  # Basic backup with tar
  dirsnap -s /home/user -d /backup/location

  # Backup with rsync and 14-day retention
  dirsnap -s /var/www -d /backup/www -m rsync -r 14

  # Backup with exclusions and logging
  dirsnap -s /home -d /backup -e exclude.txt -l /var/log/backup.log

Only one run may target a given destination at a time.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dirsnap',
        description="Snapshot a directory into a destination and delete expired snapshots.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-s', '--source', default=Config.SOURCE, metavar='PATH',
                        help="Source directory to backup (required)")
    parser.add_argument('-d', '--destination', default=Config.DESTINATION, metavar='PATH',
                        help="Destination directory for backups (required)")
    parser.add_argument('-m', '--method', default=Config.METHOD, metavar='METHOD',
                        help="Backup method: tar or rsync (default: %(default)s)")
    parser.add_argument('-r', '--retention', default=Config.RETENTION_DAYS, metavar='DAYS',
                        help="Number of days to keep backups (default: %(default)s)")
    parser.add_argument('-l', '--log', default=Config.LOG_FILE, metavar='FILE',
                        help="Log file path (default: no logging)")
    parser.add_argument('-e', '--exclude', default=Config.EXCLUDE_FILE, metavar='FILE',
                        help="File containing exclude patterns (one per line)")
    parser.add_argument('-n', '--no-compress', dest='compress', action='store_false',
                        help="Disable compression (tar method only)")
    parser.add_argument('--dry-run', action='store_true',
                        help="Show what would be done without doing it")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Enable debug logging")
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    return parser


def parse_options(argv: Optional[List[str]] = None) -> Tuple[RawOptions, argparse.Namespace]:
    """Parse command-line arguments into RawOptions."""
    args = build_parser().parse_args(argv)
    options = RawOptions(
        source=args.source,
        destination=args.destination,
        method=args.method,
        retention_days=args.retention,
        exclude_file=args.exclude,
        log_file=args.log,
        compress=args.compress,
        dry_run=args.dry_run
    )
    return options, args


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point; returns the process exit status."""
    options, args = parse_options(argv)
    try:
        configure_logging(log_file=options.log_file, verbose=args.verbose)
    except OSError as e:
        print(f"Cannot open log file {options.log_file}: {e}", file=sys.stderr)
        return 1

    outcome = run_backup(options)
    return outcome.exit_code


if __name__ == '__main__':
    sys.exit(main())
