"""
Configuration validation.

Every check runs on every call so that all problems are reported together.
Validation never touches the filesystem beyond reading it.
"""

import re
import shutil
from pathlib import Path
from typing import Callable, List, Optional

from dirsnap.config import Config
from dirsnap.errors import ConfigurationError
from dirsnap.models import BackupMethod, Configuration, RawOptions


def _resolve(path: Optional[str]) -> Optional[Path]:
    if path is None or not str(path).strip():
        return None
    return Path(path).expanduser().absolute()


def _parse_retention(value: Optional[str]) -> Optional[int]:
    text = str(value).strip() if value is not None else ''
    if not re.fullmatch(r'[0-9]+', text):
        return None
    return int(text)


def validate_config(
    options: RawOptions,
    which: Callable[[str], Optional[str]] = shutil.which
) -> Configuration:
    """
    Validate raw options and build the run configuration.

    Args:
        options: Unvalidated user input
        which: Executable lookup used to check that rsync is installed

    Returns:
        Fully populated Configuration

    Raises:
        ConfigurationError: Carrying every validation message
    """
    errors: List[str] = []

    source = _resolve(options.source)
    if source is None:
        errors.append("Source directory not specified")
    elif not source.is_dir():
        errors.append(f"Source directory does not exist: {options.source}")

    destination = _resolve(options.destination)
    if destination is None:
        errors.append("Destination directory not specified")

    method = None
    try:
        method = BackupMethod.parse(options.method)
    except ValueError:
        errors.append(f"Invalid backup method: {options.method} (must be tar or rsync)")

    retention_days = _parse_retention(options.retention_days)
    if retention_days is None:
        errors.append(f"Retention days must be a non-negative integer: {options.retention_days}")

    exclude_file = _resolve(options.exclude_file)
    if exclude_file is not None and not exclude_file.is_file():
        errors.append(f"Exclude file does not exist: {options.exclude_file}")

    if method is BackupMethod.MIRROR and which(Config.RSYNC_BINARY) is None:
        errors.append(f"{Config.RSYNC_BINARY} is not installed")

    if errors:
        raise ConfigurationError(errors)

    return Configuration(
        source=source,
        destination=destination,
        method=method,
        retention_days=retention_days,
        exclude_file=exclude_file,
        compress=options.compress,
        dry_run=options.dry_run,
        log_file=_resolve(options.log_file)
    )
