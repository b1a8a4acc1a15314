"""
Shared pytest fixtures for dirsnap tests.

This module provides fixtures for:
- Source trees and destination directories
- Validated configurations and run contexts
- Exclude pattern files
- Helpers for ageing snapshot artifacts
"""

import os
import logging
from datetime import datetime, timedelta

import pytest

from dirsnap.models import BackupMethod, Configuration, RunContext
from dirsnap.backup.naming import generate_snapshot_id


@pytest.fixture
def source_tree(tmp_path):
    """
    Create a source directory to back up.

    Creates:
    - file1.txt
    - file2.log
    - nested/file3.txt
    - scratch.tmp and nested/deep.tmp (excluded in tests)
    """
    source = tmp_path / 'source'
    source.mkdir()

    (source / 'file1.txt').write_text('Test content 1')
    (source / 'file2.log').write_text('Test log content')
    (source / 'scratch.tmp').write_text('temporary')

    nested_dir = source / 'nested'
    nested_dir.mkdir()
    (nested_dir / 'file3.txt').write_text('Nested test content')
    (nested_dir / 'deep.tmp').write_text('temporary')

    return source


@pytest.fixture
def destination(tmp_path):
    """Destination directory (not created)."""
    return tmp_path / 'backups'


@pytest.fixture
def exclude_file(tmp_path):
    """Exclude file containing '*.tmp'."""
    path = tmp_path / 'exclude.txt'
    path.write_text('# scratch files\n*.tmp\n\n')
    return path


@pytest.fixture
def make_config(source_tree, destination):
    """
    Factory for validated configurations.

    Defaults to an archive backup of source_tree into destination.
    """
    def _make(**overrides):
        fields = {
            'source': source_tree,
            'destination': destination,
            'method': BackupMethod.ARCHIVE,
            'retention_days': 7,
            'exclude_file': None,
            'compress': True,
            'dry_run': False,
        }
        fields.update(overrides)
        return Configuration(**fields)

    return _make


@pytest.fixture
def make_context():
    """Factory for run contexts with a fixed start time."""
    def _make(config, now=None):
        now = now or datetime(2024, 1, 15, 12, 0, 0)
        return RunContext(config=config, now=now, snapshot_id=generate_snapshot_id(now))

    return _make


@pytest.fixture
def age_path():
    """Set a path's mtime to a number of days before a reference time."""
    def _age(path, days, now=None):
        now = now or datetime.now()
        stamp = (now - timedelta(days=days)).timestamp()
        os.utime(path, (stamp, stamp), follow_symlinks=False)
        return path

    return _age


@pytest.fixture
def tree_of():
    """Map of relative path -> bytes (None for directories) under a directory."""
    def _tree(path):
        tree = {}
        for root, dirs, files in os.walk(path):
            for name in dirs:
                full = os.path.join(root, name)
                tree[os.path.relpath(full, path)] = None
            for name in files:
                full = os.path.join(root, name)
                with open(full, 'rb') as f:
                    tree[os.path.relpath(full, path)] = f.read()
        return tree

    return _tree


@pytest.fixture(autouse=True)
def reset_dirsnap_logger():
    """Detach handlers installed by configure_logging after each test."""
    yield
    package_logger = logging.getLogger('dirsnap')
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
