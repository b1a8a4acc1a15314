"""
Unit tests for configuration validation (dirsnap/validation.py).
"""

from pathlib import Path

import pytest

from dirsnap.errors import ConfigurationError
from dirsnap.models import BackupMethod, Configuration, RawOptions
from dirsnap.validation import validate_config


def rsync_installed(name):
    return f"/usr/bin/{name}"


def rsync_missing(name):
    return None


class TestValidateConfig:
    """Test validate_config on valid input."""

    def test_valid_archive_config(self, source_tree, destination, exclude_file):
        """Test that valid options produce a full Configuration."""
        options = RawOptions(
            source=str(source_tree),
            destination=str(destination),
            method='tar',
            retention_days='14',
            exclude_file=str(exclude_file),
            compress=False,
            dry_run=True
        )

        config = validate_config(options, which=rsync_missing)

        assert isinstance(config, Configuration)
        assert config.source == source_tree
        assert config.destination == destination
        assert config.method is BackupMethod.ARCHIVE
        assert config.retention_days == 14
        assert config.exclude_file == exclude_file
        assert config.compress is False
        assert config.dry_run is True

    def test_valid_mirror_config(self, source_tree, destination):
        """Test that rsync method validates when rsync is installed."""
        options = RawOptions(source=str(source_tree), destination=str(destination), method='rsync')

        config = validate_config(options, which=rsync_installed)

        assert config.method is BackupMethod.MIRROR

    @pytest.mark.parametrize("method,expected", [
        ('tar', BackupMethod.ARCHIVE),
        ('TAR', BackupMethod.ARCHIVE),
        ('archive', BackupMethod.ARCHIVE),
        ('rsync', BackupMethod.MIRROR),
        ('mirror', BackupMethod.MIRROR),
    ])
    def test_method_spellings(self, source_tree, destination, method, expected):
        options = RawOptions(source=str(source_tree), destination=str(destination), method=method)

        assert validate_config(options, which=rsync_installed).method is expected

    def test_retention_zero_is_valid(self, source_tree, destination):
        options = RawOptions(source=str(source_tree), destination=str(destination), retention_days='0')

        assert validate_config(options).retention_days == 0

    def test_relative_paths_are_made_absolute(self, source_tree, monkeypatch):
        """Test that relative paths resolve against the working directory."""
        monkeypatch.chdir(source_tree.parent)
        options = RawOptions(source='source', destination='backups')

        config = validate_config(options)

        assert config.source.is_absolute()
        assert config.source == Path.cwd() / 'source'
        assert config.destination == Path.cwd() / 'backups'

    def test_validation_does_not_create_destination(self, source_tree, destination):
        options = RawOptions(source=str(source_tree), destination=str(destination))

        validate_config(options)

        assert not destination.exists()


class TestValidateConfigErrors:
    """Test that every problem is reported."""

    def test_all_errors_are_collected(self, tmp_path):
        """Test that independent failures are aggregated into one error."""
        options = RawOptions(
            source=None,
            destination=None,
            method='ftp',
            retention_days='-1',
            exclude_file=str(tmp_path / 'missing.txt')
        )

        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(options, which=rsync_installed)

        errors = exc_info.value.errors
        assert len(errors) == 5
        assert "Source directory not specified" in errors
        assert "Destination directory not specified" in errors
        assert any("Invalid backup method: ftp" in e for e in errors)
        assert any("Retention days" in e for e in errors)
        assert any("Exclude file does not exist" in e for e in errors)

    def test_nonexistent_source(self, tmp_path, destination):
        options = RawOptions(source=str(tmp_path / 'nope'), destination=str(destination))

        with pytest.raises(ConfigurationError, match="Source directory does not exist"):
            validate_config(options)

    def test_source_is_a_file(self, tmp_path, destination):
        source_file = tmp_path / 'file.txt'
        source_file.write_text('not a directory')
        options = RawOptions(source=str(source_file), destination=str(destination))

        with pytest.raises(ConfigurationError, match="Source directory does not exist"):
            validate_config(options)

    @pytest.mark.parametrize("retention", ['-1', 'abc', '1.5', '', None, '7d'])
    def test_invalid_retention(self, source_tree, destination, retention):
        options = RawOptions(source=str(source_tree), destination=str(destination), retention_days=retention)

        with pytest.raises(ConfigurationError, match="Retention days must be a non-negative integer"):
            validate_config(options)

    def test_exclude_file_is_a_directory(self, source_tree, destination, tmp_path):
        options = RawOptions(source=str(source_tree), destination=str(destination), exclude_file=str(tmp_path))

        with pytest.raises(ConfigurationError, match="Exclude file does not exist"):
            validate_config(options)

    def test_rsync_missing_for_mirror(self, source_tree, destination):
        """Test that a missing rsync is a configuration error."""
        options = RawOptions(source=str(source_tree), destination=str(destination), method='rsync')

        with pytest.raises(ConfigurationError, match="rsync is not installed"):
            validate_config(options, which=rsync_missing)

    def test_rsync_not_required_for_archive(self, source_tree, destination):
        options = RawOptions(source=str(source_tree), destination=str(destination), method='tar')

        config = validate_config(options, which=rsync_missing)

        assert config.method is BackupMethod.ARCHIVE

    def test_missing_rsync_reported_with_other_errors(self, tmp_path, destination):
        options = RawOptions(source=str(tmp_path / 'nope'), destination=str(destination), method='rsync')

        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(options, which=rsync_missing)

        assert len(exc_info.value.errors) == 2
