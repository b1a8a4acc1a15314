import os


class Config:
    """Defaults, overridable through the environment"""

    # Run
    SOURCE = os.environ.get('DIRSNAP_SOURCE')
    DESTINATION = os.environ.get('DIRSNAP_DESTINATION')
    METHOD = os.environ.get('DIRSNAP_METHOD') or 'tar'
    RETENTION_DAYS = os.environ.get('DIRSNAP_RETENTION_DAYS') or '7'
    EXCLUDE_FILE = os.environ.get('DIRSNAP_EXCLUDE_FILE')

    # Logging
    LOG_FILE = os.environ.get('DIRSNAP_LOG_FILE')
    LOG_MAX_BYTES = 10485760  # 10MB
    LOG_BACKUP_COUNT = 10

    # Snapshot naming
    SNAPSHOT_PREFIX = 'backup_'
    TIMESTAMP_FORMAT = '%Y%m%d_%H%M%S'

    # Mirror engine
    RSYNC_BINARY = os.environ.get('DIRSNAP_RSYNC') or 'rsync'
