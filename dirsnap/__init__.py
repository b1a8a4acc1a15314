import logging
from logging.handlers import RotatingFileHandler

from dirsnap.config import Config

__version__ = '1.0.0'


def configure_logging(log_file=None, verbose=False):
    """Configure dirsnap logging"""

    # Set log level based on verbosity
    log_level = logging.DEBUG if verbose else logging.INFO

    package_logger = logging.getLogger(__name__)

    # Drop handlers from a previous call
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s: %(message)s'
    )
    console_handler.setFormatter(console_formatter)
    package_logger.addHandler(console_handler)

    # File handler
    if log_file:
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=Config.LOG_MAX_BYTES,
            backupCount=Config.LOG_BACKUP_COUNT,
            encoding='utf-8',
            errors='backslashreplace'
        )
        file_handler.setLevel(log_level)
        file_formatter = logging.Formatter(
            '[%(asctime)s] %(levelname)s [%(name)s.%(funcName)s:%(lineno)d] %(message)s'
        )
        file_handler.setFormatter(file_formatter)
        package_logger.addHandler(file_handler)

    package_logger.setLevel(log_level)
    package_logger.debug(f"Logging configured (level: {logging.getLevelName(log_level)})")
    return package_logger
