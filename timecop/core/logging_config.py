"""Logging configuration for timecop.

Provides a consistent logging setup:
- Console handler: warnings and above
- File handler: TIMECOP_LOG_LEVEL and above to TIMECOP_LOG_FILE (if set)
"""

import logging

from timecop.core.config import settings

# Module-level logger cache
_loggers = {}


def get_logger(name: str = "timecop") -> logging.Logger:
    """Get a configured logger for timecop modules.

    Args:
        name: Logger name (typically module name like "timecop.summary")

    Returns:
        Configured logger instance
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s: %(message)s"))
        logger.addHandler(console_handler)

        log_file = settings.log_file_path
        if log_file is not None:
            try:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_file)
                file_handler.setLevel(settings.LOG_LEVEL.upper())
                file_handler.setFormatter(logging.Formatter(
                    "%(asctime)s [%(name)s] %(levelname)s: %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                ))
                logger.addHandler(file_handler)
            except OSError:
                # Can't write to log file - continue with console only
                logger.warning("cannot open log file %s, logging to console only", log_file)

        logger.propagate = False

    _loggers[name] = logger
    return logger
