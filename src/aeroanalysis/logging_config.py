"""
Logging Configuration
Sets up the 'aeroanalysis' logger: console output, optionally a log file.
"""
import logging
import sys
from typing import Optional, Union

LOGGER_NAME = "aeroanalysis"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def parse_level(name: Optional[str], default: int = logging.INFO) -> int:
    """Translate a level name like 'debug' into a logging constant."""
    if not name:
        return default
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else default


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger and return it.

    `level` may be a logging constant or a name from the settings ('DEBUG').
    Calling this again replaces the previous handlers instead of adding to them.
    """
    if isinstance(level, str):
        level = parse_level(level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(f"Logging initialized at {logging.getLevelName(level)}" + (f", writing to {log_file}." if log_file else "."))
    return logger
