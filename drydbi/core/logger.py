"""
===========================================
Centralized logging configuration for dbi.
===========================================

The builders log through module loggers (``logging.getLogger(__name__)``) and
never install handlers on import. Applications that want the library's output
call ``setup_logging`` once at start-up.

Provides:
- Console output with optional colors
- Optional file output
- Level defaults taken from the DBI_LOG_LEVEL setting

Example:
    >>> from drydbi.core.logger import get_logger, setup_logging
    >>>
    >>> setup_logging(log_level='DEBUG')
    >>> logger = get_logger('drydbi.sql')
    >>> logger.debug("Rendered query")
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from drydbi.core.config import config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Formatter that wraps the level name in ANSI color codes.

    Attributes:
        COLORS: Dict mapping log levels to ANSI color codes
    """

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        """Format the record with a colored level name.

        The record is copied so other handlers still see the plain level name.
        """
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)

        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _resolve_level(level: Optional[str]) -> int:
    name = (level or config.log_level).upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level '{level}'")
    return resolved


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Get a logger instance for the specified module.

    Args:
        name: Logger name (typically __name__ of calling module)
        level: Optional logging level override (DEBUG/INFO/WARNING/ERROR/CRITICAL)

    Returns:
        Logger instance

    Example:
        >>> logger = get_logger(__name__, level='DEBUG')
    """
    logger = logging.getLogger(name)

    if level:
        logger.setLevel(_resolve_level(level))

    return logger


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    console_output: bool = True,
    use_colors: bool = True,
    logger_name: str = 'drydbi'
) -> logging.Logger:
    """Configure handlers for the library's logger tree.

    Args:
        log_level: Logging level, defaults to the DBI_LOG_LEVEL setting
        log_file: Optional log file name (e.g., 'dbi.log')
        log_dir: Optional log directory path (defaults to 'logs/')
        console_output: If True, output to console (stdout)
        use_colors: If True, use colored output for console
        logger_name: Logger to configure, the package root by default

    Returns:
        The configured logger

    Example:
        >>> setup_logging(log_level='DEBUG', log_file='dbi.log', log_dir='logs')
    """
    level = _resolve_level(log_level)

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.handlers.clear()

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)

        if use_colors:
            console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        else:
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_dir) if log_dir else Path('logs')
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path / log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_module_logger(module_name: str) -> logging.Logger:
    """Get a logger for a specific module.

    Args:
        module_name: Name of the module (typically use __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(module_name)
