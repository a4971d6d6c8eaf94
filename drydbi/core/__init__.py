"""
=========================================
Core infrastructure package for drydbi.
=========================================

This package provides centralized configuration management and logging
infrastructure used throughout the library.

Modules:
    config: Configuration management from environment variables
    logger: Logging configuration and utilities

Example:
    >>> from drydbi.core.config import config
    >>> from drydbi.core.logger import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info(f"Using collation {config.table_collation}")
"""

__all__ = [
    'get_logger', 'setup_logging', 'get_module_logger',
    'config', 'Config', 'BuilderConfig', 'DatabaseConfig', 'ConfigError'
]

from drydbi.core.config import BuilderConfig, Config, ConfigError, DatabaseConfig, config
from drydbi.core.logger import get_logger, get_module_logger, setup_logging
