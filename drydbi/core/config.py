"""
==============================================
Configuration management for the dbi builders.
==============================================

Loads all configuration from environment variables (.env file) and provides
a centralized Config singleton for library-wide access.

The configuration system covers:
- The database URL used by the SQLAlchemy-backed model collaborator
- Table options rendered into CREATE TABLE statements
- The default format of generated timestamp columns
- The default logging level

Example:
    >>> from drydbi.core.config import config
    >>>
    >>> # Table options used by QueryBuilder.create()
    >>> print(config.table_collation)
    >>>
    >>> # Database connection
    >>> engine_url = config.database_url
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).resolve().parent.parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

TIMESTAMP_FORMATS = ('UNIX', 'DATETIME')


class ConfigError(ValueError):
    """Exception raised when an environment setting holds an invalid value."""
    pass


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_optional(name: str, default: Optional[str] = None) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return default
    raw = raw.strip()
    return raw or None


@dataclass
class DatabaseConfig:
    """Database configuration settings.

    Attributes:
        url: SQLAlchemy database URL used by the model collaborator
        echo: Log every SQL statement SQLAlchemy emits
        pool_pre_ping: Test pooled connections before handing them out
    """

    url: str
    echo: bool = False
    pool_pre_ping: bool = True


@dataclass
class BuilderConfig:
    """Settings consumed by the statement builders.

    Attributes:
        table_engine: Storage engine rendered as ENGINE=... (omitted when None)
        table_charset: Character set rendered as DEFAULT CHARSET=... (omitted when None)
        table_collation: Collation rendered as COLLATE '...' (omitted when None)
        timestamp_format: Default format for TableBuilder.timestamps() (UNIX or DATETIME)
    """

    table_engine: Optional[str] = None
    table_charset: Optional[str] = None
    table_collation: Optional[str] = 'utf8_unicode_ci'
    timestamp_format: str = 'UNIX'

    def __post_init__(self):
        self.timestamp_format = self.timestamp_format.upper()
        if self.timestamp_format not in TIMESTAMP_FORMATS:
            raise ConfigError(
                f"Unknown timestamp format '{self.timestamp_format}', "
                f"expected one of {', '.join(TIMESTAMP_FORMATS)}"
            )

    def table_options(self) -> str:
        """Render the trailing CREATE TABLE options.

        Returns:
            Options string with a leading space, or an empty string
        """
        options = []
        if self.table_engine:
            options.append(f"ENGINE={self.table_engine}")
        if self.table_charset:
            options.append(f"DEFAULT CHARSET={self.table_charset}")
        if self.table_collation:
            options.append(f"COLLATE '{self.table_collation}'")

        if not options:
            return ''
        return ' ' + ' '.join(options)


@dataclass
class LoggingConfig:
    """Logging configuration settings.

    Attributes:
        level: Default log level (DEBUG/INFO/WARNING/ERROR/CRITICAL)
    """

    level: str = 'WARNING'


class Config:
    """Centralized configuration manager.

    Provides access to all configuration settings loaded from environment
    variables (.env file).

    Attributes:
        db: DatabaseConfig instance with connection settings
        builder: BuilderConfig instance with statement rendering settings
        logging: LoggingConfig instance

    Example:
        >>> config = Config()
        >>> print(config.database_url, config.timestamp_format)
    """

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.db = DatabaseConfig(
            url=os.getenv('DBI_DATABASE_URL', 'sqlite://'),
            echo=_env_bool('DBI_ECHO_SQL', False),
            pool_pre_ping=_env_bool('DBI_POOL_PRE_PING', True)
        )

        self.builder = BuilderConfig(
            table_engine=_env_optional('DBI_TABLE_ENGINE'),
            table_charset=_env_optional('DBI_TABLE_CHARSET'),
            table_collation=_env_optional('DBI_TABLE_COLLATION', 'utf8_unicode_ci'),
            timestamp_format=os.getenv('DBI_TIMESTAMP_FORMAT', 'UNIX')
        )

        self.logging = LoggingConfig(
            level=os.getenv('DBI_LOG_LEVEL', 'WARNING').upper()
        )

    @property
    def database_url(self) -> str:
        """Get the SQLAlchemy database URL."""
        return self.db.url

    @property
    def echo_sql(self) -> bool:
        """Get whether SQLAlchemy echoes statements."""
        return self.db.echo

    @property
    def table_engine(self) -> Optional[str]:
        """Get the default storage engine for new tables."""
        return self.builder.table_engine

    @property
    def table_charset(self) -> Optional[str]:
        """Get the default character set for new tables."""
        return self.builder.table_charset

    @property
    def table_collation(self) -> Optional[str]:
        """Get the default collation for new tables."""
        return self.builder.table_collation

    @property
    def timestamp_format(self) -> str:
        """Get the default timestamp column format."""
        return self.builder.timestamp_format

    @property
    def log_level(self) -> str:
        """Get the default log level."""
        return self.logging.level


# Global configuration instance
config = Config()
