"""
==========================
Utility Functions Package.
==========================

Reusable utility functions for database connectivity used by the model
collaborator.

Modules:
    database_utils: SQLAlchemy engines, positional binds and health checks
"""

__all__ = [
    'DatabaseConnectionError',
    'ParameterBindingError',
    'get_connection_string',
    'create_sqlalchemy_engine',
    'bind_positional',
    'check_database_available',
    'get_database_connection_info'
]

from .database_utils import (
    DatabaseConnectionError,
    ParameterBindingError,
    bind_positional,
    check_database_available,
    create_sqlalchemy_engine,
    get_connection_string,
    get_database_connection_info,
)
