"""
=====================================
dry-dbi: fluent SQL statement builder.
=====================================

Subpackages:
    core: Configuration and logging
    sql: QueryBuilder, TableBuilder and the SQL fragment types
    repository: Criteria, repositories and the SQLAlchemy model collaborator
    utils: Database connectivity helpers

Example:
    >>> from drydbi import QueryBuilder
    >>>
    >>> query = QueryBuilder().table('users').select('name')
    >>> query.build()
    >>> query.get_query()
    'SELECT `users`.`name` FROM `users`'
"""

__version__ = "1.0.0"
__all__ = [
    'QueryBuilder', 'TableBuilder', 'JoinBuilder', 'Raw',
    'Repository', 'BaseRepository', 'SQLAlchemyModel',
    'config', 'setup_logging',
]

from .core import config, setup_logging
from .repository import BaseRepository, Repository, SQLAlchemyModel
from .sql import JoinBuilder, QueryBuilder, Raw, TableBuilder
