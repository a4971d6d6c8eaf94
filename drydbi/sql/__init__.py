"""
=====================================================
SQL statement builders.
=====================================================

This package renders parameterized MySQL-flavoured SQL. Nothing in it opens a
connection; the output is a query string with ``?`` placeholders plus an
ordered parameter list, or a list of DDL statements.

The package follows a clear organization:
    - statement.py: Raw and computed SQL fragments with their bindings
    - build_handler.py: Shared base (table, quoting, query/parameter buffers)
    - definitions.py: Column and constraint value objects
    - join_builder.py: Single JOIN clause
    - table_builder.py: CREATE/ALTER TABLE fragments and timestamp triggers
    - query_builder.py: SELECT and DDL orchestration

Architecture:
    - query_builder.py composes join_builder.py and table_builder.py (not vice versa)
    - Every builder derives from BuildHandler and renders in build()

Example:
    >>> from drydbi.sql import QueryBuilder, Raw
    >>>
    >>> query = QueryBuilder().table('users')
    >>> query.select('name').select_as(Raw('COUNT(*)'), 'total').group_by('name')
    >>> query.build()
    >>> query.get_query()
    'SELECT `users`.`name`, COUNT(*) AS total FROM `users` GROUP BY `users`.`name`'
"""

__all__ = [
    # Fragments
    'Statement', 'Raw', 'ComputedStatement',
    # Builders
    'BuildHandler', 'JoinBuilder', 'TableBuilder', 'QueryBuilder',
    # Definitions
    'ColumnDefinition', 'ForeignKeyDefinition', 'UniqueDefinition',
    'IndexDefinition', 'CheckDefinition',
    # Errors
    'DefinitionError', 'JoinBuilderError', 'QueryBuilderError',
]

from .build_handler import BuildHandler
from .definitions import (
    CheckDefinition,
    ColumnDefinition,
    DefinitionError,
    ForeignKeyDefinition,
    IndexDefinition,
    UniqueDefinition,
)
from .join_builder import JoinBuilder, JoinBuilderError
from .query_builder import QueryBuilder, QueryBuilderError
from .statement import ComputedStatement, Raw, Statement
from .table_builder import TableBuilder
