"""
=================================================
SQLAlchemy-backed model collaborator.
=================================================

SQLAlchemyModel executes the SQL rendered by the builders. Subclasses name
their table and share an engine:

    >>> class User(SQLAlchemyModel):
    ...     TABLE = 'users'
    ...
    >>> User.engine = create_sqlalchemy_engine('sqlite://')
    >>> User.query('SELECT * FROM `users` WHERE `users`.`status` = ?', 'active')
    [{'id': 1, 'status': 'active'}]

Rows are returned as plain dictionaries keyed by column name.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Engine

from drydbi.utils.database_utils import bind_positional, create_sqlalchemy_engine

logger = logging.getLogger(__name__)


class SQLAlchemyModel:
    """Model collaborator exposing ``query`` and ``query_row``.

    Attributes:
        TABLE: Table the repository builds queries for
        engine: Engine used for execution; created from config on first use
    """

    TABLE: str = ''
    engine: Optional[Engine] = None

    @classmethod
    def get_engine(cls) -> Engine:
        if cls.engine is None:
            cls.engine = create_sqlalchemy_engine()
        return cls.engine

    @classmethod
    def query(cls, sql: str, *params: Any) -> List[Dict[str, Any]]:
        """Run a SELECT and return every row."""
        statement, binds = bind_positional(sql, params)
        logger.debug(f"query: {sql} {list(params)}")

        with cls.get_engine().connect() as conn:
            result = conn.execute(text(statement), binds)
            return [dict(row) for row in result.mappings()]

    @classmethod
    def query_row(cls, sql: str, *params: Any) -> Optional[Dict[str, Any]]:
        """Run a SELECT and return the first row, or None."""
        statement, binds = bind_positional(sql, params)
        logger.debug(f"query_row: {sql} {list(params)}")

        with cls.get_engine().connect() as conn:
            row = conn.execute(text(statement), binds).mappings().first()
            return dict(row) if row is not None else None

    @classmethod
    def execute(cls, sql: str, *params: Any) -> int:
        """Run a write statement in its own transaction.

        Returns:
            Number of affected rows
        """
        statement, binds = bind_positional(sql, params)
        logger.debug(f"execute: {sql} {list(params)}")

        with cls.get_engine().begin() as conn:
            return conn.execute(text(statement), binds).rowcount

    @classmethod
    def execute_statements(cls, statements: Sequence[str]) -> None:
        """Run DDL statements one by one inside a single transaction.

        Used for ``QueryBuilder.get_statements()``, whose trigger statements
        cannot share one call with the table DDL.
        """
        with cls.get_engine().begin() as conn:
            for sql in statements:
                statement, _ = bind_positional(sql, ())
                logger.debug(f"execute_statements: {sql}")
                conn.execute(text(statement))
