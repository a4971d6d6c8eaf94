"""
==============================================
Shared accumulator base for the SQL builders.
==============================================

BuildHandler owns the target table, an append-only query buffer and an
append-only parameter list. Subclasses render into the buffer from ``build()``.

The positional binding contract: the Nth ``?`` in the buffer binds to the Nth
entry of the parameter list, so text and parameters must always be appended in
the same left-to-right order.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional

from drydbi.sql.statement import ComputedStatement, Statement


class BuildHandler(ABC):
    """Base class for every builder: quoting, prefixing and output buffers."""

    def __init__(self):
        self._table: Optional[str] = None
        self._query = ''
        self._parameters: List[Any] = []

    @abstractmethod
    def build(self):
        """Render the builder's configuration into the query buffer."""

    @staticmethod
    def quote(token: str) -> str:
        """Wrap a single identifier token in backticks.

        Embedded backticks are not escaped; tokens are trusted identifiers.
        """
        return f"`{token}`"

    def with_table_prefix(self, column_name: str) -> str:
        """Quote a column reference, prefixing it with a table.

        ``'posts.user_id'`` becomes ```posts`.`user_id``` and a bare ``'name'``
        uses the handler's own table.
        """
        table, column = self._table, column_name
        parts = column_name.split('.', 1)

        if len(parts) > 1:
            table, column = parts

        return f"{self.quote(table)}.{self.quote(column)}"

    def create_statement(self, value: Any, use_table_prefix: bool = False) -> Statement:
        """Turn a caller value into a Statement.

        Args:
            value: A Statement (returned unchanged), a column reference or a plain value
            use_table_prefix: Treat ``value`` as a column reference instead of a parameter

        Returns:
            Statement for the value
        """
        if isinstance(value, Statement):
            return value

        if use_table_prefix:
            return ComputedStatement.identifier(self.with_table_prefix(value))

        return ComputedStatement.parameter(value)

    def get_table(self) -> Optional[str]:
        return self._table

    def table(self, table_name: str):
        """Set the table this builder works on."""
        self._table = table_name
        return self

    def add_to_query(self, query_part: str) -> None:
        self._query += query_part

    def add_parameter(self, value: Any) -> None:
        self._parameters.append(value)

    def add_parameters(self, values: Iterable[Any]) -> None:
        for value in values:
            self.add_parameter(value)

    def get_query(self) -> str:
        return self._query

    def get_parameters(self) -> List[Any]:
        return list(self._parameters)
