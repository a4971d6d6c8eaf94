"""
=============================
JOIN clause builder.
=============================

Renders one ``{LEFT|RIGHT|INNER} JOIN <table> [AS <alias>] ON ...`` fragment.
QueryBuilder creates one JoinBuilder per joined table and splices its output
into the SELECT statement.

Example:
    >>> join = JoinBuilder().table('users')
    >>> join.set_type('left')
    >>> join.on('posts.user_id', '=', 'users.id')
    >>> join.build()
    >>> join.get_query()
    'LEFT JOIN `users` ON `posts`.`user_id` = `users`.`id`'
"""

from typing import List, Optional, Tuple

from drydbi.sql.build_handler import BuildHandler

JOIN_TYPES = {
    'left': 'LEFT',
    'right': 'RIGHT',
    'inner': 'INNER',
}


class JoinBuilderError(ValueError):
    """Exception raised for invalid join configuration."""
    pass


class JoinBuilder(BuildHandler):
    """Builder for a single JOIN clause."""

    def __init__(self):
        super().__init__()
        self._type: Optional[str] = None
        self._alias: Optional[str] = None
        self._on: List[Tuple[str, str, str, bool]] = []

    def set_type(self, join_type: str) -> 'JoinBuilder':
        """Set the join kind: ``left``, ``right`` or ``inner``.

        Raises:
            JoinBuilderError: For any other kind
        """
        if join_type not in JOIN_TYPES:
            raise JoinBuilderError('Unknown join type')

        self._type = JOIN_TYPES[join_type]
        return self

    def get_type(self) -> Optional[str]:
        return self._type

    def alias(self, alias: str) -> 'JoinBuilder':
        """Render the joined table as ``AS `alias```."""
        self._alias = alias
        return self

    def on(self, field: str, operator: str, value: str, prefix: bool = True) -> 'JoinBuilder':
        """Add an ON condition; conditions are AND-ed together.

        Args:
            field: Left column reference
            operator: Comparison operator
            value: Right column reference
            prefix: When False, bare operands (no ``.``) are quoted without a
                table prefix so aliases can be referenced
        """
        self._on.append((field, operator, value, prefix))
        return self

    def _render_operand(self, operand: str, prefix: bool) -> str:
        if prefix or '.' in operand:
            return self.with_table_prefix(operand)
        return self.quote(operand)

    def build(self):
        if self._type is None:
            raise JoinBuilderError('Join type must be set before building')

        self.add_to_query(f"{self._type} JOIN {self.quote(self.get_table())}")

        if self._alias:
            self.add_to_query(f" AS {self.quote(self._alias)}")

        if self._on:
            conditions = [
                f"{self._render_operand(field, prefix)} {operator} {self._render_operand(value, prefix)}"
                for field, operator, value, prefix in self._on
            ]
            self.add_to_query(' ON ' + ' AND '.join(conditions))
