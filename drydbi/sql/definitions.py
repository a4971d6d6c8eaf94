"""
=====================================================
Schema definition value objects for the TableBuilder.
=====================================================

Each definition describes one schema fragment:

    ColumnDefinition: a column, rendered by get_string()
    ForeignKeyDefinition: FOREIGN KEY constraint
    UniqueDefinition: UNIQUE constraint, single column or composite
    IndexDefinition: secondary index, single column or composite
    CheckDefinition: CHECK constraint

Constraint definitions derive a deterministic default identifier from their
columns (``fk_``, ``uq_``, ``idx_`` and ``chk_`` prefixes). Because the default
is a pure function of the inputs, a fragment added with its default identifier
can be dropped later by describing the same columns again.

Example:
    >>> from drydbi.sql.definitions import IndexDefinition, ForeignKeyDefinition
    >>>
    >>> IndexDefinition(['a', 'b']).get_identifier()
    'idx_a_b'
    >>> ForeignKeyDefinition('posts', 'user_id', 'users', 'id').get_identifier()
    'fk_posts_user_id_users_id'
"""

import re
from typing import Any, List, Optional, Sequence, Tuple, Union

from drydbi.sql.statement import Raw

IDENTIFIER_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')

# Marks a column without a DEFAULT clause; None means DEFAULT NULL
NO_DEFAULT = object()


class DefinitionError(ValueError):
    """Exception raised when a definition is given invalid input."""
    pass


def is_valid_identifier(identifier: str) -> bool:
    """Check that a name is a plain SQL identifier (letters, digits, underscores)."""
    return bool(identifier) and IDENTIFIER_PATTERN.match(identifier) is not None


def _normalize_columns(columns: Union[str, Sequence[str]]) -> Tuple[str, ...]:
    normalized = (columns,) if isinstance(columns, str) else tuple(columns)

    if not normalized:
        raise DefinitionError('At least one column is required')

    for column in normalized:
        if not is_valid_identifier(column):
            raise DefinitionError(f"Column name '{column}' must be a valid identifier")

    return normalized


class ColumnDefinition:
    """A column for CREATE TABLE / ALTER TABLE.

    In alter mode the column renders as ```name` `new_name` ...`` so it can be
    used with CHANGE; the new name defaults to the current one.

    Args:
        name: Column name, must match ``^[a-zA-Z_][a-zA-Z0-9_]*$``
        is_alter: Render the CHANGE form with the (new) name repeated

    Raises:
        DefinitionError: If the name is not a valid identifier
    """

    def __init__(self, name: str, is_alter: bool = False):
        if not is_valid_identifier(name):
            raise DefinitionError('Column name must be a valid identifier')

        self.name = name
        self.is_alter = is_alter
        self.new_name: Optional[str] = None
        self.column_type = ''
        self.column_length: Optional[Union[int, str]] = None
        self.generate_query: Optional[str] = None
        self.nullable = False
        self.default_value: Any = NO_DEFAULT
        self.is_auto_increment = False
        self.is_primary_key = False

    def type(self, column_type: str) -> 'ColumnDefinition':
        if not column_type:
            raise DefinitionError('Column type cannot be empty')
        self.column_type = column_type
        return self

    def rename(
        self,
        name: str,
        column_type: str,
        length: Optional[Union[int, str]] = None
    ) -> 'ColumnDefinition':
        """Give the column a new name and type (alter mode).

        Raises:
            DefinitionError: If the new name is invalid or the type is empty
        """
        if not is_valid_identifier(name):
            raise DefinitionError('New column name must be a valid identifier')
        if not column_type:
            raise DefinitionError('Column type cannot be empty')

        self.new_name = name
        self.column_type = column_type

        if length:
            self.column_length = length

        return self

    def length(self, length: Union[int, str]) -> 'ColumnDefinition':
        """Set the type length, e.g. ``255`` or ``'10,2'``."""
        self.column_length = length
        return self

    def primary_key(self, auto_increment: bool = True) -> 'ColumnDefinition':
        self.is_auto_increment = auto_increment
        self.is_primary_key = True
        return self

    def auto_increment(self) -> 'ColumnDefinition':
        self.is_auto_increment = True
        return self

    def null(self) -> 'ColumnDefinition':
        self.nullable = True
        return self

    def not_null(self) -> 'ColumnDefinition':
        self.nullable = False
        return self

    def default(self, value: Any) -> 'ColumnDefinition':
        """Set the DEFAULT clause.

        A Raw value is emitted unescaped in parentheses (``DEFAULT (JSON_ARRAY())``),
        strings are single-quoted and ``None`` renders ``DEFAULT NULL``.
        DDL takes no parameters, so bindings carried by a Raw default are
        discarded; put the literal values into the Raw text instead.
        """
        self.default_value = value
        return self

    def generate(self, query: str) -> 'ColumnDefinition':
        """Make this a generated column computed from ``query``."""
        self.generate_query = query
        return self

    def _render_default(self) -> str:
        value = self.default_value

        if isinstance(value, Raw):
            return f"DEFAULT ({value.value})"
        if isinstance(value, str):
            escaped = value.replace("'", "''")
            return f"DEFAULT '{escaped}'"
        if value is None:
            return 'DEFAULT NULL'
        if isinstance(value, bool):
            return 'DEFAULT TRUE' if value else 'DEFAULT FALSE'
        return f"DEFAULT {value}"

    def get_string(self) -> str:
        """Render the column definition.

        Returns:
            Column DDL fragment, e.g. ```id` INT NOT NULL AUTO_INCREMENT PRIMARY KEY``
        """
        name = f"`{self.name}`"
        if self.is_alter:
            name += f" `{self.new_name or self.name}`"

        statement = [name]

        if self.column_type:
            column_type = self.column_type.upper()
            if self.column_length is not None:
                column_type += f"({self.column_length})"
            statement.append(column_type)

        # Generated columns take no NULL/DEFAULT/key clauses
        if self.generate_query:
            statement.append(f"GENERATED ALWAYS as ({self.generate_query})")
            return ' '.join(statement)

        statement.append('NULL' if self.nullable else 'NOT NULL')

        if self.default_value is not NO_DEFAULT:
            statement.append(self._render_default())

        if self.is_auto_increment:
            statement.append('AUTO_INCREMENT')

        if self.is_primary_key:
            statement.append('PRIMARY KEY')

        return ' '.join(statement)

    def __repr__(self):
        return f"ColumnDefinition({self.get_string()!r})"


class ConstraintDefinition:
    """Columns plus an identifier that defaults to ``<prefix><columns>``.

    The default identifier is derived once from the immutable columns; calling
    ``identifier()`` only sets an override.
    """

    prefix = ''

    def __init__(self, columns: Union[str, Sequence[str]]):
        self._columns = _normalize_columns(columns)
        self._identifier_override: Optional[str] = None

    @property
    def default_identifier(self) -> str:
        return self.prefix + '_'.join(self._columns)

    def identifier(self, identifier_name: str):
        """Override the generated identifier."""
        if not is_valid_identifier(identifier_name):
            raise DefinitionError(f"Identifier '{identifier_name}' must be a valid identifier")
        self._identifier_override = identifier_name
        return self

    def get_identifier(self) -> str:
        return self._identifier_override or self.default_identifier

    def get_columns(self) -> List[str]:
        return list(self._columns)

    def is_composite(self) -> bool:
        return len(self._columns) > 1

    def __repr__(self):
        return f"{type(self).__name__}({self.get_columns()!r}, identifier={self.get_identifier()!r})"


class IndexDefinition(ConstraintDefinition):
    """Secondary index over one or more columns (``idx_`` prefix)."""

    prefix = 'idx_'


class UniqueDefinition(ConstraintDefinition):
    """UNIQUE constraint over one or more columns (``uq_`` prefix)."""

    prefix = 'uq_'

    def get_column(self) -> str:
        """First column, for single-column constraints."""
        return self._columns[0]


class CheckDefinition(ConstraintDefinition):
    """CHECK constraint.

    The expression is the full condition without surrounding parentheses,
    e.g. ```status` IN (0, 1, 2, 3)``; the column only names the constraint.

    Raises:
        DefinitionError: If the column or the expression is empty
    """

    prefix = 'chk_'

    def __init__(self, column: str, expression: str):
        if not column:
            raise DefinitionError('Check constraint column cannot be empty')
        if not expression or not expression.strip():
            raise DefinitionError('Check constraint expression cannot be empty')

        super().__init__(column)
        self._expression = expression

    def get_column(self) -> str:
        return self._columns[0]

    def get_expression(self) -> str:
        return self._expression


class ForeignKeyDefinition(ConstraintDefinition):
    """FOREIGN KEY constraint from ``table.column`` to ``foreign_table.foreign_column``.

    The default identifier folds in both sides:
    ``fk_<table>_<column>_<foreign_table>_<foreign_column>``.

    Args:
        table: Table owning the constraint
        column: Referencing column
        foreign_table: Referenced table
        foreign_column: Referenced column
        on_delete: Optional ON DELETE action (CASCADE, SET NULL, ...)
        on_update: Optional ON UPDATE action

    Raises:
        DefinitionError: If any of the table or column names is empty
    """

    prefix = 'fk_'

    def __init__(
        self,
        table: str,
        column: str,
        foreign_table: str,
        foreign_column: str = 'id',
        on_delete: Optional[str] = None,
        on_update: Optional[str] = None
    ):
        for label, value in (
            ('table', table),
            ('column', column),
            ('foreign table', foreign_table),
            ('foreign column', foreign_column),
        ):
            if not value:
                raise DefinitionError(f"Foreign key {label} cannot be empty")

        super().__init__(column)
        self._table = table
        self._foreign_table = foreign_table
        self._foreign_column = foreign_column
        self._on_delete = on_delete or None
        self._on_update = on_update or None

    @property
    def default_identifier(self) -> str:
        return f"fk_{self._table}_{self.get_column()}_{self._foreign_table}_{self._foreign_column}"

    def get_table(self) -> str:
        return self._table

    def get_column(self) -> str:
        return self._columns[0]

    def get_foreign_table(self) -> str:
        return self._foreign_table

    def get_foreign_column(self) -> str:
        return self._foreign_column

    def get_on_delete(self) -> Optional[str]:
        return self._on_delete

    def get_on_update(self) -> Optional[str]:
        return self._on_update
