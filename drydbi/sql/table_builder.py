"""
====================================================
DDL fragment builder for CREATE and ALTER TABLE.
====================================================

TableBuilder collects column and constraint changes for one table and renders
them as a comma separated fragment list. QueryBuilder wraps the fragment in
``CREATE TABLE `t` (...)`` or ``ALTER TABLE `t` ...``.

Fragment order:
    1. added columns
    2. generated timestamp columns
    3. alter mode only: changed columns, dropped foreign keys, dropped uniques,
       dropped indexes, dropped checks, dropped columns
    4. added foreign keys, uniques, indexes and checks

Timestamp maintenance triggers cannot share a prepared statement with the
table DDL, so they are exposed separately through get_trigger_statements().

Example:
    >>> table = TableBuilder(is_alter=False).table('users')
    >>> table.id()
    >>> table.add_column('email', 'varchar').length(255)
    >>> table.add_unique('email')
    >>> table.timestamps()
    >>> table.build()
    >>> table.get_query()
    '`id` INT(11) NOT NULL AUTO_INCREMENT PRIMARY KEY, `email` VARCHAR(255) NOT NULL, ...'
    >>> table.get_trigger_statements()[0]
    'DROP TRIGGER IF EXISTS `users_created_trigger`'
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from drydbi.core.config import TIMESTAMP_FORMATS, BuilderConfig, config
from drydbi.sql.build_handler import BuildHandler
from drydbi.sql.definitions import (
    CheckDefinition,
    ColumnDefinition,
    DefinitionError,
    ForeignKeyDefinition,
    IndexDefinition,
    UniqueDefinition,
    is_valid_identifier,
)

logger = logging.getLogger(__name__)

UNIX = 'UNIX'
DATETIME = 'DATETIME'

TIMESTAMP_COLUMN_TYPES = {
    UNIX: 'INT UNSIGNED NOT NULL',
    DATETIME: 'TIMESTAMP NOT NULL',
}

TIMESTAMP_NOW = {
    UNIX: 'UNIX_TIMESTAMP()',
    DATETIME: 'CURRENT_TIMESTAMP',
}


@dataclass(frozen=True)
class TimestampConfig:
    """Created/updated column names and the format both columns use."""

    created_column: str
    updated_column: str
    format: str = UNIX


class TableBuilder(BuildHandler):
    """Column and constraint fragments for one table.

    Args:
        is_alter: Render ALTER TABLE fragments (``ADD``/``CHANGE``/``DROP``)
            instead of CREATE TABLE definitions
        settings: Supplies the default timestamp format, the global
            ``config.builder`` when omitted
    """

    def __init__(self, is_alter: bool = False, settings: Optional[BuilderConfig] = None):
        super().__init__()
        self._is_alter = is_alter
        self.settings = settings or config.builder

        self._add_columns: List[ColumnDefinition] = []
        self._change_columns: List[ColumnDefinition] = []
        self._drop_columns: List[str] = []

        self._add_foreign_keys: List[ForeignKeyDefinition] = []
        self._drop_foreign_keys: List[str] = []

        self._add_uniques: List[UniqueDefinition] = []
        self._drop_uniques: List[str] = []

        self._add_indexes: List[IndexDefinition] = []
        self._drop_indexes: List[str] = []

        self._add_checks: List[CheckDefinition] = []
        self._drop_checks: List[str] = []

        self._timestamps: Optional[TimestampConfig] = None
        self._drop_triggers: List[str] = []
        self._trigger_statements: List[str] = []

    @property
    def is_alter(self) -> bool:
        return self._is_alter

    def _require_table(self) -> str:
        table = self.get_table()
        if not table:
            raise DefinitionError('Table name must be set before adding constraints')
        return table

    def _warn_create_mode(self, operation: str) -> None:
        if not self._is_alter:
            logger.warning(
                "%s on table %s is ignored when creating a table", operation, self.get_table()
            )

    # Columns

    def id(
        self,
        name: str = 'id',
        column_type: str = 'int',
        length: Union[int, str] = 11,
        auto_increment: bool = True
    ) -> 'TableBuilder':
        """Add a primary key column, ```id` INT(11) NOT NULL AUTO_INCREMENT PRIMARY KEY`` by default."""
        self.add_column(name, column_type).length(length).primary_key(auto_increment)
        return self

    def add_column(self, name: str, column_type: str) -> ColumnDefinition:
        column = ColumnDefinition(name).type(column_type)
        self._add_columns.append(column)
        return column

    def change_column(self, name: str) -> ColumnDefinition:
        """Change an existing column; configure the returned definition."""
        column = ColumnDefinition(name, True)
        self._change_columns.append(column)
        return column

    def drop_column(self, name: str) -> 'TableBuilder':
        self._warn_create_mode('DROP COLUMN')
        self._drop_columns.append(name)
        return self

    # Foreign keys

    def add_foreign_key(
        self,
        column: str,
        foreign_table: str,
        foreign_column: str = 'id',
        on_delete: Optional[str] = None,
        on_update: Optional[str] = None
    ) -> ForeignKeyDefinition:
        foreign_key = ForeignKeyDefinition(
            self._require_table(), column, foreign_table, foreign_column, on_delete, on_update
        )
        self._add_foreign_keys.append(foreign_key)
        return foreign_key

    def drop_foreign_key(
        self,
        column: str,
        foreign_table: str,
        foreign_column: str = 'id'
    ) -> 'TableBuilder':
        """Drop a foreign key that was added with its default identifier."""
        foreign_key = ForeignKeyDefinition(self._require_table(), column, foreign_table, foreign_column)
        return self.drop_foreign_key_by_identifier(foreign_key.get_identifier())

    def drop_foreign_key_by_identifier(self, identifier: str) -> 'TableBuilder':
        self._warn_create_mode('DROP FOREIGN KEY')
        self._drop_foreign_keys.append(identifier)
        return self

    # Unique constraints

    def add_unique(self, columns: Union[str, Sequence[str]]) -> UniqueDefinition:
        unique = UniqueDefinition(columns)
        self._add_uniques.append(unique)
        return unique

    def drop_unique(self, columns: Union[str, Sequence[str]]) -> 'TableBuilder':
        return self.drop_unique_by_identifier(UniqueDefinition(columns).get_identifier())

    def drop_unique_by_identifier(self, identifier: str) -> 'TableBuilder':
        self._warn_create_mode('DROP UNIQUE')
        self._drop_uniques.append(identifier)
        return self

    # Indexes

    def add_index(self, columns: Union[str, Sequence[str]]) -> IndexDefinition:
        index = IndexDefinition(columns)
        self._add_indexes.append(index)
        return index

    def drop_index(self, columns: Union[str, Sequence[str]]) -> 'TableBuilder':
        return self.drop_index_by_identifier(IndexDefinition(columns).get_identifier())

    def drop_index_by_identifier(self, identifier: str) -> 'TableBuilder':
        self._warn_create_mode('DROP INDEX')
        self._drop_indexes.append(identifier)
        return self

    # Check constraints

    def add_check(self, column: str, expression: str) -> CheckDefinition:
        check = CheckDefinition(column, expression)
        self._add_checks.append(check)
        return check

    def drop_check(self, column: str) -> 'TableBuilder':
        return self.drop_check_by_identifier(CheckDefinition.prefix + column)

    def drop_check_by_identifier(self, identifier: str) -> 'TableBuilder':
        self._warn_create_mode('DROP CHECK')
        self._drop_checks.append(identifier)
        return self

    # Timestamps

    def timestamps(
        self,
        created: str = 'created',
        updated: str = 'updated',
        timestamp_format: Optional[str] = None
    ) -> 'TableBuilder':
        """Add created/updated columns maintained by BEFORE INSERT/UPDATE triggers.

        Args:
            created: Column set on insert
            updated: Column set on insert and update
            timestamp_format: ``UNIX`` (INT UNSIGNED) or ``DATETIME`` (TIMESTAMP),
                defaults to the builder settings (DBI_TIMESTAMP_FORMAT)

        Raises:
            DefinitionError: For invalid column names or an unknown format
        """
        timestamp_format = (timestamp_format or self.settings.timestamp_format).upper()
        if timestamp_format not in TIMESTAMP_FORMATS:
            raise DefinitionError(f"Unknown timestamp format '{timestamp_format}'")

        for column in (created, updated):
            if not is_valid_identifier(column):
                raise DefinitionError('Column name must be a valid identifier')

        self._timestamps = TimestampConfig(created, updated, timestamp_format)
        return self

    def get_timestamps(self) -> Optional[TimestampConfig]:
        return self._timestamps

    def get_generated_trigger_names(self) -> List[str]:
        """Names of the two timestamp triggers for this table."""
        table = self.get_table()
        return [f"{table}_created_trigger", f"{table}_updated_trigger"]

    def drop_timestamp_triggers(self) -> 'TableBuilder':
        """Schedule both generated timestamp triggers for removal."""
        for name in self.get_generated_trigger_names():
            self.drop_timestamp_trigger(name)
        return self

    def drop_timestamp_trigger(self, name: str) -> 'TableBuilder':
        self._drop_triggers.append(name)
        return self

    def get_trigger_statements(self) -> List[str]:
        """Trigger statements rendered by build(), each executed on its own."""
        return list(self._trigger_statements)

    # Rendering

    def _add_prefix(self) -> str:
        return 'ADD ' if self._is_alter else ''

    def _column_list(self, columns: Sequence[str]) -> str:
        return ', '.join(self.quote(column) for column in columns)

    def _render_foreign_key(self, foreign_key: ForeignKeyDefinition) -> str:
        statement = (
            f"{self._add_prefix()}CONSTRAINT {self.quote(foreign_key.get_identifier())} "
            f"FOREIGN KEY ({self.quote(foreign_key.get_column())}) "
            f"REFERENCES {self.quote(foreign_key.get_foreign_table())} "
            f"({self.quote(foreign_key.get_foreign_column())})"
        )
        if foreign_key.get_on_delete():
            statement += f" ON DELETE {foreign_key.get_on_delete()}"
        if foreign_key.get_on_update():
            statement += f" ON UPDATE {foreign_key.get_on_update()}"
        return statement

    def _render_fragments(self) -> List[str]:
        prefix = self._add_prefix()
        fragments = [prefix + column.get_string() for column in self._add_columns]

        if self._timestamps:
            column_type = TIMESTAMP_COLUMN_TYPES[self._timestamps.format]
            for column in (self._timestamps.created_column, self._timestamps.updated_column):
                fragments.append(f"{prefix}{self.quote(column)} {column_type}")

        if self._is_alter:
            fragments.extend('CHANGE ' + column.get_string() for column in self._change_columns)

            for identifier in self._drop_foreign_keys:
                fragments.append(f"DROP INDEX {self.quote(identifier)}")
                fragments.append(f"DROP FOREIGN KEY {self.quote(identifier)}")

            fragments.extend(f"DROP INDEX {self.quote(identifier)}" for identifier in self._drop_uniques)
            fragments.extend(f"DROP INDEX {self.quote(identifier)}" for identifier in self._drop_indexes)
            fragments.extend(f"DROP CHECK {self.quote(identifier)}" for identifier in self._drop_checks)
            fragments.extend(f"DROP COLUMN {self.quote(column)}" for column in self._drop_columns)

        fragments.extend(self._render_foreign_key(foreign_key) for foreign_key in self._add_foreign_keys)

        for unique in self._add_uniques:
            fragments.append(
                f"{prefix}CONSTRAINT {self.quote(unique.get_identifier())} "
                f"UNIQUE ({self._column_list(unique.get_columns())})"
            )

        for index in self._add_indexes:
            fragments.append(
                f"{prefix}INDEX {self.quote(index.get_identifier())} "
                f"({self._column_list(index.get_columns())})"
            )

        for check in self._add_checks:
            fragments.append(
                f"{prefix}CONSTRAINT {self.quote(check.get_identifier())} "
                f"CHECK ({check.get_expression()})"
            )

        return fragments

    def _render_triggers(self) -> List[str]:
        statements = [f"DROP TRIGGER IF EXISTS {self.quote(name)}" for name in self._drop_triggers]

        if not self._timestamps:
            return statements

        table = self.quote(self.get_table())
        now = TIMESTAMP_NOW[self._timestamps.format]
        created = self.quote(self._timestamps.created_column)
        updated = self.quote(self._timestamps.updated_column)
        created_trigger, updated_trigger = (self.quote(name) for name in self.get_generated_trigger_names())

        statements.append(f"DROP TRIGGER IF EXISTS {created_trigger}")
        statements.append(
            f"CREATE TRIGGER {created_trigger} BEFORE INSERT ON {table} FOR EACH ROW "
            f"BEGIN SET NEW.{created} = {now}; SET NEW.{updated} = {now}; END"
        )
        statements.append(f"DROP TRIGGER IF EXISTS {updated_trigger}")
        statements.append(
            f"CREATE TRIGGER {updated_trigger} BEFORE UPDATE ON {table} FOR EACH ROW "
            f"SET NEW.{updated} = {now}"
        )
        return statements

    def build(self):
        self._require_table()

        self.add_to_query(', '.join(self._render_fragments()))
        self._trigger_statements.extend(self._render_triggers())

        logger.debug(
            "Built %s fragments for table %s (%d trigger statements)",
            'ALTER' if self._is_alter else 'CREATE',
            self.get_table(),
            len(self._trigger_statements),
        )
