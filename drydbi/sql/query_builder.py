"""
=========================================================
Fluent SQL statement builder.
=========================================================

QueryBuilder accumulates clauses through chained calls and renders exactly one
kind of statement on build():

    SELECT: select(), select_all() or select_as() were called
    CREATE TABLE: create(callback)
    ALTER TABLE: alter(callback)
    DROP TABLE: drop()
    RENAME TABLE: rename(new_name)

Plain values are never inlined; each one becomes a ``?`` placeholder and is
appended to the parameter list in the same order as its placeholder.

Example:
    >>> from drydbi.sql import QueryBuilder
    >>>
    >>> query = QueryBuilder().table('users')
    >>> query.select_all().where('status', '=', 'active')
    >>> query.where_group(lambda group: (
    ...     group.where('role', '=', 'admin'),
    ...     group.where('role', '=', 'moderator', 'OR'),
    ... ))
    >>> query.order_by('created', 'DESC').limit(10)
    >>> query.build()
    >>> query.get_query()
    'SELECT `users`.* FROM `users` WHERE `users`.`status` = ? AND  ( ... ) ORDER BY ...'
    >>> query.get_parameters()
    ['active', 'admin', 'moderator', 10]

    >>> ddl = QueryBuilder().table('posts')
    >>> ddl.create(lambda table: (table.id(), table.timestamps()))
    >>> ddl.build()
    >>> ddl.get_statements()
    ['CREATE TABLE `posts` (...)', 'DROP TRIGGER IF EXISTS `posts_created_trigger`', ...]
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from drydbi.core.config import BuilderConfig, config
from drydbi.sql.build_handler import BuildHandler
from drydbi.sql.join_builder import JoinBuilder
from drydbi.sql.statement import Raw, Statement
from drydbi.sql.table_builder import TableBuilder

logger = logging.getLogger(__name__)

CONNECTORS = ('AND', 'OR')
SORT_DIRECTIONS = ('ASC', 'DESC')


class QueryBuilderError(ValueError):
    """Exception raised for invalid QueryBuilder usage."""
    pass


# ====================
# Conditions
# ====================

@dataclass(frozen=True)
class Condition:
    """Single ``field operator value`` comparison."""

    field: Statement
    operator: str
    value: Statement
    connector: str = 'AND'


@dataclass(frozen=True)
class ConditionGroup:
    """Parenthesised list of conditions, one level deep."""

    conditions: Tuple[Condition, ...]
    connector: str = 'AND'


ConditionEntry = Union[Condition, ConditionGroup]


def _normalize_connector(connector: str) -> str:
    normalized = (connector or '').upper()
    if normalized not in CONNECTORS:
        raise QueryBuilderError(f"Unknown connector '{connector}', expected AND or OR")
    return normalized


class ConditionScope:
    """Collects the conditions of one group while its callback runs.

    The scope shares the parent's table for column prefixing but owns its own
    condition list; the parent merges that list when the callback returns.
    """

    def __init__(self, builder: 'QueryBuilder'):
        self._builder = builder
        self._conditions: List[Condition] = []

    def _add(self, field: Any, operator: str, value: Any, connector: str) -> None:
        self._conditions.append(self._builder._make_condition(field, operator, value, connector))

    def get_conditions(self) -> Tuple[Condition, ...]:
        return tuple(self._conditions)

    def where_group(self, *args, **kwargs):
        raise QueryBuilderError('Condition groups cannot be nested')

    def having_group(self, *args, **kwargs):
        raise QueryBuilderError('Condition groups cannot be nested')


class WhereScope(ConditionScope):
    """Receiver passed to a ``where_group`` callback."""

    def where(self, field: Any, operator: str, value: Any, connector: str = 'AND') -> 'WhereScope':
        self._add(field, operator, value, connector)
        return self


class HavingScope(ConditionScope):
    """Receiver passed to a ``having_group`` callback."""

    def having(self, field: Any, operator: str, value: Any, connector: str = 'AND') -> 'HavingScope':
        self._add(field, operator, value, connector)
        return self


# ====================
# Query intents
# ====================

@dataclass(frozen=True)
class SelectIntent:
    pass


@dataclass(frozen=True)
class CreateIntent:
    table_builder: TableBuilder


@dataclass(frozen=True)
class AlterIntent:
    table_builder: TableBuilder


@dataclass(frozen=True)
class DropIntent:
    pass


@dataclass(frozen=True)
class RenameIntent:
    new_name: str


QueryIntent = Union[SelectIntent, CreateIntent, AlterIntent, DropIntent, RenameIntent]


class QueryBuilder(BuildHandler):
    """Builds one SELECT or DDL statement for a table.

    Args:
        settings: Table options and timestamp defaults, the global
            ``config.builder`` when omitted
    """

    def __init__(self, settings: Optional[BuilderConfig] = None):
        super().__init__()
        self.settings = settings or config.builder

        self._intent: Optional[QueryIntent] = None
        self._select: List[Statement] = []
        self._joins: Dict[str, JoinBuilder] = {}
        self._where: List[ConditionEntry] = []
        self._having: List[ConditionEntry] = []
        self._group_by: List[Statement] = []
        self._order_by: List[Tuple[Statement, str]] = []
        self._limit: Optional[Statement] = None
        self._offset: Optional[Statement] = None

    # ====================
    # Intent
    # ====================

    def _check_intent(self, intent_type: type) -> None:
        if self._intent is not None and type(self._intent) is not intent_type:
            raise QueryBuilderError(
                f"Cannot combine {intent_type.__name__} with {type(self._intent).__name__}"
            )

    def _set_intent(self, intent: QueryIntent) -> None:
        self._check_intent(type(intent))
        self._intent = intent

    def get_intent(self) -> Optional[QueryIntent]:
        return self._intent

    def _require_table(self, operation: str) -> str:
        if not self.get_table():
            raise QueryBuilderError(f"Table name must be set before {operation}")
        return self.get_table()

    def _column(self, column: Any, operation: str) -> Statement:
        self._require_table(operation)
        return self.create_statement(column, True)

    # ====================
    # Select list
    # ====================

    def select(self, column: Any) -> 'QueryBuilder':
        """Add a column (table-prefixed) or a Raw expression to the select list.

        Raises:
            QueryBuilderError: If no table was set
        """
        column = self._column(column, 'select')
        self._set_intent(SelectIntent())
        self._select.append(column)
        return self

    def select_all(self, table: Optional[str] = None) -> 'QueryBuilder':
        """Select ```table`.*``, the builder's own table by default."""
        own_table = self._require_table('select')
        return self.select(Raw(self.quote(table or own_table) + '.*'))

    def select_as(self, statement: Any, alias: str) -> 'QueryBuilder':
        """Select an expression under an alias; the alias is emitted as given."""
        statement = self._column(statement, 'select')
        return self.select(Raw(f"{statement.value} AS {alias}", statement.bindings))

    # ====================
    # Filters
    # ====================

    def _make_condition(self, field: Any, operator: str, value: Any, connector: str) -> Condition:
        return Condition(
            self._column(field, 'adding conditions'),
            operator,
            self.create_statement(value),
            _normalize_connector(connector),
        )

    def where(self, field: Any, operator: str, value: Any, connector: str = 'AND') -> 'QueryBuilder':
        """Add a WHERE condition.

        Args:
            field: Column reference (``'status'`` or ``'posts.status'``) or Raw
            operator: Comparison operator, emitted as given
            value: Bound value, or Raw to inline trusted SQL
            connector: ``AND`` or ``OR``, ignored for the first condition
        """
        self._where.append(self._make_condition(field, operator, value, connector))
        return self

    def having(self, field: Any, operator: str, value: Any, connector: str = 'AND') -> 'QueryBuilder':
        self._having.append(self._make_condition(field, operator, value, connector))
        return self

    def _collect_group(self, scope: ConditionScope, callback: Callable, connector: str) -> Optional[ConditionGroup]:
        connector = _normalize_connector(connector)
        callback(scope)
        conditions = scope.get_conditions()
        if not conditions:
            logger.debug("Skipping empty condition group on table %s", self.get_table())
            return None
        return ConditionGroup(conditions, connector)

    def where_group(self, callback: Callable[[WhereScope], Any], connector: str = 'AND') -> 'QueryBuilder':
        """Add a parenthesised group of WHERE conditions.

        The callback receives a WhereScope; conditions added to it through
        ``where()`` form the group.

        Example:
            >>> query.where_group(lambda group: (
            ...     group.where('role', '=', 'admin'),
            ...     group.where('role', '=', 'moderator', 'OR'),
            ... ))
        """
        group = self._collect_group(WhereScope(self), callback, connector)
        if group:
            self._where.append(group)
        return self

    def having_group(self, callback: Callable[[HavingScope], Any], connector: str = 'AND') -> 'QueryBuilder':
        group = self._collect_group(HavingScope(self), callback, connector)
        if group:
            self._having.append(group)
        return self

    # ====================
    # Grouping, ordering, paging
    # ====================

    def group_by(self, column: Any) -> 'QueryBuilder':
        self._group_by.append(self._column(column, 'group_by'))
        return self

    def order_by(self, column: Any, direction: str = 'ASC') -> 'QueryBuilder':
        """Order by a column; ordering the same column again replaces the earlier entry."""
        normalized = (direction or '').upper()
        if normalized not in SORT_DIRECTIONS:
            raise QueryBuilderError(f"Unknown sort direction '{direction}', expected ASC or DESC")

        field = self._column(column, 'order_by')
        self._order_by = [entry for entry in self._order_by if entry[0].value != field.value]
        self._order_by.append((field, normalized))
        return self

    def limit(self, limit: Any) -> 'QueryBuilder':
        self._limit = self.create_statement(limit)
        return self

    def offset(self, offset: Any) -> 'QueryBuilder':
        """Set the OFFSET; only rendered together with a LIMIT."""
        self._offset = self.create_statement(offset)
        return self

    # ====================
    # Joins
    # ====================

    def _join(self, join_type: str, table: str) -> JoinBuilder:
        if table in self._joins:
            return self._joins[table]

        join = JoinBuilder().table(table)
        join.set_type(join_type)
        self._joins[table] = join
        return join

    def left_join(self, table: str) -> JoinBuilder:
        """Join a table; a table already joined returns its existing JoinBuilder."""
        return self._join('left', table)

    def right_join(self, table: str) -> JoinBuilder:
        return self._join('right', table)

    def inner_join(self, table: str) -> JoinBuilder:
        return self._join('inner', table)

    # ====================
    # DDL
    # ====================

    def _table_builder(self, is_alter: bool, callback: Callable[[TableBuilder], Any]) -> TableBuilder:
        table_builder = TableBuilder(is_alter, self.settings).table(self.get_table())
        callback(table_builder)
        return table_builder

    def create(self, callback: Callable[[TableBuilder], Any]) -> 'QueryBuilder':
        """CREATE TABLE; the callback defines columns and constraints on a TableBuilder."""
        self._require_table('create')
        self._check_intent(CreateIntent)
        self._set_intent(CreateIntent(self._table_builder(False, callback)))
        return self

    def alter(self, callback: Callable[[TableBuilder], Any]) -> 'QueryBuilder':
        """ALTER TABLE; the callback receives an alter-mode TableBuilder."""
        self._require_table('alter')
        self._check_intent(AlterIntent)
        self._set_intent(AlterIntent(self._table_builder(True, callback)))
        return self

    def drop(self) -> 'QueryBuilder':
        self._require_table('drop')
        self._set_intent(DropIntent())
        return self

    def rename(self, new_name: str) -> 'QueryBuilder':
        self._require_table('rename')
        if not new_name:
            raise QueryBuilderError('New table name cannot be empty')
        self._set_intent(RenameIntent(new_name))
        return self

    # ====================
    # Rendering
    # ====================

    def _splice(self, handler: BuildHandler, separator: str = ' ') -> None:
        handler.build()
        self.add_to_query(separator + handler.get_query())
        self.add_parameters(handler.get_parameters())

    def _render_condition(self, condition: Condition, first: bool) -> str:
        self.add_parameters(condition.field.bindings)
        self.add_parameters(condition.value.bindings)

        text = f"{condition.field.value} {condition.operator} {condition.value.value}"
        return text if first else f"{condition.connector} {text}"

    def _build_conditions(self, entries: List[ConditionEntry], keyword: str) -> None:
        if not entries:
            return

        parts = []
        for position, entry in enumerate(entries):
            if isinstance(entry, ConditionGroup):
                inner = [
                    self._render_condition(condition, index == 0)
                    for index, condition in enumerate(entry.conditions)
                ]
                group = ' ( ' + ' '.join(inner) + ' )'
                parts.append(group if position == 0 else f"{entry.connector} {group}")
            else:
                parts.append(self._render_condition(entry, position == 0))

        self.add_to_query(f" {keyword} " + ' '.join(parts))

    def _build_statement_list(self, statements: List[Statement], keyword: str) -> None:
        if not statements:
            return
        for statement in statements:
            self.add_parameters(statement.bindings)
        self.add_to_query(f" {keyword} " + ', '.join(statement.value for statement in statements))

    def _ignored_clauses(self) -> List[str]:
        clauses = {
            'join': self._joins,
            'where': self._where,
            'group_by': self._group_by,
            'having': self._having,
            'order_by': self._order_by,
            'limit': self._limit is not None,
            'offset': self._offset is not None,
        }
        return [name for name, present in clauses.items() if present]

    def _build_select(self) -> None:
        self._require_table('select')
        for statement in self._select:
            self.add_parameters(statement.bindings)
        columns = ', '.join(statement.value for statement in self._select)
        self.add_to_query(f"SELECT {columns} FROM {self.quote(self.get_table())}")

        for join in self._joins.values():
            self._splice(join)

        self._build_conditions(self._where, 'WHERE')
        self._build_statement_list(self._group_by, 'GROUP BY')
        self._build_conditions(self._having, 'HAVING')

        if self._order_by:
            for statement, _ in self._order_by:
                self.add_parameters(statement.bindings)
            self.add_to_query(' ORDER BY ' + ', '.join(
                f"{statement.value} {direction}" for statement, direction in self._order_by
            ))

        if self._limit is not None:
            self.add_to_query(f" LIMIT {self._limit.value}")
            self.add_parameters(self._limit.bindings)

            if self._offset is not None:
                self.add_to_query(f" OFFSET {self._offset.value}")
                self.add_parameters(self._offset.bindings)

    def build(self):
        """Render the configured statement into the query buffer.

        Building again appends a second rendering to the same buffer.
        """
        intent = self._intent
        table = self.quote(self.get_table())

        if intent is None:
            logger.debug("Nothing to build for table %s", self.get_table())
            return

        if not isinstance(intent, SelectIntent):
            ignored = self._ignored_clauses()
            if ignored:
                logger.warning(
                    "%s on table %s is ignored by %s",
                    ', '.join(ignored), self.get_table(), type(intent).__name__
                )

        if isinstance(intent, SelectIntent):
            self._build_select()
        elif isinstance(intent, CreateIntent):
            intent.table_builder.build()
            self.add_to_query(
                f"CREATE TABLE {table} ({intent.table_builder.get_query()})"
                + self.settings.table_options()
            )
        elif isinstance(intent, AlterIntent):
            intent.table_builder.build()
            self.add_to_query(f"ALTER TABLE {table} {intent.table_builder.get_query()}")
        elif isinstance(intent, DropIntent):
            self.add_to_query(f"DROP TABLE {table}")
        elif isinstance(intent, RenameIntent):
            self.add_to_query(f"RENAME TABLE {table} TO {self.quote(intent.new_name)}")

        logger.debug("Built %s: %s %s", type(intent).__name__, self.get_query(), self.get_parameters())

    def get_statements(self) -> List[str]:
        """Independently executable statements, table DDL first then triggers.

        Returns:
            Empty list before build(), otherwise the query followed by any
            timestamp trigger statements of a CREATE or ALTER
        """
        if not self.get_query():
            return []

        statements = [self.get_query()]
        if isinstance(self._intent, (CreateIntent, AlterIntent)):
            statements.extend(self._intent.table_builder.get_trigger_statements())
        return statements
