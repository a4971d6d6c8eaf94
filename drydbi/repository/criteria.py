"""
=============================================
Reusable query criteria for repositories.
=============================================

A criterion is a small object that applies one predicate, ordering or paging
rule to a QueryBuilder. Repositories collect criteria and apply them in the
order they were added.

Example:
    >>> from drydbi.repository.criteria import Equals, OrderBy, LimitOffset
    >>>
    >>> query = QueryBuilder().table('users').select_all()
    >>> for criterion in (Equals('status', 'active'), OrderBy('name'), LimitOffset(10, 20)):
    ...     criterion.apply(query)
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Sequence, Tuple

from drydbi.sql.query_builder import QueryBuilder
from drydbi.sql.statement import Raw


class Criteria(ABC):
    """A rule that modifies a QueryBuilder."""

    @abstractmethod
    def apply(self, query_builder: QueryBuilder) -> None:
        """Apply the rule to the builder."""


class _Comparison(Criteria):
    operator = '='

    def __init__(self, column: Any, value: Any):
        self.column = column
        self.value = value

    def apply(self, query_builder: QueryBuilder) -> None:
        query_builder.where(self.column, self.operator, self.value)

    def __repr__(self):
        return f"{type(self).__name__}({self.column!r}, {self.value!r})"


class Equals(_Comparison):
    operator = '='


class NotEquals(_Comparison):
    operator = '!='


class GreaterThan(_Comparison):
    operator = '>'


class GreaterThanOrEqual(_Comparison):
    operator = '>='


class LessThan(_Comparison):
    operator = '<'


class LessThanOrEqual(_Comparison):
    operator = '<='


class In(Criteria):
    """``column IN (...)`` with the values written into the SQL text.

    Strings are wrapped in single quotes without escaping and nothing is bound,
    so only trusted values may be passed.
    """

    def __init__(self, column: Any, values: Iterable[Any]):
        self.column = column
        self.values = list(values)

    def _render_value(self, value: Any) -> str:
        if isinstance(value, str):
            return f"'{value}'"
        return str(value)

    def apply(self, query_builder: QueryBuilder) -> None:
        rendered = ','.join(self._render_value(value) for value in self.values)
        query_builder.where(self.column, 'IN', Raw(f"({rendered})"))


class _IsLiteral(Criteria):
    operator = 'IS'
    literal = 'NULL'

    def __init__(self, column: Any):
        self.column = column

    def apply(self, query_builder: QueryBuilder) -> None:
        query_builder.where(self.column, self.operator, Raw(self.literal))


class IsNull(_IsLiteral):
    pass


class NotNull(_IsLiteral):
    operator = 'IS NOT'


class IsTrue(_IsLiteral):
    literal = 'TRUE'


class IsFalse(_IsLiteral):
    literal = 'FALSE'


class OrEquals(Criteria):
    """Match any of several ``column = value`` pairs.

    Renders as one AND-connected group: ``AND ( a = ? OR b = ? )``.

    Args:
        criteria: Sequence of ``(column, value)`` pairs
    """

    def __init__(self, criteria: Sequence[Tuple[Any, Any]]):
        self.criteria = list(criteria)

    def apply(self, query_builder: QueryBuilder) -> None:
        def add_alternatives(group):
            for column, value in self.criteria:
                group.where(column, '=', value, 'OR')

        query_builder.where_group(add_alternatives, 'AND')


class OrderBy(Criteria):
    def __init__(self, column: Any, order: str = 'ASC'):
        self.column = column
        self.order = order

    def apply(self, query_builder: QueryBuilder) -> None:
        query_builder.order_by(self.column, self.order)


class GroupBy(Criteria):
    def __init__(self, column: Any):
        self.column = column

    def apply(self, query_builder: QueryBuilder) -> None:
        query_builder.group_by(self.column)


class LimitOffset(Criteria):
    """LIMIT with an optional OFFSET; an offset of 0 is not rendered."""

    def __init__(self, limit: int, offset: int = 0):
        self.limit = limit
        self.offset = offset

    def apply(self, query_builder: QueryBuilder) -> None:
        query_builder.limit(self.limit)

        if self.offset:
            query_builder.offset(self.offset)


class CriteriaCollection:
    """Ordered collection of criteria."""

    def __init__(self):
        self._criteria: List[Criteria] = []

    def add_criteria(self, criteria: Criteria) -> None:
        self._criteria.append(criteria)

    def get_criteria(self) -> List[Criteria]:
        return list(self._criteria)

    def __len__(self):
        return len(self._criteria)
