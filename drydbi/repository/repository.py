"""
==============================================
Criteria-driven repositories.
==============================================

A Repository turns collected criteria into a SELECT on its model's table and
hands the rendered ``(sql, *params)`` to the model's ``query`` (all rows) or
``query_row`` (first row) entry points.

Example:
    >>> class ActiveUsers(BaseRepository):
    ...     model = User
    ...
    ...     def init(self):
    ...         self.add_criteria(Equals('status', 'active'))
    ...
    >>> rows = ActiveUsers.create().amount(10).get()
"""

import logging
from typing import Any, Callable, List, Optional

from drydbi.repository.criteria import Criteria, CriteriaCollection, LimitOffset
from drydbi.sql.query_builder import QueryBuilder

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Exception raised when a repository is used without a model."""
    pass


class Repository:
    """Base repository.

    Subclasses set ``model`` to a class exposing ``TABLE``, ``query`` and
    ``query_row`` (see SQLAlchemyModel) and may override ``init()`` to
    register their default criteria.

    Args:
        criteria: Collection to add criteria to, a new one when omitted
    """

    model: Any = None

    def __init__(self, criteria: Optional[CriteriaCollection] = None):
        self._criteria = criteria if criteria is not None else CriteriaCollection()
        self._query_builder_uses: List[Callable[[QueryBuilder], Any]] = []
        self.init()

    @classmethod
    def create(cls):
        """Create a repository with an empty criteria collection."""
        return cls(CriteriaCollection())

    def init(self) -> None:
        """Hook called once after construction."""

    def add_criteria(self, criteria: Criteria) -> None:
        self._criteria.add_criteria(criteria)

    def use_query_builder(self, call: Callable[[QueryBuilder], Any]) -> None:
        """Register a callable that receives the QueryBuilder after the criteria."""
        self._query_builder_uses.append(call)

    def _create_query_builder(self) -> QueryBuilder:
        if self.model is None:
            raise RepositoryError(f"{type(self).__name__} has no model")

        query_builder = QueryBuilder().table(self.model.TABLE)

        for criterion in self._criteria.get_criteria():
            criterion.apply(query_builder)

        for use in self._query_builder_uses:
            use(query_builder)

        return query_builder

    def _get_query(self, query_builder: QueryBuilder) -> list:
        query_builder.build()
        logger.debug(
            "%s applying %d criteria to %s", type(self).__name__, len(self._criteria), self.model.TABLE
        )
        return [query_builder.get_query()] + query_builder.get_parameters()

    def get(self):
        """Fetch every row matching the criteria."""
        query_builder = self._create_query_builder()
        query_builder.select_all()

        return self.model.query(*self._get_query(query_builder))

    def first(self):
        """Fetch the first row matching the criteria, or None."""
        query_builder = self._create_query_builder()
        query_builder.select_all()
        query_builder.limit(1)

        return self.model.query_row(*self._get_query(query_builder))


class BaseRepository(Repository):
    """Repository with paging."""

    def amount(self, amount: int = 30, offset: int = 0) -> 'BaseRepository':
        """Limit the result to ``amount`` rows starting at ``offset``."""
        self.add_criteria(LimitOffset(amount, offset))
        return self
