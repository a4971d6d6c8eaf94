"""
=====================================
Repository and criteria package.
=====================================

Modules:
    criteria: Reusable where/order/paging rules and CriteriaCollection
    repository: Repository and BaseRepository
    model: SQLAlchemyModel, the collaborator that executes rendered SQL
"""

__all__ = [
    # Criteria
    'Criteria', 'CriteriaCollection',
    'Equals', 'NotEquals', 'GreaterThan', 'GreaterThanOrEqual',
    'LessThan', 'LessThanOrEqual', 'In', 'IsNull', 'NotNull',
    'IsTrue', 'IsFalse', 'OrEquals', 'OrderBy', 'GroupBy', 'LimitOffset',
    # Repositories
    'Repository', 'BaseRepository', 'RepositoryError',
    # Model
    'SQLAlchemyModel',
]

from .criteria import (
    Criteria,
    CriteriaCollection,
    Equals,
    GreaterThan,
    GreaterThanOrEqual,
    GroupBy,
    In,
    IsFalse,
    IsNull,
    IsTrue,
    LessThan,
    LessThanOrEqual,
    LimitOffset,
    NotEquals,
    NotNull,
    OrderBy,
    OrEquals,
)
from .model import SQLAlchemyModel
from .repository import BaseRepository, Repository, RepositoryError
