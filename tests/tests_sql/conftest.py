"""
Shared fixtures for drydbi.sql tests.

Key fixtures:
- query_factory: returns a QueryBuilder for a table, using environment-independent settings.
- table_factory: returns a TableBuilder for a table in create or alter mode.
- built: builds a builder and returns (query, parameters).
"""

import pytest

from drydbi.sql.query_builder import QueryBuilder
from drydbi.sql.table_builder import TableBuilder


@pytest.fixture
def query_factory(builder_settings):
    """
    Factory that creates a QueryBuilder bound to a table.
    """
    def factory(table='users', settings=None):
        return QueryBuilder(settings or builder_settings).table(table)

    return factory


@pytest.fixture
def table_factory(builder_settings):
    """
    Factory that creates a TableBuilder bound to a table.
    """
    def factory(table='users', is_alter=False, settings=None):
        return TableBuilder(is_alter, settings or builder_settings).table(table)

    return factory


@pytest.fixture
def built():
    """
    Build a handler and return its rendered query and parameters.
    """
    def build(handler):
        handler.build()
        return handler.get_query(), handler.get_parameters()

    return build
