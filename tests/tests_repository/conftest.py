"""
Shared fixtures for drydbi.repository tests.

Key fixtures:
- fake_model: MagicMock standing in for a model collaborator on the `users` table.
- repository_factory: builds a repository subclass bound to a model.
- sqlite_engine: in-memory SQLite engine shared across connections.
- user_model: SQLAlchemyModel subclass for a seeded `users` table.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from drydbi.repository.model import SQLAlchemyModel
from drydbi.repository.repository import BaseRepository

USERS = [
    ('alice', 'active', 'admin', 34),
    ('bob', 'active', 'editor', 27),
    ('carol', 'pending', 'editor', 41),
    ('dave', 'banned', None, 19),
]


@pytest.fixture
def fake_model():
    """
    Model collaborator mock; query/query_row record the (sql, *params) they receive.
    """
    model = MagicMock()
    model.TABLE = 'users'
    model.query.return_value = []
    model.query_row.return_value = None
    return model


@pytest.fixture
def repository_factory():
    """
    Factory that creates a repository subclass bound to a model, optionally with an init hook.
    """
    def factory(model, init=None, base=BaseRepository):
        attributes = {'model': model}
        if init is not None:
            attributes['init'] = init
        return type('UserRepository', (base,), attributes)

    return factory


@pytest.fixture
def sqlite_engine():
    """
    In-memory SQLite engine; StaticPool keeps one connection so the data survives.
    """
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    yield engine
    engine.dispose()


@pytest.fixture
def user_model(sqlite_engine):
    """
    SQLAlchemyModel subclass for a seeded `users` table.
    """
    class User(SQLAlchemyModel):
        TABLE = 'users'

    User.engine = sqlite_engine
    User.execute_statements([
        "CREATE TABLE `users` ("
        "`id` INTEGER PRIMARY KEY AUTOINCREMENT, "
        "`name` VARCHAR(100) NOT NULL, "
        "`status` VARCHAR(20) NOT NULL, "
        "`role` VARCHAR(20) NULL, "
        "`age` INTEGER NOT NULL)"
    ])

    for name, status, role, age in USERS:
        User.execute(
            "INSERT INTO `users` (`name`, `status`, `role`, `age`) VALUES (?, ?, ?, ?)",
            name, status, role, age
        )

    return User
