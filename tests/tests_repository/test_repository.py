"""
=================================================
Pytest suite for drydbi/repository/repository.py
=================================================

Sections:
---------
1. Unit tests - get/first/amount against a mocked model
2. Integration tests - Repositories over SQLAlchemyModel and SQLite
3. Edge case tests - Missing models and criteria ordering

Available markers:
------------------
unit, integration, edge_case

How to Execute:
---------------
All tests:          pytest tests/tests_repository/test_repository.py -v
By category:        pytest tests/tests_repository/test_repository.py -m integration
"""

import pytest

from drydbi.repository.criteria import (
    CriteriaCollection,
    Equals,
    In,
    IsNull,
    OrderBy,
    OrEquals,
)
from drydbi.repository.repository import BaseRepository, Repository, RepositoryError

# ===============
# 1. UNIT TESTS
# ===============

@pytest.mark.unit
def test_get_selects_all(fake_model, repository_factory):
    repository = repository_factory(fake_model).create()

    result = repository.get()

    fake_model.query.assert_called_once_with('SELECT `users`.* FROM `users`')
    assert result == []


@pytest.mark.unit
def test_first_limits_to_one_row(fake_model, repository_factory):
    fake_model.query_row.return_value = {'id': 1}
    repository = repository_factory(fake_model).create()

    result = repository.first()

    fake_model.query_row.assert_called_once_with('SELECT `users`.* FROM `users` LIMIT ?', 1)
    assert result == {'id': 1}


@pytest.mark.unit
def test_criteria_parameters_are_unpacked(fake_model, repository_factory):
    repository = repository_factory(fake_model).create()
    repository.add_criteria(Equals('status', 'active'))
    repository.add_criteria(OrderBy('name', 'DESC'))

    repository.get()

    fake_model.query.assert_called_once_with(
        'SELECT `users`.* FROM `users` WHERE `users`.`status` = ? ORDER BY `users`.`name` DESC',
        'active'
    )


@pytest.mark.unit
def test_amount_defaults(fake_model, repository_factory):
    repository = repository_factory(fake_model).create().amount()

    repository.get()

    fake_model.query.assert_called_once_with('SELECT `users`.* FROM `users` LIMIT ?', 30)


@pytest.mark.unit
def test_amount_with_offset(fake_model, repository_factory):
    repository = repository_factory(fake_model).create().amount(10, 20)

    repository.get()

    fake_model.query.assert_called_once_with(
        'SELECT `users`.* FROM `users` LIMIT ? OFFSET ?', 10, 20
    )


@pytest.mark.unit
def test_init_hook_registers_criteria(fake_model, repository_factory):
    def init(self):
        self.add_criteria(Equals('status', 'active'))

    repository = repository_factory(fake_model, init=init).create()

    repository.get()

    fake_model.query.assert_called_once_with(
        'SELECT `users`.* FROM `users` WHERE `users`.`status` = ?', 'active'
    )


@pytest.mark.unit
def test_use_query_builder(fake_model, repository_factory):
    repository = repository_factory(fake_model).create()
    repository.use_query_builder(lambda query: query.where('age', '>', 30))

    repository.get()

    fake_model.query.assert_called_once_with(
        'SELECT `users`.* FROM `users` WHERE `users`.`age` > ?', 30
    )


@pytest.mark.unit
def test_create_uses_fresh_collection(fake_model, repository_factory):
    repository_class = repository_factory(fake_model)

    first = repository_class.create()
    first.add_criteria(Equals('a', 1))
    second = repository_class.create()

    second.get()

    fake_model.query.assert_called_once_with('SELECT `users`.* FROM `users`')


@pytest.mark.unit
def test_shared_collection(fake_model, repository_factory):
    collection = CriteriaCollection()
    collection.add_criteria(Equals('role', 'admin'))

    repository = repository_factory(fake_model)(collection)
    repository.get()

    fake_model.query.assert_called_once_with(
        'SELECT `users`.* FROM `users` WHERE `users`.`role` = ?', 'admin'
    )


# ======================
# 2. INTEGRATION TESTS
# ======================

@pytest.mark.integration
def test_repository_get_from_sqlite(user_model, repository_factory):
    repository = repository_factory(user_model).create()
    repository.add_criteria(Equals('status', 'active'))
    repository.add_criteria(OrderBy('name'))

    rows = repository.get()

    assert [row['name'] for row in rows] == ['alice', 'bob']


@pytest.mark.integration
def test_repository_first_from_sqlite(user_model, repository_factory):
    repository = repository_factory(user_model).create()
    repository.add_criteria(OrderBy('age', 'DESC'))

    row = repository.first()

    assert row['name'] == 'carol'
    assert row['age'] == 41


@pytest.mark.integration
def test_repository_first_without_match(user_model, repository_factory):
    repository = repository_factory(user_model).create()
    repository.add_criteria(Equals('name', 'nobody'))

    assert repository.first() is None


@pytest.mark.integration
def test_repository_or_equals_and_in(user_model, repository_factory):
    repository = repository_factory(user_model).create()
    repository.add_criteria(In('status', ['active', 'pending']))
    repository.add_criteria(OrEquals([('role', 'editor'), ('name', 'alice')]))
    repository.add_criteria(OrderBy('name'))

    rows = repository.get()

    assert [row['name'] for row in rows] == ['alice', 'bob', 'carol']


@pytest.mark.integration
def test_repository_is_null(user_model, repository_factory):
    repository = repository_factory(user_model).create()
    repository.add_criteria(IsNull('role'))

    rows = repository.get()

    assert [row['name'] for row in rows] == ['dave']


@pytest.mark.integration
def test_repository_paging(user_model, repository_factory):
    repository = repository_factory(user_model).create()
    repository.add_criteria(OrderBy('name'))
    repository.amount(2, 1)

    rows = repository.get()

    assert [row['name'] for row in rows] == ['bob', 'carol']


# ===================
# 3. EDGE CASE TESTS
# ===================

@pytest.mark.edge_case
def test_repository_without_model_fails():
    with pytest.raises(RepositoryError):
        Repository.create().get()


@pytest.mark.edge_case
def test_criteria_applied_before_direct_uses(fake_model, repository_factory):
    repository = repository_factory(fake_model).create()
    repository.use_query_builder(lambda query: query.order_by('name', 'DESC'))
    repository.add_criteria(OrderBy('name', 'ASC'))

    repository.get()

    fake_model.query.assert_called_once_with(
        'SELECT `users`.* FROM `users` ORDER BY `users`.`name` DESC'
    )


@pytest.mark.edge_case
def test_plain_repository_has_no_amount(fake_model, repository_factory):
    repository = repository_factory(fake_model, base=Repository).create()

    assert not hasattr(repository, 'amount')
    assert isinstance(repository_factory(fake_model).create(), BaseRepository)
