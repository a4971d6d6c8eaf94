"""
=================================================
Pytest suite for drydbi/core/logger.py
=================================================

Sections:
---------
1. Unit tests - Logger lookup, formatter and handler setup
2. Edge case tests - Invalid levels and repeated setup

Available markers:
------------------
unit, edge_case

How to Execute:
---------------
All tests:          pytest tests/tests_core/test_logger.py -v
By category:        pytest tests/tests_core/test_logger.py -m unit
"""

import logging

import pytest

from drydbi.core.logger import (
    ColoredFormatter,
    get_logger,
    get_module_logger,
    setup_logging,
)

TEST_LOGGER = 'drydbi_logger_tests'


@pytest.fixture
def isolated_logger():
    """Yield a dedicated logger name and remove its handlers afterwards."""
    yield TEST_LOGGER
    logger = logging.getLogger(TEST_LOGGER)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ===============
# 1. UNIT TESTS
# ===============

@pytest.mark.unit
def test_get_logger_returns_named_logger():
    assert get_logger('drydbi.sql').name == 'drydbi.sql'


@pytest.mark.unit
def test_get_logger_sets_level(isolated_logger):
    logger = get_logger(isolated_logger, level='debug')

    assert logger.level == logging.DEBUG


@pytest.mark.unit
def test_get_module_logger():
    assert get_module_logger(__name__) is logging.getLogger(__name__)


@pytest.mark.unit
def test_colored_formatter_colors_level_only_in_output():
    formatter = ColoredFormatter('%(levelname)s %(message)s')
    record = logging.LogRecord('x', logging.WARNING, __file__, 1, 'careful', None, None)

    output = formatter.format(record)

    assert output == '\033[33mWARNING\033[0m careful'
    assert record.levelname == 'WARNING'


@pytest.mark.unit
def test_setup_logging_console_handler(isolated_logger):
    logger = setup_logging(log_level='INFO', use_colors=False, logger_name=isolated_logger)

    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert not isinstance(logger.handlers[0].formatter, ColoredFormatter)


@pytest.mark.unit
def test_setup_logging_file_handler(isolated_logger, tmp_path):
    logger = setup_logging(
        log_level='DEBUG',
        log_file='dbi.log',
        log_dir=str(tmp_path),
        console_output=False,
        logger_name=isolated_logger
    )

    logger.debug('rendered query')
    for handler in logger.handlers:
        handler.flush()

    content = (tmp_path / 'dbi.log').read_text(encoding='utf-8')
    assert 'DEBUG - rendered query' in content


# ===================
# 2. EDGE CASE TESTS
# ===================

@pytest.mark.edge_case
def test_unknown_level_rejected(isolated_logger):
    with pytest.raises(ValueError):
        get_logger(isolated_logger, level='LOUD')


@pytest.mark.edge_case
def test_setup_logging_replaces_handlers(isolated_logger):
    setup_logging(log_level='INFO', logger_name=isolated_logger)
    logger = setup_logging(log_level='INFO', logger_name=isolated_logger)

    assert len(logger.handlers) == 1


@pytest.mark.edge_case
def test_colored_formatter_unknown_level():
    formatter = ColoredFormatter('%(levelname)s %(message)s')
    record = logging.LogRecord('x', 5, __file__, 1, 'trace', None, None)

    assert formatter.format(record) == 'Level 5 trace'
