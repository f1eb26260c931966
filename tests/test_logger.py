"""Tests for siteremap logging setup."""
import logging

import pytest

from siteremap.core import logger as logger_module
from siteremap.core.logger import PACKAGE_LOGGER, get_logger, setup_file_logging


@pytest.fixture(autouse=True)
def detach_file_handler():
    yield
    handler = logger_module._file_handler
    if handler is not None:
        logging.getLogger(PACKAGE_LOGGER).removeHandler(handler)
        handler.close()
        logger_module._file_handler = None
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.INFO)


def test_module_loggers_share_package_handler():
    log = get_logger('siteremap.services.remap.steps')

    assert log.name == 'siteremap.services.remap.steps'
    assert log.handlers == []
    assert logging.getLogger(PACKAGE_LOGGER).handlers


def test_foreign_names_are_nested_under_package():
    assert get_logger('helpers').name == 'siteremap.helpers'


def test_default_log_file_beside_sites_file(tmp_path, monkeypatch):
    monkeypatch.setenv('SITEREMAP_SITES_FILE', str(tmp_path / 'state' / 'sites.json'))

    target = setup_file_logging()

    assert target == tmp_path / 'state' / 'siteremap.log'
    assert 'Logging to' in target.read_text()


def test_setup_again_switches_file(tmp_path):
    first = setup_file_logging(log_file=str(tmp_path / 'one.log'))
    second = setup_file_logging(log_file=str(tmp_path / 'two.log'), verbose=True)

    get_logger('siteremap.test').debug("debug detail")

    assert 'debug detail' not in first.read_text()
    assert 'debug detail' in second.read_text()
