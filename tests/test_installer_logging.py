"""Console logging setup"""

import logging

import pytest

from installer_logging import reset_logging, setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    reset_logging()


def test_messages_carry_installer_prefix(capsys):
    setup_logging('INFO')
    logging.getLogger('install_orchestrator').info("Starting ...")
    assert 'VRCFury Installer > Starting ...' in capsys.readouterr().err


def test_repeated_setup_does_not_duplicate(capsys):
    setup_logging('INFO')
    setup_logging('INFO')
    logging.getLogger('manifest_store').info("once")
    assert capsys.readouterr().err.count('once') == 1


def test_level_is_applied(capsys):
    setup_logging('WARNING')
    logging.getLogger('directory_swapper').info("hidden")
    assert 'hidden' not in capsys.readouterr().err
