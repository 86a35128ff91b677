import logging

import pytest

from petroleum_ops.core.logger import HANDLER_NAME, LOGGER_NAME, setup_logging


@pytest.fixture
def app_logger():
    app_logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(app_logger.handlers), app_logger.level
    yield app_logger
    app_logger.handlers[:] = handlers
    app_logger.setLevel(level)


def test_setup_logging_is_idempotent(app_logger):
    setup_logging("DEBUG")
    setup_logging("WARNING")

    named = [h for h in app_logger.handlers if h.get_name() == HANDLER_NAME]
    assert len(named) == 1
    assert app_logger.level == logging.WARNING


def test_module_loggers_inherit_application_handler(app_logger):
    setup_logging("INFO")

    child = logging.getLogger("petroleum_ops.services.milestone_service")

    assert child.getEffectiveLevel() == logging.INFO
    assert child.propagate
