from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_schemaids_logger():
    """Let pytest capture schemaids logs even after the CLI configured handlers."""
    yield
    logger = logging.getLogger("schemaids")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
