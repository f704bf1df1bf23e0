"""Root pytest configuration for all tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_wikigraph_logger():
    """Drop handlers the CLI attaches to the package logger between tests."""
    yield
    app_logger = logging.getLogger("wikigraph")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.setLevel(logging.NOTSET)
