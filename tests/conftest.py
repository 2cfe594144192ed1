"""Pytest configuration and fixtures."""

import io
import logging

import pytest

from assertkit.facade import reset_default_handler
from assertkit.handler import AssertHandler


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Strip handlers that tests attached to assertkit loggers."""
    yield

    names = [
        name
        for name in logging.Logger.manager.loggerDict.keys()
        if name.startswith("assertkit")
    ]

    for name in names:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def isolated_default_handler():
    """Every test starts with a fresh process default handler."""
    reset_default_handler()
    yield
    reset_default_handler()


class ExitRecorder:
    """Termination action that records status codes instead of exiting."""

    def __init__(self):
        self.codes = []

    def __call__(self, code):
        self.codes.append(code)


@pytest.fixture
def exits():
    return ExitRecorder()


@pytest.fixture
def buffer():
    return io.StringIO()


@pytest.fixture
def handler(buffer, exits):
    """Handler writing to an in-memory buffer with a recording exit."""
    return AssertHandler(writer=buffer, exit_func=exits)
