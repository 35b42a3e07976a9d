"""Pytest configuration and fixtures."""

import logging

import pytest

pytest_plugins = ["pytester", "assertlite.plugin"]


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Clean up assertlite loggers after each test."""
    yield

    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("assertlite"):
            logger = logging.getLogger(name)
            logger.handlers.clear()
            logger.propagate = True


class Aborted(BaseException):
    """Raised by RecordingTB.fatalf to unwind the test like a real fatal report."""


class RecordingTB:
    """Test context that records every call instead of reporting to pytest."""

    def __init__(self) -> None:
        self.helper_calls = 0
        self.errors: list[str] = []
        self.fatals: list[str] = []

    def helper(self) -> None:
        self.helper_calls += 1

    def errorf(self, format: str, *args) -> None:
        self.errors.append(format % args if args else format)

    def fatalf(self, format: str, *args) -> None:
        self.fatals.append(format % args if args else format)
        raise Aborted()

    @property
    def messages(self) -> list[str]:
        return self.errors + self.fatals


@pytest.fixture
def tb() -> RecordingTB:
    return RecordingTB()
