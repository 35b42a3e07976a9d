"""pytest plugin providing the ``t`` fixture, a test context for the assertions.

    from assertlite import E, F, equal, no_err

    def test_load(t):
        cfg, err = load("app.toml")
        no_err(F, t, err)
        equal(E, t, cfg.port, 8080)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from types import CodeType, FrameType
from typing import Any

import pytest

from assertlite.assertions import TB

logger = logging.getLogger(__name__)

_context_key = pytest.StashKey["TestContext"]()


class TestContext(TB):
    """Collects assertion failures for a single test."""

    __test__ = False

    def __init__(self, nodeid: str) -> None:
        self.nodeid = nodeid
        self.failures: list[str] = []
        self.aborted = False
        self._helpers: set[CodeType] = set()

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    def helper(self) -> None:
        """Mark the calling function as a helper.

        Failure locations skip helper frames, so they point at the test
        line that called into the helper.
        """
        self._helpers.add(sys._getframe(1).f_code)

    def errorf(self, format: str, *args: Any) -> None:
        self._record(format, args)

    def fatalf(self, format: str, *args: Any) -> None:
        self._record(format, args)
        self.aborted = True
        pytest.fail(self.report(), pytrace=False)

    def report(self) -> str:
        return "\n".join(self.failures)

    def _record(self, format: str, args: tuple[Any, ...]) -> None:
        message = self._decorate(format, args)
        logger.debug(f"{self.nodeid}: {message}")
        self.failures.append(message)

    def _decorate(self, format: str, args: tuple[Any, ...]) -> str:
        message = format % args if args else format
        frame = self._caller()
        if frame is None:
            return message
        return f"{Path(frame.f_code.co_filename).name}:{frame.f_lineno}: {message}"

    def _caller(self) -> FrameType | None:
        frame: FrameType | None = sys._getframe(1)
        while frame is not None:
            code = frame.f_code
            if code not in self._helpers and code.co_filename != __file__:
                return frame
            frame = frame.f_back
        return None


@pytest.fixture
def t(request: pytest.FixtureRequest) -> TestContext:
    """Test context that records failures from assertlite assertions."""
    context = TestContext(request.node.nodeid)
    request.node.stash[_context_key] = context
    return context


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item: pytest.Item):
    context = item.stash.get(_context_key, None)
    try:
        result = yield
    except (pytest.skip.Exception, pytest.xfail.Exception):
        # A recorded failure outranks a later skip.
        if context is not None and context.failed:
            pytest.fail(context.report(), pytrace=False)
        raise
    except BaseException:
        if context is not None and context.failed and not context.aborted:
            item.add_report_section("call", "assertlite", context.report())
        raise
    if context is not None and context.failed:
        pytest.fail(context.report(), pytrace=False)
    return result
