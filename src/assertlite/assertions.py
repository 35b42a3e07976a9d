"""Common assertions for test suites.

Every assertion takes a severity as its first argument, then a test context
(anything implementing :class:`TB`):

    equal(E, t, got, want)          # record the failure, keep going
    no_err(F, t, err, "load: %s", path)  # record the failure, stop the test

This module depends on the standard library only so that
``assertlite install`` can copy it into other projects as-is.
"""

from __future__ import annotations

import dataclasses
import logging
from enum import Enum
from typing import Any, Generic, Iterator, Protocol, TypeVar

logger = logging.getLogger(__name__)

ExcT = TypeVar("ExcT", bound=BaseException)


class TB(Protocol):
    """The subset of a test context used by the assertions."""

    def helper(self) -> None: ...

    def errorf(self, format: str, *args: Any) -> None: ...

    def fatalf(self, format: str, *args: Any) -> None: ...


class Severity(str, Enum):
    """Controls what happens when an assertion fails."""

    CONTINUE = "continue"
    ABORT = "abort"


# Marks the test as failed and continues its execution.
E = Severity.CONTINUE
# Marks the test as failed and stops its execution.
F = Severity.ABORT

_REPORTERS: dict[Severity, str] = {
    Severity.CONTINUE: "errorf",
    Severity.ABORT: "fatalf",
}


class ErrorSlot(Generic[ExcT]):
    """Receives the matching exception from :func:`as_err`.

    Attributes:
        type: The exception class to look for in the cause chain.
        value: The first matching exception, or None until a match is found.
    """

    def __init__(self, type: type[ExcT]) -> None:
        self.type = type
        self.value: ExcT | None = None

    def __repr__(self) -> str:
        return f"ErrorSlot[{self.type.__qualname__}]({self.value!r})"


def fail(
    severity: Severity,
    t: TB,
    custom_format_and_args: tuple[Any, ...],
    format: str,
    *args: Any,
) -> None:
    """Report a failure through the method of t selected by severity.

    A non-empty custom_format_and_args replaces format and args entirely;
    its first element must be the format string.
    """
    __tracebackhide__ = True
    t.helper()
    if custom_format_and_args:
        format = custom_format_and_args[0]
        args = tuple(custom_format_and_args[1:])
    method = _REPORTERS[Severity(severity)]
    logger.debug(f"Assertion failed, reporting via {method}")
    getattr(t, method)(format, *args)


def equal(severity: Severity, t: TB, got: Any, want: Any, *format_and_args: Any) -> None:
    """Assert that got and want are deeply equal."""
    __tracebackhide__ = True
    t.helper()
    if not deep_equal(got, want):
        fail(severity, t, format_and_args, "\ngot\t%r\nwant\t%r", got, want)


def no_err(severity: Severity, t: TB, err: BaseException | None, *format_and_args: Any) -> None:
    """Assert that err is None."""
    __tracebackhide__ = True
    t.helper()
    if err is not None:
        fail(severity, t, format_and_args, "\ngot\t%r\nwant\tno error", err)


def is_err(
    severity: Severity,
    t: TB,
    err: BaseException | None,
    target: BaseException | None,
    *format_and_args: Any,
) -> None:
    """Assert that err, or an exception in its cause chain, is target."""
    __tracebackhide__ = True
    t.helper()
    if not error_is(err, target):
        fail(severity, t, format_and_args, "\ngot\t%r\nwant\t%r", err, target)


def as_err(
    severity: Severity,
    t: TB,
    err: BaseException | None,
    target: ErrorSlot[Any],
    *format_and_args: Any,
) -> None:
    """Assert that err's cause chain holds an instance of target.type.

    On success the matching exception is stored in target.value.
    """
    __tracebackhide__ = True
    t.helper()
    if not error_as(err, target):
        fail(
            severity,
            t,
            format_and_args,
            "\ngot\t%s\nwant\t%s",
            type(err).__qualname__ if err is not None else "None",
            f"ErrorSlot[{target.type.__qualname__}]",
        )


# --- error chains ---


def unwrap(err: BaseException) -> list[BaseException]:
    """Return the exceptions directly wrapped by err."""
    if isinstance(err, BaseExceptionGroup):
        return list(err.exceptions)
    if err.__cause__ is not None:
        return [err.__cause__]
    if err.__context__ is not None and not err.__suppress_context__:
        return [err.__context__]
    return []


def walk_chain(err: BaseException | None) -> Iterator[BaseException]:
    """Yield err and every exception it wraps, depth-first."""
    seen: set[int] = set()
    stack = [err] if err is not None else []
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.extend(reversed(unwrap(current)))


def error_is(err: BaseException | None, target: BaseException | None) -> bool:
    """Report whether any exception in err's chain matches target.

    A link matches when it is target or compares equal to it, so exception
    classes can define ``__eq__`` to widen what counts as a match.
    """
    if target is None:
        return err is None
    for link in walk_chain(err):
        if link is target or link == target:
            return True
    return False


def error_as(err: BaseException | None, target: ErrorSlot[Any]) -> bool:
    """Find the first exception in err's chain that is a target.type.

    On a match, target.value is set to it and True is returned. target is
    left untouched otherwise.
    """
    wanted = target.type
    for link in walk_chain(err):
        if isinstance(link, wanted):
            target.value = link
            return True
    return False


# --- deep equality ---


def deep_equal(a: Any, b: Any) -> bool:
    """Report whether a and b are structurally equal.

    Values of different types are never equal. Containers, dataclasses and
    plain objects are compared member by member; types that define their
    own ``__eq__`` are compared with it.
    """
    return _deep_equal(a, b, set())


def _deep_equal(a: Any, b: Any, visited: set[tuple[int, int]]) -> bool:
    if a is b:
        return True
    if type(a) is not type(b):
        return False

    # A pair already being compared higher up the stack is assumed equal,
    # which is what lets cyclic values terminate.
    key = (id(a), id(b))
    if key in visited:
        return True

    if isinstance(a, (list, tuple)):
        if len(a) != len(b):
            return False
        visited.add(key)
        return all(_deep_equal(x, y, visited) for x, y in zip(a, b))

    if isinstance(a, dict):
        if a.keys() != b.keys():
            return False
        visited.add(key)
        return all(_deep_equal(a[k], b[k], visited) for k in a)

    if isinstance(a, (set, frozenset)):
        return a == b

    if dataclasses.is_dataclass(a) and not isinstance(a, type):
        visited.add(key)
        return all(
            _deep_equal(getattr(a, f.name), getattr(b, f.name), visited)
            for f in dataclasses.fields(a)
        )

    if isinstance(a, BaseException):
        visited.add(key)
        return _deep_equal(a.args, b.args, visited) and _deep_equal(
            vars(a), vars(b), visited
        )

    if type(a).__eq__ is not object.__eq__:
        result = a == b
        try:
            return bool(result)
        except ValueError:
            # Elementwise __eq__ (array types): compare item by item.
            if len(a) != len(b):
                return False
            visited.add(key)
            return all(_deep_equal(x, y, visited) for x, y in zip(a, b))

    slots = _slot_names(type(a))
    if slots or hasattr(a, "__dict__"):
        visited.add(key)
        for name in slots:
            x = getattr(a, name, _UNSET)
            y = getattr(b, name, _UNSET)
            if x is _UNSET or y is _UNSET:
                if x is not y:
                    return False
            elif not _deep_equal(x, y, visited):
                return False
        if hasattr(a, "__dict__"):
            return _deep_equal(vars(a), vars(b), visited)
        return True

    return a == b


_UNSET = object()


def _slot_names(cls: type) -> list[str]:
    """Return the names declared in __slots__ anywhere in cls's MRO."""
    names: list[str] = []
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            if name.startswith("__") and not name.endswith("__"):
                name = f"_{klass.__name__.lstrip('_')}{name}"
            if name not in names:
                names.append(name)
    return names
