"""Minimal assertions for test suites, with continue-or-abort failure reporting."""

from assertlite.assertions import (
    E,
    F,
    TB,
    ErrorSlot,
    Severity,
    as_err,
    deep_equal,
    equal,
    error_as,
    error_is,
    is_err,
    no_err,
)

__all__ = [
    "E",
    "F",
    "TB",
    "ErrorSlot",
    "Severity",
    "as_err",
    "deep_equal",
    "equal",
    "error_as",
    "error_is",
    "is_err",
    "no_err",
]
