"""Tests for walking exception cause chains."""

from assertlite.assertions import ErrorSlot, error_as, error_is, unwrap, walk_chain


class NotFoundError(Exception):
    pass


class CodeError(Exception):
    """Errors with the same code count as the same error."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code

    def __eq__(self, other):
        return isinstance(other, CodeError) and other.code == self.code

    __hash__ = Exception.__hash__


def _raise_from(inner: BaseException, outer: BaseException) -> BaseException:
    try:
        raise outer from inner
    except BaseException as exc:
        return exc


def _raise_during(inner: BaseException, outer: BaseException) -> BaseException:
    try:
        try:
            raise inner
        except BaseException:
            raise outer
    except BaseException as exc:
        return exc


def test_unwrap_explicit_cause():
    inner = NotFoundError()
    outer = _raise_from(inner, RuntimeError("outer"))
    assert unwrap(outer) == [inner]


def test_unwrap_implicit_context():
    inner = NotFoundError()
    outer = _raise_during(inner, RuntimeError("outer"))
    assert unwrap(outer) == [inner]


def test_unwrap_suppressed_context():
    inner = NotFoundError()
    outer = _raise_from(None, RuntimeError("outer"))
    outer.__context__ = inner
    assert unwrap(outer) == []


def test_unwrap_exception_group():
    first, second = NotFoundError("a"), ValueError("b")
    group = ExceptionGroup("many", [first, second])
    assert unwrap(group) == [first, second]


def test_walk_chain_order():
    c = NotFoundError("c")
    b = _raise_from(c, RuntimeError("b"))
    a = _raise_from(b, RuntimeError("a"))
    assert list(walk_chain(a)) == [a, b, c]


def test_walk_chain_none():
    assert list(walk_chain(None)) == []


def test_walk_chain_cycle_terminates():
    a = RuntimeError("a")
    b = RuntimeError("b")
    a.__cause__ = b
    b.__cause__ = a
    assert list(walk_chain(a)) == [a, b]


def test_error_is_through_group():
    target = NotFoundError("deep")
    inner = _raise_from(target, RuntimeError("inner"))
    group = ExceptionGroup("many", [ValueError("x"), inner])
    assert error_is(group, target)


def test_error_is_uses_equivalence():
    err = _raise_from(CodeError(404), RuntimeError("request failed"))
    assert error_is(err, CodeError(404))
    assert not error_is(err, CodeError(500))


def test_error_as_first_match_wins():
    deepest = NotFoundError("deepest")
    middle = _raise_from(deepest, NotFoundError("middle"))
    top = _raise_from(middle, RuntimeError("top"))
    slot = ErrorSlot(NotFoundError)
    assert error_as(top, slot)
    assert slot.value is middle


def test_error_as_base_class():
    err = _raise_from(NotFoundError("x"), RuntimeError("top"))
    slot = ErrorSlot(Exception)
    assert error_as(err, slot)
    assert slot.value is err
