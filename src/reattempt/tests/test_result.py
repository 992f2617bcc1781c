"""Tests for the Result type carrying task outcomes."""

from __future__ import annotations

from typing import Callable

import pytest

from reattempt import Err, Ok, Result, TaskFailed
from reattempt.monads import sequence


# ═════════════════════════════════════════════════════════════════════════════
# Laws
# ═════════════════════════════════════════════════════════════════════════════


def test_functor_identity() -> None:
    """Functor law: fmap id = id"""
    assert Ok(42).map(lambda x: x) == Ok(42)
    assert Err("fail").map(lambda x: x) == Err("fail")


def test_monad_associativity() -> None:
    """Monad law: (m >>= f) >>= g = m >>= (\\x -> f x >>= g)"""
    m: Result[int, str] = Ok(5)
    f: Callable[[int], Result[int, str]] = lambda x: Ok(x + 1)
    g: Callable[[int], Result[int, str]] = lambda x: Ok(x * 2)

    assert m.flat_map(f).flat_map(g) == m.flat_map(lambda x: f(x).flat_map(g))


# ═════════════════════════════════════════════════════════════════════════════
# Operational Tests
# ═════════════════════════════════════════════════════════════════════════════


def test_ok_accessors() -> None:
    result: Result[int, str] = Ok(42)

    assert result.is_ok() and not result.is_err()
    assert result.unwrap() == 42
    assert result.ok() == 42
    assert result.err() is None
    assert bool(result)


def test_err_accessors() -> None:
    result: Result[int, str] = Err("failed")

    assert result.is_err() and not result.is_ok()
    assert result.unwrap_err() == "failed"
    assert result.unwrap_or(7) == 7
    assert result.ok() is None
    assert not bool(result)


def test_unwrap_err_value_raises_task_failed() -> None:
    with pytest.raises(TaskFailed) as info:
        Err({"code": 503}).unwrap()
    assert info.value.error == {"code": 503}


def test_unwrap_exception_error_reraises_it() -> None:
    """Exception errors surface as themselves, not wrapped."""
    exc = ConnectionError("reset")
    with pytest.raises(ConnectionError) as info:
        Err(exc).unwrap()
    assert info.value is exc


def test_unwrap_err_on_ok_raises() -> None:
    with pytest.raises(RuntimeError):
        Ok(1).unwrap_err()


def test_map_err_and_or_else() -> None:
    assert Err("x").map_err(str.upper) == Err("X")
    assert Ok(1).map_err(str.upper) == Ok(1)
    assert Err("x").or_else(lambda e: Ok(len(e))) == Ok(1)


def test_match() -> None:
    assert Ok(3).match(ok=lambda v: v * 2, err=lambda e: -1) == 6
    assert Err("e").match(ok=lambda v: v, err=lambda e: e * 2) == "ee"


def test_iteration_yields_ok_value_only() -> None:
    assert list(Ok(1)) == [1]
    assert list(Err("e")) == []
    assert [v for r in (Ok(1), Err("e"), Ok(3)) for v in r] == [1, 3]


def test_repr_and_hash() -> None:
    assert repr(Ok(1)) == "Ok(1)"
    assert repr(Err("e")) == "Err('e')"
    assert len({Ok(1), Ok(1), Err(1)}) == 2


def test_sequence_fails_fast() -> None:
    assert sequence([Ok(1), Ok(2)]) == Ok([1, 2])
    assert sequence([Ok(1), Err("a"), Err("b")]) == Err("a")
