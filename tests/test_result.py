"""Result variants: exactly-one-of semantics and small ergonomics."""

from __future__ import annotations

import pytest

from courier.failures import BadResponseFailure, Failure, FailureKind
from courier.result import Err, Ok, Result

pytestmark = pytest.mark.unit


def _describe(result: Result[int]) -> str:
    match result:
        case Ok(value):
            return f"ok:{value}"
        case Err(failure):
            return f"err:{failure.kind.value}"
    raise AssertionError("unreachable")


def test_ok_and_err_are_exclusive() -> None:
    ok: Result[int] = Ok(1)
    err: Result[int] = Err(Failure(FailureKind.UNKNOWN))

    assert ok.is_ok() and not ok.is_err()
    assert err.is_err() and not err.is_ok()


def test_structural_matching() -> None:
    assert _describe(Ok(3)) == "ok:3"
    assert _describe(Err(BadResponseFailure())) == "err:bad_response"


def test_unwrap_returns_value_or_raises_failure() -> None:
    assert Ok("Success").unwrap() == "Success"

    with pytest.raises(BadResponseFailure):
        Err(BadResponseFailure()).unwrap()


def test_unwrap_or() -> None:
    assert Ok(1).unwrap_or(0) == 1
    assert Err(Failure(FailureKind.UNKNOWN)).unwrap_or(0) == 0


def test_map_applies_only_to_ok() -> None:
    failure = Err(Failure(FailureKind.CANCELLED))

    assert Ok(2).map(lambda v: v * 10) == Ok(20)
    assert failure.map(lambda v: v) is failure


def test_fold_picks_the_populated_side() -> None:
    on_err = lambda f: f.title  # noqa: E731
    on_ok = lambda v: f"value={v}"  # noqa: E731

    assert Ok(5).fold(on_err, on_ok) == "value=5"
    assert Err(Failure(FailureKind.SEND_TIMEOUT)).fold(on_err, on_ok) == "Send Timeout"


def test_variants_are_frozen() -> None:
    ok = Ok(1)

    with pytest.raises(AttributeError):
        ok.value = 2  # type: ignore[misc]
