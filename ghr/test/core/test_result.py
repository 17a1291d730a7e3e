"""Tests for ghr.core.result module."""

import pytest

from ghr.core.result import Err, Ok, Result, is_err, is_ok


class TestOk:
    def test_accessors(self) -> None:
        result = Ok(42)
        assert result.value == 42
        assert result.is_ok() is True
        assert result.is_err() is False
        assert result.unwrap() == 42
        assert result.unwrap_or(0) == 42

    def test_unwrap_err_raises(self) -> None:
        with pytest.raises(ValueError, match="called unwrap_err on Ok"):
            Ok(42).unwrap_err()

    def test_map(self) -> None:
        assert Ok(21).map(lambda x: x * 2) == Ok(42)
        assert Ok(42).map_err(lambda e: f"error: {e}") == Ok(42)

    def test_flat_map(self) -> None:
        result: Result[int, str] = Ok(21)
        assert result.flat_map(lambda x: Ok(x * 2)) == Ok(42)
        assert result.flat_map(lambda x: Err("nope")) == Err("nope")

    def test_repr(self) -> None:
        assert repr(Ok("v1.0.0")) == "Ok('v1.0.0')"


class TestErr:
    def test_accessors(self) -> None:
        result = Err("not found")
        assert result.error == "not found"
        assert result.is_ok() is False
        assert result.is_err() is True
        assert result.unwrap_or(0) == 0
        assert result.unwrap_err() == "not found"

    def test_unwrap_raises(self) -> None:
        with pytest.raises(ValueError, match="called unwrap on Err"):
            Err("boom").unwrap()

    def test_map(self) -> None:
        assert Err("x").map(lambda v: v) == Err("x")
        assert Err(404).map_err(lambda code: f"HTTP {code}") == Err("HTTP 404")
        assert Err("x").flat_map(lambda v: Ok(v)) == Err("x")


class TestMatching:
    def test_type_guards(self) -> None:
        assert is_ok(Ok(1))
        assert not is_ok(Err(1))
        assert is_err(Err(1))
        assert not is_err(Ok(1))

    def test_pattern_matching(self) -> None:
        def describe(result: Result[int, str]) -> str:
            match result:
                case Ok(value):
                    return f"ok {value}"
                case Err(error):
                    return f"err {error}"

        assert describe(Ok(1)) == "ok 1"
        assert describe(Err("bad")) == "err bad"

    def test_frozen(self) -> None:
        result = Ok(1)
        with pytest.raises(AttributeError):
            result.value = 2  # type: ignore[misc]
