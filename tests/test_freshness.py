"""Tests for freshness tokens."""

from datetime import timedelta

import pytest

from keyless.freshness import (
    check_fresh,
    elapsed,
    is_fresh,
    now,
    token_from_ns,
    token_to_ns,
    window_nanos,
)
from keyless.types import TOKEN_SIZE, MalformedMessageError, StaleTokenError

from conftest import MILLISECOND, SECOND, START_NS, FakeClock


class TestTokenEncoding:
    """Big-endian 8-byte serialization."""

    def test_big_endian(self) -> None:
        """Most significant byte first."""
        assert token_from_ns(1) == b"\x00" * 7 + b"\x01"
        assert token_from_ns(0x0102030405060708) == bytes([1, 2, 3, 4, 5, 6, 7, 8])

    def test_round_trip_value(self) -> None:
        """Parsing returns the original reading."""
        assert token_to_ns(token_from_ns(START_NS)) == START_NS

    def test_out_of_range(self) -> None:
        """Negative and oversized readings do not fit."""
        with pytest.raises(ValueError):
            token_from_ns(-1)
        with pytest.raises(ValueError):
            token_from_ns(1 << 64)

    def test_wrong_length(self) -> None:
        """Tokens must be exactly 8 bytes."""
        with pytest.raises(MalformedMessageError):
            token_to_ns(b"\x00" * 7)

    def test_now_uses_clock(self) -> None:
        """now() serializes the clock reading."""
        clock = FakeClock(START_NS)
        token = now(clock)
        assert len(token) == TOKEN_SIZE
        assert token_to_ns(token) == START_NS


class TestElapsed:
    """Unsigned subtraction between tokens."""

    @pytest.mark.parametrize("ns", [0, 1, START_NS, (1 << 64) - 1])
    def test_same_token_is_zero(self, ns: int) -> None:
        """elapsed(t, t) is zero."""
        t = token_from_ns(ns)
        assert elapsed(t, t) == 0

    def test_forward(self) -> None:
        """Later minus earlier."""
        assert elapsed(token_from_ns(START_NS), token_from_ns(START_NS + 500 * MILLISECOND)) == 500 * MILLISECOND

    @pytest.mark.parametrize("t1,t2", [(1, 0), (START_NS, START_NS - 1), ((1 << 64) - 1, 0)])
    def test_backwards_is_none(self, t1: int, t2: int) -> None:
        """A current token before the reference is undefined, not wrapped."""
        assert elapsed(token_from_ns(t1), token_from_ns(t2)) is None


class TestIsFresh:
    """The one-second acceptance window."""

    def test_fresh_within_window(self) -> None:
        """Half a second old is fresh."""
        token = token_from_ns(START_NS)
        assert is_fresh(token, token_from_ns(START_NS + 500 * MILLISECOND))

    def test_just_under_window(self) -> None:
        """One nanosecond short of a second is still fresh."""
        token = token_from_ns(START_NS)
        assert is_fresh(token, token_from_ns(START_NS + SECOND - 1))

    def test_exactly_window_is_stale(self) -> None:
        """Exactly one second old is rejected."""
        token = token_from_ns(START_NS)
        assert not is_fresh(token, token_from_ns(START_NS + SECOND))

    def test_future_token_is_rejected(self) -> None:
        """A token ahead of the receiver's clock is rejected, not clamped."""
        token = token_from_ns(START_NS + 1)
        assert not is_fresh(token, token_from_ns(START_NS))

    def test_custom_window(self) -> None:
        """The window is configurable."""
        token = token_from_ns(START_NS)
        current = token_from_ns(START_NS + 200 * MILLISECOND)
        assert not is_fresh(token, current, timedelta(milliseconds=200))
        assert is_fresh(token, current, timedelta(milliseconds=201))

    def test_check_fresh_raises(self) -> None:
        """check_fresh raises StaleTokenError on a stale token."""
        token = token_from_ns(START_NS)
        check_fresh(token, token)
        with pytest.raises(StaleTokenError):
            check_fresh(token, token_from_ns(START_NS + 2 * SECOND))

    def test_window_nanos(self) -> None:
        """timedelta converts to whole nanoseconds."""
        assert window_nanos(timedelta(seconds=1)) == SECOND
        assert window_nanos(timedelta(milliseconds=3)) == 3 * MILLISECOND
