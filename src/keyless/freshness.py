"""Freshness tokens for replay protection.

A token is the sender's clock reading in nanoseconds, serialized as 8
big-endian bytes. The verifier accepts a token only while it is younger
than the freshness window; there is no nonce or counter behind it.
"""

import time
from datetime import timedelta
from typing import Callable, Optional

from .types import FRESHNESS_WINDOW, TOKEN_SIZE, MalformedMessageError, StaleTokenError


Clock = Callable[[], int]
"""Returns the current time in nanoseconds."""

_MAX_TOKEN = (1 << (8 * TOKEN_SIZE)) - 1
_NANOS_PER_MICRO = 1000


def system_clock() -> int:
    """Wall-clock nanoseconds since the Unix epoch."""
    return time.time_ns()


def token_from_ns(nanos: int) -> bytes:
    """Serialize a nanosecond reading as a token."""
    if not 0 <= nanos <= _MAX_TOKEN:
        raise ValueError(f"Timestamp out of range for a {TOKEN_SIZE}-byte token: {nanos}")
    return nanos.to_bytes(TOKEN_SIZE, byteorder="big")


def token_to_ns(token: bytes) -> int:
    """Parse a token back into nanoseconds."""
    if len(token) != TOKEN_SIZE:
        raise MalformedMessageError(f"Token must be {TOKEN_SIZE} bytes, got {len(token)}")
    return int.from_bytes(token, byteorder="big")


def now(clock: Clock = system_clock) -> bytes:
    """Sample the clock and return it as a token."""
    return token_from_ns(clock())


def window_nanos(window: timedelta) -> int:
    """Convert a freshness window to whole nanoseconds."""
    return (window // timedelta(microseconds=1)) * _NANOS_PER_MICRO


def elapsed(reference: bytes, current: bytes) -> Optional[int]:
    """Nanoseconds from reference to current.

    Args:
        reference: The earlier token (e.g. from the message).
        current: The later token (e.g. the receiver's clock).

    Returns:
        current - reference, or None if current is before reference.
    """
    since = token_to_ns(reference)
    to = token_to_ns(current)
    if to < since:
        return None
    return to - since


def is_fresh(token: bytes, current: bytes, window: timedelta = FRESHNESS_WINDOW) -> bool:
    """Check a token against the freshness window.

    Rejects tokens that are:
        - From the future relative to current
        - Exactly window old or older

    Args:
        token: The token carried by the message.
        current: The receiver's clock reading as a token.
        window: Maximum age (exclusive).

    Returns:
        True if the token is fresh.
    """
    age = elapsed(token, current)
    if age is None:
        return False
    return age < window_nanos(window)


def check_fresh(token: bytes, current: bytes, window: timedelta = FRESHNESS_WINDOW) -> None:
    """Like is_fresh, but raises StaleTokenError instead of returning False."""
    if not is_fresh(token, current, window):
        raise StaleTokenError("Token outside freshness window")
