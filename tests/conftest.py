"""Shared fixtures: one RSA key pair per session and a controllable clock."""

import pytest

from keyless.config import HandshakeConfig
from keyless.keys import generate_keypair

# 2024-01-01T00:00:00Z in nanoseconds
START_NS = 1_704_067_200_000_000_000
MILLISECOND = 1_000_000
SECOND = 1_000 * MILLISECOND


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: int = START_NS) -> None:
        self.nanos = start

    def __call__(self) -> int:
        return self.nanos

    def advance(self, nanos: int) -> None:
        self.nanos += nanos


@pytest.fixture(scope="session")
def keypair():
    """RSA-2048 key pair shared by the whole test session."""
    return generate_keypair(HandshakeConfig.default())


@pytest.fixture(scope="session")
def other_keypair():
    """A second, unrelated key pair."""
    return generate_keypair(HandshakeConfig.fast())


@pytest.fixture
def clock():
    """Fresh fake clock at START_NS."""
    return FakeClock()
