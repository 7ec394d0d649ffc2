"""Provisioning and a single end-to-end handshake run."""

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .codec import decode_message
from .config import HandshakeConfig
from .freshness import Clock, system_clock
from .keys import generate_keypair, private_key_to_pem, public_key_to_pem
from .roles import Prover, Verifier
from .signer import fingerprint
from .transport import BroadcastTransport
from .types import MessageKind


logger = logging.getLogger(__name__)


@dataclass
class HandshakeResult:
    """Outcome of run_handshake."""
    success: bool
    delivered: list[bytes] = field(default_factory=list)

    @property
    def kinds(self) -> list[Optional[MessageKind]]:
        """Kind of each delivered frame (None for undecodable frames)."""
        result = []
        for frame in self.delivered:
            decoded = decode_message(frame)
            result.append(decoded.kind if decoded else None)
        return result


def provision(
    config: Optional[HandshakeConfig] = None,
    clock: Clock = system_clock,
    verifier_clock: Optional[Clock] = None,
) -> Tuple[Verifier, Prover]:
    """
    Register a car and a key fob with a fresh key pair.

    The public half goes to the car and the private half to the key fob,
    both as PEM. Nothing is kept afterwards.

    Args:
        config: Key and freshness parameters
        clock: Clock for both roles
        verifier_clock: Separate clock for the car, if it should differ

    Returns:
        Tuple of (verifier, prover)
    """
    config = (config or HandshakeConfig()).validate()
    private_key, public_key = generate_keypair(config)
    public_pem = public_key_to_pem(public_key)
    private_pem = private_key_to_pem(private_key)

    logger.info("registration: car key %s (%d bits)", fingerprint(public_key), config.key_size)
    logger.debug("registration:\n\tcar:\n%s\n\tkeychain:\n%s", public_pem.hex(), private_pem.hex())

    verifier = Verifier.from_pem(
        public_pem,
        clock=verifier_clock or clock,
        window=config.freshness_window,
    )
    prover = Prover.from_pem(private_pem, clock=clock)
    return verifier, prover


def run_handshake(
    verifier: Verifier,
    prover: Prover,
    transport: Optional[BroadcastTransport] = None,
) -> HandshakeResult:
    """
    Run one handshake over a broadcast transport until it goes quiet.

    Args:
        verifier: The car
        prover: The key fob
        transport: Medium to use; a new one with both roles registered if None

    Returns:
        HandshakeResult with every delivered frame
    """
    if transport is None:
        transport = BroadcastTransport([verifier, prover])

    completions_before = prover.completions
    transport.broadcast(prover.initiate())
    transport.drain()

    success = prover.completions > completions_before
    if success:
        logger.info("handshake complete")
    else:
        logger.info("handshake rejected")
    return HandshakeResult(success=success, delivered=transport.delivered)
