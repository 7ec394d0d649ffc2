"""
The two sides of the keyless-entry handshake.

The Prover (key fob) holds the private key and sends a signed COMMAND_OPEN.
The Verifier (car) holds the public key, checks freshness and signature,
and answers SUCCESS. Both implement MessageHandler and share nothing else.

Every rejection is silent: a malformed frame, a stale or future token and
a bad signature all produce no response, so a sender cannot tell them apart.
"""

import logging
from datetime import timedelta
from enum import Enum
from typing import Optional, Protocol, runtime_checkable

from cryptography.hazmat.primitives.asymmetric import rsa

from .codec import CommandOpen, decode_command_open, decode_message, encode_command_open, encode_success
from .freshness import Clock, check_fresh, now, system_clock
from .keys import private_key_from_pem, public_key_from_pem
from .signer import check_signature, sign_token
from .types import (
    FRESHNESS_WINDOW,
    InvalidSignatureError,
    MalformedMessageError,
    MessageKind,
    StaleTokenError,
)


logger = logging.getLogger(__name__)


@runtime_checkable
class MessageHandler(Protocol):
    """Anything that can receive a broadcast frame and optionally answer."""

    def handle(self, message: bytes) -> Optional[bytes]:
        """Process one frame; return a response frame or None."""
        ...


class ProverState(Enum):
    """Key fob handshake state."""
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"


class VerifierState(Enum):
    """Car handshake state."""
    IDLE = "idle"
    RESPONDED = "responded"


class Prover:
    """Key fob: signs a freshness token to ask the car to open."""

    def __init__(
        self,
        private_key: rsa.RSAPrivateKey,
        clock: Clock = system_clock,
        name: str = "keychain",
    ) -> None:
        self._private_key = private_key
        self._clock = clock
        self.name = name
        self.state = ProverState.IDLE
        self.completions = 0

    @classmethod
    def from_pem(cls, pem: bytes, **kwargs) -> "Prover":
        """Creates a prover from the private key PEM handed over at registration."""
        return cls(private_key_from_pem(pem), **kwargs)

    @property
    def completed(self) -> bool:
        """Whether at least one handshake has finished."""
        return self.completions > 0

    def initiate(self) -> bytes:
        """
        Build a COMMAND_OPEN frame for a new handshake attempt.

        Returns:
            Encoded frame: tag || token || signature
        """
        token = now(self._clock)
        signature = sign_token(self._private_key, token)
        self.state = ProverState.AWAITING_RESPONSE
        return encode_command_open(CommandOpen(token=token, signature=signature))

    def handle(self, message: bytes) -> Optional[bytes]:
        """Record SUCCESS; never answers anything."""
        decoded = decode_message(message)
        if decoded is not None and decoded.kind is MessageKind.SUCCESS:
            logger.info("%s received Success", self.name)
            self.completions += 1
            self.state = ProverState.IDLE
        return None


class Verifier:
    """Car: validates COMMAND_OPEN frames and answers SUCCESS."""

    def __init__(
        self,
        public_key: rsa.RSAPublicKey,
        clock: Clock = system_clock,
        window: timedelta = FRESHNESS_WINDOW,
        name: str = "car",
    ) -> None:
        self._public_key = public_key
        self._clock = clock
        self.window = window
        self.name = name
        self.state = VerifierState.IDLE
        self.rejections = 0

    @classmethod
    def from_pem(cls, pem: bytes, **kwargs) -> "Verifier":
        """Creates a verifier from the public key PEM handed over at registration."""
        return cls(public_key_from_pem(pem), **kwargs)

    def reset(self) -> None:
        """Start a new handshake."""
        self.state = VerifierState.IDLE

    def handle(self, message: bytes) -> Optional[bytes]:
        """
        Evaluate one frame.

        Args:
            message: Raw frame from the transport

        Returns:
            A SUCCESS frame if the frame is a fresh, correctly signed
            COMMAND_OPEN; None otherwise
        """
        decoded = decode_message(message)
        if decoded is None or decoded.kind is not MessageKind.COMMAND_OPEN:
            return None

        logger.info("%s received CommandOpen:\n%s", self.name, message.hex())

        if self.state is VerifierState.RESPONDED:
            logger.debug("%s already responded, dropping CommandOpen", self.name)
            return None

        try:
            command = decode_command_open(decoded.payload)
            check_fresh(command.token, now(self._clock), self.window)
            check_signature(self._public_key, command.token, command.signature)
        except (MalformedMessageError, StaleTokenError, InvalidSignatureError) as e:
            self.rejections += 1
            logger.debug("%s dropped CommandOpen: %s", self.name, type(e).__name__)
            return None

        self.state = VerifierState.RESPONDED
        return encode_success()
