"""
Keyless - challenge/response handshake between a car and a key fob

The key fob signs a nanosecond timestamp with RSA; the car accepts the
command only if the timestamp is under one second old and the signature
recovers its SHA-256 digest.
"""

from .types import (
    MessageKind,
    TOKEN_SIZE,
    DIGEST_SIZE,
    FRESHNESS_WINDOW,
    DEFAULT_KEY_SIZE,
    KeylessError,
    MalformedMessageError,
    StaleTokenError,
    InvalidSignatureError,
    KeyProvisioningError,
    ConfigurationError,
)
from .config import HandshakeConfig
from .codec import (
    Message,
    CommandOpen,
    encode_message,
    decode_message,
    encode_command_open,
    decode_command_open,
    encode_success,
    is_keyless_message,
)
from .freshness import (
    Clock,
    system_clock,
    now,
    elapsed,
    is_fresh,
    token_from_ns,
    token_to_ns,
)
from .signer import (
    token_digest,
    sign_digest,
    sign_token,
    verify_digest,
    verify_token,
    signature_size,
    fingerprint,
)
from .keys import (
    generate_keypair,
    public_key_to_pem,
    private_key_to_pem,
    public_key_from_pem,
    private_key_from_pem,
)
from .roles import (
    MessageHandler,
    Prover,
    ProverState,
    Verifier,
    VerifierState,
)
from .transport import BroadcastTransport
from .simulation import HandshakeResult, provision, run_handshake

__version__ = "0.1.0"

__all__ = [
    # Types
    "MessageKind",
    "TOKEN_SIZE",
    "DIGEST_SIZE",
    "FRESHNESS_WINDOW",
    "DEFAULT_KEY_SIZE",
    # Errors
    "KeylessError",
    "MalformedMessageError",
    "StaleTokenError",
    "InvalidSignatureError",
    "KeyProvisioningError",
    "ConfigurationError",
    # Config
    "HandshakeConfig",
    # Codec
    "Message",
    "CommandOpen",
    "encode_message",
    "decode_message",
    "encode_command_open",
    "decode_command_open",
    "encode_success",
    "is_keyless_message",
    # Freshness
    "Clock",
    "system_clock",
    "now",
    "elapsed",
    "is_fresh",
    "token_from_ns",
    "token_to_ns",
    # Signer
    "token_digest",
    "sign_digest",
    "sign_token",
    "verify_digest",
    "verify_token",
    "signature_size",
    "fingerprint",
    # Keys
    "generate_keypair",
    "public_key_to_pem",
    "private_key_to_pem",
    "public_key_from_pem",
    "private_key_from_pem",
    # Roles
    "MessageHandler",
    "Prover",
    "ProverState",
    "Verifier",
    "VerifierState",
    # Transport
    "BroadcastTransport",
    # Simulation
    "HandshakeResult",
    "provision",
    "run_handshake",
]
