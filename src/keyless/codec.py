"""Frame encoding and decoding for the keyless-entry protocol."""

from dataclasses import dataclass
from typing import Optional

from .types import (
    KIND_SIZE,
    MIN_COMMAND_OPEN_PAYLOAD,
    TOKEN_SIZE,
    MalformedMessageError,
    MessageKind,
)


@dataclass(frozen=True)
class Message:
    """A decoded frame: kind tag plus raw payload."""
    kind: MessageKind
    payload: bytes = b""


@dataclass(frozen=True)
class CommandOpen:
    """Payload of a COMMAND_OPEN frame."""
    token: bytes  # 8 bytes
    signature: bytes  # key_size // 8 bytes


def encode_message(kind: MessageKind, payload: bytes = b"") -> bytes:
    """
    Encode a frame.

    Format:
        [0]   kind tag (COMMAND_OPEN=0x01, SUCCESS=0x04)
        [1+]  payload (variable)

    Args:
        kind: Message kind
        payload: Raw payload bytes

    Returns:
        Encoded bytes
    """
    return bytes([MessageKind(kind)]) + payload


def decode_message(data: bytes) -> Optional[Message]:
    """
    Decode a frame into its kind and payload.

    Payload length is not checked here; each kind has its own minimum and
    the receiving role enforces it.

    Args:
        data: Encoded frame

    Returns:
        Decoded Message, or None if the buffer is empty or the tag is unknown
    """
    if len(data) < KIND_SIZE:
        return None

    try:
        kind = MessageKind(data[0])
    except ValueError:
        return None

    return Message(kind=kind, payload=bytes(data[KIND_SIZE:]))


def encode_command_open(command: CommandOpen) -> bytes:
    """
    Encode a COMMAND_OPEN frame.

    Format:
        [0]       kind tag (0x01)
        [1..8]    freshness token (8 bytes, big-endian nanoseconds)
        [9..]     signature block (key_size // 8 bytes)
    """
    if len(command.token) != TOKEN_SIZE:
        raise MalformedMessageError(
            f"Token must be {TOKEN_SIZE} bytes, got {len(command.token)}"
        )
    return encode_message(MessageKind.COMMAND_OPEN, command.token + command.signature)


def decode_command_open(payload: bytes) -> CommandOpen:
    """
    Split a COMMAND_OPEN payload into token and signature.

    Args:
        payload: Frame payload (everything after the kind tag)

    Returns:
        Decoded CommandOpen

    Raises:
        MalformedMessageError: If the payload has no bytes beyond the token
    """
    if len(payload) < MIN_COMMAND_OPEN_PAYLOAD:
        raise MalformedMessageError(
            f"Payload too short: {len(payload)} bytes (minimum {MIN_COMMAND_OPEN_PAYLOAD})"
        )

    return CommandOpen(
        token=bytes(payload[:TOKEN_SIZE]),
        signature=bytes(payload[TOKEN_SIZE:]),
    )


def encode_success() -> bytes:
    """Encode a SUCCESS frame (tag only)."""
    return encode_message(MessageKind.SUCCESS)


def is_keyless_message(data: bytes) -> bool:
    """Check if data starts with a known kind tag."""
    return decode_message(data) is not None
