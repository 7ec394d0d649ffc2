"""Type definitions for the keyless-entry handshake."""

from datetime import timedelta
from enum import IntEnum


class MessageKind(IntEnum):
    """Tag carried in the first byte of every frame."""
    COMMAND_OPEN = 1  # key fob asks the car to open
    SUCCESS = 1 << 2  # car tells the key fob the command succeeded


# Protocol constants
KIND_SIZE = 1
TOKEN_SIZE = 8
DIGEST_SIZE = 32
MIN_COMMAND_OPEN_PAYLOAD = TOKEN_SIZE + 1

# Freshness window
FRESHNESS_WINDOW = timedelta(seconds=1)

# Key constants
DEFAULT_KEY_SIZE = 2048
MIN_KEY_SIZE = 1024
PUBLIC_EXPONENT = 65537


# Exception types
class KeylessError(Exception):
    """Base exception for keyless handshake errors."""
    pass


class MalformedMessageError(KeylessError):
    """Unknown tag or payload too short for its kind."""
    pass


class StaleTokenError(KeylessError):
    """Freshness token is too old or from the future."""
    pass


class InvalidSignatureError(KeylessError):
    """Signature did not recover the token digest."""
    pass


class KeyProvisioningError(KeylessError):
    """Key material could not be loaded or has the wrong shape."""
    pass


class ConfigurationError(KeylessError):
    """Invalid configuration value."""
    pass
