"""Configuration for the keyless-entry handshake."""

import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Mapping, Optional

from .types import (
    DEFAULT_KEY_SIZE,
    FRESHNESS_WINDOW,
    MIN_KEY_SIZE,
    PUBLIC_EXPONENT,
    ConfigurationError,
)


ENV_KEY_SIZE = "KEYLESS_KEY_SIZE"
ENV_FRESHNESS_MS = "KEYLESS_FRESHNESS_MS"


@dataclass
class HandshakeConfig:
    """Parameters shared by key provisioning and both protocol roles."""

    key_size: int = DEFAULT_KEY_SIZE
    """RSA modulus size in bits. The signature block is key_size // 8 bytes."""

    public_exponent: int = PUBLIC_EXPONENT
    """RSA public exponent."""

    freshness_window: timedelta = field(default=FRESHNESS_WINDOW)
    """Maximum age of a token the verifier accepts (exclusive)."""

    def validate(self) -> "HandshakeConfig":
        """Check the values and return self."""
        if self.key_size < MIN_KEY_SIZE or self.key_size % 8 != 0:
            raise ConfigurationError(
                f"Key size must be a multiple of 8 and at least {MIN_KEY_SIZE} bits, "
                f"got {self.key_size}"
            )
        if self.public_exponent not in (3, 65537):
            raise ConfigurationError(
                f"Public exponent must be 3 or 65537, got {self.public_exponent}"
            )
        if self.freshness_window <= timedelta(0):
            raise ConfigurationError("Freshness window must be positive")
        return self

    @classmethod
    def default(cls) -> "HandshakeConfig":
        """Creates the standard configuration (RSA-2048, one second window)."""
        return cls()

    @classmethod
    def fast(cls) -> "HandshakeConfig":
        """Creates a configuration with 1024-bit keys for tests and demos."""
        return cls(key_size=MIN_KEY_SIZE)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HandshakeConfig":
        """
        Build a configuration from environment variables.

        Reads KEYLESS_KEY_SIZE (bits) and KEYLESS_FRESHNESS_MS (milliseconds).
        Unset variables keep their defaults.

        Raises:
            ConfigurationError: If a variable is not an integer or the
                resulting configuration is invalid
        """
        env = os.environ if environ is None else environ
        config = cls()

        try:
            if env.get(ENV_KEY_SIZE):
                config.key_size = int(env[ENV_KEY_SIZE])
            if env.get(ENV_FRESHNESS_MS):
                config.freshness_window = timedelta(milliseconds=int(env[ENV_FRESHNESS_MS]))
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment value: {e}") from e

        return config.validate()
