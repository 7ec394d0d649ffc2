"""Key provisioning for the car and the key fob."""

from typing import Optional, Tuple

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .config import HandshakeConfig
from .types import MIN_KEY_SIZE, KeyProvisioningError


def generate_keypair(
    config: Optional[HandshakeConfig] = None,
) -> Tuple[rsa.RSAPrivateKey, rsa.RSAPublicKey]:
    """
    Generate a fresh RSA key pair.

    Args:
        config: Key size and public exponent (defaults to RSA-2048, e = 65537)

    Returns:
        Tuple of (private_key, public_key)
    """
    config = (config or HandshakeConfig()).validate()
    private_key = rsa.generate_private_key(
        public_exponent=config.public_exponent,
        key_size=config.key_size,
    )
    return private_key, private_key.public_key()


def public_key_to_pem(public_key: rsa.RSAPublicKey) -> bytes:
    """Export a public key as SubjectPublicKeyInfo PEM."""
    return public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def private_key_to_pem(private_key: rsa.RSAPrivateKey) -> bytes:
    """Export a private key as unencrypted PKCS#8 PEM."""
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def _check_rsa(key, expected_type) -> None:
    if not isinstance(key, expected_type):
        raise KeyProvisioningError(f"Expected an RSA key, got {type(key).__name__}")
    if key.key_size < MIN_KEY_SIZE:
        raise KeyProvisioningError(
            f"Key must be at least {MIN_KEY_SIZE} bits, got {key.key_size}"
        )


def public_key_from_pem(pem: bytes) -> rsa.RSAPublicKey:
    """
    Load the public half handed to the car.

    Raises:
        KeyProvisioningError: If the PEM is invalid or not an RSA public key
    """
    try:
        key = serialization.load_pem_public_key(pem)
    except ValueError as e:
        raise KeyProvisioningError(f"Invalid public key PEM: {e}") from e
    _check_rsa(key, rsa.RSAPublicKey)
    return key


def private_key_from_pem(pem: bytes) -> rsa.RSAPrivateKey:
    """
    Load the private half handed to the key fob.

    Raises:
        KeyProvisioningError: If the PEM is invalid or not an RSA private key
    """
    try:
        key = serialization.load_pem_private_key(pem, password=None)
    except (ValueError, TypeError) as e:
        raise KeyProvisioningError(f"Invalid private key PEM: {e}") from e
    _check_rsa(key, rsa.RSAPrivateKey)
    return key
