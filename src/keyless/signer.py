"""
Signatures over freshness tokens.

The key fob applies the raw RSA private-key transform to the SHA-256 digest
of the token, padded as an EMSA-PKCS1-v1_5 type 1 block without a
DigestInfo header. The car recovers the block with the public key and
compares it with its own digest of the token. Only the token is covered;
the kind tag is not part of the signed data.
"""

import hashlib
import hmac

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .types import TOKEN_SIZE, InvalidSignatureError


# PKCS#1 v1.5 requires at least 8 bytes of 0xFF filler
_MIN_PADDING = 8
_BLOCK_OVERHEAD = 3  # 0x00 0x01 ... 0x00


def token_digest(token: bytes) -> bytes:
    """
    Compute the digest a signature covers.

    Args:
        token: The freshness token (8 bytes)

    Returns:
        SHA-256 of the token bytes (32 bytes)
    """
    if len(token) != TOKEN_SIZE:
        raise ValueError(f"Token must be {TOKEN_SIZE} bytes, got {len(token)}")
    return hashlib.sha256(token).digest()


def signature_size(key) -> int:
    """Size in bytes of a signature block for an RSA key (public or private)."""
    return (key.key_size + 7) // 8


def sign_digest(private_key: rsa.RSAPrivateKey, digest: bytes) -> bytes:
    """
    Sign a digest with the raw RSA private-key transform.

    The block is 0x00 0x01 FF..FF 0x00 || digest, so the same key and digest
    always produce the same signature.

    Args:
        private_key: The key fob's RSA private key
        digest: Data to sign (normally token_digest(token))

    Returns:
        Signature block (signature_size(private_key) bytes)

    Raises:
        ValueError: If the digest is too long for the modulus
    """
    k = signature_size(private_key)
    filler = k - _BLOCK_OVERHEAD - len(digest)
    if filler < _MIN_PADDING:
        raise ValueError(
            f"Digest of {len(digest)} bytes is too long for a {private_key.key_size}-bit key"
        )

    block = b"\x00\x01" + b"\xff" * filler + b"\x00" + digest

    numbers = private_key.private_numbers()
    n = numbers.public_numbers.n
    m = int.from_bytes(block, byteorder="big")
    s = pow(m, numbers.d, n)
    return s.to_bytes(k, byteorder="big")


def sign_token(private_key: rsa.RSAPrivateKey, token: bytes) -> bytes:
    """Sign the digest of a freshness token."""
    return sign_digest(private_key, token_digest(token))


def verify_digest(public_key: rsa.RSAPublicKey, digest: bytes, signature: bytes) -> bool:
    """
    Verify a signature block against an expected digest.

    Args:
        public_key: The car's copy of the key fob's public key
        digest: Independently computed digest
        signature: Signature block from the message

    Returns:
        True if the recovered block equals the digest, False on any failure
    """
    if len(signature) != signature_size(public_key):
        return False

    try:
        recovered = public_key.recover_data_from_signature(
            signature, padding.PKCS1v15(), None
        )
    except (InvalidSignature, ValueError):
        return False

    # Full-length constant-time comparison
    return hmac.compare_digest(recovered, digest)


def verify_token(public_key: rsa.RSAPublicKey, token: bytes, signature: bytes) -> bool:
    """Verify a signature over the digest of a freshness token."""
    return verify_digest(public_key, token_digest(token), signature)


def check_signature(public_key: rsa.RSAPublicKey, token: bytes, signature: bytes) -> None:
    """
    Like verify_token, but raises instead of returning False.

    Raises:
        InvalidSignatureError: If verification fails for any reason
    """
    if not verify_token(public_key, token, signature):
        raise InvalidSignatureError("Signature verification failed")


def fingerprint(public_key: rsa.RSAPublicKey) -> str:
    """
    Generate a human-readable fingerprint for a public key.

    The fingerprint is a truncated SHA-256 hash of the DER encoding,
    formatted for easy comparison.

    Args:
        public_key: The RSA public key

    Returns:
        A fingerprint string like "A7B3 C9D1 E5F2 8A4B"
    """
    der = public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    hash_bytes = hashlib.sha256(der).digest()

    hex_bytes = [f"{b:02X}" for b in hash_bytes[:8]]
    groups = [hex_bytes[i] + hex_bytes[i + 1] for i in range(0, 8, 2)]

    return " ".join(groups)
