# credstore/security/hashing.py
"""
Password hashing utilities.

This module handles:
- Salt generation (CSPRNG)
- PBKDF2 password derivation
- Constant-time verification

Nothing here touches the database or keeps state. The plaintext password
is never stored or returned, only the salt and the derived hash.
"""
import base64
import binascii
import hashlib
import secrets
from typing import Optional

from credstore.core.errors import CryptoError

# Random bytes per salt (128-bit)
SALT_BYTES = 16

# PBKDF2 parameters. Changing any of these invalidates every stored hash.
HASH_ITERATIONS = 10_000
HASH_LENGTH = 64
HASH_DIGEST = "sha1"


def generate_salt() -> str:
    """
    Generate a cryptographically secure random salt.

    Returns:
        Base64-encoded 16-byte (128-bit) salt

    Raises:
        CryptoError: if the operating system random source is unavailable
    """
    try:
        salt_bytes = secrets.token_bytes(SALT_BYTES)
    except (NotImplementedError, OSError) as e:
        raise CryptoError(f"Random source unavailable: {e}") from e
    return base64.b64encode(salt_bytes).decode("utf-8")


def hash_password(salt: str, password: str) -> str:
    """
    Derive the stored hash for a password.

    Args:
        salt: Base64-encoded salt (an empty string is a valid, empty salt)
        password: Plaintext password

    Returns:
        Base64-encoded 64-byte PBKDF2 output

    Raises:
        TypeError: if password is not a string
        CryptoError: if the salt cannot be decoded or the digest is unavailable
    """
    if not isinstance(password, str):
        raise TypeError(f"password must be str, not {type(password).__name__}")

    try:
        salt_bytes = base64.b64decode(salt)
        derived = hashlib.pbkdf2_hmac(
            HASH_DIGEST,
            password.encode("utf-8"),
            salt_bytes,
            HASH_ITERATIONS,
            dklen=HASH_LENGTH,
        )
    except (binascii.Error, ValueError) as e:
        raise CryptoError(f"Password derivation failed: {e}") from e

    return base64.b64encode(derived).decode("utf-8")


def constant_time_compare(a: str, b: str) -> bool:
    """
    Compare two strings in constant time to prevent timing attacks.

    Args:
        a: Expected value
        b: Provided value

    Returns:
        True if strings match, False otherwise
    """
    return secrets.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def verify_password(candidate: str, salt: Optional[str], stored_hash: Optional[str]) -> bool:
    """
    Check a candidate password against a stored salt/hash pair.

    A missing hash never matches. A missing salt is treated as the empty
    salt.
    """
    if not stored_hash:
        return False
    return constant_time_compare(hash_password(salt or "", candidate), stored_hash)
