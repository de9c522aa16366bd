# credstore/core/errors.py
"""
Exception types raised by credstore.

Uniqueness violations are produced by the database layer and passed
through untouched, so UniquenessViolation is just the SQLAlchemy error.
"""
from sqlalchemy.exc import IntegrityError


class CredstoreError(Exception):
    """Base class for credstore errors."""


class CryptoError(CredstoreError):
    """Random source or key derivation primitive failed."""


class StoreConnectionError(CredstoreError):
    """The backing store could not be connected or its entities loaded."""


UniquenessViolation = IntegrityError

__all__ = [
    "CredstoreError",
    "CryptoError",
    "StoreConnectionError",
    "UniquenessViolation",
]
