"""Pluggable one-way password hashing."""

from __future__ import annotations

from typing import Protocol

import bcrypt

# bcrypt ignores (or, in newer releases, rejects) anything past this length
BCRYPT_MAX_PASSWORD_BYTES = 72


class HashingError(Exception):
    """Raised when a plaintext credential cannot be hashed."""


class PasswordHasher(Protocol):
    """Strategy turning a plaintext credential into its stored form."""

    def hash(self, plaintext: bytes) -> bytes:
        ...


class BcryptHasher:
    """Default adaptive hasher with a fixed work factor."""

    def __init__(self, cost: int = 10) -> None:
        self._cost = cost

    def hash(self, plaintext: bytes) -> bytes:
        """Return the bcrypt hash of ``plaintext``.

        Raises
        ------
        HashingError
            If the input exceeds bcrypt's length limit or bcrypt rejects it.
        """
        if len(plaintext) > BCRYPT_MAX_PASSWORD_BYTES:
            raise HashingError(f"password exceeds {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        try:
            return bcrypt.hashpw(plaintext, bcrypt.gensalt(rounds=self._cost))
        except (TypeError, ValueError) as exc:
            raise HashingError(str(exc)) from exc
