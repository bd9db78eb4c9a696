"""
adapters/bcrypt_hasher.py
──────────────────────────────────────────────────────────────────────────────
Implements PasswordHasherPort using bcrypt.

bcrypt only looks at the first 72 bytes of a password; longer passwords are
truncated explicitly so hash() and verify() agree on what was hashed.
"""
from __future__ import annotations

import logging

import bcrypt

logger = logging.getLogger(__name__)

_MAX_PASSWORD_BYTES = 72


class BcryptPasswordHasher:
    """bcrypt implementation of PasswordHasherPort.

    Args:
        rounds: Cost factor (log2 of the work); BCRYPT_ROUNDS in settings.
    """

    def __init__(self, rounds: int = 10) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("ascii")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("ascii"))
        except ValueError:
            logger.warning("Stored password hash is not a bcrypt hash")
            return False


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]
