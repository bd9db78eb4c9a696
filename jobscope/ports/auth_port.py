"""
ports/auth_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interfaces for the two cryptographic collaborators of AuthService.

  PasswordHasherPort → one-way salted hash + constant-time verify
  TokenIssuerPort    → signed, expiring bearer tokens naming a user id

Current implementations:
  BcryptPasswordHasher (bcrypt)
  JWTTokenIssuer       (PyJWT, HS256)
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PasswordHasherPort(Protocol):
    """Contract for password hashing."""

    def hash(self, password: str) -> str:
        """Return a salted hash of ``password`` suitable for storage."""
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        """True when ``password`` matches ``password_hash``.  Never raises."""
        ...


@runtime_checkable
class TokenIssuerPort(Protocol):
    """Contract for bearer token issuance."""

    def issue(self, user_id: int) -> str:
        """Return a signed token naming ``user_id`` that expires after the TTL."""
        ...

    def decode(self, token: str) -> int:
        """Return the user id a token names.

        Raises:
            InvalidTokenError: If the token is malformed, forged or expired.
        """
        ...
