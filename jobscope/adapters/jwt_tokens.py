"""
adapters/jwt_tokens.py
──────────────────────────────────────────────────────────────────────────────
Implements TokenIssuerPort using PyJWT.

Token payload:
  sub    → user id as a string (registered claim, must be a string)
  userId → user id as an integer, for clients that read it directly
  iat    → issued-at
  exp    → expiry, JWT_TTL_SECONDS after iat (1 hour by default)

Tokens are signed with HS256 and JWT_SECRET.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import jwt

from jobscope.domain.exceptions import InvalidTokenError

logger = logging.getLogger(__name__)


class JWTTokenIssuer:
    """PyJWT implementation of TokenIssuerPort."""

    def __init__(self, secret: str, ttl_seconds: int = 3600, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._ttl = timedelta(seconds=ttl_seconds)
        self._algorithm = algorithm

    def issue(self, user_id: int) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "userId": user_id,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> int:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidTokenError("Token has expired") from exc
        except jwt.PyJWTError as exc:
            logger.debug("Rejected token: %s", exc)
            raise InvalidTokenError("Invalid token") from exc

        try:
            return int(payload["sub"])
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError("Invalid token subject") from exc
