"""
services/auth.py
──────────────────────────────────────────────────────────────────────────────
User accounts: registration, password login and bearer-token lookups.

  register       → hash password, create user (emails unique, lower-cased)
  login          → verify password, issue a token naming the user id
  user_for_token → decode token, load user (used by the auth routes)

Unknown emails and wrong passwords fail identically so a login attempt does
not reveal which accounts exist.
"""
from __future__ import annotations

import logging
from typing import Optional

from jobscope.domain.exceptions import (
    InvalidCredentialsError,
    MissingTokenError,
    UserNotFoundError,
)
from jobscope.domain.models import LoginRequest, RegisterRequest, User, UserProfile
from jobscope.ports.auth_port import PasswordHasherPort, TokenIssuerPort
from jobscope.ports.user_store_port import UserStorePort

logger = logging.getLogger(__name__)


class AuthService:
    """Account operations over a user store, a hasher and a token issuer.

    Inject via services/container.py — do not instantiate directly in
    application code.
    """

    def __init__(
        self,
        users: UserStorePort,
        hasher: PasswordHasherPort,
        tokens: TokenIssuerPort,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._tokens = tokens

    def register(self, request: RegisterRequest) -> UserProfile:
        """Create an account.

        Raises:
            UserAlreadyExistsError: If the email is taken.
        """
        password_hash = self._hasher.hash(request.password)
        user = self._users.create_user(request.full_name.strip(), request.email, password_hash)
        return user.public()

    def login(self, request: LoginRequest) -> str:
        """Return a bearer token for valid credentials.

        Raises:
            InvalidCredentialsError: On an unknown email or a wrong password.
        """
        user = self._users.get_by_email(request.email)
        if user is None:
            logger.info("Login failed: unknown user %s", request.email)
            raise InvalidCredentialsError("Invalid credentials")
        if not self._hasher.verify(request.password, user.password_hash):
            logger.info("Login failed: password mismatch for %s", request.email)
            raise InvalidCredentialsError("Invalid credentials")
        return self._tokens.issue(user.id)

    def user_for_token(self, token: Optional[str]) -> User:
        """Resolve a bearer token to its user.

        Raises:
            MissingTokenError: If ``token`` is empty.
            InvalidTokenError: If the token does not verify.
            UserNotFoundError: If the user it names no longer exists.
        """
        if not token:
            raise MissingTokenError("Access denied. No token provided.")
        user_id = self._tokens.decode(token)
        user = self._users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError("User not found")
        return user

    def profile(self, token: Optional[str]) -> UserProfile:
        return self.user_for_token(token).public()
