"""
ports/user_store_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for the user account store.

Emails are unique and stored lower-cased; callers normalise before calling.
The store only ever sees password hashes, never plain passwords.

Current implementation: PostgresUserStore (psycopg2)
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from jobscope.domain.models import User


@runtime_checkable
class UserStorePort(Protocol):
    """Contract for the user account store."""

    def create_user(self, full_name: str, email: str, password_hash: str) -> User:
        """Insert a new account and return it with its assigned id.

        Raises:
            UserAlreadyExistsError: If the email is taken.
            DatabaseError:          On connection failure.
        """
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def get_by_id(self, user_id: int) -> Optional[User]:
        ...
