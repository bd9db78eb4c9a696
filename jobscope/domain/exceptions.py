"""
domain/exceptions.py
──────────────────────────────────────────────────────────────────────────────
Custom exception hierarchy.

All exceptions are rooted at JobScopeError so callers can catch broadly
(except JobScopeError) or narrowly (except FetchTimeoutError).

The FastAPI layer (interfaces/api.py) maps these to HTTP status codes:
  CategoryNotFoundError    → 404
  IngestionInProgressError → 409
  AuthenticationError      → 502
  FetchError               → 502
  FetchTimeoutError        → 504
  DatabaseError            → 503
  UserAlreadyExistsError   → 400
  InvalidCredentialsError  → 400
  InvalidTokenError        → 400
  MissingTokenError        → 401
  UserNotFoundError        → 404

Classification never raises: unknown or missing codes fall back to "Other".
"""
from __future__ import annotations


class JobScopeError(Exception):
    """Base exception for all application errors."""


class ConfigurationError(JobScopeError):
    """Raised when required configuration is missing or invalid."""


class AuthenticationError(JobScopeError):
    """Raised when the jobs API key is missing or rejected."""


class FetchError(JobScopeError):
    """Raised when the jobs API call fails or returns an unusable body."""


class FetchTimeoutError(FetchError):
    """Raised when the jobs API does not answer within the configured timeout."""


class DatabaseError(JobScopeError):
    """Raised when a job store operation fails."""


class IngestionInProgressError(JobScopeError):
    """Raised when an ingestion run is triggered while another is running."""


class CategoryNotFoundError(JobScopeError):
    """Raised when a category has no stored postings."""


# ── User accounts ──────────────────────────────────────────────────────────

class UserAlreadyExistsError(JobScopeError):
    """Raised when registering an email that already has an account."""


class InvalidCredentialsError(JobScopeError):
    """Raised when a login names an unknown email or the wrong password."""


class MissingTokenError(JobScopeError):
    """Raised when a protected route is called without a bearer token."""


class InvalidTokenError(JobScopeError):
    """Raised when a bearer token is malformed, forged or expired."""


class UserNotFoundError(JobScopeError):
    """Raised when a valid token names a user that no longer exists."""
