"""
services/container.py
──────────────────────────────────────────────────────────────────────────────
Dependency Injection container.

THIS IS THE ONLY FILE THAT NAMES CONCRETE ADAPTER CLASSES.

  JobsAPIPort        → WeDataToolsAPIAdapter   (requests)
  JobStorePort       → PostgresJobStore        (psycopg2)
  UserStorePort      → PostgresUserStore       (psycopg2)
  PasswordHasherPort → BcryptPasswordHasher    (bcrypt)
  TokenIssuerPort    → JWTTokenIssuer          (PyJWT)

Replace the database:
  - from jobscope.adapters.postgres_job_store import PostgresJobStore
  + from jobscope.adapters.mongo_job_store import MongoJobStore

Thread safety:
  @lru_cache(maxsize=1) makes each getter return the same instance across
  calls.  Both Postgres stores share one PostgresPool per process, and every
  statement borrows its own pooled connection, so the API threadpool and the
  scheduler thread can query concurrently.  The API adapter is only built
  when ingestion is requested, so read-only deployments do not need
  WEDATATOOLS_API_KEY; likewise JWT_SECRET is only required by the auth
  routes.
"""
from __future__ import annotations

import logging
from functools import lru_cache

from jobscope.adapters.bcrypt_hasher import BcryptPasswordHasher
from jobscope.adapters.jwt_tokens import JWTTokenIssuer
from jobscope.adapters.postgres_job_store import PostgresJobStore
from jobscope.adapters.postgres_pool import PostgresPool
from jobscope.adapters.postgres_user_store import PostgresUserStore
from jobscope.adapters.wedatatools_api import WeDataToolsAPIAdapter
from jobscope.config.settings import get_settings
from jobscope.domain.exceptions import ConfigurationError
from jobscope.services.auth import AuthService
from jobscope.services.ingestion import IngestionPipeline
from jobscope.services.query import JobQueryService
from jobscope.services.scheduler import IngestionScheduler

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_db_pool() -> PostgresPool:
    return PostgresPool(get_settings())


@lru_cache(maxsize=1)
def get_store() -> PostgresJobStore:
    """Build the job store singleton and make sure its schema exists.

    Raises:
        DatabaseError: If the database is unreachable.
    """
    settings = get_settings()
    store = PostgresJobStore(settings, pool=get_db_pool())
    store.ensure_schema()
    return store


@lru_cache(maxsize=1)
def get_user_store() -> PostgresUserStore:
    settings = get_settings()
    users = PostgresUserStore(settings, pool=get_db_pool())
    users.ensure_schema()
    return users


@lru_cache(maxsize=1)
def get_ingestion_pipeline() -> IngestionPipeline:
    """Build and return the fully wired IngestionPipeline singleton.

    Raises:
        AuthenticationError: If WEDATATOOLS_API_KEY is missing.
        DatabaseError:       If the database is unreachable.
    """
    settings = get_settings()
    logger.info(
        "Building IngestionPipeline | api=%s per_page=%d max_pages=%d",
        settings.jobs_api_url,
        settings.jobs_api_per_page,
        settings.jobs_api_max_pages,
    )
    api = WeDataToolsAPIAdapter(settings)
    return IngestionPipeline(api=api, store=get_store(), settings=settings)


@lru_cache(maxsize=1)
def get_query_service() -> JobQueryService:
    settings = get_settings()
    return JobQueryService(store=get_store(), detail_limit=settings.category_detail_limit)


@lru_cache(maxsize=1)
def get_auth_service() -> AuthService:
    """Build the AuthService singleton.

    Raises:
        ConfigurationError: If JWT_SECRET is not set.
        DatabaseError:      If the database is unreachable.
    """
    settings = get_settings()
    if not settings.jwt_secret:
        raise ConfigurationError("JWT_SECRET must be set to use the auth routes")
    return AuthService(
        users=get_user_store(),
        hasher=BcryptPasswordHasher(rounds=settings.bcrypt_rounds),
        tokens=JWTTokenIssuer(settings.jwt_secret, ttl_seconds=settings.jwt_ttl_seconds),
    )


def build_scheduler(run_immediately: bool = False) -> IngestionScheduler:
    """A new scheduler around the shared pipeline (not cached: one per caller)."""
    settings = get_settings()
    return IngestionScheduler(
        pipeline=get_ingestion_pipeline(),
        interval_seconds=settings.ingest_interval_seconds,
        run_immediately=run_immediately,
    )
