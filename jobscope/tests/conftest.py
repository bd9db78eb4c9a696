"""
tests/conftest.py
──────────────────────────────────────────────────────────────────────────────
Shared pytest fixtures and mock adapter implementations.

Mock adapters implement the Port Protocols via structural subtyping — they do
NOT inherit from any base class.  pytest uses them to test service logic
without any real jobs API or database connections.

Fixture hierarchy:
  settings       → Settings with small page sizes
  mock_api       → implements JobsAPIPort (pages of canned hits)
  store          → implements JobStorePort (in-memory dict keyed by url)
  pipeline       → IngestionPipeline wired with mock_api + store
  query_service  → JobQueryService wired with store
  users          → implements UserStorePort (in-memory, unique emails)
  auth_service   → AuthService with users, real bcrypt (cheap rounds) and JWT
"""
from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Optional

import pytest

from jobscope.adapters.bcrypt_hasher import BcryptPasswordHasher
from jobscope.adapters.jwt_tokens import JWTTokenIssuer
from jobscope.config.settings import Settings
from jobscope.domain.exceptions import DatabaseError, UserAlreadyExistsError
from jobscope.domain.models import CategoryGroup, JobPosting, User
from jobscope.services.auth import AuthService
from jobscope.services.ingestion import IngestionPipeline
from jobscope.services.query import JobQueryService


# ── Settings fixture ───────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def settings() -> Settings:
    """Return a Settings instance with sane test defaults."""
    return Settings(
        jobs_api_key="test-key",
        jobs_api_url="https://jobs.example.test/v2/get-jobs",
        jobs_api_per_page=3,
        jobs_api_max_pages=1,
        jobs_api_timeout=5,
        jobs_api_retries=2,
        db_dsn="dbname=jobscope_test",
        ingest_interval_seconds=3600,
        scheduler_enabled=False,
        cors_origins=("*",),
        category_detail_limit=20,
        log_level="DEBUG",
    )


# ── Raw posting builder ────────────────────────────────────────────────────

def make_raw(url: str, **fields: Any) -> dict[str, Any]:
    """A raw `_source` document as the jobs API returns it."""
    raw: dict[str, Any] = {
        "url": url,
        "job_title": f"Job at {url}",
        "employer": "Acme Corp",
        "excerpt": "A great opportunity.",
        "post_date": "2024-05-01T09:00:00",
        "region": "Toronto",
        "stateprov": "Ontario",
        "nocs_2021": ["2171"],
        "major_group_2021": ["21"],
        "naics": ["54"],
        "skill_names": ["Python"],
    }
    raw.update(fields)
    return raw


def as_response(postings: list[dict]) -> dict[str, Any]:
    return {"hits": [{"_source": p} for p in postings]}


# ── Mock adapters ──────────────────────────────────────────────────────────

class MockJobsAPIAdapter:
    """Serves canned pages; page N is ``pages[N - 1]``, beyond that empty."""

    def __init__(self, pages: Optional[list[list[dict]]] = None) -> None:
        self.pages: list[list[dict]] = pages or []
        self.calls: list[tuple[int, int]] = []
        self.error: Optional[Exception] = None

    def fetch_page(self, page: int, per_page: int) -> dict[str, Any]:
        self.calls.append((page, per_page))
        if self.error is not None:
            raise self.error
        if page > len(self.pages):
            return {"hits": []}
        return as_response(self.pages[page - 1])


class InMemoryJobStore:
    """In-memory fake job store with a unique index on url.

    URLs listed in ``fail_urls`` raise DatabaseError on upsert.
    """

    def __init__(self) -> None:
        self.docs: dict[str, JobPosting] = {}
        self.upsert_calls: list[str] = []
        self.fail_urls: set[str] = set()

    # write path

    def upsert_job(self, posting: JobPosting) -> None:
        self.upsert_calls.append(posting.url)
        if posting.url in self.fail_urls:
            raise DatabaseError(f"simulated failure for {posting.url}")
        now = datetime.now(timezone.utc)
        existing = self.docs.get(posting.url)
        created = existing.created_at if existing else now
        self.docs[posting.url] = posting.model_copy(
            update={"created_at": created, "updated_at": now}
        )

    # read paths

    def count(self) -> int:
        return len(self.docs)

    def list_jobs(self, limit: Optional[int] = None) -> list[JobPosting]:
        jobs = _newest_first(self.docs.values())
        return jobs if limit is None else jobs[:limit]

    def category_groups(self) -> list[CategoryGroup]:
        buckets: dict[tuple, list[JobPosting]] = defaultdict(list)
        for job in self.docs.values():
            buckets[(job.category, job.sector)].append(job)
        groups = [
            CategoryGroup(
                category=category,
                sector=sector,
                count=len(jobs),
                noc_codes=sorted({j.noc_code for j in jobs if j.noc_code}),
                naics_codes=sorted({j.naics_code for j in jobs if j.naics_code}),
            )
            for (category, sector), jobs in buckets.items()
        ]
        return sorted(groups, key=lambda g: g.count, reverse=True)

    def jobs_by_category(self, category: str, limit: int) -> list[JobPosting]:
        jobs = [j for j in self.docs.values() if j.category == category]
        return _newest_first(jobs)[:limit]

    def search(self, query: str, offset: int, limit: int) -> tuple[list[JobPosting], int]:
        needle = query.lower()
        matches = [
            j for j in self.docs.values()
            if any(needle in (text or "").lower() for text in (j.job_title, j.employer, j.excerpt))
        ]
        matches = _newest_first(matches)
        return matches[offset: offset + limit], len(matches)

    def jobs_with_coordinates(self) -> list[JobPosting]:
        return _newest_first(j for j in self.docs.values() if j.coordinates is not None)


class InMemoryUserStore:
    """In-memory fake user store with a unique index on email."""

    def __init__(self) -> None:
        self.users: dict[int, User] = {}

    def create_user(self, full_name: str, email: str, password_hash: str) -> User:
        if self.get_by_email(email) is not None:
            raise UserAlreadyExistsError(f"User {email} already exists")
        user = User(
            id=len(self.users) + 1,
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        self.users[user.id] = user
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)


def _newest_first(jobs) -> list[JobPosting]:
    return sorted(
        jobs,
        key=lambda j: (j.post_date is not None, j.post_date or datetime.min),
        reverse=True,
    )


# ── pytest fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def mock_api():
    return MockJobsAPIAdapter()


@pytest.fixture
def store():
    return InMemoryJobStore()


@pytest.fixture
def pipeline(mock_api, store, settings):
    return IngestionPipeline(api=mock_api, store=store, settings=settings)


@pytest.fixture
def query_service(store):
    return JobQueryService(store=store, detail_limit=20)


@pytest.fixture
def raw_posting():
    """Factory for raw API postings: ``raw_posting("https://x/1", job_title=...)``."""
    return make_raw


JWT_TEST_SECRET = "test-secret"


@pytest.fixture
def users():
    return InMemoryUserStore()


@pytest.fixture
def tokens():
    return JWTTokenIssuer(JWT_TEST_SECRET, ttl_seconds=3600)


@pytest.fixture
def auth_service(users, tokens):
    return AuthService(users=users, hasher=BcryptPasswordHasher(rounds=4), tokens=tokens)
