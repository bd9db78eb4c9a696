"""
domain/models.py
──────────────────────────────────────────────────────────────────────────────
Pure domain objects — Pydantic models with no imports from adapters or ports.

These models are the lingua franca of the entire system:
  • the ingestion pipeline validates raw API postings into JobPosting
  • the job store persists and returns JobPosting
  • the query service assembles the read-side response models
  • interfaces (FastAPI, CLI, Streamlit) serialise them

Field names on JobPosting follow the upstream jobs API so a raw `_source`
document validates directly.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from jobscope.config.classification import OTHER


# ── Persisted entity ───────────────────────────────────────────────────────────

class Coordinates(BaseModel):
    """A latitude / longitude pair."""

    lat: Optional[float] = None
    lon: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return self.lat is not None and self.lon is not None


class JobPosting(BaseModel):
    """One job advertisement, keyed by its source URL."""

    model_config = ConfigDict(extra="ignore")

    url: str = Field(..., min_length=1, description="Source URL; the upsert key")

    job_title:   Optional[str] = None
    employer:    Optional[str] = None
    excerpt:     Optional[str] = None
    content:     Optional[str] = None
    post_date:   Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    type:        Optional[str] = None
    duration:    Optional[str] = None

    location:         Optional[Coordinates] = None
    derived_location: Optional[Coordinates] = None
    region:           Optional[str] = None
    stateprov:        Optional[str] = None

    wage_value:      Optional[float] = None
    wage_unit:       Optional[str] = None
    harmonized_wage: Optional[float] = None

    # Raw classification inputs from the jobs API
    nocs_2021:        list[str] = Field(default_factory=list)
    major_group_2021: list[str] = Field(default_factory=list)
    naics:            list[str] = Field(default_factory=list)
    sector:           Optional[str] = None

    # Derived classification
    category:   str = OTHER
    noc_code:   Optional[str] = None
    naics_code: Optional[str] = None

    skill_names: list[str] = Field(default_factory=list)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("url")
    @classmethod
    def strip_url(cls, v: str) -> str:
        return v.strip()

    @field_validator("nocs_2021", "major_group_2021", "naics", "skill_names", mode="before")
    @classmethod
    def as_string_list(cls, v: Any) -> list[str]:
        """Accept a scalar or a list; drop empty entries."""
        if v is None:
            return []
        if not isinstance(v, (list, tuple)):
            v = [v]
        return [str(item) for item in v if item is not None and str(item) != ""]

    @field_validator("noc_code", "naics_code", mode="before")
    @classmethod
    def code_as_string(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        return str(v)

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, v: Any) -> str:
        return v or OTHER

    @field_validator("location", "derived_location", mode="before")
    @classmethod
    def parse_geo_point(cls, v: Any) -> Any:
        """Accept ``{"lat", "lon"}`` objects or ``"lat,lon"`` strings."""
        if isinstance(v, str):
            parts = [p.strip() for p in v.split(",")]
            if len(parts) != 2:
                return None
            try:
                return {"lat": float(parts[0]), "lon": float(parts[1])}
            except ValueError:
                return None
        return v

    @field_validator("post_date", "expiry_date", "created_at", "updated_at", mode="before")
    @classmethod
    def parse_datetime(cls, v: Any) -> Any:
        """Parse ISO strings leniently; unparseable values become None."""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            try:
                return datetime.fromisoformat(v.replace("Z", "+00:00"))
            except ValueError:
                return None
        return v

    @property
    def coordinates(self) -> Optional[Coordinates]:
        """Primary location if complete, else the derived location, else None."""
        for loc in (self.location, self.derived_location):
            if loc is not None and loc.is_complete:
                return loc
        return None


# ── Category metadata ──────────────────────────────────────────────────────────

class CategoryMetadata(BaseModel):
    """Presentation metadata derived from a category name at read time."""

    skills:        list[str]
    salary:        str
    median_salary: int
    description:   str


# ── Read-side aggregates ───────────────────────────────────────────────────────

class CategoryGroup(BaseModel):
    """One (category, sector) bucket as returned by the job store."""

    category:    Optional[str] = None
    sector:      Optional[str] = None
    count:       int
    noc_codes:   list[str] = Field(default_factory=list)
    naics_codes: list[str] = Field(default_factory=list)


class CategorySummary(BaseModel):
    """A category bubble: store aggregate enriched with metadata."""

    id:            int
    name:          str
    count:         int
    sector:        str
    description:   str
    skills:        list[str]
    salary:        str
    median_salary: int
    noc_codes:     list[str]
    naics_codes:   list[str]
    is_related:    bool = False


class JobSummary(BaseModel):
    """Compact posting row shown in a category detail view."""

    title:     Optional[str] = None
    employer:  Optional[str] = None
    location:  Optional[str] = None
    post_date: Optional[datetime] = None
    url:       str
    type:      Optional[str] = None


class CategoryDetail(BaseModel):
    """A category with its most recent postings."""

    name:          str
    count:         int
    sector:        str
    description:   str
    skills:        list[str]
    salary:        str
    median_salary: int
    noc_codes:     list[str]
    naics_codes:   list[str]
    jobs:          list[JobSummary]


class Pagination(BaseModel):
    total: int
    page:  int
    pages: int


class SearchPage(BaseModel):
    """One page of free-text search results."""

    jobs:       list[JobPosting]
    pagination: Pagination


class MapPoint(BaseModel):
    """A posting placed on the map."""

    job_title: Optional[str] = None
    employer:  Optional[str] = None
    post_date: Optional[datetime] = None
    url:       str
    latitude:  float
    longitude: float
    job_type:  str = "Other"


# ── Ingestion run report ───────────────────────────────────────────────────────

class IngestionSummary(BaseModel):
    """Outcome of one ingestion run.

    A run succeeds when every fetched posting was attempted; ``failed``
    counts the postings whose validation or upsert raised.
    """

    pages_fetched: int = 0
    fetched:       int = 0
    upserted:      int = 0
    failed:        int = 0
    skipped:       int = 0
    started_at:    datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at:   Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def to_dict(self) -> dict:
        """Serialise to a plain JSON-safe dict."""
        data = self.model_dump(mode="json")
        data["duration_seconds"] = round(self.duration_seconds, 3)
        return data


# ── User accounts ──────────────────────────────────────────────────────────────

class User(BaseModel):
    """A stored account, including its password hash.  Never serialised out."""

    id:            int
    full_name:     str
    email:         str
    password_hash: str
    created_at:    Optional[datetime] = None

    def public(self) -> UserProfile:
        return UserProfile(
            id=self.id,
            full_name=self.full_name,
            email=self.email,
            created_at=self.created_at,
        )


class UserProfile(BaseModel):
    """The account as returned to clients: everything but the password hash."""

    id:         int
    full_name:  str
    email:      str
    created_at: Optional[datetime] = None


def _normalise_email(value: str) -> str:
    value = value.strip().lower()
    if "@" not in value or value.startswith("@") or value.endswith("@"):
        raise ValueError("must be an email address")
    return value


class RegisterRequest(BaseModel):
    """Body of POST /api/auth/register.  Accepts ``fullName`` or ``full_name``."""

    full_name: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("fullName", "full_name")
    )
    email:     str
    password:  str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        return _normalise_email(v)


class LoginRequest(BaseModel):
    """Body of POST /api/auth/login."""

    email:    str
    password: str

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        return v.strip().lower()


class TokenResponse(BaseModel):
    success: bool = True
    token:   str
