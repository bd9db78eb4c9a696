"""
interfaces/api.py
──────────────────────────────────────────────────────────────────────────────
FastAPI delivery layer.

Run:
  uvicorn jobscope.interfaces.api:app --port 3000

Routes:
  GET       /health
  GET       /api/test
  GET       /api/jobs
  GET       /api/jobs/categories
  GET       /api/jobs/categories/{name}
  GET|POST  /api/jobs/fetch              manual ingestion trigger
  GET       /api/jobs/search?query=&page=&limit=
  GET       /api/jobs/map
  POST      /api/auth/register
  POST      /api/auth/login
  GET       /api/auth/validate-token     Authorization: Bearer <token>
  GET       /api/auth/profile            Authorization: Bearer <token>

Services are resolved with Depends() on the container getters, so tests swap
them with ``app.dependency_overrides``.  Domain exceptions are mapped to
status codes in one place (see domain/exceptions.py).
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jobscope import __version__
from jobscope.config.settings import get_settings
from jobscope.domain.exceptions import (
    AuthenticationError,
    CategoryNotFoundError,
    DatabaseError,
    FetchError,
    FetchTimeoutError,
    IngestionInProgressError,
    InvalidCredentialsError,
    InvalidTokenError,
    JobScopeError,
    MissingTokenError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from jobscope.domain.models import (
    CategoryDetail,
    CategorySummary,
    JobPosting,
    LoginRequest,
    MapPoint,
    RegisterRequest,
    SearchPage,
    TokenResponse,
    UserProfile,
)
from jobscope.services.auth import AuthService
from jobscope.services.container import (
    build_scheduler,
    get_auth_service,
    get_ingestion_pipeline,
    get_query_service,
)
from jobscope.services.ingestion import IngestionPipeline
from jobscope.services.query import JobQueryService

logger = logging.getLogger(__name__)

# Most specific first: FetchTimeoutError is a FetchError.
_STATUS_BY_ERROR: tuple[tuple[type[JobScopeError], int], ...] = (
    (CategoryNotFoundError, 404),
    (UserNotFoundError, 404),
    (MissingTokenError, 401),
    (InvalidTokenError, 400),
    (InvalidCredentialsError, 400),
    (UserAlreadyExistsError, 400),
    (IngestionInProgressError, 409),
    (FetchTimeoutError, 504),
    (FetchError, 502),
    (AuthenticationError, 502),
    (DatabaseError, 503),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    scheduler = None
    if settings.scheduler_enabled:
        scheduler = build_scheduler()
        scheduler.start()
    yield
    if scheduler is not None:
        scheduler.stop()


router = APIRouter(prefix="/api")


@router.get("/test")
def api_test():
    return {"message": "JobScope API is working!"}


@router.get("/jobs", response_model=list[JobPosting])
def list_jobs(service: JobQueryService = Depends(get_query_service)):
    return service.list_jobs()


@router.get("/jobs/categories", response_model=list[CategorySummary])
def list_categories(service: JobQueryService = Depends(get_query_service)):
    return service.categories()


@router.get("/jobs/categories/{name}", response_model=CategoryDetail)
def category_detail(name: str, service: JobQueryService = Depends(get_query_service)):
    return service.category_detail(name)


@router.api_route("/jobs/fetch", methods=["GET", "POST"])
def trigger_fetch(pipeline: IngestionPipeline = Depends(get_ingestion_pipeline)):
    logger.info("Manual job fetch triggered")
    summary = pipeline.ingest_all()
    return {
        "success": True,
        "message": "Jobs fetched and saved successfully",
        "summary": summary.to_dict(),
    }


@router.get("/jobs/search", response_model=SearchPage)
def search_jobs(
    query: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    service: JobQueryService = Depends(get_query_service),
):
    return service.search(query, page=page, limit=limit)


@router.get("/jobs/map")
def map_jobs(service: JobQueryService = Depends(get_query_service)) -> dict[str, list[MapPoint]]:
    return {"jobs": service.map_jobs()}


# ── Auth routes ────────────────────────────────────────────────────────────

auth_router = APIRouter(prefix="/api/auth")
_bearer = HTTPBearer(auto_error=False)


def bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Optional[str]:
    """The token of an ``Authorization: Bearer`` header, or None."""
    return credentials.credentials if credentials else None


@auth_router.post("/register", status_code=201)
def register(body: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    user = service.register(body)
    return {"message": "User registered successfully", "user": user}


@auth_router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    try:
        token = service.login(body)
    except InvalidCredentialsError as exc:
        return JSONResponse(status_code=400, content={"message": str(exc)})
    return TokenResponse(token=token)


@auth_router.get("/validate-token")
def validate_token(
    token: Optional[str] = Depends(bearer_token),
    service: AuthService = Depends(get_auth_service),
):
    # Every failure here is a 401 with valid=false, unlike the profile guard.
    if not token:
        return _invalid("No token provided")
    try:
        user = service.user_for_token(token)
    except UserNotFoundError:
        return _invalid("User not found")
    except InvalidTokenError:
        return _invalid("Invalid or expired token")
    return {"valid": True, "user": user.public()}


@auth_router.get("/profile", response_model=UserProfile)
def profile(
    token: Optional[str] = Depends(bearer_token),
    service: AuthService = Depends(get_auth_service),
):
    return service.profile(token)


def _invalid(message: str) -> JSONResponse:
    return JSONResponse(status_code=401, content={"valid": False, "message": message})


async def _handle_domain_error(request: Request, exc: JobScopeError) -> JSONResponse:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            break
    else:
        status = 500
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status, content={"error": str(exc)})


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="JobScope API",
        description="Job postings classified by NOC occupation category and NAICS sector",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_exception_handler(JobScopeError, _handle_domain_error)

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "jobs_api_configured": bool(settings.jobs_api_key),
        }

    app.include_router(router)
    app.include_router(auth_router)
    return app


app = create_app()
