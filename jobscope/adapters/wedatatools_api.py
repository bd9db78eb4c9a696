"""
adapters/wedatatools_api.py
──────────────────────────────────────────────────────────────────────────────
Implements JobsAPIPort using the WeDataTools get-jobs endpoint.

Key behaviour:
  - POST form-encoded parameters via raw requests (no SDK)
  - Requests a fixed set of fields with repeated ``includes[]`` parameters
    and orders results newest first (``orderby=date_desc``)
  - Every request carries a timeout; a timeout raises FetchTimeoutError
  - Retries on 429 / 5xx / connection errors with exponential back-off

Required env vars:
  WEDATATOOLS_API_KEY   — API key
  JOBS_API_URL          — default: https://api.wedatatools.com/v2/get-jobs
  JOBS_API_TIMEOUT      — seconds, default 30
  JOBS_API_RETRIES      — attempts, default 3
"""
from __future__ import annotations

import logging
import time
from typing import Any

import requests

from jobscope.config.settings import Settings
from jobscope.domain.exceptions import AuthenticationError, FetchError, FetchTimeoutError

logger = logging.getLogger(__name__)

# Order matters only for readability of the outgoing request.
INCLUDED_FIELDS: tuple[str, ...] = (
    "location",
    "derived_location",
    "job_title",
    "employer",
    "type",
    "excerpt",
    "url",
    "post_date",
    "region",
    "stateprov",
    "harmonized_wage",
    "skill_names",
    # Classification inputs
    "nocs_2021",
    "major_group_2021",
    "naics",
    "sector",
)

_RETRY_STATUSES = (429, 500, 502, 503)


class WeDataToolsAPIAdapter:
    """requests implementation of JobsAPIPort.

    Injected into IngestionPipeline via services/container.py.
    """

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        if not settings.jobs_api_key:
            raise AuthenticationError(
                "WEDATATOOLS_API_KEY is not set. "
                "Add it to your .env file or environment."
            )
        self._settings = settings
        self._session = session or requests.Session()
        logger.debug(
            "WeDataToolsAPIAdapter ready | url=%s timeout=%ds",
            settings.jobs_api_url,
            settings.jobs_api_timeout,
        )

    # ── JobsAPIPort implementation ─────────────────────────────────────────

    def fetch_page(self, page: int, per_page: int) -> dict[str, Any]:
        """Fetch one page of postings, newest first.

        Raises:
            FetchError:          On failure after all retries or a bad body.
            FetchTimeoutError:   When the last attempt timed out.
            AuthenticationError: When the key is rejected (401 / 403).
        """
        logger.info("Fetching jobs page | page=%d per_page=%d", page, per_page)
        resp = self._post_with_retry(self._build_params(page, per_page))
        try:
            data = resp.json()
        except ValueError as exc:
            raise FetchError(
                f"Jobs API returned a non-JSON body: {resp.text[:300]}"
            ) from exc
        if not isinstance(data, dict):
            raise FetchError(
                f"Jobs API returned {type(data).__name__}, expected an object"
            )
        return data

    # ── Private helpers ────────────────────────────────────────────────────

    def _build_params(self, page: int, per_page: int) -> list[tuple[str, Any]]:
        """Form fields as a list of pairs so ``includes[]`` can repeat."""
        params: list[tuple[str, Any]] = [
            ("key", self._settings.jobs_api_key),
            ("page", page),
            ("per_page", per_page),
        ]
        params.extend(("includes[]", name) for name in INCLUDED_FIELDS)
        params.append(("orderby", "date_desc"))
        return params

    def _post_with_retry(self, params: list[tuple[str, Any]]) -> requests.Response:
        """POST to the jobs API with retry on 429 / 5xx / connection errors."""
        retries = max(self._settings.jobs_api_retries, 1)
        delay = 2.0
        last_exc: Exception | None = None

        for attempt in range(1, retries + 1):
            try:
                resp = self._session.post(
                    self._settings.jobs_api_url,
                    data=params,
                    timeout=self._settings.jobs_api_timeout,
                )
            except requests.Timeout as exc:
                last_exc = exc
                logger.warning(
                    "Jobs API timed out after %ds (attempt %d/%d)",
                    self._settings.jobs_api_timeout, attempt, retries,
                )
            except requests.RequestException as exc:
                last_exc = exc
                logger.warning(
                    "Jobs API request error (attempt %d/%d): %s",
                    attempt, retries, exc,
                )
            else:
                if resp.status_code in (401, 403):
                    raise AuthenticationError(
                        f"Jobs API returned {resp.status_code}. "
                        "Check that WEDATATOOLS_API_KEY is valid."
                    )
                if resp.status_code not in _RETRY_STATUSES:
                    if not resp.ok:
                        raise FetchError(
                            f"Jobs API HTTP {resp.status_code}: {resp.text[:300]}"
                        )
                    return resp
                last_exc = None
                logger.warning(
                    "Jobs API %d (attempt %d/%d)",
                    resp.status_code, attempt, retries,
                )

            if attempt < retries:
                time.sleep(delay)
                delay *= 2

        if isinstance(last_exc, requests.Timeout):
            raise FetchTimeoutError(
                f"Jobs API did not answer within {self._settings.jobs_api_timeout}s "
                f"after {retries} attempts"
            ) from last_exc
        raise FetchError(f"Jobs API failed after {retries} attempts") from last_exc
