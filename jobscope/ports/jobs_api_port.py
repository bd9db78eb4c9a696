"""
ports/jobs_api_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for the upstream jobs API.

Current implementation: WeDataToolsAPIAdapter (requests)
To swap: write a new adapter implementing this Protocol and change ONE line
in services/container.py.
"""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class JobsAPIPort(Protocol):
    """Contract for a paged source of raw job postings."""

    def fetch_page(self, page: int, per_page: int) -> dict[str, Any]:
        """Fetch one page of postings, newest first.

        Args:
            page:     1-indexed page number.
            per_page: Page size.

        Returns:
            The decoded response body, shaped ``{"hits": [{"_source": {...}}]}``.
            ``hits`` may be absent.

        Raises:
            FetchError:          On network failure, non-2xx or malformed body.
            FetchTimeoutError:   When the request exceeds the timeout.
            AuthenticationError: When the API key is rejected.
        """
        ...
