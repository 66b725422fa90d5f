"""HTTP client for the upstream listing API.

Fetches one page at a time from ``{base_url}?ac=list&pg={page}``.
There is no retry: any transport error, non-2xx status or malformed
body is reported as UpstreamError and left to the caller.
"""

from __future__ import annotations

import logging
from types import TracebackType

import httpx
from pydantic import ValidationError

from vodcatalog.models.types import UpstreamPage

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Raised when a page cannot be fetched or parsed."""

    pass


class UpstreamClient:
    """Synchronous client for the listing API.

    Use as a context manager; the underlying httpx.Client lives only
    for the duration of the ``with`` block.

    Attributes:
        base_url: Listing API endpoint.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Listing API endpoint, without query string.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        self.base_url = base_url
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    def __enter__(self) -> "UpstreamClient":
        """Enter context and create HTTP client."""
        self._client = httpx.Client(timeout=self._timeout, transport=self._transport)
        return self

    def __exit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        """Exit context and close HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def fetch_page(self, page: int) -> UpstreamPage:
        """Fetch and parse one listing page.

        Args:
            page: 1-based page number.

        Returns:
            Parsed page. Video rows are left unvalidated.

        Raises:
            UpstreamError: On transport errors, non-2xx responses or
                bodies that are not a listing page.
        """
        if self._client is None:
            raise UpstreamError("Client not initialized. Use context manager.")

        logger.debug(f"Fetching page {page} from {self.base_url}")
        try:
            response = self._client.get(self.base_url, params={"ac": "list", "pg": page})
        except httpx.HTTPError as e:
            raise UpstreamError(f"Request failed for page {page}: {e}") from e

        if not response.is_success:
            raise UpstreamError(f"HTTP error: {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON on page {page}") from e

        if not isinstance(payload, dict):
            raise UpstreamError(f"Unexpected payload on page {page}: {type(payload).__name__}")

        try:
            return UpstreamPage.model_validate(payload)
        except ValidationError as e:
            raise UpstreamError(f"Malformed listing page {page}: {e}") from e
