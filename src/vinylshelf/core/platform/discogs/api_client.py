"""Direct Discogs API client implementation."""

import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlencode

import requests
from loguru import logger
from requests.exceptions import RequestException

from vinylshelf.core.platform.discogs.exceptions import DiscogsApiError
from vinylshelf.core.platform.discogs.models import (
    DiscogsCollectionPage,
    DiscogsRelease,
    DiscogsSearchResult,
    MarketStats,
)
from vinylshelf.core.platform.discogs.rate_limiter import RateLimiter


@dataclass(frozen=True)
class EmptyResponse:
    """Successful response that carried no body (e.g. ``201 Created``)."""

    status: int


class DiscogsApiClient:
    """Low-level client for making direct requests to the Discogs API.

    One instance owns one rate limiter. Create a single client per logical
    operation (a sync run, a CLI command) and pass it to everything that needs
    it; a fresh client starts with a fresh limiter and would not be throttled
    against earlier requests.
    """

    # Discogs API base URL
    BASE_URL = "https://api.discogs.com"

    # Requests per minute allowed by Discogs
    AUTHENTICATED_RATE_LIMIT = 60
    UNAUTHENTICATED_RATE_LIMIT = 25

    MAX_ATTEMPTS = 3
    REQUEST_TIMEOUT = 30.0
    CACHE_MAX_AGE = 3600

    def __init__(
        self,
        user_agent: str,
        token: str | None = None,
        base_url: str | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the Discogs API client.

        Args:
            user_agent: User agent string (required by Discogs)
            token: Personal access token (optional, raises the rate limit)
            base_url: Override for the API base URL
            sleep: Function used for 429 backoff waits
        """
        self.user_agent = user_agent
        self.token = token or None
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self._sleep = sleep

        rate = self.AUTHENTICATED_RATE_LIMIT if self.token else self.UNAUTHENTICATED_RATE_LIMIT
        self.rate_limiter = RateLimiter(rate)

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def _get_headers(self, method: str, has_body: bool) -> dict[str, str]:
        """Get headers for API requests.

        Returns:
            Dictionary of headers
        """
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

        if self.token:
            headers["Authorization"] = f"Discogs token={self.token}"

        if method == "GET":
            headers["Cache-Control"] = f"max-age={self.CACHE_MAX_AGE}"

        if has_body:
            headers["Content-Type"] = "application/json"

        return headers

    def _retry_delay(self, response: requests.Response, attempt: int) -> float:
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                return max(float(retry_after), 0.0)
            except ValueError:
                logger.debug(f"Ignoring non-numeric Retry-After header: {retry_after}")
        return float(2**attempt)

    def make_request(
        self,
        path: str,
        method: str = "GET",
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make a request to the Discogs API.

        Args:
            path: API path (without base URL), may include a query string
            method: HTTP method (GET, POST, etc.)
            body: JSON body for non-GET requests
            params: Extra URL parameters

        Returns:
            Parsed JSON payload, or EmptyResponse when the body is empty

        Raises:
            DiscogsApiError: On a non-2xx status (after retries for 429) or a
                transport failure
        """
        method = method.upper()
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = self._get_headers(method, body is not None)
        payload = json.dumps(body) if body is not None else None

        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            self.rate_limiter.wait_for_next_slot()

            try:
                logger.debug(f"Making {method} request to {url}")
                response = requests.request(
                    method=method,
                    url=url,
                    headers=headers,
                    params=params,
                    data=payload,
                    timeout=self.REQUEST_TIMEOUT,
                )
            except RequestException as e:
                logger.error(f"API request error: {e}")
                raise DiscogsApiError(f"Discogs request failed: {e}", path=path) from e

            # Log rate limit information if provided
            if "X-Discogs-Ratelimit" in response.headers:
                limit = response.headers.get("X-Discogs-Ratelimit")
                remaining = response.headers.get("X-Discogs-Ratelimit-Remaining")
                logger.debug(f"Rate limit: {remaining}/{limit}")

            if response.status_code == 429 and attempt < self.MAX_ATTEMPTS:
                delay = self._retry_delay(response, attempt)
                logger.warning(
                    f"Rate limited (attempt {attempt}/{self.MAX_ATTEMPTS}). "
                    f"Waiting {delay:.1f} seconds"
                )
                self._sleep(delay)
                continue

            return self._handle_response(response, path)

        # The final attempt always returns or raises inside the loop
        raise DiscogsApiError("Discogs API error: retries exhausted", status=429, path=path)

    def _handle_response(self, response: requests.Response, path: str) -> Any:
        status = response.status_code
        if not 200 <= status < 300:
            raise DiscogsApiError(
                f"Discogs API error: {status} {response.reason or ''}".rstrip(),
                status=status,
                path=path,
            )

        if not response.content or not response.text.strip():
            return EmptyResponse(status)

        try:
            return response.json()
        except ValueError as e:
            raise DiscogsApiError(
                f"Discogs API returned invalid JSON: {e}", status=status, path=path
            ) from e

    def _search(self, **criteria: str) -> list[DiscogsSearchResult]:
        query = urlencode(
            {**criteria, "type": "release", "format": "Vinyl"},
            quote_via=quote,
        )
        response = self.make_request(f"/database/search?{query}")
        if not isinstance(response, dict):
            return []

        results: list[DiscogsSearchResult] = []
        for result in response.get("results") or []:
            if not isinstance(result, dict):
                continue
            try:
                results.append(DiscogsSearchResult.from_discogs_dict(result))
            except ValueError as e:
                logger.warning(f"Skipping malformed search result: {e}")
        return results

    def search_by_catalog_number(self, catalog_number: str) -> list[DiscogsSearchResult]:
        """Search vinyl releases by catalog number.

        Args:
            catalog_number: The catalog number to search for

        Returns:
            Matching releases
        """
        return self._search(catno=catalog_number)

    def search_by_artist_and_title(self, artist: str, title: str) -> list[DiscogsSearchResult]:
        """Search vinyl releases by artist and release title.

        Args:
            artist: The artist name
            title: The album title

        Returns:
            Matching releases
        """
        return self._search(artist=artist, title=title)

    def search_by_upc(self, upc_code: str) -> list[DiscogsSearchResult]:
        """Search vinyl releases by UPC/barcode.

        Args:
            upc_code: The barcode to search for

        Returns:
            Matching releases
        """
        return self._search(barcode=upc_code)

    def get_release(self, release_id: int | str) -> DiscogsRelease:
        """Get a specific release by ID.

        Args:
            release_id: Discogs release ID

        Returns:
            The release details
        """
        return DiscogsRelease.from_discogs_dict(self.make_request(f"/releases/{release_id}"))

    def get_release_market_stats(self, release_id: int | str) -> MarketStats:
        """Get marketplace statistics for a release.

        Stats are not available for every release; failures yield empty stats.
        """
        try:
            stats = self.make_request(f"/marketplace/stats/{release_id}")
        except DiscogsApiError as e:
            logger.warning(f"Marketplace stats not available for release {release_id}: {e}")
            return MarketStats()

        if not isinstance(stats, dict):
            return MarketStats()
        return MarketStats.from_discogs_dict(stats)

    def get_user_collection(
        self, username: str, page: int = 1, per_page: int = 100
    ) -> DiscogsCollectionPage:
        """Get one page of a user's collection, newest additions first.

        Args:
            username: Discogs username
            page: Page number (1-based)
            per_page: Number of items per page (Discogs max is 100)

        Returns:
            The page with its pagination metadata
        """
        query = urlencode(
            {
                "page": page,
                "per_page": min(per_page, 100),
                "sort": "added",
                "sort_order": "desc",
            }
        )
        response = self.make_request(
            f"/users/{quote(username, safe='')}/collection/folders/0/releases?{query}"
        )
        if not isinstance(response, dict):
            raise DiscogsApiError(
                "Discogs API returned an empty collection page", status=getattr(response, "status", None)
            )
        return DiscogsCollectionPage.from_discogs_dict(response)

    def add_to_collection(self, username: str, release_id: int | str) -> None:
        """Add a release to the user's default ("Uncategorized") collection folder.

        Args:
            username: Discogs username
            release_id: Discogs release ID

        Raises:
            DiscogsApiError: With status 409 if the release is already present
        """
        self.make_request(
            f"/users/{quote(username, safe='')}/collection/folders/1/releases/{release_id}",
            method="POST",
        )
