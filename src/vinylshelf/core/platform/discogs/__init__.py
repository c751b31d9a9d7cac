"""Discogs API integration."""

from vinylshelf.core.platform.discogs.api_client import DiscogsApiClient, EmptyResponse
from vinylshelf.core.platform.discogs.exceptions import (
    DiscogsApiError,
    DiscogsConfigError,
    DiscogsErrorKind,
)
from vinylshelf.core.platform.discogs.rate_limiter import RateLimiter

__all__ = [
    "DiscogsApiClient",
    "DiscogsApiError",
    "DiscogsConfigError",
    "DiscogsErrorKind",
    "EmptyResponse",
    "RateLimiter",
]
