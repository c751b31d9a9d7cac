"""Errors raised by the Discogs integration."""

from enum import Enum


class DiscogsErrorKind(Enum):
    """Stable classification of a failed Discogs call."""

    RATE_LIMITED = "rate_limited"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    TRANSIENT = "transient"
    CLIENT = "client"

    @classmethod
    def from_status(cls, status: int | None) -> "DiscogsErrorKind":
        """Map an HTTP status code to an error kind.

        Args:
            status: HTTP status code, or None when no response was received

        Returns:
            The matching error kind
        """
        if status is None or status >= 500:
            return cls.TRANSIENT
        if status == 429:
            return cls.RATE_LIMITED
        if status == 409:
            return cls.CONFLICT
        if status == 404:
            return cls.NOT_FOUND
        return cls.CLIENT


class DiscogsApiError(Exception):
    """A Discogs request that did not succeed.

    The HTTP status is kept as a field so callers can branch on it
    (e.g. a 409 from add-to-collection means the release is already there).
    """

    def __init__(self, message: str, status: int | None = None, path: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.path = path
        self.kind = DiscogsErrorKind.from_status(status)

    @property
    def is_conflict(self) -> bool:
        return self.kind is DiscogsErrorKind.CONFLICT

    @property
    def is_rate_limited(self) -> bool:
        return self.kind is DiscogsErrorKind.RATE_LIMITED


class DiscogsConfigError(ValueError):
    """Required Discogs configuration is missing."""
