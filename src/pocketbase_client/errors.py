"""Domain errors."""

from __future__ import annotations

from dataclasses import dataclass


class PocketBaseError(Exception):
    """Base class for every error raised by this package."""


class MalformedTokenError(PocketBaseError, ValueError):
    """Raised when a bearer token does not carry a readable expiry claim."""


class InvalidTargetError(PocketBaseError, TypeError):
    """Raised when a decode target cannot be populated in place."""


class DecodeError(PocketBaseError, ValueError):
    """Raised when a response body cannot be decoded into its target."""


@dataclass(frozen=True, slots=True)
class PocketBaseApiError(PocketBaseError):
    """Raised when the PocketBase API returns a non-success response."""

    status_code: int
    method: str
    url: str
    response_text: str

    def __str__(self) -> str:
        return (
            f"PocketBase API error {self.status_code} for {self.method} {self.url}: "
            f"{self.response_text}"
        )
