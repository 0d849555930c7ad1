"""Structured models decoded from PocketBase responses."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, computed_field, field_validator

from .decoding import Source, decode_into
from .tokens import extract_unverified_expiration

T = TypeVar("T")

# A token is treated as expired this long before its literal expiry.
EXPIRY_MARGIN = timedelta(seconds=30)


class User(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = ""
    collection_id: str = Field(default="", alias="collectionId")
    collection_name: str = Field(default="", alias="collectionName")
    username: str = ""
    verified: bool = False
    email_visibility: bool = Field(default=False, alias="emailVisibility")
    email: str = ""
    created: str = ""
    updated: str = ""
    name: str = ""
    avatar: str = ""


class SearchResults(BaseModel, Generic[T]):
    """One page of a record list.

    When the list was requested with ``skip_total`` the server reports ``-1`` for
    both totals, so ``next_page()`` cannot tell whether more pages exist and
    always returns ``None``.
    """

    model_config = ConfigDict(populate_by_name=True)

    page: int = 0
    per_page: int = Field(default=0, alias="perPage")
    total_pages: int = Field(default=0, alias="totalPages")
    total_items: int = Field(default=0, alias="totalItems")
    items: list[T] = Field(default_factory=list)

    def prev_page(self) -> int | None:
        if self.page > 1:
            return self.page - 1
        return None

    def next_page(self) -> int | None:
        if self.page < self.total_pages:
            return self.page + 1
        return None


class AuthToken(BaseModel):
    """An auth token together with the account it was issued for.

    ``expiration`` is always read from the token's own ``exp`` claim and cannot
    be set independently.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: str
    user: User = Field(default_factory=User, alias="record")

    _expiration: datetime = PrivateAttr()

    @field_validator("token")
    @classmethod
    def check_token(cls, value: str) -> str:
        extract_unverified_expiration(value)
        return value

    def model_post_init(self, __context: Any) -> None:
        self._expiration = extract_unverified_expiration(self.token)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def expiration(self) -> datetime:
        return self._expiration

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return True when the token expires within ``EXPIRY_MARGIN`` of ``now``.

        A naive ``now`` is taken to be UTC.
        """
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return self.expiration < now + EXPIRY_MARGIN


class _AuthPayload(BaseModel):
    token: str
    record: User = Field(default_factory=User)


def parse_token(source: Source) -> AuthToken:
    """Decode an auth response body and check its token's expiry claim."""
    payload = decode_into(source, _AuthPayload(token=""))
    # Fail here with MalformedTokenError rather than on first use.
    extract_unverified_expiration(payload.token)
    return AuthToken(token=payload.token, user=payload.record)
