"""Unverified claim extraction for PocketBase bearer tokens.

Nothing here checks a signature. The expiration read from a token is advisory:
it tells a client when to refresh, it does not prove the token is genuine.
"""

from __future__ import annotations

import base64
import binascii
import re
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, StrictInt, ValidationError

from .errors import MalformedTokenError


class TokenClaims(BaseModel):
    """The subset of JWT payload claims read by the client."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    exp: StrictInt


_B64URL_UNPADDED = re.compile(r"[A-Za-z0-9_-]*")


def _b64url_decode(segment: str) -> bytes:
    if not _B64URL_UNPADDED.fullmatch(segment):
        raise ValueError("segment is not unpadded base64url")
    padded = segment + "=" * (-len(segment) % 4)
    return base64.b64decode(padded, altchars=b"-_", validate=True)


def extract_unverified_claims(token: str) -> TokenClaims:
    parts = token.split(".")
    if len(parts) != 3:
        raise MalformedTokenError(f"Invalid token format: expected 3 segments, got {len(parts)}")
    try:
        payload = _b64url_decode(parts[1])
    except (binascii.Error, ValueError) as exc:
        raise MalformedTokenError("Failed to decode token payload") from exc
    try:
        return TokenClaims.model_validate_json(payload)
    except ValidationError as exc:
        raise MalformedTokenError("Failed to parse token claims") from exc


def extract_unverified_expiration(token: str) -> datetime:
    """Return the ``exp`` claim of ``token`` as an aware UTC datetime."""
    claims = extract_unverified_claims(token)
    try:
        return datetime.fromtimestamp(claims.exp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise MalformedTokenError(f"Token expiry out of range: {claims.exp}") from exc
