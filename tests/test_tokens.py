from __future__ import annotations

import base64
import json
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from pocketbase_client.errors import MalformedTokenError
from pocketbase_client.models import AuthToken, parse_token
from pocketbase_client.tokens import extract_unverified_expiration


def test_extracts_exp_claim(make_token) -> None:
    token = make_token(exp=1700000000, id="u1", type="authRecord")
    assert extract_unverified_expiration(token) == datetime.fromtimestamp(
        1700000000, tz=timezone.utc
    )


@pytest.mark.parametrize(
    "token",
    [
        "only.two",
        "one",
        "a.b.c.d",
        "",
    ],
)
def test_wrong_segment_count_is_malformed(token: str) -> None:
    with pytest.raises(MalformedTokenError):
        extract_unverified_expiration(token)


def test_bad_base64_is_malformed() -> None:
    with pytest.raises(MalformedTokenError):
        extract_unverified_expiration("header.!!not-base64!!.sig")


def test_claims_without_exp_are_malformed(make_token) -> None:
    with pytest.raises(MalformedTokenError):
        extract_unverified_expiration(make_token(id="u1"))


def test_non_json_payload_is_malformed() -> None:
    # "bm90IGpzb24" is "not json" without padding.
    with pytest.raises(MalformedTokenError):
        extract_unverified_expiration("aGVhZGVy.bm90IGpzb24.sig")


def _auth_at(make_token, expires: datetime) -> AuthToken:
    return AuthToken(token=make_token(exp=int(expires.timestamp())))


def test_expired_within_safety_margin(make_token) -> None:
    now = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
    assert _auth_at(make_token, now + timedelta(seconds=29)).is_expired(now)
    assert not _auth_at(make_token, now + timedelta(seconds=31)).is_expired(now)
    assert _auth_at(make_token, now - timedelta(hours=1)).is_expired(now)


def test_is_expired_defaults_to_current_time(make_token) -> None:
    now = datetime.now(timezone.utc)
    assert _auth_at(make_token, now + timedelta(seconds=5)).is_expired()
    assert not _auth_at(make_token, now + timedelta(hours=1)).is_expired()


def test_parse_token_populates_user_and_expiration(make_token) -> None:
    token = make_token(exp=1700000000)
    body = json.dumps(
        {
            "token": token,
            "record": {
                "id": "u1",
                "collectionId": "_pb_users_auth_",
                "collectionName": "users",
                "username": "jane",
                "verified": True,
                "emailVisibility": False,
                "email": "jane@example.com",
                "created": "2023-01-02 03:04:05.123Z",
                "updated": "2023-01-02 03:04:05.123Z",
                "name": "Jane",
                "avatar": "",
            },
        }
    ).encode("utf-8")

    auth = parse_token(body)
    assert auth.token == token
    assert auth.expiration == datetime.fromtimestamp(1700000000, tz=timezone.utc)
    assert auth.user.id == "u1"
    assert auth.user.collection_name == "users"
    assert auth.user.verified is True
    assert auth.user.email == "jane@example.com"


def test_parse_token_rejects_malformed_token() -> None:
    with pytest.raises(MalformedTokenError):
        parse_token(b'{"token": "not-a-jwt", "record": {}}')


def test_auth_token_is_immutable(make_token) -> None:
    auth = AuthToken(token=make_token(exp=1700000000))
    with pytest.raises(ValidationError):
        auth.token = make_token(exp=1800000000)  # type: ignore[misc]
    with pytest.raises((ValidationError, AttributeError)):
        auth.expiration = datetime.now(timezone.utc)  # type: ignore[misc]
    assert auth.expiration == datetime.fromtimestamp(1700000000, tz=timezone.utc)


def _payload_segment(raw: bytes, *, padded: bool = False, standard: bool = False) -> str:
    enc = base64.standard_b64encode(raw) if standard else base64.urlsafe_b64encode(raw)
    return (enc if padded else enc.rstrip(b"=")).decode("ascii")


def test_padded_payload_is_malformed() -> None:
    segment = _payload_segment(b'{"exp":10}', padded=True)
    assert segment.endswith("=")
    with pytest.raises(MalformedTokenError):
        extract_unverified_expiration(f"h.{segment}.s")


def test_standard_alphabet_payload_is_malformed() -> None:
    # Six "?" bytes always hold one aligned group, which encodes to "Pz8/".
    raw = b'{"exp":1700000000,"s":"??????"}'
    segment = _payload_segment(raw, standard=True)
    assert "/" in segment
    urlsafe = _payload_segment(raw)
    assert extract_unverified_expiration(f"h.{urlsafe}.s").year == 2023
    with pytest.raises(MalformedTokenError):
        extract_unverified_expiration(f"h.{segment}.s")


@pytest.mark.parametrize("exp", ["1700000000", True, 1700000000.5, None])
def test_non_integer_exp_is_malformed(make_token, exp) -> None:
    with pytest.raises(MalformedTokenError):
        extract_unverified_expiration(make_token(exp=exp))


def test_auth_token_rejects_bad_token_on_construction() -> None:
    with pytest.raises(ValidationError):
        AuthToken(token="not-a-jwt")


def test_is_expired_treats_naive_now_as_utc(make_token) -> None:
    now = datetime(2024, 5, 1, 12, 0, 0)
    aware = now.replace(tzinfo=timezone.utc)
    assert _auth_at(make_token, aware + timedelta(seconds=29)).is_expired(now)
    assert not _auth_at(make_token, aware + timedelta(seconds=31)).is_expired(now)
