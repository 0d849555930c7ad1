from __future__ import annotations

import base64
import json
from collections.abc import Callable
from typing import Any

import pytest


def _segment(obj: dict[str, Any]) -> str:
    raw = json.dumps(obj).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Build an unsigned three-segment token carrying the given claims."""

    def build(**claims: Any) -> str:
        header = _segment({"alg": "HS256", "typ": "JWT"})
        return f"{header}.{_segment(claims)}.c2lnbmF0dXJl"

    return build
