"""Async client for the PocketBase REST API."""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel

from .decoding import decode_into
from .errors import PocketBaseApiError
from .models import AuthToken, parse_token
from .params import Params
from .settings import Settings
from .timestamps import to_backend, to_standard

log = logging.getLogger(__name__)

Output = TypeVar("Output")


class PocketBaseClient:
    """Thin wrapper around PocketBase's record, auth and file endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float = 15.0,
        normalize_timestamps: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.strip().rstrip("/")
        self._normalize_timestamps = normalize_timestamps
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None
    ) -> PocketBaseClient:
        return cls(
            base_url=str(settings.base_url),
            timeout_seconds=settings.http_timeout_seconds,
            normalize_timestamps=settings.normalize_timestamps,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> PocketBaseClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        *,
        token: str = "",
        body: Any = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        headers: dict[str, str] = {}
        if token:
            headers["Authorization"] = token
        content = None
        if body is not None:
            content = self._encode_body(body)
            headers["Content-Type"] = "application/json"

        log.debug("%s %s", method, path)
        resp = await self._client.request(
            method, path, headers=headers, content=content, params=params
        )
        if not resp.is_success:
            log.warning("%s %s failed with status %s", method, path, resp.status_code)
            raise PocketBaseApiError(
                status_code=resp.status_code,
                method=method,
                url=str(resp.request.url),
                response_text=(resp.text or "").strip(),
            )
        return resp

    def _encode_body(self, body: Any) -> bytes:
        if isinstance(body, BaseModel):
            raw = body.model_dump_json(by_alias=True).encode("utf-8")
        else:
            raw = json.dumps(body).encode("utf-8")
        if self._normalize_timestamps:
            raw = to_backend(raw)
        return raw

    def _response_body(self, resp: httpx.Response) -> bytes:
        if self._normalize_timestamps:
            return to_standard(resp.content)
        return resp.content

    @staticmethod
    def _with_query(path: str, params: Params) -> str:
        query = params.query_string()
        return f"{path}?{query}" if query else path

    async def _auth(self, path: str, *, token: str = "", body: Any = None) -> AuthToken:
        resp = await self._send("POST", path, token=token, body=body)
        return parse_token(self._response_body(resp))

    async def auth_admin_with_password(self, identity: str, password: str) -> AuthToken:
        """Authenticate an admin account."""
        if not identity or not password:
            raise ValueError("identity and password are required")
        return await self._auth(
            "/api/admins/auth-with-password",
            body={"identity": identity, "password": password},
        )

    async def auth_user_with_password(
        self, identity: str, password: str, *, collection: str = "users"
    ) -> AuthToken:
        """Authenticate a record of an auth collection."""
        if not identity or not password:
            raise ValueError("identity and password are required")
        return await self._auth(
            f"/api/collections/{collection}/auth-with-password",
            body={"identity": identity, "password": password},
        )

    async def auth_refresh(self, token: str, *, collection: str = "users") -> AuthToken:
        """Exchange a still valid token for a fresh one."""
        return await self._auth(f"/api/collections/{collection}/auth-refresh", token=token)

    async def file_token(self, token: str) -> AuthToken:
        """Request a short-lived token for reading protected files."""
        return await self._auth("/api/files/token", token=token)

    async def record_search(self, params: Params, output: Output | None = None) -> Output | None:
        """List records of ``params.collection``.

        A ``SearchResults[...]`` instance is the usual ``output``.
        """
        path = self._with_query(f"/api/collections/{params.collection}/records", params)
        resp = await self._send("GET", path, token=params.token)
        return decode_into(self._response_body(resp), output)

    async def record_view(self, params: Params, output: Output | None = None) -> Output | None:
        path = self._with_query(
            f"/api/collections/{params.collection}/records/{params.id}", params
        )
        resp = await self._send("GET", path, token=params.token)
        return decode_into(self._response_body(resp), output)

    async def record_create(self, params: Params, output: Output | None = None) -> Output | None:
        path = self._with_query(f"/api/collections/{params.collection}/records", params)
        resp = await self._send("POST", path, token=params.token, body=params.data)
        return decode_into(self._response_body(resp), output)

    async def record_update(self, params: Params, output: Output | None = None) -> Output | None:
        path = self._with_query(
            f"/api/collections/{params.collection}/records/{params.id}", params
        )
        resp = await self._send("PATCH", path, token=params.token, body=params.data)
        return decode_into(self._response_body(resp), output)

    async def record_delete(self, params: Params) -> None:
        await self._send(
            "DELETE",
            f"/api/collections/{params.collection}/records/{params.id}",
            token=params.token,
        )

    def get_file_url(self, params: Params) -> str:
        """Absolute URL of a record file. Protected files also need a file token."""
        return f"{self._base_url}/api/files/{params.collection}/{params.id}/{params.file_name}"

    async def get_file_content(self, params: Params) -> bytes:
        q: dict[str, str] = {}
        if params.token:
            q["token"] = params.token
        if params.thumb:
            q["thumb"] = params.thumb
        resp = await self._send(
            "GET",
            f"/api/files/{params.collection}/{params.id}/{params.file_name}",
            params=q or None,
        )
        return resp.content
