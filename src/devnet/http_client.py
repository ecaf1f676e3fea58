"""JSON-over-HTTP transport shared by the pollers and the bridge RPC probe."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Mapping, Optional
from urllib.parse import urlsplit

import aiohttp
from aiohttp import ClientError, ClientTimeout

from .exceptions import EndpointUnavailable

logger = logging.getLogger(__name__)

_HTTP_OK_MIN = 200
_HTTP_OK_MAX = 299


def ensure_http_url(request_url: str) -> str:
    """Ensure the provided URL uses an allowed HTTP/HTTPS scheme."""
    parsed = urlsplit(request_url)
    scheme = parsed.scheme.lower()
    if scheme not in {"http", "https"}:
        raise ValueError(f"Unsupported URL scheme: {request_url}")
    if not parsed.netloc:
        raise ValueError(f"URL missing network location: {request_url}")
    return request_url


class JsonHttpClient:
    """
    Thin wrapper around one aiohttp session.

    Every request carries its own total timeout. Any failure to obtain a
    decodable 2xx JSON body surfaces as EndpointUnavailable.
    """

    def __init__(self, request_timeout_seconds: float = 5.0, session: Optional[Any] = None):
        self.request_timeout_seconds = request_timeout_seconds
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "JsonHttpClient":
        if self.session is None:
            self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, _exc_type, _exc, _tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self.session is not None and not self.session.closed:
            await self.session.close()
        if self._owns_session:
            self.session = None

    async def get_json(self, url: str) -> Any:
        return await self._request("GET", url)

    async def post_json(self, url: str, payload: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None) -> Any:
        return await self._request("POST", url, payload=payload, headers=headers)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        payload: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        if self.session is None:
            raise RuntimeError("JsonHttpClient must be used as an async context manager")
        ensure_http_url(url)
        timeout = ClientTimeout(total=self.request_timeout_seconds)
        request = self.session.get if method == "GET" else self.session.post
        kwargs: dict[str, Any] = {"timeout": timeout}
        if payload is not None:
            kwargs["json"] = dict(payload)
        if headers:
            kwargs["headers"] = dict(headers)

        try:
            async with request(url, **kwargs) as response:
                if not _HTTP_OK_MIN <= response.status <= _HTTP_OK_MAX:
                    raise EndpointUnavailable(f"{method} {url} returned HTTP {response.status}", url=url, status=response.status)
                body = await response.read()
        except asyncio.TimeoutError as exc:
            raise EndpointUnavailable(f"{method} {url} timed out after {self.request_timeout_seconds}s", url=url) from exc
        except (ClientError, OSError) as exc:
            raise EndpointUnavailable(f"{method} {url} failed: {exc}", url=url) from exc

        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise EndpointUnavailable(f"{method} {url} returned a non-JSON body", url=url) from exc


__all__ = ["JsonHttpClient", "ensure_http_url"]
