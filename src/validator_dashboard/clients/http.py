"""Blocking JSON-over-HTTP transport, exposed to asyncio via worker threads."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import backoff
import requests

from ..errors import (
    AdapterError,
    MalformedResponse,
    NetworkUnavailable,
    NotFound,
    RateLimited,
    Unauthorized,
)
from ..logger import TRACE, get_logger

logger = get_logger(__name__)

HTTP_MAX_TRIES = 3
DEFAULT_HEADERS = {"Accept": "application/json"}


def raise_for_status(response: requests.Response, url: str) -> None:
    """Map a non-2xx response onto the adapter error taxonomy."""
    status = response.status_code
    if 200 <= status < 300:
        return
    if status == 429:
        raise RateLimited(f"Rate limited by {url}")
    if status in (401, 403):
        raise Unauthorized(f"HTTP {status} from {url}")
    if status == 404:
        raise NotFound(f"HTTP 404 from {url}")
    raise NetworkUnavailable(f"HTTP {status} from {url}")


def decode_json(response: requests.Response, url: str) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, ValueError) as e:
        raise MalformedResponse(f"Invalid JSON from {url}") from e


class HttpJsonClient:
    """Small JSON client with retries on transient failures.

    Requests run in a worker thread so that many upstreams can be awaited
    concurrently. ``NetworkUnavailable`` (connection errors, timeouts, 5xx)
    is retried with exponential backoff; everything else is final.
    """

    def __init__(
        self,
        *,
        timeout: float = 8.0,
        session: requests.Session | None = None,
        headers: dict[str, str] | None = None,
    ):
        self._timeout = timeout
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._headers = {**DEFAULT_HEADERS, **(headers or {})}

    def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._owns_session:
            self._session.close()

    async def get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await asyncio.to_thread(
            self._request, "GET", url, params=params, headers=headers
        )

    async def post_json(
        self,
        url: str,
        payload: Any,
        *,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await asyncio.to_thread(
            self._request, "POST", url, payload=payload, headers=headers
        )

    @backoff.on_exception(
        backoff.expo,
        NetworkUnavailable,
        max_tries=lambda: HTTP_MAX_TRIES,
        factor=0.5,
        jitter=backoff.full_jitter,
    )
    def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        payload: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        merged_headers = {**self._headers, **(headers or {})}
        logger.log(TRACE, "%s %s params=%s", method, url, params)
        try:
            if method == "GET":
                response = self._session.get(
                    url, params=params, headers=merged_headers, timeout=self._timeout
                )
            else:
                response = self._session.post(
                    url, json=payload, headers=merged_headers, timeout=self._timeout
                )
        except requests.exceptions.RequestException as e:
            raise NetworkUnavailable(f"{method} {url} failed: {e}") from e

        raise_for_status(response, url)
        return decode_json(response, url)


def describe(error: BaseException) -> str:
    """One-line description used in logs and failure records."""
    if isinstance(error, AdapterError):
        return str(error)
    return f"{type(error).__name__}: {error}"
