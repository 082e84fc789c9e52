"""JSON-RPC 2.0 client with ordered fallback across endpoints."""

from __future__ import annotations

from itertools import count
from typing import Any

from ..errors import MalformedResponse, NetworkUnavailable, RateLimited
from ..logger import get_logger
from .http import HttpJsonClient

logger = get_logger(__name__)

_request_ids = count(1)


class JsonRpcError(MalformedResponse):
    """The endpoint answered with a JSON-RPC ``error`` object."""

    kind = "JsonRpcError"

    def __init__(self, method: str, error: Any):
        code = error.get("code") if isinstance(error, dict) else None
        message = error.get("message") if isinstance(error, dict) else error
        super().__init__(f"{method} failed with RPC error {code}: {message}")
        self.code = code
        self.error = error


class JsonRpcClient:
    """Calls one method at a time against the first endpoint that answers.

    Transport failures and rate limiting move on to the next URL; an RPC
    level ``error`` object is returned by a healthy node and is final.
    """

    def __init__(self, urls: list[str], http: HttpJsonClient):
        if not urls:
            raise ValueError("JsonRpcClient needs at least one endpoint")
        self.urls = list(urls)
        self._http = http

    @staticmethod
    def envelope(method: str, params: Any) -> dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": next(_request_ids),
            "method": method,
            "params": params,
        }

    async def call(self, method: str, params: Any = None) -> Any:
        """Invoke ``method`` and return its ``result``.

        Raises:
            JsonRpcError: If the node returned an error object.
            MalformedResponse: If the payload has no ``result``.
            NetworkUnavailable / RateLimited: If every endpoint failed.
        """
        payload = self.envelope(method, [] if params is None else params)
        last_error: NetworkUnavailable | RateLimited | None = None

        for url in self.urls:
            try:
                data = await self._http.post_json(url, payload)
            except (NetworkUnavailable, RateLimited) as e:
                logger.debug("RPC %s via %s failed: %s", method, url, e)
                last_error = e
                continue

            if not isinstance(data, dict):
                raise MalformedResponse(f"{method}: unexpected payload from {url}")
            if data.get("error") is not None:
                raise JsonRpcError(method, data["error"])
            if "result" not in data:
                raise MalformedResponse(f"{method}: no result in response from {url}")
            return data["result"]

        assert last_error is not None
        raise last_error
