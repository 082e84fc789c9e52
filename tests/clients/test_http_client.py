from __future__ import annotations

import pytest
import requests
from conftest import FakeResponse, FakeSession

from validator_dashboard.clients import http
from validator_dashboard.clients.http import HttpJsonClient
from validator_dashboard.errors import (
    MalformedResponse,
    NetworkUnavailable,
    NotFound,
    RateLimited,
    Unauthorized,
)


@pytest.mark.asyncio
async def test_get_json_passes_params_and_headers():
    session = FakeSession(lambda method, url, params: {"ok": True})
    client = HttpJsonClient(session=session, headers={"X-Test": "1"})

    data = await client.get_json("https://api.test/x", params={"a": 1}, headers={"X-Call": "2"})

    assert data == {"ok": True}
    assert session.calls == [("GET", "https://api.test/x", {"a": 1})]
    assert session.last_headers["X-Test"] == "1"
    assert session.last_headers["X-Call"] == "2"
    assert session.last_headers["Accept"] == "application/json"


@pytest.mark.asyncio
async def test_post_json_sends_body():
    session = FakeSession(lambda method, url, body: {"echo": body})
    client = HttpJsonClient(session=session)

    assert await client.post_json("https://rpc.test", {"id": 1}) == {"echo": {"id": 1}}
    assert session.calls[0][0] == "POST"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "error"),
    [
        (429, RateLimited),
        (401, Unauthorized),
        (403, Unauthorized),
        (404, NotFound),
        (500, NetworkUnavailable),
        (503, NetworkUnavailable),
    ],
)
async def test_status_codes_map_to_taxonomy(status, error):
    session = FakeSession(lambda *_: FakeResponse(status, {}))
    client = HttpJsonClient(session=session)

    with pytest.raises(error):
        await client.get_json("https://api.test")


@pytest.mark.asyncio
async def test_invalid_json_is_malformed():
    session = FakeSession(lambda *_: FakeResponse(200, text="<html>"))
    client = HttpJsonClient(session=session)

    with pytest.raises(MalformedResponse, match="Invalid JSON"):
        await client.get_json("https://api.test")


@pytest.mark.asyncio
async def test_connection_errors_are_network_unavailable():
    session = FakeSession(lambda *_: requests.ConnectionError("refused"))
    client = HttpJsonClient(session=session)

    with pytest.raises(NetworkUnavailable, match="refused"):
        await client.get_json("https://api.test")


@pytest.mark.asyncio
async def test_transient_failures_are_retried(monkeypatch):
    monkeypatch.setattr(http, "HTTP_MAX_TRIES", 3)
    monkeypatch.setattr("time.sleep", lambda _seconds: None)
    responses = [FakeResponse(502, {}), FakeResponse(503, {}), FakeResponse(200, {"ok": 1})]
    session = FakeSession(lambda *_: responses.pop(0))
    client = HttpJsonClient(session=session)

    assert await client.get_json("https://api.test") == {"ok": 1}
    assert len(session.calls) == 3


@pytest.mark.asyncio
async def test_rate_limits_are_not_retried(monkeypatch):
    monkeypatch.setattr(http, "HTTP_MAX_TRIES", 3)
    session = FakeSession(lambda *_: FakeResponse(429, {}))
    client = HttpJsonClient(session=session)

    with pytest.raises(RateLimited):
        await client.get_json("https://api.test")
    assert len(session.calls) == 1


def test_close_only_closes_owned_session(monkeypatch):
    created = FakeSession(lambda *_: {})
    monkeypatch.setattr(requests, "Session", lambda: created)
    injected = FakeSession(lambda *_: {})

    HttpJsonClient().close()
    HttpJsonClient(session=injected).close()

    assert created.closed
    assert not injected.closed
