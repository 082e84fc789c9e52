from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, Callable

import pytest

from validator_dashboard.adapters import STRATEGIES, NetworkStrategy
from validator_dashboard.adapters.price_adapters.coingecko import CoinGeckoPriceAdapter
from validator_dashboard.adapters.validator_adapters import BaseValidatorAdapter
from validator_dashboard.clients import etherscan, http
from validator_dashboard.clients.http import HttpJsonClient
from validator_dashboard.domain import (
    AprRange,
    Ecosystem,
    NetworkRegistryEntry,
    PriceQuote,
    ValidatorSnapshot,
)
from validator_dashboard.errors import NetworkUnavailable
from validator_dashboard.processors import StakeRewardRevenue
from validator_dashboard.settings import DashboardSettings
from validator_dashboard.state import AppState


class FakeResponse:
    """Just enough of ``requests.Response`` for the JSON clients."""

    def __init__(self, status_code: int = 200, payload: Any = None, text: str | None = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self) -> Any:
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


Handler = Callable[[str, str, Any], Any]


class FakeSession:
    """Routes every request through ``handler(method, url, params_or_body)``.

    The handler may return a ``FakeResponse``, a plain payload (served as
    HTTP 200) or an exception instance to raise.
    """

    def __init__(self, handler: Handler):
        self.handler = handler
        self.calls: list[tuple[str, str, Any]] = []
        self.closed = False

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append(("GET", url, params))
        self.last_headers = headers
        return self._respond(self.handler("GET", url, params))

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append(("POST", url, json))
        self.last_headers = headers
        return self._respond(self.handler("POST", url, json))

    def close(self):
        self.closed = True

    @staticmethod
    def _respond(result: Any) -> FakeResponse:
        if isinstance(result, BaseException):
            raise result
        if isinstance(result, FakeResponse):
            return result
        return FakeResponse(200, result)


def rpc_result(result: Any) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": 1, "result": result}


def rpc_error(code: int = -32000, message: str = "boom") -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": 1, "error": {"code": code, "message": message}}


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from real config files, keys and retry delays."""
    for key in list(os.environ):
        if key.startswith("VALIDATOR_DASHBOARD_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("ETHERSCAN_API_KEY", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(http, "HTTP_MAX_TRIES", 1)
    monkeypatch.setattr(etherscan, "ETHERSCAN_MAX_RETRY_SECONDS", 0)

    # setup_logging replaces root handlers; put them back
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def settings() -> DashboardSettings:
    return DashboardSettings(
        etherscan_api_key=None,
        coingecko_api_key=None,
        adapter_timeout_seconds=5.0,
        global_timeout_seconds=10.0,
        lcd_overrides={"cosmos": "https://lcd.test/", "neutron": "https://neutron-lcd.test"},
        rpc_overrides={
            "solana": ["https://sol-1.test", "https://sol-2.test"],
            "sui": ["https://sui.test"],
            "near": ["https://near.test"],
            "chainlink": ["https://eth-1.test", "https://eth-2.test"],
        },
    )


@pytest.fixture
def state(settings) -> AppState:
    return AppState(settings=settings, logger=logging.getLogger("test"))


@pytest.fixture
def make_http() -> Callable[[Handler], tuple[HttpJsonClient, FakeSession]]:
    def _make(handler: Handler) -> tuple[HttpJsonClient, FakeSession]:
        session = FakeSession(handler)
        return HttpJsonClient(session=session), session

    return _make


class ScriptedAdapter(BaseValidatorAdapter):
    """Adapter whose behaviour is chosen by the entry's address.

    ``ok`` returns 100 tokens at 5% commission, ``down`` raises
    ``NetworkUnavailable``, ``crash`` raises ``RuntimeError`` and ``slow``
    sleeps for a second before answering.
    """

    adapter_name = "scripted"

    async def _fetch_snapshot(self, entry: NetworkRegistryEntry) -> ValidatorSnapshot:
        behaviour = entry.address
        if behaviour == "down":
            raise NetworkUnavailable("connection refused")
        if behaviour == "crash":
            raise RuntimeError("adapter bug")
        if behaviour == "slow":
            await asyncio.sleep(1)
        return ValidatorSnapshot(
            network_id=entry.id, raw_stake=100 * 10**6, decimals=6, commission=5.0
        )


def scripted_entry(
    network_id: str, behaviour: str | None = "ok", **kwargs: Any
) -> NetworkRegistryEntry:
    fields: dict[str, Any] = {
        "name": network_id.title(),
        "token": "TOK",
        "ecosystem": Ecosystem.OTHER,
        "apr": AprRange(10, 20),
        "address": behaviour,
        "price_id": "tok",
        "adapter": "scripted",
    }
    fields.update(kwargs)
    return NetworkRegistryEntry(id=network_id, **fields)


@pytest.fixture
def scripted(monkeypatch) -> dict[str, Any]:
    """Register ``ScriptedAdapter`` and serve a $2 quote for every token.

    Returns a mutable dict: set ``"price_error"`` to make the price source
    raise, or ``"price_delay"`` to make it sleep first.
    """
    control: dict[str, Any] = {"price_error": None, "price_delay": 0.0}

    async def fake_quotes(self, token_ids):
        if control["price_delay"]:
            await asyncio.sleep(control["price_delay"])
        if control["price_error"] is not None:
            raise control["price_error"]
        return {token_id: PriceQuote(id=token_id, usd=2.0) for token_id in token_ids}

    monkeypatch.setitem(
        STRATEGIES,
        "scripted",
        NetworkStrategy("scripted", ScriptedAdapter, StakeRewardRevenue()),
    )
    monkeypatch.setattr(CoinGeckoPriceAdapter, "fetch_quotes", fake_quotes)
    return control
