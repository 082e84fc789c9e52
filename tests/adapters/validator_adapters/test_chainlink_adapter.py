from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import SecretStr

from validator_dashboard.adapters.validator_adapters import ChainlinkAdapter, chainlink
from validator_dashboard.clients import etherscan
from validator_dashboard.clients.etherscan import EtherscanClient
from validator_dashboard.domain import Ecosystem, NetworkRegistryEntry
from validator_dashboard.errors import RateLimited, Unauthorized
from validator_dashboard.settings import DashboardSettings

OPERATOR = "0x7A30E4B6307c0Db7AeF247A656b44d888B23a2DC"
NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)
LINK = 10**18


@pytest.fixture
def entry() -> NetworkRegistryEntry:
    return NetworkRegistryEntry(
        id="chainlink", name="Chainlink", token="LINK", ecosystem=Ecosystem.ETHEREUM,
        address=OPERATOR, adapter="chainlink",
    )


@pytest.fixture
def keyed_settings(settings) -> DashboardSettings:
    return settings.model_copy(update={"etherscan_api_key": SecretStr("secret")}, deep=True)


def _transfer(days_ago: float, amount: int, incoming: bool = True) -> dict[str, str]:
    timestamp = int((NOW - timedelta(days=days_ago)).timestamp())
    other = "0x000000000000000000000000000000000000dEaD"
    return {
        "hash": f"0x{days_ago}",
        "timeStamp": str(timestamp),
        "from": other if incoming else OPERATOR.lower(),
        "to": OPERATOR.lower() if incoming else other,
        "value": str(amount),
        "tokenSymbol": "LINK",
        "tokenDecimal": "18",
    }


HISTORY = [
    _transfer(2, 10 * LINK),
    _transfer(20, 20 * LINK),
    _transfer(60, 30 * LINK),
    _transfer(200, 40 * LINK),
    _transfer(5, 15 * LINK, incoming=False),
]


def test_summarize_transfers():
    summary = chainlink.summarize_transfers(HISTORY, OPERATOR, now=NOW)

    assert summary.total_received == 100.0
    assert summary.total_sent == 15.0
    assert summary.net_balance == 85.0
    assert summary.last_7_days == 10.0
    assert summary.last_30_days == 30.0
    assert summary.last_90_days == 60.0
    assert summary.transfer_count == 5


def test_summarize_no_transfers():
    summary = chainlink.summarize_transfers([], OPERATOR, now=NOW)

    assert summary.total_received == 0.0
    assert summary.transfer_count == 0


def test_summarize_lists_each_payment():
    unrelated = {**_transfer(3, 1 * LINK), "to": "0x1", "from": "0x2", "hash": "0xother"}

    summary = chainlink.summarize_transfers([*HISTORY, unrelated], OPERATOR, now=NOW)

    assert summary.transfer_count == 6
    assert [p.hash for p in summary.payments] == ["0x2", "0x20", "0x60", "0x200", "0x5"]
    first, sent = summary.payments[0], summary.payments[-1]
    assert first.direction == "in"
    assert first.amount == 10.0
    assert first.from_address == "0x000000000000000000000000000000000000dEaD"
    assert first.timestamp == NOW - timedelta(days=2)
    assert first.amount_usd is None
    assert sent.direction == "out"
    assert sent.from_address == OPERATOR.lower()


@pytest.fixture
def rpc_balance(monkeypatch):
    calls: list[str] = []

    def fake_read(rpc_url, token, owner, *, timeout):
        calls.append(rpc_url)
        if rpc_url == "https://eth-1.test":
            raise ConnectionError("connection refused")
        return 1234 * LINK

    monkeypatch.setattr(chainlink, "read_erc20_balance", fake_read)
    return calls


@pytest.mark.asyncio
async def test_without_key_returns_degraded_balance(settings, entry, rpc_balance):
    outcome = await ChainlinkAdapter(settings).fetch_snapshot(entry)

    snapshot = outcome.snapshot
    assert outcome.error is None
    assert snapshot.stake_amount == 1234.0
    assert snapshot.degraded is True
    assert snapshot.degraded_reason == chainlink.NO_KEY_REASON
    assert snapshot.transfers is None
    assert rpc_balance == ["https://eth-1.test", "https://eth-2.test"]


@pytest.mark.asyncio
async def test_with_key_fetches_transfer_history(keyed_settings, entry, rpc_balance, monkeypatch):
    recent = [_transfer(1, 5 * LINK)]
    monkeypatch.setattr(EtherscanClient, "fetch_token_transfers", lambda self, token, address: recent)

    snapshot = (await ChainlinkAdapter(keyed_settings).fetch_snapshot(entry)).snapshot

    assert snapshot.degraded is False
    assert snapshot.transfers is not None
    assert snapshot.transfers.total_received == 5.0
    assert snapshot.transfers.transfer_count == 1


@pytest.mark.asyncio
async def test_rejected_key_degrades(keyed_settings, entry, rpc_balance, monkeypatch):
    def rejected(self, token, address):
        raise Unauthorized("Etherscan rejected the API key: Invalid API Key")

    monkeypatch.setattr(EtherscanClient, "fetch_token_transfers", rejected)

    outcome = await ChainlinkAdapter(keyed_settings).fetch_snapshot(entry)

    assert outcome.ok
    assert outcome.snapshot.degraded is True
    assert "Invalid API Key" in outcome.snapshot.degraded_reason
    assert outcome.snapshot.stake_amount == 1234.0


@pytest.mark.asyncio
async def test_history_failure_keeps_balance(keyed_settings, entry, rpc_balance, monkeypatch):
    def limited(self, token, address):
        raise RateLimited("Max rate limit reached")

    monkeypatch.setattr(EtherscanClient, "fetch_token_transfers", limited)

    snapshot = (await ChainlinkAdapter(keyed_settings).fetch_snapshot(entry)).snapshot

    assert snapshot.transfers is None
    assert snapshot.degraded is False


@pytest.mark.asyncio
async def test_rpc_failure_without_key_is_network_unavailable(settings, entry, monkeypatch):
    def down(rpc_url, token, owner, *, timeout):
        raise ConnectionError("down")

    monkeypatch.setattr(chainlink, "read_erc20_balance", down)

    outcome = await ChainlinkAdapter(settings).fetch_snapshot(entry)

    assert outcome.error.kind == "NetworkUnavailable"


@pytest.mark.asyncio
async def test_rpc_failure_with_key_falls_back_to_etherscan(keyed_settings, entry, monkeypatch):
    def down(rpc_url, token, owner, *, timeout):
        raise ConnectionError("down")

    monkeypatch.setattr(chainlink, "read_erc20_balance", down)
    monkeypatch.setattr(EtherscanClient, "fetch_token_balance", lambda self, token, address: 7 * LINK)
    monkeypatch.setattr(EtherscanClient, "fetch_token_transfers", lambda self, token, address: [])

    snapshot = (await ChainlinkAdapter(keyed_settings).fetch_snapshot(entry)).snapshot

    assert snapshot.stake_amount == 7.0
    assert snapshot.transfers.transfer_count == 0


def test_etherscan_retries_fit_in_the_adapter_timeout(keyed_settings, monkeypatch):
    monkeypatch.setattr(etherscan, "ETHERSCAN_MAX_RETRY_SECONDS", 30)

    client = ChainlinkAdapter(keyed_settings).etherscan_client()

    assert client.retry_window() == keyed_settings.adapter_timeout_seconds


@pytest.mark.asyncio
async def test_etherscan_client_is_closed(keyed_settings, entry, rpc_balance, monkeypatch):
    closed: list[EtherscanClient] = []
    monkeypatch.setattr(EtherscanClient, "fetch_token_transfers", lambda self, token, address: [])
    monkeypatch.setattr(EtherscanClient, "close", lambda self: closed.append(self))

    await ChainlinkAdapter(keyed_settings).fetch_snapshot(entry)

    assert len(closed) == 1
