import pytest
from conftest import FakeResponse
from pydantic import SecretStr

from validator_dashboard.adapters.price_adapters import CoinGeckoPriceAdapter
from validator_dashboard.errors import NetworkUnavailable, RateLimited

PAYLOAD = {
    "cosmos": {"usd": 4.5, "usd_24h_change": -1.25, "usd_market_cap": 1_750_000_000},
    "near": {"usd": 2},
    "half-listed": {"usd_24h_change": 3.0},
}


@pytest.mark.asyncio
async def test_fetch_prices_batches_ids(settings, make_http):
    http, session = make_http(lambda *_: PAYLOAD)
    adapter = CoinGeckoPriceAdapter(settings, http=http)

    prices = await adapter.fetch_prices({"near", "cosmos", "half-listed", "unknown"})

    assert set(prices) == {"cosmos", "near"}
    assert prices["cosmos"].usd == 4.5
    assert prices["cosmos"].usd_24h_change == -1.25
    assert prices["cosmos"].usd_market_cap == 1_750_000_000
    assert prices["near"].usd == 2.0
    assert prices["near"].usd_24h_change is None

    method, url, params = session.calls[0]
    assert len(session.calls) == 1
    assert url == "https://api.coingecko.com/api/v3/simple/price"
    assert params["ids"] == "cosmos,half-listed,near,unknown"
    assert params["vs_currencies"] == "usd"
    assert params["include_24hr_change"] == "true"
    assert params["include_market_cap"] == "true"


@pytest.mark.asyncio
async def test_no_ids_makes_no_request(settings, make_http):
    http, session = make_http(lambda *_: PAYLOAD)

    assert await CoinGeckoPriceAdapter(settings, http=http).fetch_prices([]) == {}
    assert session.calls == []


@pytest.mark.asyncio
async def test_rate_limit_yields_empty_mapping(settings, make_http):
    http, _ = make_http(lambda *_: FakeResponse(429, {"status": {"error_code": 429}}))
    adapter = CoinGeckoPriceAdapter(settings, http=http)

    assert await adapter.fetch_prices({"cosmos"}) == {}
    with pytest.raises(RateLimited):
        await adapter.fetch_quotes({"cosmos"})


@pytest.mark.asyncio
async def test_outage_yields_empty_mapping(settings, make_http):
    http, _ = make_http(lambda *_: FakeResponse(502, {}))
    adapter = CoinGeckoPriceAdapter(settings, http=http)

    assert await adapter.fetch_prices({"cosmos"}) == {}
    with pytest.raises(NetworkUnavailable):
        await adapter.fetch_quotes({"cosmos"})


@pytest.mark.asyncio
async def test_demo_key_header(settings, make_http):
    keyed = settings.model_copy(update={"coingecko_api_key": SecretStr("cg-key")})
    http, session = make_http(lambda *_: PAYLOAD)

    await CoinGeckoPriceAdapter(keyed, http=http).fetch_prices({"cosmos"})

    assert session.last_headers["x-cg-demo-api-key"] == "cg-key"


@pytest.mark.asyncio
async def test_non_dict_payload_is_an_error(settings, make_http):
    http, _ = make_http(lambda *_: ["unexpected"])
    adapter = CoinGeckoPriceAdapter(settings, http=http)

    assert await adapter.fetch_prices({"cosmos"}) == {}
