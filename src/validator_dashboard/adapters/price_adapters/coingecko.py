from __future__ import annotations

import logging
from typing import Any, Iterable

from ...domain import PriceQuote
from ...errors import MalformedResponse
from .base import BasePriceAdapter

logger = logging.getLogger(__name__)

DEMO_KEY_HEADER = "x-cg-demo-api-key"


def _optional_float(value: Any) -> float | None:
    return float(value) if isinstance(value, (int, float)) else None


class CoinGeckoPriceAdapter(BasePriceAdapter):
    """USD quotes from CoinGecko ``/simple/price``, batched in one request."""

    @property
    def adapter_name(self) -> str:
        return "coingecko"

    def headers(self) -> dict[str, str]:
        key = self.config.coingecko_api_key
        return {DEMO_KEY_HEADER: key.get_secret_value()} if key else {}

    async def fetch_quotes(self, token_ids: Iterable[str]) -> dict[str, PriceQuote]:
        ids = sorted(set(token_ids))
        if not ids:
            return {}

        data = await self.http.get_json(
            f"{self.config.coingecko_base_url.rstrip('/')}/simple/price",
            params={
                "ids": ",".join(ids),
                "vs_currencies": "usd",
                "include_24hr_change": "true",
                "include_market_cap": "true",
            },
            headers=self.headers(),
        )
        if not isinstance(data, dict):
            raise MalformedResponse("Unexpected CoinGecko payload format")

        quotes: dict[str, PriceQuote] = {}
        for token_id in ids:
            entry = data.get(token_id)
            if not isinstance(entry, dict):
                continue
            usd = _optional_float(entry.get("usd"))
            if usd is None:
                continue
            quotes[token_id] = PriceQuote(
                id=token_id,
                usd=usd,
                usd_24h_change=_optional_float(entry.get("usd_24h_change")),
                usd_market_cap=_optional_float(entry.get("usd_market_cap")),
            )

        missing = set(ids) - quotes.keys()
        if missing:
            logger.debug("CoinGecko returned no USD price for: %s", ", ".join(sorted(missing)))
        return quotes
