"""Price collection for the registry's tokens."""

from __future__ import annotations

from ..adapters import PRICE_ADAPTERS
from ..domain import PriceQuote
from ..errors import AdapterError
from .context import PipelineContext

PRICES_ERROR_ID = "prices"


async def collect_prices(ctx: PipelineContext) -> None:
    """Fetch USD quotes for the union of the registry's price ids.

    A failed price source leaves ``ctx.prices`` empty and records one
    failure under ``PRICES_ERROR_ID``.
    """
    s = ctx.state.settings
    log = ctx.state.logger
    token_ids = ctx.price_ids
    log.info("Fetching prices for %d tokens...", len(token_ids))

    prices: dict[str, PriceQuote] = {}
    for adapter_class in PRICE_ADAPTERS:
        adapter = adapter_class(s, http=ctx.http)
        missing = token_ids - prices.keys()
        if not missing:
            break
        try:
            prices.update(await adapter.fetch_quotes(missing))
        except AdapterError as e:
            log.warning("Price adapter '%s' failed: %s", adapter.adapter_name, e)
            ctx.record_failure(PRICES_ERROR_ID, e)

    log.debug("Price adapters returned %d quotes", len(prices))
    ctx.prices = prices
