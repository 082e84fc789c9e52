"""High-level aggregation orchestration."""

from __future__ import annotations

import asyncio

from ..clients.http import HttpJsonClient
from ..domain import AggregationResult, EnrichedNetwork, NetworkRegistryEntry, utc_now
from ..errors import NetworkUnavailable
from ..processors import derive_metrics, merge_network
from ..state import AppState
from .context import PipelineContext
from .pricing import PRICES_ERROR_ID, collect_prices
from .snapshots import collect_snapshots, resolve_strategies


def merge_all(ctx: PipelineContext) -> list[EnrichedNetwork]:
    """Pure merge of every registry entry, in registry order."""
    prices = ctx.prices or {}
    networks = []
    for entry in ctx.registry:
        strategy = ctx.strategies.get(entry.id)
        networks.append(
            merge_network(
                entry,
                ctx.snapshots.get(entry.id),
                prices.get(entry.price_id) if entry.price_id else None,
                strategy.revenue if strategy else None,
            )
        )
    return networks


async def aggregate(
    state: AppState,
    registry: list[NetworkRegistryEntry],
    *,
    http: HttpJsonClient | None = None,
) -> AggregationResult:
    """Run one aggregation cycle.

    This is a thin orchestrator:
    1. Resolve a strategy per registry entry
    2. Fetch snapshots and prices concurrently
    3. Merge (pure) and derive metrics

    Per-network failures end up in ``AggregationResult.errors``. When the
    global timeout expires, networks still in flight are recorded as
    ``NetworkUnavailable`` and the cycle completes with what it has.

    Args:
        state: Application state containing settings and logger
        registry: Static network registry
        http: Transport shared by every adapter; when omitted one is
            created for this cycle and closed before returning

    Raises:
        RegistryError: If a registry entry names an unknown adapter
    """
    s = state.settings
    log = state.logger
    ctx = PipelineContext(state=state, registry=list(registry))

    resolve_strategies(ctx)
    timeout_s = s.global_timeout_seconds

    async def _run_pipeline() -> None:
        await asyncio.gather(collect_snapshots(ctx), collect_prices(ctx))

    # One transport for every adapter of the cycle; only close what we opened
    owns_http = http is None
    client = http or HttpJsonClient(timeout=s.request_timeout_seconds)
    ctx.http = client
    try:
        if timeout_s is None or timeout_s <= 0:
            await _run_pipeline()
        else:
            async with asyncio.timeout(timeout_s):
                await _run_pipeline()
    except TimeoutError:
        log.error("Aggregation exceeded global timeout %ss", timeout_s)
        for entry in ctx.dispatched:
            if entry.id not in ctx.snapshots and entry.id not in ctx.failures:
                ctx.record_failure(
                    entry.id,
                    NetworkUnavailable(f"global timeout {timeout_s}s expired"),
                )
        if ctx.prices is None and ctx.price_ids:
            ctx.record_failure(
                PRICES_ERROR_ID,
                NetworkUnavailable(f"global timeout {timeout_s}s expired"),
            )
    finally:
        if owns_http:
            client.close()

    networks = merge_all(ctx)
    metrics = derive_metrics(networks)
    # Registry order; non-network sources such as prices go last.
    positions = {entry.id: index for index, entry in enumerate(ctx.registry)}
    errors = sorted(
        ctx.failures.values(),
        key=lambda f: (positions.get(f.network_id, len(positions)), f.network_id),
    )

    log.info(
        "Aggregated %d networks (%d errors), total stake $%.2f",
        len(networks),
        len(errors),
        metrics.total_stake_usd,
    )
    return AggregationResult(
        networks=networks,
        metrics=metrics,
        last_updated=utc_now(),
        errors=errors,
    )

