"""Validator snapshot fan-out."""

from __future__ import annotations

import asyncio

from ..adapters import resolve_strategy
from ..domain import NetworkRegistryEntry
from ..errors import NetworkUnavailable
from .context import PipelineContext


def resolve_strategies(ctx: PipelineContext) -> None:
    """Attach a strategy to every registry entry that has one.

    Raises:
        RegistryError: If an entry names an unknown adapter
    """
    log = ctx.state.logger
    for entry in ctx.registry:
        strategy = resolve_strategy(entry)
        if strategy is None:
            log.debug("No adapter for %s (%s)", entry.id, entry.ecosystem.value)
            continue
        ctx.strategies[entry.id] = strategy


async def _fetch_one(ctx: PipelineContext, entry: NetworkRegistryEntry) -> None:
    strategy = ctx.strategies[entry.id]
    adapter = strategy.adapter_class(ctx.state.settings, http=ctx.http)
    outcome = await adapter.fetch_snapshot(entry)
    if outcome.snapshot is not None:
        ctx.snapshots[entry.id] = outcome.snapshot
    elif outcome.error is not None:
        ctx.record_failure(entry.id, outcome.error)


def _process_adapter_results(
    ctx: PipelineContext,
    entries: list[NetworkRegistryEntry],
    results: list[BaseException | None],
) -> None:
    """Record exceptions that escaped an adapter call."""
    log = ctx.state.logger
    for entry, result in zip(entries, results):
        if isinstance(result, asyncio.CancelledError):
            ctx.record_failure(entry.id, NetworkUnavailable("aggregation cancelled"))
        elif isinstance(result, BaseException):
            log.error("Adapter for %s raised unexpectedly: %r", entry.id, result)
            ctx.record_failure(entry.id, result)


async def collect_snapshots(ctx: PipelineContext) -> None:
    """Fetch a snapshot for every dispatchable entry, concurrently.

    Failures are recorded on the context; nothing here raises for an
    individual network.
    """
    log = ctx.state.logger
    entries = ctx.dispatched
    log.info("Fetching %d validator snapshots...", len(entries))

    results = await asyncio.gather(
        *(_fetch_one(ctx, entry) for entry in entries), return_exceptions=True
    )
    _process_adapter_results(ctx, entries, list(results))

    log.info(
        "Snapshots: %d live, %d failed", len(ctx.snapshots), len(ctx.failures)
    )
