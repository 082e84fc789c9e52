"""Cached access to the current aggregation.

The cache is advisory: a result younger than ``cache_ttl_seconds`` is
served as-is (flagged ``from_cache``), and a network that fails in a new
cycle keeps its last good data marked as stale.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import replace
from typing import Callable

from .clients.http import HttpJsonClient
from .domain import AggregationResult, EnrichedNetwork, Freshness, NetworkRegistryEntry
from .pipeline import aggregate
from .processors import derive_metrics
from .registry import load_registry
from .state import AppState


def carry_forward(
    current: AggregationResult, previous: AggregationResult | None
) -> AggregationResult:
    """Replace no-data networks with their previous data, marked stale."""
    if previous is None:
        return current

    changed = False
    networks: list[EnrichedNetwork] = []
    for network in current.networks:
        earlier = previous.get(network.id)
        if (
            network.freshness == Freshness.NO_DATA
            and earlier is not None
            and earlier.freshness != Freshness.NO_DATA
        ):
            networks.append(replace(earlier, network=network.network, freshness=Freshness.STALE))
            changed = True
        else:
            networks.append(network)

    if not changed:
        return current
    return replace(current, networks=networks, metrics=derive_metrics(networks))


class DashboardService:
    """Entry point for callers that want "the current aggregation"."""

    def __init__(
        self,
        state: AppState,
        registry: list[NetworkRegistryEntry] | None = None,
        *,
        http: HttpJsonClient | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.state = state
        self._registry = registry
        self._http = http
        self._clock = clock
        self._lock = asyncio.Lock()
        self._cached: AggregationResult | None = None
        self._cached_at: float | None = None

    @property
    def registry(self) -> list[NetworkRegistryEntry]:
        """The static registry, loaded on first use.

        Raises:
            RegistryError: If the registry cannot be loaded
        """
        if self._registry is None:
            self._registry = load_registry(self.state.settings)
        return self._registry

    def _is_fresh(self) -> bool:
        if self._cached is None or self._cached_at is None:
            return False
        ttl = self.state.settings.cache_ttl_seconds
        return ttl > 0 and self._clock() - self._cached_at < ttl

    async def get_current_aggregation(self, force_refresh: bool = False) -> AggregationResult:
        """Return the cached aggregation or run a new cycle.

        Raises:
            RegistryError: If the registry cannot be loaded
        """
        async with self._lock:
            if not force_refresh and self._is_fresh():
                assert self._cached is not None
                self.state.logger.debug("Serving cached aggregation")
                return replace(self._cached, from_cache=True)

            result = await aggregate(self.state, self.registry, http=self._http)
            result = carry_forward(result, self._cached)
            self._cached = result
            self._cached_at = self._clock()
            return result
