from __future__ import annotations

from dataclasses import dataclass, field

from ..adapters import NetworkStrategy
from ..clients.http import HttpJsonClient
from ..domain import AdapterFailure, NetworkRegistryEntry, PriceQuote, ValidatorSnapshot
from ..state import AppState


@dataclass
class PipelineContext:
    """Mutable state of one aggregation cycle.

    Each snapshot task writes only its own key of ``snapshots``.
    """

    state: AppState
    registry: list[NetworkRegistryEntry]
    http: HttpJsonClient | None = None
    strategies: dict[str, NetworkStrategy] = field(default_factory=dict)
    snapshots: dict[str, ValidatorSnapshot] = field(default_factory=dict)
    prices: dict[str, PriceQuote] | None = None
    failures: dict[str, AdapterFailure] = field(default_factory=dict)

    @property
    def price_ids(self) -> set[str]:
        return {entry.price_id for entry in self.registry if entry.price_id}

    @property
    def dispatched(self) -> list[NetworkRegistryEntry]:
        """Entries that have both an address and a strategy."""
        return [
            entry
            for entry in self.registry
            if entry.address and entry.id in self.strategies
        ]

    def record_failure(self, network_id: str, error: BaseException) -> None:
        kind = getattr(error, "kind", type(error).__name__)
        self.failures[network_id] = AdapterFailure(
            network_id=network_id, kind=kind, message=str(error) or kind
        )
