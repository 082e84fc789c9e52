"""Network strategy registry.

A strategy pairs the adapter that fetches a validator snapshot with the
revenue estimator that prices it. Registry entries name a strategy through
their ``adapter`` field; otherwise the ecosystem default applies.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..domain import Ecosystem, NetworkRegistryEntry
from ..errors import RegistryError
from ..processors.revenue import (
    RevenueEstimator,
    RevenueModuleRevenue,
    StakeRewardRevenue,
    TransferRevenue,
)
from .price_adapters import PRICE_ADAPTERS
from .validator_adapters import (
    BaseValidatorAdapter,
    ChainlinkAdapter,
    CosmosAdapter,
    NearAdapter,
    NeutronAdapter,
    SkaleAdapter,
    SolanaAdapter,
    SuiAdapter,
)


@dataclass(frozen=True)
class NetworkStrategy:
    name: str
    adapter_class: type[BaseValidatorAdapter]
    revenue: RevenueEstimator


STRATEGIES: dict[str, NetworkStrategy] = {
    s.name: s
    for s in (
        NetworkStrategy("cosmos", CosmosAdapter, StakeRewardRevenue()),
        NetworkStrategy("neutron", NeutronAdapter, RevenueModuleRevenue()),
        NetworkStrategy("solana", SolanaAdapter, StakeRewardRevenue()),
        NetworkStrategy("sui", SuiAdapter, StakeRewardRevenue()),
        NetworkStrategy("near", NearAdapter, StakeRewardRevenue()),
        NetworkStrategy("skale", SkaleAdapter, StakeRewardRevenue()),
        NetworkStrategy("chainlink", ChainlinkAdapter, TransferRevenue()),
    )
}

ECOSYSTEM_DEFAULTS: dict[Ecosystem, str] = {
    Ecosystem.COSMOS: "cosmos",
    Ecosystem.SOLANA: "solana",
    Ecosystem.SUI: "sui",
    Ecosystem.NEAR: "near",
}


def get_strategy(name: str) -> NetworkStrategy:
    """Get a strategy by name.

    Args:
        name: Name of the strategy (case-insensitive)

    Returns:
        The registered strategy

    Raises:
        RegistryError: If name is not recognized
    """
    normalized = name.lower()
    if normalized not in STRATEGIES:
        raise RegistryError(
            f"Unknown adapter '{name}'. Available: {', '.join(STRATEGIES.keys())}"
        )
    return STRATEGIES[normalized]


def resolve_strategy(entry: NetworkRegistryEntry) -> NetworkStrategy | None:
    """Strategy for ``entry``, or None when its ecosystem has no default."""
    if entry.adapter:
        return get_strategy(entry.adapter)
    default = ECOSYSTEM_DEFAULTS.get(entry.ecosystem)
    return STRATEGIES[default] if default else None


__all__ = [
    "ECOSYSTEM_DEFAULTS",
    "PRICE_ADAPTERS",
    "STRATEGIES",
    "NetworkStrategy",
    "get_strategy",
    "resolve_strategy",
]
