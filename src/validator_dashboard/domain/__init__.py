"""Domain models for the validator dashboard."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from ..units import to_decimal


class Ecosystem(str, Enum):
    COSMOS = "cosmos"
    SOLANA = "solana"
    SUI = "sui"
    NEAR = "near"
    ETHEREUM = "ethereum"
    OTHER = "other"


class NetworkStatus(str, Enum):
    ACTIVE = "active"
    COMING_SOON = "coming_soon"
    INACTIVE = "inactive"


class Freshness(str, Enum):
    """Where the live fields of an enriched network come from."""

    LIVE = "live"
    STALE = "stale"
    NO_DATA = "no_data"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AprRange:
    """Annual percentage rate bounds, in percent."""

    min: float
    max: float

    @property
    def average(self) -> float:
        return (self.min + self.max) / 2


@dataclass(frozen=True)
class NetworkRegistryEntry:
    """Static description of one validator we operate."""

    id: str
    name: str
    token: str
    ecosystem: Ecosystem
    apr: AprRange | None = None
    address: str | None = None
    status: NetworkStatus = NetworkStatus.ACTIVE
    price_id: str | None = None
    adapter: str | None = None
    explorer_url: str | None = None
    stake_url: str | None = None


@dataclass(frozen=True)
class TransferPayment:
    """One token transfer to or from the operator address."""

    hash: str
    timestamp: datetime
    amount: float  # whole tokens
    from_address: str
    direction: str  # "in" or "out"
    amount_usd: float | None = None


@dataclass(frozen=True)
class TransferSummary:
    """Token transfer statistics for an operator address."""

    total_received: float
    total_sent: float
    last_7_days: float
    last_30_days: float
    last_90_days: float
    transfer_count: int
    payments: tuple[TransferPayment, ...] = ()

    @property
    def net_balance(self) -> float:
        return self.total_received - self.total_sent


@dataclass(frozen=True)
class RevenueModuleStats:
    """Neutron revenue module figures for the current payment period."""

    performance_rating: float  # 0.0-1.0
    committed_blocks: int | None = None
    committed_oracle_votes: int | None = None
    active_blocks: int | None = None
    expected_revenue: float | None = None  # NTRN
    blocks_uptime: float | None = None  # percent of active blocks
    oracle_uptime: float | None = None  # percent of active blocks


@dataclass(frozen=True)
class ValidatorSnapshot:
    """Live validator data returned by one adapter call."""

    network_id: str
    raw_stake: int  # smallest denomination
    decimals: int
    commission: float | None = None  # percent, 0-100
    rank: int | None = None
    total_validators: int | None = None
    delinquent: bool = False
    voting_power: float | None = None  # percent of network stake
    network_total_stake: float | None = None  # whole tokens
    apr_override: float | None = None  # percent
    delegators: int | None = None
    owner_balance: float | None = None
    moniker: str | None = None
    bond_status: str | None = None
    revenue_stats: RevenueModuleStats | None = None
    reward_quote_usd: float | None = None
    transfers: TransferSummary | None = None
    is_live: bool = True
    degraded: bool = False
    degraded_reason: str | None = None
    fetched_at: datetime = field(default_factory=utc_now)

    @property
    def stake_amount(self) -> float:
        return to_decimal(self.raw_stake, self.decimals)

    @property
    def revenue_performance(self) -> float | None:
        return self.revenue_stats.performance_rating if self.revenue_stats else None


@dataclass(frozen=True)
class PriceQuote:
    """USD quote for one token id."""

    id: str
    usd: float
    usd_24h_change: float | None = None
    usd_market_cap: float | None = None


@dataclass(frozen=True)
class StakeValue:
    amount: float
    usd_value: float | None = None


@dataclass(frozen=True)
class RevenueEstimate:
    monthly_usd: float
    yearly_usd: float
    method: str


@dataclass(frozen=True)
class EnrichedNetwork:
    """A registry entry with whatever live data could be attached to it."""

    network: NetworkRegistryEntry
    apr: AprRange | None = None
    stake: StakeValue | None = None
    commission: float | None = None
    rank: int | None = None
    total_validators: int | None = None
    voting_power: float | None = None
    delinquent: bool | None = None
    price: PriceQuote | None = None
    estimated_monthly_revenue: float | None = None
    estimated_yearly_revenue: float | None = None
    revenue_method: str | None = None
    revenue_stats: RevenueModuleStats | None = None
    transfers: TransferSummary | None = None
    freshness: Freshness = Freshness.NO_DATA
    fetched_at: datetime | None = None
    is_live_data: bool | None = None
    degraded: bool = False
    degraded_reason: str | None = None

    @property
    def id(self) -> str:
        return self.network.id

    @property
    def is_active(self) -> bool:
        return self.network.status == NetworkStatus.ACTIVE


@dataclass(frozen=True)
class Metrics:
    total_stake_usd: float
    total_networks: int
    active_networks: int
    networks_with_live_data: int
    estimated_monthly_revenue: float
    estimated_yearly_revenue: float
    average_apr: float | None


@dataclass(frozen=True)
class AdapterFailure:
    """A per-network failure recorded during an aggregation cycle."""

    network_id: str
    kind: str
    message: str

    def __str__(self) -> str:
        return f"{self.network_id}: {self.kind}: {self.message}"


@dataclass(frozen=True)
class AggregationResult:
    networks: list[EnrichedNetwork]
    metrics: Metrics
    last_updated: datetime
    errors: list[AdapterFailure] = field(default_factory=list)
    from_cache: bool = False

    def get(self, network_id: str) -> EnrichedNetwork | None:
        for network in self.networks:
            if network.id == network_id:
                return network
        return None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready representation."""
        return _jsonable(asdict(self))


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value
