from .merge import effective_apr, merge_network, price_payments
from .metrics import derive_metrics
from .ranking import rank_by_stake
from .revenue import (
    RevenueEstimator,
    RevenueModuleRevenue,
    StakeRewardRevenue,
    TransferRevenue,
)

__all__ = [
    "effective_apr",
    "merge_network",
    "price_payments",
    "derive_metrics",
    "rank_by_stake",
    "RevenueEstimator",
    "RevenueModuleRevenue",
    "StakeRewardRevenue",
    "TransferRevenue",
]
