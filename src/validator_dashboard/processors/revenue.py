"""Pluggable revenue estimation strategies.

Each registered network strategy pairs an adapter with one of these
estimators, so a chain with its own reward model only needs a new class.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..constants import NEUTRON_DEFAULT_REWARD_QUOTE_USD
from ..domain import AprRange, PriceQuote, RevenueEstimate, ValidatorSnapshot

MONTHS_PER_YEAR = 12


class RevenueEstimator(ABC):
    """Turns a snapshot plus optional APR and price into a revenue estimate."""

    @property
    @abstractmethod
    def method(self) -> str:
        """Name recorded on the enriched network."""
        ...

    @abstractmethod
    def monthly_usd(
        self,
        snapshot: ValidatorSnapshot,
        apr: AprRange | None,
        price: PriceQuote | None,
    ) -> float | None:
        """Return estimated monthly USD revenue, or None when inputs are missing."""
        ...

    def estimate(
        self,
        snapshot: ValidatorSnapshot,
        apr: AprRange | None,
        price: PriceQuote | None,
    ) -> RevenueEstimate | None:
        monthly = self.monthly_usd(snapshot, apr, price)
        if monthly is None:
            return None
        return RevenueEstimate(
            monthly_usd=monthly,
            yearly_usd=monthly * MONTHS_PER_YEAR,
            method=self.method,
        )


class StakeRewardRevenue(RevenueEstimator):
    """Commission on staking rewards.

    monthly = stake * avgApr/100 / 12 * commission/100 * price
    """

    @property
    def method(self) -> str:
        return "stake_reward"

    def monthly_usd(self, snapshot, apr, price):
        if apr is None or price is None or snapshot.commission is None:
            return None
        monthly_reward_tokens = snapshot.stake_amount * (apr.average / 100) / MONTHS_PER_YEAR
        commission_tokens = monthly_reward_tokens * (snapshot.commission / 100)
        return commission_tokens * price.usd


class RevenueModuleRevenue(RevenueEstimator):
    """Fixed USD quota scaled by a reported performance rating (Neutron)."""

    def __init__(self, default_quote_usd: float = NEUTRON_DEFAULT_REWARD_QUOTE_USD):
        self.default_quote_usd = default_quote_usd

    @property
    def method(self) -> str:
        return "revenue_module"

    def monthly_usd(self, snapshot, apr, price):
        if snapshot.revenue_performance is None:
            return None
        quote = snapshot.reward_quote_usd
        if quote is None:
            quote = self.default_quote_usd
        return quote * snapshot.revenue_performance


class TransferRevenue(RevenueEstimator):
    """Tokens received over the last 30 days, valued at the current price."""

    @property
    def method(self) -> str:
        return "transfers"

    def monthly_usd(self, snapshot, apr, price):
        if snapshot.transfers is None or price is None:
            return None
        return snapshot.transfers.last_30_days * price.usd
