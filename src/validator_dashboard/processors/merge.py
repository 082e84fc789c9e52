from __future__ import annotations

from dataclasses import replace

from ..domain import (
    AprRange,
    EnrichedNetwork,
    Freshness,
    NetworkRegistryEntry,
    PriceQuote,
    StakeValue,
    TransferSummary,
    ValidatorSnapshot,
)
from .revenue import RevenueEstimator


def effective_apr(
    entry: NetworkRegistryEntry, snapshot: ValidatorSnapshot | None
) -> AprRange | None:
    """Live APR when the adapter reported one, else the registry range."""
    if snapshot is not None and snapshot.apr_override is not None:
        return AprRange(snapshot.apr_override, snapshot.apr_override)
    return entry.apr


def price_payments(
    transfers: TransferSummary | None, price: PriceQuote | None
) -> TransferSummary | None:
    """Attach a USD amount to every payment at the current price."""
    if transfers is None or price is None:
        return transfers
    payments = tuple(
        replace(payment, amount_usd=payment.amount * price.usd)
        for payment in transfers.payments
    )
    return replace(transfers, payments=payments)


def merge_network(
    entry: NetworkRegistryEntry,
    snapshot: ValidatorSnapshot | None,
    price: PriceQuote | None,
    estimator: RevenueEstimator | None = None,
) -> EnrichedNetwork:
    """Overlay live data onto a registry entry.

    Pure function: every field is independently optional. Without a
    snapshot the live fields stay None; without a price the stake amount
    is still reported but its USD value and price-based revenue are None.
    """
    if snapshot is None:
        return EnrichedNetwork(network=entry, apr=entry.apr, price=price)

    apr = effective_apr(entry, snapshot)
    amount = snapshot.stake_amount
    usd_value = amount * price.usd if price is not None else None
    estimate = estimator.estimate(snapshot, apr, price) if estimator else None

    return EnrichedNetwork(
        network=entry,
        apr=apr,
        stake=StakeValue(amount=amount, usd_value=usd_value),
        commission=snapshot.commission,
        rank=snapshot.rank,
        total_validators=snapshot.total_validators,
        voting_power=snapshot.voting_power,
        delinquent=snapshot.delinquent,
        price=price,
        estimated_monthly_revenue=estimate.monthly_usd if estimate else None,
        estimated_yearly_revenue=estimate.yearly_usd if estimate else None,
        revenue_method=estimate.method if estimate else None,
        revenue_stats=snapshot.revenue_stats,
        transfers=price_payments(snapshot.transfers, price),
        freshness=Freshness.LIVE,
        fetched_at=snapshot.fetched_at,
        is_live_data=snapshot.is_live,
        degraded=snapshot.degraded,
        degraded_reason=snapshot.degraded_reason,
    )
