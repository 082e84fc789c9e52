from __future__ import annotations

from typing import Sequence

from ..domain import EnrichedNetwork, Freshness, Metrics


def derive_metrics(networks: Sequence[EnrichedNetwork]) -> Metrics:
    """Portfolio totals over active networks.

    Unknown values are skipped, never counted as zero in an average.
    ``average_apr`` is the unweighted mean of the known APR midpoints, or
    None when no active network has an APR.
    """
    active = [n for n in networks if n.is_active]

    total_stake_usd = sum(
        n.stake.usd_value
        for n in active
        if n.stake is not None and n.stake.usd_value is not None
    )
    monthly = sum(
        n.estimated_monthly_revenue for n in active if n.estimated_monthly_revenue is not None
    )
    yearly = sum(
        n.estimated_yearly_revenue for n in active if n.estimated_yearly_revenue is not None
    )
    aprs = [n.apr.average for n in active if n.apr is not None]

    return Metrics(
        total_stake_usd=float(total_stake_usd),
        total_networks=len(networks),
        active_networks=len(active),
        networks_with_live_data=sum(
            1 for n in active if n.freshness == Freshness.LIVE and n.is_live_data
        ),
        estimated_monthly_revenue=float(monthly),
        estimated_yearly_revenue=float(yearly),
        average_apr=sum(aprs) / len(aprs) if aprs else None,
    )
