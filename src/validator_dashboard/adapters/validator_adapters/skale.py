from __future__ import annotations

from ...constants import (
    SKALE_DECIMALS,
    SKALE_REFERENCE_COMMISSION,
    SKALE_REFERENCE_DELEGATIONS,
    SKALE_VALIDATORS,
)
from ...domain import NetworkRegistryEntry, ValidatorSnapshot
from .base import BaseValidatorAdapter


class SkaleAdapter(BaseValidatorAdapter):
    """SKALE adapter serving fixed reference data.

    No network call is made. The snapshot covers validator ids 10 and 43
    and is flagged ``is_live=False``.
    """

    @property
    def adapter_name(self) -> str:
        return "skale"

    async def _fetch_snapshot(self, entry: NetworkRegistryEntry) -> ValidatorSnapshot:
        delegated = sum(SKALE_REFERENCE_DELEGATIONS[vid] for vid in SKALE_VALIDATORS)
        return ValidatorSnapshot(
            network_id=entry.id,
            raw_stake=delegated * 10**SKALE_DECIMALS,
            decimals=SKALE_DECIMALS,
            commission=SKALE_REFERENCE_COMMISSION,
            is_live=False,
        )
