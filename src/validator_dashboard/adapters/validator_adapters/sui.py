from __future__ import annotations

import logging
from typing import Any

from ...constants import SUI_DECIMALS
from ...domain import NetworkRegistryEntry, ValidatorSnapshot
from ...errors import AdapterError, MalformedResponse, NotFound
from ...processors.ranking import rank_by_stake
from ...units import parse_raw_amount, to_decimal
from .base import BaseValidatorAdapter

logger = logging.getLogger(__name__)


class SuiAdapter(BaseValidatorAdapter):
    """Sui validator adapter.

    Reads the full system state for stake, commission and rank, then makes a
    best-effort call for the live validator APY.
    """

    @property
    def adapter_name(self) -> str:
        return "sui"

    async def fetch_validator_apy(self, entry: NetworkRegistryEntry, address: str) -> float | None:
        """Return our validator's APY in percent, or None if it is not listed."""
        result = await self.rpc_client(entry).call("suix_getValidatorsApy")
        for item in result.get("apys") or []:
            if item.get("address") == address:
                return round(float(item["apy"]) * 100, 2)
        return None

    async def _fetch_snapshot(self, entry: NetworkRegistryEntry) -> ValidatorSnapshot:
        address = self.require_address(entry)
        rpc = self.rpc_client(entry)

        state = await rpc.call("suix_getLatestSuiSystemState")
        if not isinstance(state, dict):
            raise MalformedResponse("suix_getLatestSuiSystemState returned no state")
        validators: list[dict[str, Any]] = state.get("activeValidators") or []

        def stake_of(validator: dict) -> int:
            return parse_raw_amount(validator["stakingPoolSuiBalance"])

        def is_ours(validator: dict) -> bool:
            return validator.get("suiAddress") == address

        ours = next((v for v in validators if is_ours(v)), None)
        if ours is None:
            raise NotFound(f"Sui validator {address} is not in the active set")

        rank, total = rank_by_stake(validators, stake=stake_of, is_target=is_ours)
        total_stake = state.get("totalStake")

        apr_override = None
        try:
            apr_override = await self.fetch_validator_apy(entry, address)
        except (AdapterError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.debug("Sui APY unavailable, using registry APR: %s", e)

        return ValidatorSnapshot(
            network_id=entry.id,
            raw_stake=stake_of(ours),
            decimals=SUI_DECIMALS,
            # basis points
            commission=int(ours["commissionRate"]) / 100,
            rank=rank,
            total_validators=total,
            voting_power=int(ours["votingPower"]) / 100 if "votingPower" in ours else None,
            network_total_stake=(
                to_decimal(total_stake, SUI_DECIMALS) if total_stake is not None else None
            ),
            apr_override=apr_override,
            moniker=ours.get("name"),
        )
