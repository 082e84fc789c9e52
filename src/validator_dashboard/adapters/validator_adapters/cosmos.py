from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any
from urllib.parse import quote

from ...constants import COSMOS_BONDED_PAGE_LIMIT, COSMOS_CHAINS, NEUTRON_DECIMALS
from ...domain import NetworkRegistryEntry, RevenueModuleStats, ValidatorSnapshot
from ...errors import AdapterError, MalformedResponse, NetworkUnavailable
from ...processors.ranking import rank_by_stake
from ...units import parse_raw_amount, to_decimal
from .base import BaseValidatorAdapter

logger = logging.getLogger(__name__)

BOND_STATUSES = {
    "BOND_STATUS_BONDED": "bonded",
    "BOND_STATUS_UNBONDING": "unbonding",
    "BOND_STATUS_UNBONDED": "unbonded",
}
STAKING_PATH = "/cosmos/staking/v1beta1"
MAX_BONDED_PAGES = 10


class CosmosAdapter(BaseValidatorAdapter):
    """Cosmos-SDK validator adapter backed by the LCD/REST API.

    One required call (validator by operator address) plus two best-effort
    calls: the staking pool for voting power and the bonded set for rank.
    """

    @property
    def adapter_name(self) -> str:
        return "cosmos"

    def lcd_url(self, entry: NetworkRegistryEntry) -> str:
        url = self.config.lcd_url(entry.id)
        if url is None:
            raise NetworkUnavailable(f"No LCD endpoint configured for {entry.id}")
        return url

    def decimals(self, entry: NetworkRegistryEntry) -> int:
        chain = COSMOS_CHAINS.get(entry.id)
        return chain["decimals"] if chain else 6

    async def fetch_validator(self, lcd: str, address: str) -> dict[str, Any]:
        data = await self.http.get_json(
            f"{lcd}{STAKING_PATH}/validators/{quote(address, safe='')}"
        )
        validator = data.get("validator") if isinstance(data, dict) else None
        if not isinstance(validator, dict):
            raise MalformedResponse(f"No validator object in response from {lcd}")
        return validator

    async def fetch_bonded_tokens(self, lcd: str) -> int:
        data = await self.http.get_json(f"{lcd}{STAKING_PATH}/pool")
        return parse_raw_amount(data["pool"]["bonded_tokens"])

    async def fetch_bonded_validators(self, lcd: str) -> list[dict[str, Any]]:
        """Return the full bonded validator set, following pagination."""
        validators: list[dict[str, Any]] = []
        params: dict[str, Any] = {
            "status": "BOND_STATUS_BONDED",
            "pagination.limit": COSMOS_BONDED_PAGE_LIMIT,
        }
        for _ in range(MAX_BONDED_PAGES):
            data = await self.http.get_json(f"{lcd}{STAKING_PATH}/validators", params=params)
            if not isinstance(data, dict):
                raise MalformedResponse(f"Unexpected bonded validator payload from {lcd}")
            page = data.get("validators") or []
            validators.extend(page)
            next_key = (data.get("pagination") or {}).get("next_key")
            if not next_key or not page:
                break
            params = {**params, "pagination.key": next_key}
        return validators

    async def _fetch_snapshot(self, entry: NetworkRegistryEntry) -> ValidatorSnapshot:
        address = self.require_address(entry)
        lcd = self.lcd_url(entry)
        decimals = self.decimals(entry)

        validator = await self.fetch_validator(lcd, address)
        raw_stake = parse_raw_amount(validator["tokens"])
        commission = float(validator["commission"]["commission_rates"]["rate"]) * 100

        voting_power = None
        network_total_stake = None
        try:
            bonded = await self.fetch_bonded_tokens(lcd)
        except (AdapterError, AttributeError, KeyError, TypeError) as e:
            logger.debug("Staking pool unavailable for %s: %s", entry.id, e)
        else:
            network_total_stake = to_decimal(bonded, decimals)
            if bonded > 0:
                voting_power = raw_stake / bonded * 100

        rank = None
        total = None
        try:
            bonded_set = await self.fetch_bonded_validators(lcd)
            rank, total = rank_by_stake(
                bonded_set,
                stake=lambda v: parse_raw_amount(v["tokens"]),
                is_target=lambda v: v.get("operator_address") == address,
            )
        except (AdapterError, AttributeError, KeyError, TypeError) as e:
            logger.debug("Bonded validator set unavailable for %s: %s", entry.id, e)
        else:
            if rank is None:
                logger.warning(
                    "%s validator %s is not in the bonded set of %d",
                    entry.id,
                    address,
                    total,
                )

        return ValidatorSnapshot(
            network_id=entry.id,
            raw_stake=raw_stake,
            decimals=decimals,
            commission=commission,
            rank=rank,
            total_validators=total,
            delinquent=bool(validator.get("jailed", False)),
            voting_power=voting_power,
            network_total_stake=network_total_stake,
            moniker=(validator.get("description") or {}).get("moniker"),
            bond_status=BOND_STATUSES.get(validator.get("status", ""), "unbonded"),
        )


def _optional_int(info: dict[str, Any], key: str) -> int | None:
    value = info.get(key)
    return int(value) if value is not None else None


def parse_revenue_stats(stats: dict[str, Any]) -> RevenueModuleStats:
    """Build ``RevenueModuleStats`` from a ``validator_stats`` payload.

    Only ``performance_rating`` is required; block counters and the
    expected revenue are kept when present.
    """
    performance = float(stats["performance_rating"])
    if not 0.0 <= performance <= 1.0:
        raise MalformedResponse(f"Performance rating out of range: {performance}")

    info = stats.get("validator_info") or {}
    committed = _optional_int(info, "commited_blocks_in_period")
    oracle_votes = _optional_int(info, "commited_oracle_votes_in_period")
    active = _optional_int(info, "in_active_valset_for_blocks_in_period")
    expected = (stats.get("expected_revenue") or {}).get("amount")

    return RevenueModuleStats(
        performance_rating=performance,
        committed_blocks=committed,
        committed_oracle_votes=oracle_votes,
        active_blocks=active,
        expected_revenue=(
            to_decimal(parse_raw_amount(expected), NEUTRON_DECIMALS)
            if expected is not None
            else None
        ),
        blocks_uptime=committed / active * 100 if committed is not None and active else None,
        oracle_uptime=oracle_votes / active * 100 if oracle_votes is not None and active else None,
    )


class NeutronAdapter(CosmosAdapter):
    """Cosmos adapter plus Neutron's revenue module.

    Neutron pays validators a fixed USD quota scaled by a performance
    rating instead of staking commission. Both revenue calls are
    best-effort; without them the snapshot carries stake data only.
    """

    @property
    def adapter_name(self) -> str:
        return "neutron"

    async def fetch_revenue_stats(self, lcd: str, address: str) -> RevenueModuleStats:
        data = await self.http.get_json(
            f"{lcd}/neutron/revenue/validator_stats",
            params={"val_oper_address": address},
        )
        return parse_revenue_stats(data["stats"])

    async def fetch_reward_quote(self, lcd: str) -> float:
        data = await self.http.get_json(f"{lcd}/neutron/revenue/params")
        return float(int(data["params"]["reward_quote"]["amount"]))

    async def _fetch_snapshot(self, entry: NetworkRegistryEntry) -> ValidatorSnapshot:
        snapshot = await super()._fetch_snapshot(entry)
        lcd = self.lcd_url(entry)
        address = self.require_address(entry)

        stats = None
        try:
            stats = await self.fetch_revenue_stats(lcd, address)
        except (AdapterError, AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Neutron revenue stats unavailable: %s", e)

        reward_quote = self.config.neutron_reward_quote_usd
        try:
            reward_quote = await self.fetch_reward_quote(lcd)
        except (AdapterError, AttributeError, KeyError, TypeError, ValueError) as e:
            logger.debug("Neutron revenue params unavailable, using default quote: %s", e)

        if stats is not None:
            logger.info(
                "Neutron: performance %.2f%%, quote $%.0f/month",
                stats.performance_rating * 100,
                reward_quote,
            )

        return replace(
            snapshot,
            revenue_stats=stats,
            reward_quote_usd=reward_quote,
        )
