from __future__ import annotations

import logging

from ...constants import SOLANA_DECIMALS
from ...domain import NetworkRegistryEntry, ValidatorSnapshot
from ...errors import MalformedResponse, NotFound
from ...processors.ranking import rank_by_stake
from ...units import parse_raw_amount, to_decimal
from .base import BaseValidatorAdapter

logger = logging.getLogger(__name__)


class SolanaAdapter(BaseValidatorAdapter):
    """Solana vote account adapter (``getVoteAccounts``).

    Rank is computed within the current set only; a delinquent validator
    has no rank.
    """

    @property
    def adapter_name(self) -> str:
        return "solana"

    async def _fetch_snapshot(self, entry: NetworkRegistryEntry) -> ValidatorSnapshot:
        vote_pubkey = self.require_address(entry)
        rpc = self.rpc_client(entry)

        result = await rpc.call("getVoteAccounts", [{"commitment": "finalized"}])
        if not isinstance(result, dict):
            raise MalformedResponse("getVoteAccounts returned no account lists")
        current = result.get("current") or []
        delinquent = result.get("delinquent") or []

        def stake_of(account: dict) -> int:
            return parse_raw_amount(account["activatedStake"])

        def is_ours(account: dict) -> bool:
            return account.get("votePubkey") == vote_pubkey

        account = next((a for a in current if is_ours(a)), None)
        is_delinquent = False
        if account is None:
            account = next((a for a in delinquent if is_ours(a)), None)
            is_delinquent = account is not None
        if account is None:
            raise NotFound(f"Vote account {vote_pubkey} not found")

        raw_stake = stake_of(account)
        total_stake = sum(stake_of(a) for a in current) + sum(
            stake_of(a) for a in delinquent
        )

        rank = None
        if not is_delinquent:
            rank, _ = rank_by_stake(current, stake=stake_of, is_target=is_ours)
        else:
            logger.warning("Solana vote account %s is delinquent", vote_pubkey)

        return ValidatorSnapshot(
            network_id=entry.id,
            raw_stake=raw_stake,
            decimals=SOLANA_DECIMALS,
            commission=float(account["commission"]),
            rank=rank,
            total_validators=len(current),
            delinquent=is_delinquent,
            voting_power=raw_stake / total_stake * 100 if total_stake else None,
            network_total_stake=to_decimal(total_stake, SOLANA_DECIMALS),
        )
