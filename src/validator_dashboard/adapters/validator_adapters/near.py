from __future__ import annotations

import asyncio
import base64
import json
import logging
from typing import Any

from ...clients.json_rpc import JsonRpcClient
from ...constants import NEAR_DECIMALS
from ...domain import NetworkRegistryEntry, ValidatorSnapshot
from ...errors import AdapterError, MalformedResponse
from ...units import parse_raw_amount, to_decimal
from .base import BaseValidatorAdapter

logger = logging.getLogger(__name__)


async def view_call(
    rpc: JsonRpcClient,
    account_id: str,
    method_name: str,
    args: dict[str, Any] | None = None,
) -> Any:
    """Call a view method on a NEAR contract and decode its JSON result."""
    encoded = base64.b64encode(json.dumps(args or {}).encode()).decode()
    result = await rpc.call(
        "query",
        {
            "request_type": "call_function",
            "finality": "final",
            "account_id": account_id,
            "method_name": method_name,
            "args_base64": encoded,
        },
    )
    if not isinstance(result, dict) or "result" not in result:
        raise MalformedResponse(f"{method_name}: no result bytes from {account_id}")
    try:
        return json.loads(bytes(result["result"]).decode())
    except (TypeError, ValueError) as e:
        raise MalformedResponse(f"{method_name}: undecodable result") from e


class NearAdapter(BaseValidatorAdapter):
    """NEAR staking pool adapter.

    Four independent view calls run concurrently. Staked balance and the
    reward fee are required; owner balance and delegator count are not.
    """

    @property
    def adapter_name(self) -> str:
        return "near"

    async def _fetch_snapshot(self, entry: NetworkRegistryEntry) -> ValidatorSnapshot:
        pool_id = self.require_address(entry)
        rpc = self.rpc_client(entry)

        staked, owner, fee, accounts = await asyncio.gather(
            view_call(rpc, pool_id, "get_total_staked_balance"),
            view_call(rpc, pool_id, "get_owner_total_balance"),
            view_call(rpc, pool_id, "get_reward_fee_fraction"),
            view_call(rpc, pool_id, "get_number_of_accounts"),
            return_exceptions=True,
        )

        for required in (staked, fee):
            if isinstance(required, BaseException):
                raise required

        denominator = int(fee["denominator"])
        if denominator <= 0:
            raise MalformedResponse(f"Invalid reward fee fraction for {pool_id}: {fee}")
        commission = int(fee["numerator"]) / denominator * 100

        owner_balance = None
        try:
            if isinstance(owner, BaseException):
                raise owner
            owner_balance = to_decimal(owner, NEAR_DECIMALS)
        except (AdapterError, ValueError) as e:
            logger.debug("NEAR owner balance unavailable for %s: %s", pool_id, e)

        delegators = None
        if isinstance(accounts, BaseException):
            logger.debug("NEAR delegator count unavailable for %s: %s", pool_id, accounts)
        else:
            try:
                delegators = int(accounts)
            except (TypeError, ValueError):
                logger.debug("NEAR delegator count not numeric: %r", accounts)

        return ValidatorSnapshot(
            network_id=entry.id,
            raw_stake=parse_raw_amount(staked),
            decimals=NEAR_DECIMALS,
            commission=commission,
            delegators=delegators,
            owner_balance=owner_balance,
        )
