"""Chainlink node operator adapter.

The LINK balance of the operator address is always read from public
Ethereum RPC endpoints through ``eth_call``. Transfer history needs an
Etherscan API key; without one the snapshot is returned in degraded
(balance-only) mode instead of failing.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Iterable

from web3.exceptions import Web3Exception

from ...abi import read_erc20_balance
from ...clients.etherscan import EtherscanClient, TokenTransfer
from ...constants import LINK_DECIMALS, LINK_TOKEN_ADDRESS
from ...domain import (
    NetworkRegistryEntry,
    TransferPayment,
    TransferSummary,
    ValidatorSnapshot,
    utc_now,
)
from ...errors import AdapterError, NetworkUnavailable, Unauthorized
from ...units import to_decimal
from .base import BaseValidatorAdapter

logger = logging.getLogger(__name__)

NO_KEY_REASON = "no Etherscan API key"


def summarize_transfers(
    transfers: Iterable[TokenTransfer],
    operator: str,
    now: datetime | None = None,
    decimals: int = LINK_DECIMALS,
) -> TransferSummary:
    """Aggregate raw token transfers into received/sent totals.

    Windowed totals (7/30/90 days) count incoming transfers only.
    """
    now = now or utc_now()
    operator = operator.lower()
    windows = {days: now - timedelta(days=days) for days in (7, 30, 90)}
    received = sent = 0.0
    recent = {days: 0.0 for days in windows}
    payments: list[TransferPayment] = []
    count = 0

    for transfer in transfers:
        amount = to_decimal(transfer["value"], decimals)
        timestamp = datetime.fromtimestamp(int(transfer["timeStamp"]), tz=now.tzinfo)
        count += 1
        if transfer["to"].lower() == operator:
            direction = "in"
            received += amount
            for days, start in windows.items():
                if timestamp >= start:
                    recent[days] += amount
        elif transfer["from"].lower() == operator:
            direction = "out"
            sent += amount
        else:
            continue
        payments.append(
            TransferPayment(
                hash=transfer["hash"],
                timestamp=timestamp,
                amount=amount,
                from_address=transfer["from"],
                direction=direction,
            )
        )

    return TransferSummary(
        total_received=received,
        total_sent=sent,
        last_7_days=recent[7],
        last_30_days=recent[30],
        last_90_days=recent[90],
        transfer_count=count,
        payments=tuple(payments),
    )


class ChainlinkAdapter(BaseValidatorAdapter):
    """Key-gated adapter for the Chainlink node operator."""

    @property
    def adapter_name(self) -> str:
        return "chainlink"

    def etherscan_client(self) -> EtherscanClient | None:
        key = self.config.etherscan_api_key
        if key is None:
            return None
        return EtherscanClient(
            key.get_secret_value(),
            request_timeout=self.config.request_timeout_seconds,
            max_retry_seconds=self.config.adapter_timeout_seconds,
        )

    async def read_balance(self, entry: NetworkRegistryEntry, owner: str) -> int:
        """Return the raw LINK balance from the first RPC endpoint that answers."""
        urls = self.config.rpc_urls(entry.id)
        for url in urls:
            try:
                return await asyncio.to_thread(
                    read_erc20_balance,
                    url,
                    LINK_TOKEN_ADDRESS,
                    owner,
                    timeout=self.config.request_timeout_seconds,
                )
            except (Web3Exception, OSError, ValueError) as e:
                logger.debug("eth_call balanceOf via %s failed: %s", url, e)
        raise NetworkUnavailable(f"All {len(urls)} Ethereum RPC endpoints failed")

    async def _fetch_snapshot(self, entry: NetworkRegistryEntry) -> ValidatorSnapshot:
        operator = self.require_address(entry)
        etherscan = self.etherscan_client()
        try:
            return await self._read_operator(entry, operator, etherscan)
        finally:
            if etherscan is not None:
                etherscan.close()

    async def _read_operator(
        self,
        entry: NetworkRegistryEntry,
        operator: str,
        etherscan: EtherscanClient | None,
    ) -> ValidatorSnapshot:
        try:
            raw_balance = await self.read_balance(entry, operator)
        except NetworkUnavailable:
            if etherscan is None:
                raise
            logger.info("RPC balance read failed, falling back to Etherscan")
            raw_balance = await asyncio.to_thread(
                etherscan.fetch_token_balance, LINK_TOKEN_ADDRESS, operator
            )

        if etherscan is None:
            logger.info("Chainlink: %s, returning balance only", NO_KEY_REASON)
            return ValidatorSnapshot(
                network_id=entry.id,
                raw_stake=raw_balance,
                decimals=LINK_DECIMALS,
                degraded=True,
                degraded_reason=NO_KEY_REASON,
            )

        transfers = None
        degraded_reason = None
        try:
            history = await asyncio.to_thread(
                etherscan.fetch_token_transfers, LINK_TOKEN_ADDRESS, operator
            )
            transfers = summarize_transfers(history, operator)
        except Unauthorized as e:
            degraded_reason = str(e)
            logger.warning("Chainlink: %s", degraded_reason)
        except AdapterError as e:
            logger.warning("Chainlink transfer history unavailable: %s", e)

        return ValidatorSnapshot(
            network_id=entry.id,
            raw_stake=raw_balance,
            decimals=LINK_DECIMALS,
            transfers=transfers,
            degraded=degraded_reason is not None,
            degraded_reason=degraded_reason,
        )
