from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...clients.http import HttpJsonClient, describe
from ...clients.json_rpc import JsonRpcClient
from ...domain import NetworkRegistryEntry, ValidatorSnapshot
from ...errors import AdapterError, MalformedResponse, NetworkUnavailable, NotFound
from ...settings import DashboardSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapshotOutcome:
    """Either a snapshot or the tagged error explaining why there is none."""

    network_id: str
    snapshot: ValidatorSnapshot | None = None
    error: AdapterError | None = None

    @property
    def ok(self) -> bool:
        return self.snapshot is not None


class BaseValidatorAdapter(ABC):
    """Abstract base class for validator adapters.

    Subclasses implement ``_fetch_snapshot`` and raise ``AdapterError``
    subclasses; ``fetch_snapshot`` turns those (and timeouts) into a
    ``SnapshotOutcome`` so callers never have to catch anything.
    """

    def __init__(self, config: DashboardSettings, http: HttpJsonClient | None = None):
        """Initialize the adapter with configuration.

        Args:
            config: Dashboard settings
            http: Shared JSON transport; a fresh one is created when omitted
        """
        self.config = config
        self.http = http or HttpJsonClient(timeout=config.request_timeout_seconds)

    @property
    @abstractmethod
    def adapter_name(self) -> str:
        """Return the name of this adapter."""
        ...

    @abstractmethod
    async def _fetch_snapshot(self, entry: NetworkRegistryEntry) -> ValidatorSnapshot:
        """Fetch live data for ``entry`` or raise an ``AdapterError``."""
        ...

    def require_address(self, entry: NetworkRegistryEntry) -> str:
        if not entry.address:
            raise NotFound(f"No validator address configured for {entry.id}")
        return entry.address

    def rpc_client(self, entry: NetworkRegistryEntry) -> JsonRpcClient:
        urls = self.config.rpc_urls(entry.id)
        if not urls:
            raise NetworkUnavailable(f"No RPC endpoint configured for {entry.id}")
        return JsonRpcClient(urls, self.http)

    async def fetch_snapshot(self, entry: NetworkRegistryEntry) -> SnapshotOutcome:
        timeout_s = self.config.adapter_timeout_seconds
        try:
            async with asyncio.timeout(timeout_s):
                snapshot = await self._fetch_snapshot(entry)
        except TimeoutError:
            error: AdapterError = NetworkUnavailable(
                f"{self.adapter_name} timed out after {timeout_s}s",
                network_id=entry.id,
            )
        except AdapterError as e:
            e.network_id = e.network_id or entry.id
            error = e
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            # Payload did not have the shape the adapter expects.
            error = MalformedResponse(
                f"{self.adapter_name}: unexpected payload ({type(e).__name__}: {e})",
                network_id=entry.id,
            )
        else:
            logger.debug(
                "Adapter '%s' fetched %s: stake=%s commission=%s rank=%s",
                self.adapter_name,
                entry.id,
                snapshot.raw_stake,
                snapshot.commission,
                snapshot.rank,
            )
            return SnapshotOutcome(network_id=entry.id, snapshot=snapshot)

        logger.warning(
            "Adapter '%s' failed for %s: %s", self.adapter_name, entry.id, describe(error)
        )
        return SnapshotOutcome(network_id=entry.id, error=error)
