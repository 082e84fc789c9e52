from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable

from ...clients.http import HttpJsonClient
from ...domain import PriceQuote
from ...errors import AdapterError
from ...settings import DashboardSettings

logger = logging.getLogger(__name__)


class BasePriceAdapter(ABC):
    """Abstract base class for price adapters."""

    def __init__(self, config: DashboardSettings, http: HttpJsonClient | None = None):
        """Initialize the adapter with configuration."""
        self.config = config
        self.http = http or HttpJsonClient(timeout=config.request_timeout_seconds)

    @property
    @abstractmethod
    def adapter_name(self) -> str:
        """Return the name of this adapter."""
        ...

    @abstractmethod
    async def fetch_quotes(self, token_ids: Iterable[str]) -> dict[str, PriceQuote]:
        """Fetch USD quotes for ``token_ids`` or raise an ``AdapterError``.

        Tokens the source cannot price are absent from the mapping.
        """
        ...

    async def fetch_prices(self, token_ids: Iterable[str]) -> dict[str, PriceQuote]:
        """Like ``fetch_quotes`` but returns an empty mapping on failure."""
        try:
            return await self.fetch_quotes(token_ids)
        except AdapterError as e:
            logger.warning("Price adapter '%s' failed: %s", self.adapter_name, e)
            return {}
