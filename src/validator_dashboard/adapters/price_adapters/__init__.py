from __future__ import annotations

from .base import BasePriceAdapter
from .coingecko import CoinGeckoPriceAdapter

PRICE_ADAPTERS = [
    CoinGeckoPriceAdapter,
]

__all__ = ["PRICE_ADAPTERS", "BasePriceAdapter", "CoinGeckoPriceAdapter"]
