from .base import BaseValidatorAdapter, SnapshotOutcome
from .chainlink import ChainlinkAdapter
from .cosmos import CosmosAdapter, NeutronAdapter
from .near import NearAdapter
from .skale import SkaleAdapter
from .solana import SolanaAdapter
from .sui import SuiAdapter

__all__ = [
    "BaseValidatorAdapter",
    "SnapshotOutcome",
    "ChainlinkAdapter",
    "CosmosAdapter",
    "NeutronAdapter",
    "NearAdapter",
    "SkaleAdapter",
    "SolanaAdapter",
    "SuiAdapter",
]
