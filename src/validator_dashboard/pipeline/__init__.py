from .context import PipelineContext
from .pricing import PRICES_ERROR_ID, collect_prices
from .run import aggregate, merge_all
from .snapshots import collect_snapshots, resolve_strategies

__all__ = [
    "PRICES_ERROR_ID",
    "PipelineContext",
    "aggregate",
    "collect_prices",
    "collect_snapshots",
    "merge_all",
    "resolve_strategies",
]
