from __future__ import annotations

from typing import Callable, Iterable, TypeVar

T = TypeVar("T")


def rank_by_stake(
    items: Iterable[T],
    stake: Callable[[T], int],
    is_target: Callable[[T], bool],
) -> tuple[int | None, int]:
    """Return the 1-based rank of the target by descending stake.

    Ties keep their original order (the sort is stable), so the earlier
    item of two equal stakes ranks higher.

    Args:
        items: Validator records in the order the upstream returned them.
        stake: Extracts an integer stake from a record.
        is_target: Identifies our validator.

    Returns:
        ``(rank, total)``; ``rank`` is None when the target is not in ``items``.
    """
    ordered = sorted(items, key=stake, reverse=True)
    for index, item in enumerate(ordered, start=1):
        if is_target(item):
            return index, len(ordered)
    return None, len(ordered)
