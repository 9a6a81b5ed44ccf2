"""
Helpers for ordered lists (config items, navigation, field configurations).
"""

from collections import Counter

from exceptions import InvalidReorderError


def check_permutation(current_ids: list[str], ordered_ids: list[str], scope: str) -> None:
    """
    Ensure ordered_ids lists every current id exactly once.

    Raises:
        InvalidReorderError: With the missing, unexpected and duplicated ids
    """
    counts = Counter(ordered_ids)
    current = set(current_ids)

    duplicates = sorted(item_id for item_id, n in counts.items() if n > 1)
    missing = sorted(current - counts.keys())
    unexpected = sorted(counts.keys() - current)

    if duplicates or missing or unexpected:
        raise InvalidReorderError(
            scope=scope,
            missing=missing,
            unexpected=unexpected,
            duplicates=duplicates
        )


def next_sort_order(existing: list[int]) -> int:
    """Position after the current maximum; 0 for an empty list."""
    return max(existing, default=-1) + 1
