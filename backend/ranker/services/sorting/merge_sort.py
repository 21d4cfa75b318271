"""
Async Merge Sort

Stable top-down merge sort where each comparison may be an awaitable
(an LLM call, a cached scoring lookup, ...).

Comparator contract:
    comparator(a, b) -> number or awaitable number
    negative → a sorts first, positive → b sorts first, 0 → equal

Equal elements keep their input order (the left element is taken on ties).
The engine does not catch comparator errors; wrap the comparator
(see ranker.services.ranking.adapter.GuardedComparator) to recover from them.
"""

import asyncio
import inspect
import math
from typing import Any, Awaitable, Callable, List, Sequence, TypeVar, Union

T = TypeVar("T")

Comparator = Callable[[T, T], Union[float, Awaitable[float]]]


def default_comparator(a: Any, b: Any) -> float:
    """Numeric ascending order."""
    return a - b


def expected_comparisons(n: int) -> int:
    """Rough comparison count for sorting n items, used for ETA display."""
    if n < 2:
        return 0
    return int(n * math.log2(n))


async def _compare(comparator: Comparator, a: T, b: T) -> float:
    result = comparator(a, b)
    if inspect.isawaitable(result):
        result = await result
    return result


async def merge(left: List[T], right: List[T], comparator: Comparator) -> List[T]:
    """
    Merge two sorted lists.
    Comparisons run one at a time, left head against right head.
    """
    result: List[T] = []
    i = j = 0

    while i < len(left) and j < len(right):
        if await _compare(comparator, left[i], right[j]) <= 0:
            result.append(left[i])
            i += 1
        else:
            result.append(right[j])
            j += 1

    result.extend(left[i:])
    result.extend(right[j:])
    return result


async def merge_sort(
    items: Sequence[T],
    comparator: Comparator = default_comparator,
    concurrent: bool = False,
) -> List[T]:
    """
    Sort items with an (optionally async) comparator.

    Args:
        items: Items to sort. Not modified.
        comparator: Three-way comparator, sync or async.
        concurrent: Sort the two halves concurrently. Comparisons inside a
            single merge stay sequential either way.

    Returns:
        A new sorted list.
    """
    if len(items) <= 1:
        return list(items)

    mid = len(items) // 2

    if concurrent:
        left, right = await asyncio.gather(
            merge_sort(items[:mid], comparator, concurrent),
            merge_sort(items[mid:], comparator, concurrent),
        )
    else:
        left = await merge_sort(items[:mid], comparator, concurrent)
        right = await merge_sort(items[mid:], comparator, concurrent)

    return await merge(left, right, comparator)
