"""
Sorting Engine

Comparator-driven async merge sort.
"""

from ranker.services.sorting.merge_sort import (
    merge_sort,
    merge,
    default_comparator,
    expected_comparisons,
)

__all__ = [
    "merge_sort",
    "merge",
    "default_comparator",
    "expected_comparisons",
]
