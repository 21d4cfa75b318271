"""
Tests for the async merge sort engine.
"""

import asyncio

import pytest

from ranker.services.sorting import expected_comparisons, merge, merge_sort


class TestMergeSort:
    @pytest.mark.asyncio
    async def test_empty_and_single(self):
        calls = []

        def comparator(a, b):
            calls.append((a, b))
            return a - b

        assert await merge_sort([], comparator) == []
        assert await merge_sort([7], comparator) == [7]
        assert calls == []

    @pytest.mark.asyncio
    async def test_default_numeric_order(self):
        assert await merge_sort([5, 3, 9, 1, 3]) == [1, 3, 3, 5, 9]

    @pytest.mark.asyncio
    async def test_ascending_and_descending(self):
        assert await merge_sort([5, 3, 4, 1, 2], lambda a, b: a - b) == [1, 2, 3, 4, 5]
        assert await merge_sort([5, 3, 4, 1, 2], lambda a, b: b - a) == [5, 4, 3, 2, 1]

    @pytest.mark.asyncio
    async def test_output_is_permutation(self):
        items = [7, 2, 7, 9, 0, 2, 5, 1, 8, 3, 3]
        result = await merge_sort(items)
        assert sorted(result) == sorted(items)
        assert len(result) == len(items)

    @pytest.mark.asyncio
    async def test_async_comparator(self):
        async def descending(a, b):
            await asyncio.sleep(0)
            return b - a

        assert await merge_sort([2, 8, 4, 6], descending) == [8, 6, 4, 2]

    @pytest.mark.asyncio
    async def test_stable_for_equal_elements(self):
        items = [("a", 2), ("b", 1), ("c", 2), ("d", 1), ("e", 2)]

        result = await merge_sort(items, lambda x, y: x[1] - y[1])

        assert [name for name, _ in result] == ["b", "d", "a", "c", "e"]

    @pytest.mark.asyncio
    async def test_all_equal_keeps_input_order(self):
        items = ["d", "a", "c", "b"]
        assert await merge_sort(items, lambda a, b: 0) == items

    @pytest.mark.asyncio
    async def test_input_not_modified(self):
        items = [3, 1, 2]
        result = await merge_sort(items)
        assert items == [3, 1, 2]
        assert result is not items

    @pytest.mark.asyncio
    async def test_comparator_error_propagates(self):
        def broken(a, b):
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            await merge_sort([1, 2], broken)

    @pytest.mark.asyncio
    async def test_concurrent_halves_same_result(self):
        async def compare(a, b):
            await asyncio.sleep(0)
            return a - b

        items = [9, 4, 7, 1, 8, 2, 6, 3, 5]
        assert await merge_sort(items, compare, concurrent=True) == sorted(items)

    @pytest.mark.asyncio
    async def test_two_items_one_comparison(self):
        calls = []

        def comparator(a, b):
            calls.append((a, b))
            return a - b

        assert await merge_sort([2, 1], comparator) == [1, 2]
        assert calls == [(2, 1)]


class TestMerge:
    @pytest.mark.asyncio
    async def test_takes_left_on_tie(self):
        left = [("left", 1)]
        right = [("right", 1)]
        result = await merge(left, right, lambda a, b: a[1] - b[1])
        assert result == [("left", 1), ("right", 1)]

    @pytest.mark.asyncio
    async def test_remainder_appended(self):
        assert await merge([1, 2], [3, 4, 5], lambda a, b: a - b) == [1, 2, 3, 4, 5]


class TestExpectedComparisons:
    def test_small_inputs(self):
        assert expected_comparisons(0) == 0
        assert expected_comparisons(1) == 0

    def test_n_log_n(self):
        assert expected_comparisons(2) == 2
        assert expected_comparisons(8) == 24
        assert expected_comparisons(100) == 664
