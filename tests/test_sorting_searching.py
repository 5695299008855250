"""
test_sorting_searching.py

Tests for the array generators: bubble / insertion / selection sort,
merge / quick sort, linear and binary search.
"""

import random

import pytest

from algorithms.errors import InvalidInputError
from algorithms.searching import binary_search, linear_search
from algorithms.sorting import (
    DEFAULT_VALUES,
    QUICK_DEFAULT_VALUES,
    bubble_sort,
    insertion_sort,
    merge_sort,
    quick_sort,
    selection_sort,
)
from algorithms.step import Trace


SORTS = [bubble_sort, insertion_sort, selection_sort]


def run(tag, gen) -> Trace:
    return Trace.from_steps(tag, gen)


def ops(trace: Trace):
    return [s.operation for s in trace]


# =============================================================================
# Sorting
# =============================================================================

class TestSorting:

    @pytest.mark.parametrize("sort", SORTS)
    def test_default_values_sorted(self, sort):
        final = run("sorting", sort()).final
        assert final.is_complete
        assert list(final.snapshot.array) == sorted(DEFAULT_VALUES)
        assert final.snapshot.sorted_indices == tuple(range(len(DEFAULT_VALUES)))

    @pytest.mark.parametrize("sort", SORTS)
    def test_random_arrays(self, sort):
        rng = random.Random(1)
        for _ in range(20):
            values = [rng.randint(-50, 50) for _ in range(rng.randint(1, 15))]
            trace = run("sorting", sort(values))
            assert list(trace.final.snapshot.array) == sorted(values)
            assert trace.final.snapshot.counters["comparisons"] == ops(trace).count("compare")

    @pytest.mark.parametrize("sort", SORTS)
    def test_empty_array(self, sort):
        trace = run("sorting", sort([]))
        assert len(trace) == 1
        assert trace.final.operation == "empty"
        assert trace.final.is_error

    @pytest.mark.parametrize("sort", SORTS)
    def test_bad_values(self, sort):
        with pytest.raises(InvalidInputError):
            sort([3, "x", 1])

    def test_accepts_comma_separated_text(self):
        final = run("sorting-bubble", bubble_sort("5, 3, 1")).final
        assert final.snapshot.array == (1, 3, 5)

    def test_bubble_swaps_equal_inversions(self):
        final = run("sorting-bubble", bubble_sort(DEFAULT_VALUES)).final
        assert final.snapshot.counters["swaps"] == 14

    def test_bubble_early_exit(self):
        trace = run("sorting-bubble", bubble_sort([1, 2, 3, 4]))
        assert ops(trace) == ["start", "compare", "compare", "compare", "pass-complete", "complete"]
        assert trace.final.snapshot.counters == {"comparisons": 3, "swaps": 0, "pass": 1}

    def test_bubble_swap_step_shows_swapped_pair(self):
        trace = run("sorting-bubble", bubble_sort([2, 1]))
        swap = next(s for s in trace if s.operation == "swap")
        assert swap.snapshot.array == (1, 2)
        assert swap.snapshot.swapping == (0, 1)

    def test_insertion_shifts_equal_inversions(self):
        final = run("sorting-insertion", insertion_sort(DEFAULT_VALUES)).final
        assert final.snapshot.counters["shifts"] == 14

    def test_selection_swaps_at_most_n_minus_one(self):
        final = run("sorting-selection", selection_sort(DEFAULT_VALUES)).final
        assert final.snapshot.counters["swaps"] <= len(DEFAULT_VALUES) - 1

    def test_earlier_steps_keep_their_arrays(self):
        trace = run("sorting-bubble", bubble_sort([3, 2, 1]))
        assert trace[0].snapshot.array == (3, 2, 1)


class TestMergeSort:

    def test_small_example(self):
        trace = run("sorting-merge", merge_sort([38, 27, 43, 3]))
        final = trace.final
        assert final.is_complete
        assert final.snapshot.array == (3, 27, 38, 43)
        assert final.snapshot.counters == {"comparisons": 5, "writes": 8}
        assert ops(trace).count("divide") == 3
        assert ops(trace)[:3] == ["start", "divide", "divide"]

    def test_divide_step_shows_window(self):
        divide = next(s for s in run("sorting-merge", merge_sort([4, 3, 2, 1])) if s.operation == "divide")
        assert (divide.snapshot.low, divide.snapshot.mid, divide.snapshot.high) == (0, 1, 3)

    def test_random_arrays(self):
        rng = random.Random(2)
        for _ in range(20):
            values = [rng.randint(-50, 50) for _ in range(rng.randint(1, 15))]
            trace = run("sorting-merge", merge_sort(values))
            placed = ops(trace).count("place-left") + ops(trace).count("place-right")
            assert list(trace.final.snapshot.array) == sorted(values)
            assert trace.final.snapshot.counters["comparisons"] == placed

    def test_single_element(self):
        trace = run("sorting-merge", merge_sort([7]))
        assert ops(trace) == ["start", "complete"]

    def test_empty_array(self):
        trace = run("sorting-merge", merge_sort([]))
        assert trace.final.operation == "empty"
        assert trace.final.is_error


class TestQuickSort:

    def test_default_values(self):
        final = run("sorting-quick", quick_sort()).final
        assert final.is_complete
        assert list(final.snapshot.array) == sorted(QUICK_DEFAULT_VALUES)
        assert final.snapshot.sorted_indices == tuple(range(len(QUICK_DEFAULT_VALUES)))

    def test_random_arrays(self):
        rng = random.Random(3)
        for _ in range(20):
            values = [rng.randint(-50, 50) for _ in range(rng.randint(1, 15))]
            trace = run("sorting-quick", quick_sort(values))
            counters = trace.final.snapshot.counters
            assert list(trace.final.snapshot.array) == sorted(values)
            assert counters["comparisons"] == ops(trace).count("compare")
            assert counters["swaps"] == ops(trace).count("swap") + ops(trace).count("place-pivot")

    def test_every_pivot_lands_in_place(self):
        trace = run("sorting-quick", quick_sort([3, 1, 2]))
        for step in trace:
            if step.operation == "pivot-placed":
                p = step.snapshot.pivot_index
                assert step.snapshot.array[p] == sorted([3, 1, 2])[p]

    def test_sorted_input_is_the_worst_case(self):
        values = list(range(200))
        final = run("sorting-quick", quick_sort(values)).final
        assert final.is_complete
        assert final.snapshot.counters["comparisons"] == 200 * 199 // 2

    def test_empty_array(self):
        assert run("sorting-quick", quick_sort([])).final.operation == "empty"


# =============================================================================
# Searching
# =============================================================================

class TestLinearSearch:

    def test_found(self):
        final = run("search-linear", linear_search(target=32)).final
        assert final.operation == "found"
        assert final.is_complete
        assert final.snapshot.found_index == 3
        assert final.snapshot.counters["comparisons"] == 4

    def test_not_found(self):
        final = run("search-linear", linear_search(target=1000)).final
        assert final.operation == "not-found"
        assert final.is_error
        assert final.snapshot.counters["comparisons"] == 10

    def test_empty(self):
        final = run("search-linear", linear_search([], 3)).final
        assert final.operation == "empty"
        assert final.is_error

    def test_missing_target(self):
        with pytest.raises(InvalidInputError):
            linear_search([1, 2, 3])


class TestBinarySearch:

    def test_found_at_first_midpoint(self):
        trace = run("search-binary", binary_search(target=23))
        assert ops(trace) == ["start", "compare", "found"]
        assert trace.final.snapshot.found_index == 5

    def test_found_after_eliminations(self):
        trace = run("search-binary", binary_search(target=67))
        assert ops(trace).count("eliminate-left") == 2
        assert trace.final.snapshot.found_index == 9
        assert trace.final.snapshot.counters["comparisons"] == 3

    def test_window_is_recorded(self):
        trace = run("search-binary", binary_search(target=67))
        first = trace[1]
        assert (first.snapshot.low, first.snapshot.high, first.snapshot.mid) == (0, 10, 5)

    def test_not_found(self):
        final = run("search-binary", binary_search(target=4)).final
        assert final.operation == "not-found"
        assert final.is_error
        assert final.snapshot.counters["comparisons"] == 4

    def test_unsorted_input_rejected(self):
        with pytest.raises(InvalidInputError):
            binary_search([3, 1, 2], 1)

    def test_empty(self):
        assert run("search-binary", binary_search([], 1)).final.is_error
