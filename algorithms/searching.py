"""
searching.py — Linear & Binary Search
=======================================
Linear search yields a Step at the start, at every element checked, and
for every mismatch; it ends on "found" (complete) or after the last
element (error).

Binary search requires sorted input (rejected otherwise) and yields a
Step at the start, at every midpoint probe, and for every half
eliminated; it ends on "found" or once low > high.

`snapshot.counters["comparisons"]` counts element checks.
"""

from typing import Iterator, List

from algorithms.errors import InvalidInputError, parse_values, require_int
from algorithms.step import ArrayPayload, Step


DEFAULT_LINEAR_VALUES = (34, 7, 23, 32, 5, 62, 32, 12, 9, 45)
DEFAULT_BINARY_VALUES = (2, 5, 8, 12, 16, 23, 38, 45, 56, 67, 78)


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
LINEAR_PSEUDOCODE: List[str] = [
    "def linear_search(a, target):",          # 0
    "    for i in 0 .. n−1:",                 # 1
    "        if a[i] == target: return i",    # 2
    "    return NOT FOUND",                   # 3
]

BINARY_PSEUDOCODE: List[str] = [
    "def binary_search(a, target):",          # 0
    "    low ← 0;  high ← n − 1",             # 1
    "    while low ≤ high:",                  # 2
    "        mid ← (low + high) // 2",        # 3
    "        if a[mid] == target: return mid",# 4
    "        if a[mid] < target: low ← mid + 1",   # 5
    "        else: high ← mid − 1",           # 6
    "    return NOT FOUND",                   # 7
]


def _empty(target: int) -> Iterator[Step]:
    yield Step(
        description=f"Array is empty - {target} cannot be found",
        operation="empty",
        snapshot=ArrayPayload(array=(), target=target),
        is_error=True,
    )


# ---------------------------------------------------------------------------
# Linear search
# ---------------------------------------------------------------------------
def linear_search(values=None, target=None) -> Iterator[Step]:
    values = parse_values(DEFAULT_LINEAR_VALUES if values is None else values)
    target = require_int(target, "target")
    if not values:
        return _empty(target)
    return _linear(values, target)


def _linear(values: List[int], target: int) -> Iterator[Step]:
    array = tuple(values)
    comparisons = 0

    def step(description, operation, line, **fields) -> Step:
        return Step(
            description=description,
            operation=operation,
            snapshot=ArrayPayload(array=array, target=target, counters={"comparisons": comparisons},
                                  **fields),
            pseudocode_line=line,
        )

    yield step(f"Starting Linear Search for {target} in array of {len(array)} elements", "start", 0)

    for i, value in enumerate(array):
        comparisons += 1
        yield step(f"Checking element {value} at index {i}", "compare", 2,
                   current_index=i, comparing=(i,))
        if value == target:
            yield Step(
                description=f"Found {target} at index {i}! Search completed in {comparisons} comparisons",
                operation="found",
                snapshot=ArrayPayload(array=array, target=target, current_index=i, found_index=i,
                                      counters={"comparisons": comparisons}),
                is_complete=True,
                pseudocode_line=2,
            )
            return
        yield step(f"{value} ≠ {target}, continue searching...", "mismatch", 1,
                   current_index=i)

    yield Step(
        description=f"{target} not found in array. Searched all {len(array)} elements",
        operation="not-found",
        snapshot=ArrayPayload(array=array, target=target,
                              counters={"comparisons": comparisons}),
        is_error=True,
        pseudocode_line=3,
    )


# ---------------------------------------------------------------------------
# Binary search
# ---------------------------------------------------------------------------
def binary_search(values=None, target=None) -> Iterator[Step]:
    values = parse_values(DEFAULT_BINARY_VALUES if values is None else values)
    target = require_int(target, "target")
    if any(a > b for a, b in zip(values, values[1:])):
        raise InvalidInputError("binary search needs the values sorted in ascending order")
    if not values:
        return _empty(target)
    return _binary(values, target)


def _binary(values: List[int], target: int) -> Iterator[Step]:
    array = tuple(values)
    comparisons = 0
    low, high = 0, len(array) - 1

    def step(description, operation, line, mid=None, found=-1, is_error=False, is_complete=False) -> Step:
        return Step(
            description=description,
            operation=operation,
            snapshot=ArrayPayload(
                array=array, target=target, low=low, high=high, mid=mid,
                current_index=mid if mid is not None else -1, found_index=found,
                comparing=(mid,) if mid is not None else (),
                counters={"comparisons": comparisons},
            ),
            is_error=is_error,
            is_complete=is_complete,
            pseudocode_line=line,
        )

    yield step(
        f"Starting Binary Search for {target}. Array is sorted. Setting low={low}, high={high}",
        "start", 1,
    )

    while low <= high:
        mid = (low + high) // 2
        comparisons += 1
        yield step(
            f"Calculating mid = floor(({low} + {high}) / 2) = {mid}. Checking {array[mid]}",
            "compare", 3, mid=mid,
        )
        if array[mid] == target:
            yield step(
                f"Found {target} at index {mid}! Binary search completed in {comparisons} comparisons",
                "found", 4, mid=mid, found=mid, is_complete=True,
            )
            return
        if array[mid] < target:
            low = mid + 1
            yield step(f"{array[mid]} < {target}. Eliminating left half. New low = {low}", "eliminate-left", 5,
                       mid=mid)
        else:
            high = mid - 1
            yield step(f"{array[mid]} > {target}. Eliminating right half. New high = {high}", "eliminate-right", 6,
                       mid=mid)

    yield step(
        f"{target} not found. Low > High ({low} > {high}). "
        f"Binary search completed in {comparisons} comparisons",
        "not-found", 7, is_error=True,
    )
