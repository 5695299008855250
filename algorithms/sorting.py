"""
sorting.py — Comparison Sorts
=============================
Each sort works on a private copy of the input and yields a Step at:

    bubble    : start, every comparison, every swap, end of each pass
                (stops early after a pass with no swaps), complete
    insertion : start, each key taken, every comparison, every shift,
                insertion position found, key inserted, complete
    selection : start, each pass, every comparison, each new minimum,
                the swap, position sorted, complete
    merge     : start, each split, each merge, every element placed or
                copied over, complete
    quick     : start, each pivot chosen, every comparison, every swap,
                pivot placed, one-element ranges, complete

Counters travel in `snapshot.counters`:
    comparisons, swaps (bubble / selection / quick), shifts (insertion),
    writes (merge), pass (the three quadratic sorts)

An empty array ends in a single error Step.
"""

from typing import Dict, Iterator, List, Sequence, Tuple

from algorithms.errors import parse_values
from algorithms.step import ArrayPayload, Step


DEFAULT_VALUES = (64, 34, 25, 12, 22, 11, 90)
QUICK_DEFAULT_VALUES = (10, 7, 8, 9, 1, 5)


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
BUBBLE_PSEUDOCODE: List[str] = [
    "def bubble_sort(a):",                         # 0
    "    for pass in 0 .. n−2:",                   # 1
    "        swapped ← False",                     # 2
    "        for i in 0 .. n−pass−2:",             # 3
    "            if a[i] > a[i+1]:",               # 4
    "                swap(a[i], a[i+1])",          # 5
    "                swapped ← True",              # 6
    "        if not swapped: break",               # 7
    "    return a",                                # 8
]

INSERTION_PSEUDOCODE: List[str] = [
    "def insertion_sort(a):",                      # 0
    "    for i in 1 .. n−1:",                      # 1
    "        key ← a[i];  j ← i − 1",              # 2
    "        while j ≥ 0 and a[j] > key:",         # 3
    "            a[j+1] ← a[j]",                   # 4
    "            j ← j − 1",                       # 5
    "        a[j+1] ← key",                        # 6
    "    return a",                                # 7
]

SELECTION_PSEUDOCODE: List[str] = [
    "def selection_sort(a):",                      # 0
    "    for i in 0 .. n−2:",                      # 1
    "        min ← i",                             # 2
    "        for j in i+1 .. n−1:",                # 3
    "            if a[j] < a[min]: min ← j",       # 4
    "        swap(a[i], a[min])",                  # 5
    "    return a",                                # 6
]

MERGE_PSEUDOCODE: List[str] = [
    "def merge_sort(a, l, r):",                    # 0
    "    if l ≥ r: return",                        # 1
    "    m ← (l + r) // 2",                        # 2
    "    merge_sort(a, l, m);  merge_sort(a, m+1, r)", # 3
    "    L ← a[l..m];  R ← a[m+1..r];  k ← l",    # 4
    "    while L and R are not exhausted:",        # 5
    "        if L[i] ≤ R[j]: a[k] ← L[i];  i ← i+1", # 6
    "        else: a[k] ← R[j];  j ← j+1",         # 7
    "    copy the rest of L, then of R, into a",   # 8
    "    return a",                                # 9
]

QUICK_PSEUDOCODE: List[str] = [
    "def quick_sort(a, lo, hi):",                  # 0
    "    if lo ≥ hi: return",                      # 1
    "    p ← a[hi];  i ← lo − 1",                  # 2
    "    for j in lo .. hi−1:",                    # 3
    "        if a[j] < p:",                        # 4
    "            i ← i + 1;  swap(a[i], a[j])",    # 5
    "    swap(a[i+1], a[hi])",                     # 6
    "    quick_sort(a, lo, i);  quick_sort(a, i+2, hi)", # 7
    "    return a",                                # 8
]


class _ArrayRun:
    """Working array plus running counters; builds ArrayPayload Steps."""

    def __init__(self, values: Sequence[int], *counter_names: str):
        self.array: List[int] = list(values)
        self.sorted_indices: List[int] = []
        self.counters: Dict[str, int] = {name: 0 for name in counter_names}

    def step(self, description: str, operation: str, line: int, is_error: bool = False,
             is_complete: bool = False, **fields) -> Step:
        return Step(
            description=description,
            operation=operation,
            snapshot=ArrayPayload(
                array=tuple(self.array),
                sorted_indices=tuple(sorted(self.sorted_indices)),
                counters=dict(self.counters),
                **fields,
            ),
            is_error=is_error,
            is_complete=is_complete,
            pseudocode_line=line,
        )

    def complete(self, name: str, line: int, moved: str) -> Step:
        self.sorted_indices = list(range(len(self.array)))
        return self.step(
            f"{name} complete! {self.counters['comparisons']} comparisons, {self.counters[moved]} {moved}",
            "complete", line, is_complete=True,
        )


def _empty(name: str) -> Iterator[Step]:
    yield Step(
        description=f"Array is empty - nothing to sort ({name})",
        operation="empty",
        snapshot=ArrayPayload(array=()),
        is_error=True,
    )


# ---------------------------------------------------------------------------
# Bubble sort
# ---------------------------------------------------------------------------
def bubble_sort(values=None) -> Iterator[Step]:
    values = parse_values(DEFAULT_VALUES if values is None else values)
    if not values:
        return _empty("Bubble Sort")
    return _bubble(values)


def _bubble(values: List[int]) -> Iterator[Step]:
    run = _ArrayRun(values, "comparisons", "swaps", "pass")
    a, n = run.array, len(values)
    yield run.step(f"Starting Bubble Sort with {n} elements", "start", 0)

    for p in range(n - 1):
        run.counters["pass"] = p + 1
        swapped = False
        for i in range(n - p - 1):
            run.counters["comparisons"] += 1
            yield run.step(f"Comparing {a[i]} and {a[i + 1]}", "compare", 4, comparing=(i, i + 1))
            if a[i] > a[i + 1]:
                a[i], a[i + 1] = a[i + 1], a[i]
                run.counters["swaps"] += 1
                swapped = True
                yield run.step(f"Swapped {a[i + 1]} and {a[i]}", "swap", 5, swapping=(i, i + 1))

        run.sorted_indices.append(n - p - 1)
        yield run.step(f"Pass {p + 1} complete!", "pass-complete", 7)
        if not swapped:
            break

    yield run.complete("Bubble Sort", 8, "swaps")


# ---------------------------------------------------------------------------
# Insertion sort
# ---------------------------------------------------------------------------
def insertion_sort(values=None) -> Iterator[Step]:
    values = parse_values(DEFAULT_VALUES if values is None else values)
    if not values:
        return _empty("Insertion Sort")
    return _insertion(values)


def _insertion(values: List[int]) -> Iterator[Step]:
    run = _ArrayRun(values, "comparisons", "shifts", "pass")
    a, n = run.array, len(values)
    run.sorted_indices = [0]
    yield run.step(f"Starting Insertion Sort. First element {a[0]} is sorted", "start", 0)

    for i in range(1, n):
        run.counters["pass"] = i
        key = a[i]
        yield run.step(f"Taking element {key} to insert into sorted portion", "take-element", 2,
                       current_index=i)

        j = i - 1
        while j >= 0:
            run.counters["comparisons"] += 1
            yield run.step(f"Comparing {key} with {a[j]} at index {j}", "compare", 3,
                           comparing=(j, j + 1), current_index=j + 1)
            if a[j] > key:
                a[j + 1] = a[j]
                run.counters["shifts"] += 1
                yield run.step(f"{a[j]} > {key}, shifting right", "shift", 4,
                               swapping=(j, j + 1), current_index=j)
                j -= 1
            else:
                yield run.step(f"{a[j]} ≤ {key}, found insertion position", "found-position", 3,
                               current_index=j + 1)
                break

        a[j + 1] = key
        run.sorted_indices = list(range(i + 1))
        yield run.step(
            f"Inserted {key} at position {j + 1}. Sorted portion now extends to index {i}",
            "insert-complete", 6, current_index=j + 1,
        )

    yield run.complete("Insertion Sort", 7, "shifts")


# ---------------------------------------------------------------------------
# Selection sort
# ---------------------------------------------------------------------------
def selection_sort(values=None) -> Iterator[Step]:
    values = parse_values(DEFAULT_VALUES if values is None else values)
    if not values:
        return _empty("Selection Sort")
    return _selection(values)


def _selection(values: List[int]) -> Iterator[Step]:
    run = _ArrayRun(values, "comparisons", "swaps", "pass")
    a, n = run.array, len(values)
    yield run.step(f"Starting Selection Sort with {n} elements", "start", 0)

    for i in range(n - 1):
        run.counters["pass"] = i + 1
        min_idx = i
        yield run.step(f"Finding minimum in unsorted portion starting at index {i}", "start-iteration", 2,
                       current_index=i)

        for j in range(i + 1, n):
            run.counters["comparisons"] += 1
            yield run.step(f"Comparing {a[j]} with current minimum {a[min_idx]}", "compare", 4,
                           comparing=(j, min_idx), current_index=min_idx)
            if a[j] < a[min_idx]:
                min_idx = j
                yield run.step(f"Found new minimum: {a[j]} at index {j}", "new-minimum", 4,
                               current_index=min_idx)

        if min_idx != i:
            a[i], a[min_idx] = a[min_idx], a[i]
            run.counters["swaps"] += 1
            yield run.step(f"Swapped {a[min_idx]} with {a[i]}", "swap", 5, swapping=(i, min_idx))

        run.sorted_indices.append(i)
        yield run.step(f"Position {i} is now sorted with value {a[i]}", "position-sorted", 5)

    yield run.complete("Selection Sort", 6, "swaps")


# ---------------------------------------------------------------------------
# Merge sort
# ---------------------------------------------------------------------------
def merge_sort(values=None) -> Iterator[Step]:
    values = parse_values(DEFAULT_VALUES if values is None else values)
    if not values:
        return _empty("Merge Sort")
    return _merge_sort(values)


def _merge_sort(values: List[int]) -> Iterator[Step]:
    run = _ArrayRun(values, "comparisons", "writes")
    yield run.step(f"Starting Merge Sort with {len(values)} elements", "start", 0)
    yield from _merge_range(run, 0, len(values) - 1)
    yield run.complete("Merge Sort", 9, "writes")


def _merge_range(run: _ArrayRun, left: int, right: int) -> Iterator[Step]:
    # recursion depth is log2(n)
    if left >= right:
        return
    mid = (left + right) // 2
    yield run.step(f"Dividing array from {left} to {right} at midpoint {mid}", "divide", 2,
                   low=left, mid=mid, high=right)
    yield from _merge_range(run, left, mid)
    yield from _merge_range(run, mid + 1, right)
    yield from _merge(run, left, mid, right)


def _merge(run: _ArrayRun, left: int, mid: int, right: int) -> Iterator[Step]:
    a = run.array
    lpart, rpart = a[left:mid + 1], a[mid + 1:right + 1]
    window = dict(low=left, mid=mid, high=right)
    yield run.step(f"Merging {lpart} and {rpart}", "merge-start", 4, **window)

    i = j = 0
    k = left
    while i < len(lpart) and j < len(rpart):
        run.counters["comparisons"] += 1
        if lpart[i] <= rpart[j]:
            a[k] = lpart[i]
            description, operation, line = f"{lpart[i]} ≤ {rpart[j]}, placed {lpart[i]} at position {k}", "place-left", 6
            i += 1
        else:
            a[k] = rpart[j]
            description, operation, line = f"{rpart[j]} < {lpart[i]}, placed {rpart[j]} at position {k}", "place-right", 7
            j += 1
        run.counters["writes"] += 1
        yield run.step(description, operation, line, swapping=(k,), **window)
        k += 1

    for side, rest in (("left", lpart[i:]), ("right", rpart[j:])):
        for value in rest:
            a[k] = value
            run.counters["writes"] += 1
            yield run.step(f"Copying remaining {value} from {side} array", f"copy-{side}", 8,
                           swapping=(k,), **window)
            k += 1


# ---------------------------------------------------------------------------
# Quick sort
# ---------------------------------------------------------------------------
def quick_sort(values=None) -> Iterator[Step]:
    """Lomuto partition with the last element as pivot."""
    values = parse_values(QUICK_DEFAULT_VALUES if values is None else values)
    if not values:
        return _empty("Quick Sort")
    return _quick(values)


def _quick(values: List[int]) -> Iterator[Step]:
    run = _ArrayRun(values, "comparisons", "swaps")
    a, n = run.array, len(values)
    yield run.step(f"Starting Quick Sort with {n} elements", "start", 0)

    # pending (lo, hi) ranges, left range on top
    ranges: List[Tuple[int, int]] = [(0, n - 1)]
    while ranges:
        lo, hi = ranges.pop()
        if lo > hi:
            continue
        if lo == hi:
            run.sorted_indices.append(lo)
            yield run.step(f"Single element {a[lo]} at index {lo} is sorted", "single-element", 1,
                           current_index=lo)
            continue

        pivot = a[hi]
        window = dict(low=lo, high=hi)
        yield run.step(f"Chosen pivot: {pivot} at index {hi}", "choose-pivot", 2, pivot_index=hi, **window)

        i = lo - 1
        for j in range(lo, hi):
            run.counters["comparisons"] += 1
            yield run.step(f"Comparing {a[j]} with pivot {pivot}", "compare", 4,
                           comparing=(j, hi), pivot_index=hi, **window)
            if a[j] < pivot:
                i += 1
                if i != j:
                    a[i], a[j] = a[j], a[i]
                    run.counters["swaps"] += 1
                    yield run.step(f"{a[i]} < {pivot}, swapped with element at index {i}", "swap", 5,
                                   swapping=(i, j), pivot_index=hi, **window)

        p = i + 1
        a[p], a[hi] = a[hi], a[p]
        run.counters["swaps"] += 1
        yield run.step(f"Placed pivot {pivot} at its final position {p}", "place-pivot", 6,
                       swapping=(p, hi), pivot_index=p, **window)
        run.sorted_indices.append(p)
        yield run.step(f"Pivot {pivot} is now in correct position at index {p}", "pivot-placed", 7,
                       pivot_index=p)

        ranges.append((p + 1, hi))
        ranges.append((lo, p - 1))

    yield run.complete("Quick Sort", 8, "swaps")
