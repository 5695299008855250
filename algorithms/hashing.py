"""
hashing.py — Hash Table Insert & Search
=========================================
Integer keys, `hash(k) = k mod size`, and one of two collision policies:

    chaining : every bucket keeps a chain; a new key joins the end of it
    probing  : one key per slot; a taken slot sends the key on to the next
               slot, wrapping round (linear probing)

The table is rebuilt, untraced, from the keys a previous run left behind
(in insertion order), so the same keys, size and policy always give the
same layout.

Yields a Step at:
  insert : the computed hash, every stored key compared on the way
           (each one a collision), the key placed
  search : the computed hash, every stored key compared, found / not found

A duplicate key, a full probing table and a missing key end in an
`is_error` Step.  Duplicate or overflowing input keys are malformed
input and raise InvalidInputError.
"""

from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from algorithms.errors import InvalidInputError, parse_values, require_capacity, require_int
from algorithms.step import HashPayload, Step
from config import load_settings


METHODS = ("chaining", "probing")
DEFAULT_KEYS = (15, 25, 35, 10, 33, 12)


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
INSERT_PSEUDOCODE: List[str] = [
    "def insert(key):",                                       # 0
    "    h ← key mod size",                                   # 1
    "    if chaining:",                                       # 2
    "        if key in bucket[h]: DUPLICATE",                 # 3
    "        bucket[h].append(key)",                          # 4
    "    else:   # linear probing",                           # 5
    "        for i in 0 .. size−1:",                          # 6
    "            s ← (h + i) mod size",                       # 7
    "            if slot[s] is empty: slot[s] ← key; return", # 8
    "            if slot[s] = key: DUPLICATE",                # 9
    "        TABLE FULL",                                     # 10
]

SEARCH_PSEUDOCODE: List[str] = [
    "def search(key):",                                       # 0
    "    h ← key mod size",                                   # 1
    "    if chaining:",                                       # 2
    "        for pos, k in bucket[h]: if k = key: return (h, pos)", # 3
    "        return NOT FOUND",                               # 4
    "    for i in 0 .. size−1:",                              # 5
    "        s ← (h + i) mod size",                           # 6
    "        if slot[s] is empty: return NOT FOUND",          # 7
    "        if slot[s] = key: return (s, 0)",                # 8
    "    return NOT FOUND",                                   # 9
]


class _Table:
    """Buckets, insertion order and counters for one run."""

    def __init__(self, size: int, method: str):
        self.method = method
        self.buckets:  List[List[int]] = [[] for _ in range(size)]
        self.keys:     List[int]       = []
        self.counters: Dict[str, int]  = {"collisions": 0, "probes": 0, "comparisons": 0}

    @property
    def size(self) -> int:
        return len(self.buckets)

    def hash(self, key: int) -> int:
        return key % self.size

    def place(self, key: int) -> None:
        """Untraced insert used to rebuild the table."""
        h = self.hash(key)
        if self.method == "chaining":
            self.buckets[h].append(key)
        else:
            slot = next(s for s in ((h + i) % self.size for i in range(self.size)) if not self.buckets[s])
            self.buckets[slot].append(key)
        self.keys.append(key)

    def step(
        self,
        description: str,
        operation: str,
        line: int,
        highlighted: int = -1,
        probed: Sequence[int] = (),
        target: Optional[int] = None,
        found_at: Optional[Tuple[int, int]] = None,
        is_error: bool = False,
        is_complete: bool = False,
    ) -> Step:
        return Step(
            description=description,
            operation=operation,
            snapshot=HashPayload(
                buckets=tuple(tuple(b) for b in self.buckets),
                keys=tuple(self.keys),
                method=self.method,
                highlighted=highlighted,
                probed=tuple(probed),
                target=target,
                found_at=found_at,
                counters=dict(self.counters),
            ),
            is_error=is_error,
            is_complete=is_complete,
            pseudocode_line=line,
        )


def _prepare(items, capacity, method) -> _Table:
    if method not in METHODS:
        raise InvalidInputError(f"method must be one of {list(METHODS)}, got {method!r}")
    size = load_settings().hash_table_size if capacity is None else require_capacity(capacity, "table size")
    keys = parse_values(DEFAULT_KEYS if items is None else items, "keys")
    if len(set(keys)) != len(keys):
        raise InvalidInputError("keys must not repeat")
    if method == "probing" and len(keys) > size:
        raise InvalidInputError(f"{len(keys)} keys do not fit a probing table of size {size}")
    table = _Table(size, method)
    for key in keys:
        table.place(key)
    return table


# ---------------------------------------------------------------------------
# Insert
# ---------------------------------------------------------------------------
def hash_insert(items=None, value=None, capacity=None, method: str = "chaining") -> Iterator[Step]:
    """
    Args:
        items    : Keys already stored, in insertion order.
        value    : Key to insert.
        capacity : Table size (bucket count).
        method   : "chaining" or "probing".
    """
    value = require_int(value)
    table = _prepare(items, capacity, method)
    if method == "chaining":
        return _insert_chained(table, value)
    return _insert_probed(table, value)


def _insert_chained(t: _Table, key: int) -> Iterator[Step]:
    h = t.hash(key)
    yield t.step(f"Inserting {key}: hash({key}) = {key} % {t.size} = {h}", "hash", 1,
                 highlighted=h, target=key)

    for pos, stored in enumerate(t.buckets[h]):
        t.counters["comparisons"] += 1
        if stored == key:
            yield t.step(f"Key {key} already exists in bucket {h} at position {pos}", "duplicate", 3,
                         highlighted=h, target=key, is_error=True)
            return
        yield t.step(f"Collision at bucket {h}: comparing {key} with {stored}", "compare", 3,
                     highlighted=h, target=key)

    if t.buckets[h]:
        t.counters["collisions"] += 1
    t.buckets[h].append(key)
    t.keys.append(key)
    yield t.step(
        f"Inserted {key} at bucket {h} using hash({key}) = {key} % {t.size} = {h}", "insert", 4,
        highlighted=h, target=key, is_complete=True,
    )


def _insert_probed(t: _Table, key: int) -> Iterator[Step]:
    h = t.hash(key)
    yield t.step(f"Inserting {key}: hash({key}) = {key} % {t.size} = {h}", "hash", 1,
                 highlighted=h, target=key)

    probed: List[int] = []
    for i in range(t.size):
        slot = (h + i) % t.size
        probed.append(slot)
        t.counters["probes"] += 1
        if not t.buckets[slot]:
            t.buckets[slot].append(key)
            t.keys.append(key)
            if i == 0:
                description = f"Inserted {key} at bucket {slot} using hash({key}) = {key} % {t.size} = {h}"
            else:
                description = f"Inserted {key} at bucket {slot} after {i} probe(s) (collision resolved)"
            yield t.step(description, "insert", 8, highlighted=slot, probed=probed, target=key, is_complete=True)
            return

        stored = t.buckets[slot][0]
        t.counters["comparisons"] += 1
        if stored == key:
            yield t.step(f"Key {key} already exists at bucket {slot}", "duplicate", 9,
                         highlighted=slot, probed=probed, target=key, is_error=True)
            return
        t.counters["collisions"] += 1
        yield t.step(
            f"Bucket {slot} holds {stored} - probing bucket {(slot + 1) % t.size}", "probe", 7,
            highlighted=slot, probed=probed, target=key,
        )

    yield t.step(f"Hash table is full! Cannot insert {key}", "overflow", 10,
                 probed=probed, target=key, is_error=True)


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
def hash_search(items=None, value=None, capacity=None, method: str = "chaining") -> Iterator[Step]:
    value = require_int(value)
    table = _prepare(items, capacity, method)
    if method == "chaining":
        return _search_chained(table, value)
    return _search_probed(table, value)


def _search_chained(t: _Table, key: int) -> Iterator[Step]:
    h = t.hash(key)
    yield t.step(f"Searching for {key}. Calculated hash({key}) = {key} % {t.size} = {h}", "search-start", 1,
                 highlighted=h, target=key)

    for pos, stored in enumerate(t.buckets[h]):
        t.counters["comparisons"] += 1
        yield t.step(f"Comparing {key} with {stored} at position {pos}", "compare", 3,
                     highlighted=h, target=key)
        if stored == key:
            yield t.step(f"Found {key} in bucket {h} at position {pos}", "found", 3,
                         highlighted=h, target=key, found_at=(h, pos), is_complete=True)
            return

    yield t.step(f"{key} not found in bucket {h}", "not-found", 4, highlighted=h, target=key, is_error=True)


def _search_probed(t: _Table, key: int) -> Iterator[Step]:
    h = t.hash(key)
    yield t.step(f"Searching for {key}. Calculated hash({key}) = {key} % {t.size} = {h}", "search-start", 1,
                 highlighted=h, target=key)

    probed: List[int] = []
    for i in range(t.size):
        slot = (h + i) % t.size
        probed.append(slot)
        t.counters["probes"] += 1
        if not t.buckets[slot]:
            yield t.step(f"{key} not found: bucket {slot} is empty", "not-found", 7,
                         highlighted=slot, probed=probed, target=key, is_error=True)
            return
        stored = t.buckets[slot][0]
        t.counters["comparisons"] += 1
        yield t.step(f"Comparing {key} with {stored} at bucket {slot}", "compare", 8,
                     highlighted=slot, probed=probed, target=key)
        if stored == key:
            yield t.step(f"Found {key} in bucket {slot} at position 0", "found", 8,
                         highlighted=slot, probed=probed, target=key, found_at=(slot, 0), is_complete=True)
            return

    yield t.step(f"{key} not found after probing every bucket", "not-found", 9,
                 probed=probed, target=key, is_error=True)
