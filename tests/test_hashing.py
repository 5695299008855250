"""
test_hashing.py

Tests for hash table insert / search with chaining and linear probing.
The default keys (15, 25, 35, 10, 33, 12) in a table of 7 lay out as

    chaining : 0:[35] 1:[15] 3:[10] 4:[25] 5:[33, 12]
    probing  : 0:35 1:15 3:10 4:25 5:33 6:12   (slot 2 free)
"""

import pytest

from algorithms.errors import InvalidInputError
from algorithms.hashing import DEFAULT_KEYS, hash_insert, hash_search
from algorithms.step import Trace
from config import load_settings


def run(tag, gen) -> Trace:
    return Trace.from_steps(tag, gen)


def ops(trace: Trace):
    return [s.operation for s in trace]


# =============================================================================
# Chaining
# =============================================================================

class TestChaining:

    def test_default_layout(self):
        first = run("hash-search", hash_search(value=35))[0]
        assert first.snapshot.buckets == ((35,), (15,), (), (10,), (25,), (33, 12), ())
        assert first.snapshot.table_size == 7

    def test_insert_joins_the_chain(self):
        trace = run("hash-insert", hash_insert(value=22))
        final = trace.final
        assert ops(trace) == ["hash", "compare", "insert"]
        assert final.is_complete
        assert final.snapshot.buckets[1] == (15, 22)
        assert final.snapshot.keys == DEFAULT_KEYS + (22,)
        assert final.snapshot.counters["collisions"] == 1
        assert final.description == "Inserted 22 at bucket 1 using hash(22) = 22 % 7 = 1"

    def test_insert_into_empty_bucket(self):
        trace = run("hash-insert", hash_insert(value=9))
        assert ops(trace) == ["hash", "insert"]
        assert trace.final.snapshot.counters["collisions"] == 0

    def test_duplicate_insert(self):
        trace = run("hash-insert", hash_insert(value=12))
        assert ops(trace) == ["hash", "compare", "duplicate"]
        assert trace.final.is_error
        assert trace.final.snapshot.keys == DEFAULT_KEYS

    def test_search_found(self):
        trace = run("hash-search", hash_search(value=12))
        assert ops(trace) == ["search-start", "compare", "compare", "found"]
        assert trace.final.snapshot.found_at == (5, 1)
        assert trace.final.snapshot.counters["comparisons"] == 2

    def test_search_missing(self):
        final = run("hash-search", hash_search(value=40)).final
        assert final.operation == "not-found"
        assert final.is_error
        assert final.snapshot.found_at is None

    def test_negative_keys_wrap(self):
        final = run("hash-insert", hash_insert([], -3, capacity=5)).final
        assert final.snapshot.buckets[2] == (-3,)


# =============================================================================
# Linear probing
# =============================================================================

class TestProbing:

    def test_default_layout(self):
        first = run("hash-search", hash_search(value=35, method="probing"))[0]
        assert first.snapshot.buckets == ((35,), (15,), (), (10,), (25,), (33,), (12,))
        assert first.snapshot.method == "probing"

    def test_insert_resolves_collision(self):
        trace = run("hash-insert", hash_insert(value=22, method="probing"))
        final = trace.final
        assert ops(trace) == ["hash", "probe", "insert"]
        assert final.snapshot.buckets[2] == (22,)
        assert final.snapshot.probed == (1, 2)
        assert "after 1 probe(s)" in final.description

    def test_full_table(self):
        trace = run("hash-insert", hash_insert(DEFAULT_KEYS + (22,), 29, method="probing"))
        assert ops(trace) == ["hash"] + ["probe"] * 7 + ["overflow"]
        assert trace.final.is_error
        assert trace.final.description == "Hash table is full! Cannot insert 29"

    def test_duplicate_insert(self):
        final = run("hash-insert", hash_insert(value=12, method="probing")).final
        assert final.operation == "duplicate"
        assert final.snapshot.highlighted == 6

    def test_search_follows_the_run(self):
        trace = run("hash-search", hash_search(value=12, method="probing"))
        assert ops(trace) == ["search-start", "compare", "compare", "found"]
        assert trace.final.snapshot.found_at == (6, 0)

    def test_search_stops_at_empty_slot(self):
        final = run("hash-search", hash_search(value=40, method="probing")).final
        assert final.operation == "not-found"
        assert final.snapshot.highlighted == 2
        assert final.snapshot.probed == (5, 6, 0, 1, 2)


# =============================================================================
# Input handling
# =============================================================================

class TestHashInput:

    @pytest.mark.parametrize("fn", [hash_insert, hash_search])
    def test_unknown_method_rejected(self, fn):
        with pytest.raises(InvalidInputError):
            fn(value=1, method="cuckoo")

    def test_repeated_keys_rejected(self):
        with pytest.raises(InvalidInputError):
            hash_insert([1, 8, 1], 3)

    def test_too_many_keys_for_probing(self):
        with pytest.raises(InvalidInputError):
            hash_search([1, 2, 3], 1, capacity=2, method="probing")
        assert run("hash-search", hash_search([1, 2, 3], 1, capacity=2)).final.operation == "found"

    def test_value_required(self):
        with pytest.raises(InvalidInputError):
            hash_insert()

    def test_table_size_from_environment(self, monkeypatch):
        monkeypatch.setenv("ALGOVIZ_HASH_TABLE_SIZE", "11")
        load_settings.cache_clear()
        first = run("hash-search", hash_search([], 1))[0]
        assert first.snapshot.table_size == 11
