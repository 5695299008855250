"""
union_find.py — Disjoint-Set Forest
====================================
Union-Find with path compression and union by rank, keyed by node id.
Kruskal's MST uses it to reject edges that would close a cycle.
"""

from typing import Dict, Hashable, Iterable


class UnionFind:

    def __init__(self, items: Iterable[Hashable] = ()):
        self.parent: Dict[Hashable, Hashable] = {}
        self.rank:   Dict[Hashable, int]      = {}
        for item in items:
            self.add(item)

    def add(self, item: Hashable) -> None:
        if item not in self.parent:
            self.parent[item] = item
            self.rank[item]   = 0

    def find(self, item: Hashable) -> Hashable:
        """Root of item's set; every node on the way is re-pointed at the root."""
        self.add(item)
        root = item
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[item] != root:
            self.parent[item], item = root, self.parent[item]
        return root

    def union(self, a: Hashable, b: Hashable) -> bool:
        """Merge the sets of a and b.  False if they were already joined."""
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return False
        if self.rank[root_a] < self.rank[root_b]:
            self.parent[root_a] = root_b
        elif self.rank[root_a] > self.rank[root_b]:
            self.parent[root_b] = root_a
        else:
            self.parent[root_b] = root_a
            self.rank[root_a] += 1
        return True

    def connected(self, a: Hashable, b: Hashable) -> bool:
        return self.find(a) == self.find(b)

    def components(self) -> int:
        return len({self.find(item) for item in self.parent})

    def __len__(self) -> int:
        return len(self.parent)
