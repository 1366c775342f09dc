"""
disjoint_set.py — Union-Find for Kruskal
=========================================
Path-compressing find, union by rank.  On a rank tie the second root is
attached under the first, which keeps the structure (and therefore every
`groups()` snapshot) a pure function of the union order.
"""

from typing import Dict, Iterable, List, Tuple


class DisjointSet:

    def __init__(self, items: Iterable[int]):
        self._order:  List[int]      = list(items)
        self.parent:  Dict[int, int] = {i: i for i in self._order}
        self.rank:    Dict[int, int] = {i: 0 for i in self._order}

    def find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        # path compression
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, a: int, b: int) -> bool:
        """Merge the sets holding a and b.  False if they were already one set."""
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        if self.rank[ra] < self.rank[rb]:
            self.parent[ra] = rb
        elif self.rank[ra] > self.rank[rb]:
            self.parent[rb] = ra
        else:
            self.parent[rb] = ra
            self.rank[ra] += 1
        return True

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def groups(self) -> Tuple[Tuple[int, ...], ...]:
        """Current components, each sorted, ordered by their smallest member."""
        buckets: Dict[int, List[int]] = {}
        for item in self._order:
            buckets.setdefault(self.find(item), []).append(item)
        return tuple(sorted((tuple(sorted(b)) for b in buckets.values()), key=lambda g: g[0]))
