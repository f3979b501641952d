"""Disjoint-set forest over entity indices, scoped to a single graph build."""


class UnionFind:
    """Union-find with path compression."""

    def __init__(self, size: int):
        self._parent = list(range(size))

    def find(self, x: int) -> int:
        root = x
        while self._parent[root] != root:
            root = self._parent[root]
        # Path compression
        while self._parent[x] != root:
            self._parent[x], x = root, self._parent[x]
        return root

    def union(self, x: int, y: int) -> bool:
        """Merge the sets holding x and y. Returns False if already joined."""
        root_x, root_y = self.find(x), self.find(y)
        if root_x == root_y:
            return False
        self._parent[root_x] = root_y
        return True

    def connected(self, x: int, y: int) -> bool:
        return self.find(x) == self.find(y)

    def components(self) -> dict[int, list[int]]:
        """Members of each set keyed by root, in index order."""
        groups: dict[int, list[int]] = {}
        for i in range(len(self._parent)):
            groups.setdefault(self.find(i), []).append(i)
        return groups
