"""
Symmetric sparse weight matrix with adjacency lists.

The edge-pushing sweep keeps the second-order weights W between tape nodes
in this structure:
- map: Dict[(i,j), val] - canonical storage, upper triangular (i <= j)
- adj: Dict[i, Set[j]]  - neighbours of i, so the nonzeros of row i are
  found in O(degree(i)) instead of O(n)
"""

import numpy as np
from typing import Dict, Iterator, List, Set, Tuple
from collections import defaultdict

from ..config import config


class SymmSparseAdjList:
    """
    Symmetric sparse matrix with O(degree) neighbour lookup.

    An entry is removed, together with its adjacency links, when a sum
    cancels: the total is at most `tolerance` times the larger of the two
    summands in magnitude.
    """

    def __init__(self, n: int, tolerance: float = None):
        """
        Args:
            n: Matrix dimension
            tolerance: Relative cancellation threshold; defaults to config.zero_tolerance
        """
        self.n = n
        self.tolerance = config.zero_tolerance if tolerance is None else tolerance
        self.map: Dict[Tuple[int, int], float] = {}
        self.adj: Dict[int, Set[int]] = defaultdict(set)

    @staticmethod
    def _key(i: int, j: int) -> Tuple[int, int]:
        return (i, j) if i <= j else (j, i)

    def _check(self, i: int, j: int):
        if not (0 <= i < self.n and 0 <= j < self.n):
            raise IndexError(f"entry ({i}, {j}) outside a {self.n}x{self.n} matrix")

    def _unlink(self, i: int, j: int):
        for a, b in ((i, j), (j, i)):
            links = self.adj.get(a)
            if links is None:
                continue
            links.discard(b)
            if not links:
                del self.adj[a]

    def add(self, i: int, j: int, val: float) -> None:
        """Accumulate `val` into W(i,j) = W(j,i). Zero increments are skipped."""
        if val == 0:
            return
        self._check(i, j)
        key = self._key(i, j)

        if key in self.map:
            old = self.map[key]
            total = old + val
            if abs(total) <= self.tolerance * max(abs(old), abs(val)):
                # Entry cancelled out
                del self.map[key]
                self._unlink(i, j)
            else:
                self.map[key] = total
        else:
            self.map[key] = val
            self.adj[i].add(j)
            self.adj[j].add(i)

    def get(self, i: int, j: int) -> float:
        """W(i,j), or 0 if not stored."""
        self._check(i, j)
        return self.map.get(self._key(i, j), 0.0)

    def get_neighbors(self, i: int) -> List[Tuple[int, float]]:
        """All (j, W(i,j)) with W(i,j) != 0, including j == i."""
        return [(j, self.map[self._key(i, j)]) for j in self.adj.get(i, ())]

    def clear_row_col(self, idx: int) -> None:
        """Remove row and column idx."""
        for j in list(self.adj.get(idx, ())):
            self.map.pop(self._key(idx, j), None)
            self._unlink(idx, j)

    def submatrix(self, indices) -> np.ndarray:
        """Dense symmetric block W[indices][:, indices]."""
        m = len(indices)
        out = np.zeros((m, m))
        for a, i in enumerate(indices):
            for b in range(a, m):
                out[a, b] = out[b, a] = self.get(i, indices[b])
        return out

    def to_dense(self) -> np.ndarray:
        """Dense n x n symmetric matrix (for testing/debugging)."""
        dense = np.zeros((self.n, self.n))
        for (i, j), val in self.map.items():
            dense[i, j] = val
            dense[j, i] = val
        return dense

    def items(self) -> Iterator[Tuple[Tuple[int, int], float]]:
        """Upper triangular nonzeros as ((i,j), value) pairs."""
        return iter(self.map.items())

    def nnz(self) -> int:
        """Number of nonzero entries, counting symmetric pairs twice."""
        return sum(1 if i == j else 2 for (i, j) in self.map)
