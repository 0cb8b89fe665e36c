# manifold_ad/geometry/metric.py
from __future__ import annotations
from typing import Any, Callable, List, Optional, Sequence

import numpy as np

from ..ad import forward
from ..ad.core import seeds
from ..ad.core.tape import GradientTape
from ..ad.core.var import value
from .. import linalg

MIN_DIMENSION = 2
MAX_DIMENSION = 4


def _as_callable(c) -> Callable:
    if callable(c):
        return c
    return lambda tape, x, _c=c: _c


class MetricTensorField:
    """
    Metric tensor field g_ij(x) on a chart with 2 to 4 coordinates.

    Each component is a callable `f(tape, x)` written with manifold_ad.ops,
    or a constant. The same callables are evaluated on Variables (reverse
    mode), on Duals with `tape=None` (forward mode) and on plain numbers.

    Attributes
    ----------
    dimension : int
        Number of coordinates n; components form an n x n array.
    """

    def __init__(self, components: Sequence[Sequence[Any]]):
        n = len(components)
        if not MIN_DIMENSION <= n <= MAX_DIMENSION:
            raise ValueError(f"metric dimension must be between {MIN_DIMENSION} "
                             f"and {MAX_DIMENSION}, got {n}")
        if any(len(row) != n for row in components):
            raise ValueError(f"metric components must form a {n}x{n} array")
        self.dimension = n
        self._components: List[List[Callable]] = [
            [_as_callable(c) for c in row] for row in components
        ]

    def _check_index(self, i: int, j: int):
        n = self.dimension
        if not (0 <= i < n and 0 <= j < n):
            raise IndexError(f"component ({i}, {j}) outside a {n}x{n} metric")

    def __getitem__(self, key) -> Callable:
        i, j = key
        self._check_index(i, j)
        return self._components[i][j]

    def __setitem__(self, key, component):
        """Set g_ij and g_ji together."""
        i, j = key
        self._check_index(i, j)
        c = _as_callable(component)
        self._components[i][j] = c
        self._components[j][i] = c

    def _flat(self) -> List[Callable]:
        return [c for row in self._components for c in row]

    def _check_point(self, x) -> None:
        if len(x) != self.dimension:
            raise ValueError(f"point has {len(x)} coordinates, metric has {self.dimension}")

    # ------------------------------------------------------------------ #
    # values
    # ------------------------------------------------------------------ #
    def compute(self, x, tape: Optional[GradientTape] = None) -> np.ndarray:
        """
        g_ij at x as a plain matrix. `x` may hold Variables; only their values
        are used and nothing is recorded on `tape`.
        """
        self._check_point(x)
        n = self.dimension
        xs = [value(xi) for xi in x]
        if tape is None:
            return np.array([[value(c(None, xs)) for c in row] for row in self._components],
                            dtype=float).reshape(n, n)
        with tape.suspend_tracking():
            return np.array([[value(c(tape, xs)) for c in row] for row in self._components],
                            dtype=float).reshape(n, n)

    def inverse(self, x, tape: Optional[GradientTape] = None) -> np.ndarray:
        """g^ij at x; NaM where the metric is singular."""
        return linalg.inverse(self.compute(x, tape))

    # ------------------------------------------------------------------ #
    # derivatives, dg[k, i, j] = ∂_k g_ij
    # ------------------------------------------------------------------ #
    def _reshape(self, J: np.ndarray) -> np.ndarray:
        # J[m, k] with m = i*n + j  ->  dg[k, i, j]
        n = self.dimension
        return J.T.reshape(n, n, n)

    def derivative(self, tape: GradientTape, x) -> np.ndarray:
        """
        ∂_k g_ij by reverse accumulation, one component at a time.

        The metric owns the recording: `tape` is reset first, so sweeping many
        points through one tape keeps it the size of a single point. Handles
        from earlier recordings on `tape` become invalid.
        """
        self._check_point(x)
        xs = [value(xi) for xi in x]
        return self._reshape(seeds.jacobian(tape, self._flat(), xs, reset=True))

    def forward_derivative(self, x) -> np.ndarray:
        """∂_k g_ij by Dual seeding, one pass per coordinate."""
        self._check_point(x)
        flat = self._flat()
        J = forward.jacobian(lambda xs: [c(None, xs) for c in flat],
                             [value(xi) for xi in x])
        return self._reshape(J)

    def derivative_of_inverse(self, tape: Optional[GradientTape], x) -> np.ndarray:
        """
        ∂_k g^ij = -g^ia (∂_k g_ab) g^bj. Uses the tape when one is given,
        forward mode otherwise.
        """
        g_inv = self.inverse(x, tape)
        dg = self.derivative(tape, x) if tape is not None else self.forward_derivative(x)
        return -np.einsum("ia,kab,bj->kij", g_inv, dg, g_inv)
