# manifold_ad/ad/forward.py
# Forward-mode seeding helpers (independent from the tapes)

from concurrent.futures import Executor
from functools import partial
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..errors import SeedDimensionError
from .dual import Dual
from .hyperdual import HyperDual


def _point(x) -> np.ndarray:
    x = np.asarray(x, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError(f"expected a 1-d point, got shape {x.shape}")
    return x


def _direction(v, n: int) -> np.ndarray:
    v = np.asarray(v, dtype=np.float64).ravel()
    if v.shape[0] != n:
        raise SeedDimensionError(f"direction has {v.shape[0]} components, expected {n}")
    return v


def _d1(y):
    return y.d1 if isinstance(y, Dual) else 0.0


def _d3(y):
    return y.d3 if isinstance(y, HyperDual) else 0.0


def _map(fn, items, executor: Optional[Executor]) -> list:
    # fn must stay picklable for process pools: a partial over a module-level pass
    if executor is None:
        return [fn(item) for item in items]
    return list(executor.map(fn, items))


def dual_seeds(x, v) -> Tuple[Dual, ...]:
    """Duals at point x with derivative components v."""
    return tuple(Dual(xi, vi) for xi, vi in zip(x, v))


def hyperdual_seeds(x, i: int, j: int) -> Tuple[HyperDual, ...]:
    """HyperDuals at point x with ε₁ along coordinate i and ε₂ along j."""
    return tuple(HyperDual(xk, 1.0 if k == i else 0.0, 1.0 if k == j else 0.0)
                 for k, xk in enumerate(x))


def _gradient_pass(f, x, e):
    return _d1(f(dual_seeds(x, e)))


def _jacobian_column(f, x, e):
    return [_d1(y) for y in f(dual_seeds(x, e))]


def _hessian_entry(f, x, pair):
    return _d3(f(hyperdual_seeds(x, *pair)))


# ----------------------------- first order ----------------------------- #
def derivative(f: Callable[[Dual], Dual], x0: float) -> float:
    """df/dx at x0 for a function of one variable."""
    return _d1(f(Dual(x0, 1.0)))


def directional_derivative(f: Callable[[Sequence[Dual]], Dual], x, v) -> float:
    """∇f(x) · v from a single pass seeded with v."""
    x = _point(x)
    return _d1(f(dual_seeds(x, _direction(v, x.shape[0]))))


def gradient(f: Callable[[Sequence[Dual]], Dual], x,
             executor: Optional[Executor] = None) -> np.ndarray:
    """
    Gradient of a scalar function with one pass per basis direction.

    The passes share no state, so an executor may run them in parallel. A
    process pool needs `f` to be picklable (a module-level function).
    """
    x = _point(x)
    basis = np.eye(x.shape[0])
    parts = _map(partial(_gradient_pass, f, x), basis, executor)
    return np.array(parts, dtype=float)


def jacobian(f: Callable[[Sequence[Dual]], Sequence[Dual]], x,
             executor: Optional[Executor] = None) -> np.ndarray:
    """
    Jacobian J[m, i] = ∂f_m/∂x_i of a vector function; each pass fills one column.
    """
    x = _point(x)
    n = x.shape[0]
    columns = _map(partial(_jacobian_column, f, x), np.eye(n), executor)
    if not columns:
        return np.zeros((0, 0))
    return np.array(columns, dtype=float).T


# ----------------------------- second order ---------------------------- #
def hessian(f: Callable[[Sequence[HyperDual]], HyperDual], x,
            executor: Optional[Executor] = None) -> np.ndarray:
    """
    Full Hessian from n(n+1)/2 hyper-dual passes, one per unordered pair (i, j).
    """
    x = _point(x)
    n = x.shape[0]
    pairs: List[Tuple[int, int]] = [(i, j) for i in range(n) for j in range(i, n)]
    entries = _map(partial(_hessian_entry, f, x), pairs, executor)
    H = np.zeros((n, n))
    for (i, j), h in zip(pairs, entries):
        H[i, j] = H[j, i] = h
    return H


def hessian_diagonal(f: Callable[[Sequence[HyperDual]], HyperDual], x) -> np.ndarray:
    """Diagonal of the Hessian from n hyper-dual passes."""
    x = _point(x)
    return np.array([_d3(f(hyperdual_seeds(x, i, i))) for i in range(x.shape[0])],
                    dtype=float)


def laplacian(f: Callable[[Sequence[HyperDual]], HyperDual], x) -> float:
    """Sum of the unmixed second derivatives."""
    return float(np.sum(hessian_diagonal(f, x)))
