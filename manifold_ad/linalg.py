# manifold_ad/linalg.py
"""
Small dense linear algebra with a "not-a-matrix" (NaM) sentinel.

A singular matrix does not raise: `inverse` returns NaM, an all-NaN matrix of
the same size, so derivative pipelines passing through degenerate points keep
going and the caller can test the result with `is_nam`, which looks for a NaN
diagonal. NaM is absorbing: its inverse is NaM again.
"""
import warnings

import numpy as np


def _square(m) -> np.ndarray:
    m = np.asarray(m, dtype=np.float64)
    if m.ndim != 2 or m.shape[0] != m.shape[1]:
        raise ValueError(f"expected a square matrix, got shape {m.shape}")
    return m


def nam(n: int) -> np.ndarray:
    """The n x n NaM sentinel."""
    return np.full((n, n), np.nan)


def is_nam(m) -> bool:
    """
    True for the NaM sentinel: every diagonal entry is NaN. A matrix with a
    stray NaN elsewhere is not NaM.
    """
    m = _square(m)
    return m.shape[0] > 0 and bool(np.isnan(np.diagonal(m)).all())


def determinant(m) -> float:
    return float(np.linalg.det(_square(m)))


def inverse(m) -> np.ndarray:
    """Inverse of a square matrix, or NaM when it is singular or already NaM."""
    m = _square(m)
    n = m.shape[0]
    if is_nam(m):
        return nam(n)
    det = determinant(m)
    if det == 0.0 or not np.isfinite(det):
        warnings.warn(f"singular {n}x{n} matrix (det={det}); returning NaM",
                      RuntimeWarning, stacklevel=2)
        return nam(n)
    return np.linalg.inv(m)
