# manifold_ad/ad/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1) at each output and let gradients grow
# backwards through the tape. Every helper below evaluates f(tape, x) on a
# caller-owned tape and accumulates right away, one output at a time.
#
# Each call appends fresh leaves and nodes, so a tape shared across many
# calls keeps growing. Pass reset=True when the call owns the evaluation:
# the tape is cleared first and stays the size of one recording.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Sequence, Tuple

import numpy as np

from ...errors import SeedDimensionError
from .hessian_tape import HessianTape
from .tape import GradientTape
from .var import Variable, value

Component = Callable[[GradientTape, Tuple[Variable, ...]], Any]

__all__ = [
    "value", "grad", "gradient", "jacobian", "hessian", "laplacian",
    "divergence", "curl", "jvp", "vjp", "directional_derivative",
]


def _point(x) -> np.ndarray:
    x = np.asarray(x, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError(f"expected a 1-d point, got shape {x.shape}")
    return x


def _leaves(tape: GradientTape, x, reset: bool = False) -> Tuple[int, Tuple[Variable, ...]]:
    """Create one leaf per coordinate; return the first leaf slot and the handles."""
    x = _point(x)
    if reset:
        tape.reset()
    start = tape.variable_count
    return start, tape.create_variables(x)


def _is_recorded(y) -> bool:
    return isinstance(y, Variable) and y.is_tracked


def _gradient_row(tape: GradientTape, y, start: int, n: int) -> np.ndarray:
    # A constant or untracked component has a zero gradient
    if not _is_recorded(y):
        return np.zeros(n)
    return tape.reverse_accumulate(y)[start:start + n]


def _require_hessian_tape(tape):
    if not isinstance(tape, HessianTape):
        raise TypeError(f"second derivatives need a HessianTape, got {type(tape).__name__}")


def _check_direction(v, n: int) -> np.ndarray:
    v = np.asarray(v, dtype=np.float64).ravel()
    if v.shape[0] != n:
        raise SeedDimensionError(f"direction has {v.shape[0]} components, expected {n}")
    return v


# ----------------------------- one-shot grad ------------------------------ #
def grad(f: Component, x0) -> np.ndarray:
    """
    Gradient of a scalar-output function y = f(tape, x) at x0.
    Runs one reverse pass on a fresh, private tape.
    """
    return gradient(GradientTape(), f, x0)


# ----------------------------- first order ------------------------------- #
def gradient(tape: GradientTape, f: Component, x, *, reset: bool = False) -> np.ndarray:
    """∇f(x): one recording, one reverse sweep."""
    start, xs = _leaves(tape, x, reset)
    return _gradient_row(tape, f(tape, xs), start, len(xs))


def jacobian(tape: GradientTape, fs: Sequence[Component], x, *,
             reset: bool = False) -> np.ndarray:
    """
    J[m, i] = ∂f_m/∂x_i. The components share the leaves; each one is
    evaluated and accumulated before the next is recorded.
    """
    start, xs = _leaves(tape, x, reset)
    n = len(xs)
    J = np.zeros((len(fs), n))
    for m, f in enumerate(fs):
        J[m] = _gradient_row(tape, f(tape, xs), start, n)
    return J


def directional_derivative(tape: GradientTape, f: Component, x, v, *,
                           reset: bool = False) -> float:
    """∇f(x) · v."""
    g = gradient(tape, f, x, reset=reset)
    return float(g @ _check_direction(v, g.shape[0]))


def jvp(tape: GradientTape, fs: Sequence[Component], x, v, *,
        reset: bool = False) -> np.ndarray:
    """Jacobian-vector product J v."""
    n = _point(x).shape[0]
    v = _check_direction(v, n)
    return jacobian(tape, fs, x, reset=reset) @ v


def vjp(tape: GradientTape, fs: Sequence[Component], x, v, *,
        reset: bool = False) -> np.ndarray:
    """Vector-Jacobian product vᵀ J."""
    v = _check_direction(v, len(fs))
    return v @ jacobian(tape, fs, x, reset=reset)


def divergence(tape: GradientTape, fs: Sequence[Component], x, *,
               reset: bool = False) -> float:
    """Σ_i ∂f_i/∂x_i of a vector field with one component per coordinate."""
    if len(fs) != _point(x).shape[0]:
        raise SeedDimensionError(
            f"divergence needs one component per coordinate, got {len(fs)}")
    return float(np.trace(jacobian(tape, fs, x, reset=reset)))


def curl(tape: GradientTape, fs: Sequence[Component], x, *,
         reset: bool = False) -> np.ndarray:
    """∇ × F of a vector field in three coordinates."""
    if len(fs) != 3 or _point(x).shape[0] != 3:
        raise SeedDimensionError("curl is defined for three components in three coordinates")
    J = jacobian(tape, fs, x, reset=reset)
    return np.array([J[2, 1] - J[1, 2],
                     J[0, 2] - J[2, 0],
                     J[1, 0] - J[0, 1]])


# ----------------------------- second order ------------------------------ #
def hessian(tape: HessianTape, f: Component, x, *, reset: bool = False) -> np.ndarray:
    """∇²f(x) from one recording and one edge-pushing sweep."""
    _require_hessian_tape(tape)
    start, xs = _leaves(tape, x, reset)
    n = len(xs)
    y = f(tape, xs)
    if not _is_recorded(y):
        return np.zeros((n, n))
    H = tape.reverse_accumulate_hessian(y)
    return H[start:start + n, start:start + n]


def laplacian(tape: HessianTape, f: Component, x, *, reset: bool = False) -> float:
    """Trace of the Hessian."""
    return float(np.trace(hessian(tape, f, x, reset=reset)))
