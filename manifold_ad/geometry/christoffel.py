# manifold_ad/geometry/christoffel.py
from typing import Optional

import numpy as np

from ..ad.core.tape import GradientTape
from .metric import MetricTensorField


def _metric_derivative(metric: MetricTensorField, x, tape: Optional[GradientTape]):
    if tape is None:
        return metric.forward_derivative(x)
    return metric.derivative(tape, x)


def christoffel_first_kind(metric: MetricTensorField, x,
                           tape: Optional[GradientTape] = None) -> np.ndarray:
    """
    Γ_kij = ½ (∂_j g_ki + ∂_i g_kj − ∂_k g_ij), indexed [k, i, j].

    The metric derivative comes from reverse accumulation on `tape`, which is
    reset first, or from Dual seeding when no tape is given.
    """
    dg = _metric_derivative(metric, x, tape)
    return 0.5 * (np.einsum("jki->kij", dg) + np.einsum("ikj->kij", dg) - dg)


def christoffel_second_kind(metric: MetricTensorField, x,
                            tape: Optional[GradientTape] = None) -> np.ndarray:
    """Γ^k_ij = g^kl Γ_lij, indexed [k, i, j]. NaN throughout where g is singular."""
    first = christoffel_first_kind(metric, x, tape)
    g_inv = metric.inverse(x, tape)
    return np.einsum("kl,lij->kij", g_inv, first)
