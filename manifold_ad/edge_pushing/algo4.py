"""
Algorithm 4 (Edge-Pushing / component-wise form) over a Hessian tape.

For i = output, ..., 0 (leaves are skipped):
  (1) Pushing   move every weight W(p,i) onto the operands of node i
  (2) Creating  W += v̄ᵢ · Φ''ᵢ   (local second derivatives of node i)
  (3) Adjoint   v̄ᵀ ← v̄ᵀ Φ'ᵢ    (standard first-order reverse step)
After the sweep the weights between leaves are the Hessian and the adjoints
at the leaves are the gradient.

Reference: Gower & Mello, "A new framework for the computation of Hessians"
(2012).
"""

from typing import Dict, List, Sequence, Tuple

from ..ad.core.node import HessianNode
from .symm_sparse import SymmSparseAdjList


def edge_push(nodes: Sequence[HessianNode], output_index: int, seed=1.0,
              tolerance: float = None) -> Tuple[List[float], SymmSparseAdjList]:
    """
    Run the edge-pushing sweep from node `output_index`.

    Args:
        nodes: Hessian-tape node log, in recording order
        output_index: node whose adjoint is seeded with `seed`
        tolerance: relative cancellation threshold for the weight matrix

    Returns:
        (adjoints, W): one adjoint per node in [0, output_index] and the
        symmetric weight matrix over the same nodes
    """
    n_nodes = output_index + 1
    W = SymmSparseAdjList(n_nodes, tolerance)
    vbar = [0.0] * n_nodes
    vbar[output_index] = seed

    for i in range(output_index, -1, -1):
        node = nodes[i]
        if node.is_leaf:
            continue  # leaves keep their weights

        preds, d1, d2 = _local_derivatives(node)

        _pushing_stage(W, i, preds, d1)

        if vbar[i] != 0.0:
            _creating_stage(W, d2, vbar[i])
            _adjoint_update(vbar, i, preds, d1)

    return vbar, W


def _local_derivatives(node: HessianNode):
    """
    Operand indices (deduplicated), first derivatives by operand and upper
    triangular second derivatives. A node like x*x with one operand on both
    sides collapses to a unary node: d = dx + dy, s = dxx + 2 dxy + dyy.
    """
    if len(node.parents) == 1:
        j = node.parents[0]
        return [j], {j: node.partials[0]}, {(j, j): node.second[0]}

    j, k = node.parents
    dx, dy = node.partials
    dxx, dxy, dyy = node.second
    if j == k:
        return [j], {j: dx + dy}, {(j, j): dxx + 2.0 * dxy + dyy}
    if k < j:
        j, k = k, j
        dx, dy = dy, dx
        dxx, dyy = dyy, dxx
    return [j, k], {j: dx, k: dy}, {(j, j): dxx, (j, k): dxy, (k, k): dyy}


def _pushing_stage(W: SymmSparseAdjList, i: int, preds: List[int],
                   d1: Dict[int, float]) -> None:
    """
    Push the weights of row i onto the operands of node i:
      1. p = i: W(j,k) += d1[j] * d1[k] * W(i,i) for j <= k
      2. p ≠ i: W(p,p) += 2 * d1[p] * W(p,i) when j = p,
                W(p,j) += d1[j] * W(p,i) otherwise
    then clear row/column i.
    """
    for p, w_pi in W.get_neighbors(i):
        if p == i:
            for a, j in enumerate(preds):
                dj = d1[j]
                if dj == 0.0:
                    continue
                for k in preds[a:]:
                    W.add(j, k, dj * d1[k] * w_pi)
        else:
            for j in preds:
                dj = d1[j]
                if dj == 0.0:
                    continue
                if j == p:
                    W.add(p, p, 2.0 * dj * w_pi)
                else:
                    W.add(p, j, dj * w_pi)

    W.clear_row_col(i)


def _creating_stage(W: SymmSparseAdjList, d2: Dict[Tuple[int, int], float],
                    vbar: float) -> None:
    """W += v̄ᵢ * Φ''ᵢ"""
    for (j, k), val in d2.items():
        if val != 0.0:
            W.add(j, k, vbar * val)


def _adjoint_update(vbar: List[float], i: int, preds: List[int],
                    d1: Dict[int, float]) -> None:
    """v̄ᵀ ← v̄ᵀ Φ'ᵢ"""
    for j in preds:
        vbar[j] += vbar[i] * d1[j]
