# manifold_ad/ad/core/engine.py
from __future__ import annotations
import numpy as np
from typing import List, Sequence

from .node import GradientNode


def reverse_sweep(nodes: Sequence[GradientNode], output_index: int, seed=1.0) -> List:
    """
    Run a single reverse pass from node `output_index` down to node 0.

    Args:
        nodes: the node log, in recording order.
        output_index: index of the node whose adjoint is seeded.
        seed: adjoint planted at the output.

    Returns:
        Adjoint buffer with one slot per node in [0, output_index].

    Notes:
        - For each node i we propagate: adj[p] += adj[i] * (∂i/∂p).
        - Nodes recorded after the output are never visited, so several
          outputs on one tape accumulate independently.
    """
    adjoints = [0.0] * (output_index + 1)
    adjoints[output_index] = seed

    for i in range(output_index, -1, -1):
        a = adjoints[i]
        if a == 0.0:
            continue  # nothing to propagate
        node = nodes[i]
        for p, local_partial in zip(node.parents, node.partials):
            adjoints[p] += a * local_partial
    return adjoints


def gather_leaves(adjoints: Sequence, leaves: Sequence[int]) -> np.ndarray:
    """
    Read the adjoints at the leaf indices, in leaf creation order. Leaves
    created after the swept output have a zero adjoint.
    """
    n = len(adjoints)
    return np.array([adjoints[i] if i < n else 0.0 for i in leaves], dtype=float)
