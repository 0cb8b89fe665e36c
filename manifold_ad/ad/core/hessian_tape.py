# manifold_ad/ad/core/hessian_tape.py
from __future__ import annotations
import logging
from typing import Optional, Tuple

import numpy as np

from ...edge_pushing.algo4 import edge_push
from .engine import gather_leaves
from .node import HessianNode
from .tape import GradientTape
from .var import Variable

logger = logging.getLogger(__name__)


class HessianTape(GradientTape):
    """
    Gradient tape that also stores the second-order local partials of every
    operation, so one edge-pushing sweep yields the full Hessian over the
    leaves without re-evaluating the function.
    """

    node_type = HessianNode
    records_second_order = True

    def reverse_accumulate_both(self, output: Optional[Variable] = None,
                                seed=1.0) -> Tuple[np.ndarray, np.ndarray]:
        """(gradient, hessian) of `output` from a single sweep."""
        n = len(self._leaves)
        if output is None and not self._nodes:
            return np.zeros(0), np.zeros((0, 0))
        out_idx = self._output_index(output)
        adjoints, W = edge_push(self._nodes, out_idx, seed)
        logger.debug("edge-pushing sweep from node %d: %d weights left",
                     out_idx, len(W.map))

        # Leaves recorded after the output have zero rows and columns
        visible = [a for a, i in enumerate(self._leaves) if i <= out_idx]
        hessian = np.zeros((n, n))
        if visible:
            block = W.submatrix([self._leaves[a] for a in visible])
            hessian[np.ix_(visible, visible)] = block
        return gather_leaves(adjoints, self._leaves), hessian

    def reverse_accumulate_hessian(self, output: Optional[Variable] = None,
                                   seed=1.0) -> np.ndarray:
        """Dense symmetric Hessian of `output` over the leaves, in creation order."""
        return self.reverse_accumulate_both(output, seed)[1]
