# manifold_ad/ad/core/tape.py
from __future__ import annotations
import logging
from contextlib import contextmanager
from typing import Any, Iterable, List, Optional, Tuple

import numpy as np

from ...config import config
from ...errors import AutoDiffError, ForeignVariableError
from ...scalar import BinaryRule, UnaryRule
from .engine import gather_leaves, reverse_sweep
from .node import LEAF_TAG, GradientNode
from .var import UNTRACKED, Variable

logger = logging.getLogger(__name__)


class GradientTape:
    """
    Append-only log of elementary operations for reverse-mode AD.

    Every leaf made by `create_variable` and every operation on a tracked
    Variable appends one node; node operands always point to earlier
    indices. `reverse_accumulate` reads the log without changing it.

    A tape is not thread safe: use one tape per thread, or lock around the
    whole record-then-accumulate sequence.
    """

    node_type = GradientNode
    records_second_order = False

    def __init__(self, is_tracking: bool = True):
        self._nodes: List[GradientNode] = []
        self._leaves: List[int] = []
        self._is_tracking = bool(is_tracking)
        self._generation = 0

    def __repr__(self):
        return (f"{type(self).__name__}(nodes={len(self._nodes)}, "
                f"variables={len(self._leaves)}, is_tracking={self._is_tracking})")

    # ------------------------------------------------------------------ #
    # state
    # ------------------------------------------------------------------ #
    @property
    def is_tracking(self) -> bool:
        return self._is_tracking

    @is_tracking.setter
    def is_tracking(self, flag: bool):
        self._is_tracking = bool(flag)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def variable_count(self) -> int:
        return len(self._leaves)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def nodes(self) -> Tuple[GradientNode, ...]:
        return tuple(self._nodes)

    @property
    def leaves(self) -> Tuple[int, ...]:
        return tuple(self._leaves)

    def reset(self):
        """Drop every node and leaf. Variables created before the reset become invalid."""
        self._nodes.clear()
        self._leaves.clear()
        self._generation += 1

    @contextmanager
    def suspend_tracking(self):
        """
        Stop recording for the duration of the block:
            with tape.suspend_tracking():
                ... plain evaluation, nothing is recorded ...
        The previous tracking state is restored on every exit path.
        """
        prev = self._is_tracking
        self._is_tracking = False
        try:
            yield self
        finally:
            self._is_tracking = prev

    # ------------------------------------------------------------------ #
    # recording
    # ------------------------------------------------------------------ #
    def create_variable(self, value: Any) -> Variable:
        """Append a leaf node holding `value` and return its handle."""
        if isinstance(value, Variable):
            value = value.value
        v = np.float64(value)
        index = len(self._nodes)
        self._nodes.append(self.node_type(op_tag=LEAF_TAG, value=v))
        self._leaves.append(index)
        return Variable(v, index, self, self._generation)

    def create_variables(self, values: Iterable[Any]) -> Tuple[Variable, ...]:
        """One leaf per coordinate, in order."""
        return tuple(self.create_variable(v) for v in values)

    def push_node(self, *, op_tag: str, value, parents: Tuple[int, ...],
                  partials: Tuple, second: Tuple = ()) -> int:
        """
        Append a node and return its index. `second` is dropped on tapes that
        do not record second-order partials.
        """
        if self.records_second_order:
            node = self.node_type(op_tag=op_tag, value=value, parents=parents,
                                  partials=partials, second=second)
        else:
            node = self.node_type(op_tag=op_tag, value=value, parents=parents,
                                  partials=partials)
        self._nodes.append(node)
        return len(self._nodes) - 1

    def apply_unary(self, rule: UnaryRule, x) -> Variable:
        """Evaluate rule(x) and record it when `x` is tracked."""
        live = self._is_live(x)
        xv = _value_of(x)
        out = np.float64(rule.f(xv))
        if not (self._is_tracking and live):
            return self._untracked(out)
        second = (rule.d2f(xv),) if self.records_second_order else ()
        index = self.push_node(op_tag=rule.name, value=out, parents=(x.index,),
                               partials=(rule.df(xv),), second=second)
        return Variable(out, index, self, self._generation)

    def apply_binary(self, rule: BinaryRule, x, y) -> Variable:
        """
        Evaluate rule(x, y) and record it. Operands that are plain numbers or
        untracked Variables are constants: with one tracked operand a unary
        node is recorded, with none nothing is.
        """
        x_live = self._is_live(x)
        y_live = self._is_live(y)
        xv, yv = _value_of(x), _value_of(y)
        out = np.float64(rule.f(xv, yv))
        if not self._is_tracking or not (x_live or y_live):
            return self._untracked(out)

        second_order = self.records_second_order
        if x_live and y_live:
            second = ((rule.fxx(xv, yv), rule.fxy(xv, yv), rule.fyy(xv, yv))
                      if second_order else ())
            index = self.push_node(op_tag=rule.name, value=out,
                                   parents=(x.index, y.index),
                                   partials=(rule.fx(xv, yv), rule.fy(xv, yv)),
                                   second=second)
        elif x_live:
            second = (rule.fxx(xv, yv),) if second_order else ()
            index = self.push_node(op_tag=rule.name, value=out, parents=(x.index,),
                                   partials=(rule.fx(xv, yv),), second=second)
        else:
            second = (rule.fyy(xv, yv),) if second_order else ()
            index = self.push_node(op_tag=rule.name, value=out, parents=(y.index,),
                                   partials=(rule.fy(xv, yv),), second=second)
        return Variable(out, index, self, self._generation)

    def _untracked(self, out) -> Variable:
        return Variable(out, UNTRACKED, self, self._generation)

    def _is_live(self, x) -> bool:
        if not isinstance(x, Variable):
            if not isinstance(x, (int, float, np.number)):
                raise TypeError(f"cannot record {type(x).__name__} operands on a tape")
            return False
        if x.tape is None and x.index == UNTRACKED:
            return False  # free-standing constant
        self.check_variable(x)
        return x.index != UNTRACKED

    def check_variable(self, v: Variable):
        """Fail fast on a Variable from another tape or an earlier generation."""
        if not config.validate_variables:
            return
        if v.tape is not self:
            raise ForeignVariableError(f"{v!r} was not created by this tape")
        if v.generation != self._generation:
            raise ForeignVariableError(
                f"{v!r} belongs to generation {v.generation}; the tape has been "
                f"reset to generation {self._generation}")
        if v.index >= len(self._nodes):
            raise ForeignVariableError(f"{v!r} points past the end of the tape")

    # ------------------------------------------------------------------ #
    # accumulation
    # ------------------------------------------------------------------ #
    def _output_index(self, output: Optional[Variable]) -> int:
        if output is None:
            return len(self._nodes) - 1
        if not isinstance(output, Variable):
            raise TypeError(f"output must be a Variable, but got {type(output)}")
        self.check_variable(output)
        if output.index == UNTRACKED:
            raise AutoDiffError(
                "cannot accumulate from an untracked Variable; it was computed "
                "while tracking was suspended or from constants only")
        return output.index

    def reverse_accumulate(self, output: Optional[Variable] = None, seed=1.0) -> np.ndarray:
        """
        Gradient of `output` (default: the most recently recorded node) with
        respect to every leaf, in creation order. An empty tape gives an
        empty gradient. Calling it again returns the same result.
        """
        if output is None and not self._nodes:
            return np.zeros(0)
        out_idx = self._output_index(output)
        adjoints = reverse_sweep(self._nodes, out_idx, seed)
        logger.debug("reverse sweep from node %d over %d nodes", out_idx, out_idx + 1)
        return gather_leaves(adjoints, self._leaves)

    # ------------------------------------------------------------------ #
    # diagnostics
    # ------------------------------------------------------------------ #
    def log_nodes(self, log: Optional[logging.Logger] = None, limit: Optional[int] = None):
        """Write one INFO record per node, up to `limit` nodes."""
        log = log or logger
        limit = config.log_node_limit if limit is None else limit
        log.info("%s: %d nodes, %d variables", type(self).__name__,
                 len(self._nodes), len(self._leaves))
        for i, node in enumerate(self._nodes[:limit]):
            if node.is_leaf:
                log.info("Root Node %d: value=%r", i, node.value)
            else:
                log.info("Node %d [%s]: value=%r parents=%s partials=%s", i,
                         node.op_tag, node.value, node.parents, node.partials)
        if len(self._nodes) > limit:
            log.info("... %d more nodes not shown", len(self._nodes) - limit)


def _value_of(x: Any) -> Any:
    return x.value if isinstance(x, Variable) else x
