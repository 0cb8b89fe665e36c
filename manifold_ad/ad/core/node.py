# manifold_ad/ad/core/node.py
from dataclasses import dataclass
from typing import Any, Tuple

LEAF_TAG = "leaf"


@dataclass(frozen=True)
class GradientNode:
    """
    One entry of a gradient tape.

    Attributes
    ----------
    op_tag   : str
        Debug tag ("leaf", "add", "sin", ...).
    value    : Any
        Primal value produced by the operation, kept for node dumps.
    parents  : Tuple[int, ...]
        Tape indices of the operands; always smaller than this node's index.
        Empty for leaves.
    partials : Tuple[Any, ...]
        ∂out/∂parent for each entry of `parents`, evaluated when recorded.
    """
    op_tag: str
    value: Any
    parents: Tuple[int, ...] = ()
    partials: Tuple[Any, ...] = ()

    @property
    def is_leaf(self) -> bool:
        return not self.parents


@dataclass(frozen=True)
class HessianNode(GradientNode):
    """
    Gradient node plus the distinct second-order local partials.

    `second` holds (∂²out/∂x²,) for unary nodes and
    (∂²out/∂x², ∂²out/∂x∂y, ∂²out/∂y²) for binary nodes.
    """
    second: Tuple[Any, ...] = ()
