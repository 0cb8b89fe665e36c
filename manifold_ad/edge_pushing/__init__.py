from .symm_sparse import SymmSparseAdjList
from .algo4 import edge_push

__all__ = ["SymmSparseAdjList", "edge_push"]
