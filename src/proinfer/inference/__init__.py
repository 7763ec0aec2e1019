from .base import ProteinInference, check_subset_graph
from .memo import ProteinMap
from .precomputed import PrecomputedSetInference

__all__ = [
    "PrecomputedSetInference",
    "ProteinInference",
    "ProteinMap",
    "check_subset_graph",
]
