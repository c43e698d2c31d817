"""Core abstractions for forestlib.

Adapters describe how to read and write node records; traversers walk a
forest through an adapter.
"""

from .adapter import (
    ForestAdapter,
    MappingAdapter,
    AttributeAdapter,
    as_lookup_key,
    is_forest,
)
from .traverser import (
    ForestTraverser,
    DepthFirstPreOrderTraverser,
    SKIP,
    fold_forest,
)

__all__ = [
    "ForestAdapter",
    "MappingAdapter",
    "AttributeAdapter",
    "as_lookup_key",
    "is_forest",
    "ForestTraverser",
    "DepthFirstPreOrderTraverser",
    "SKIP",
    "fold_forest",
]
