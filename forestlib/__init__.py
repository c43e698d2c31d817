"""forestlib - In-memory forest transformation library.

forestlib flattens, reconstructs, searches, filters and prunes hierarchies
built from plain records (dicts or objects) linked through a children
attribute. Attribute access goes through an adapter:

    from forestlib import MappingAdapter, array_to_tree, flatten

    roots = array_to_tree(rows, MappingAdapter(parent_key="parent"))
    ordered = flatten(roots)

Operations either MUTATE their input (array_to_tree, remove_empty_children)
or RETURN NEW STRUCTURE (fuzzy_query_tree, filter_tree); the rest only read.
"""

__version__ = "0.1.0"

from .core.adapter import ForestAdapter, MappingAdapter, AttributeAdapter, is_forest
from .core.traverser import ForestTraverser, DepthFirstPreOrderTraverser, fold_forest
from .config import FilterCopyConfig, MATCHED_CHILDREN_KEY
from .errors import ForestError, InvalidConfigError, CycleDetectedError
from .log import get_logger, configure_logging
from .api import (
    flatten,
    get_tree_map,
    array_to_tree,
    get_node_path,
    fuzzy_query_tree,
    walk_forest,
    operation_attr_to_nodes,
    traversal_tree,
    remove_empty_children,
    get_all_leaves,
    filter_tree,
    dfs_filter_tree,
    count_nodes,
    find_nodes,
    get_tree_stats,
)

__all__ = [
    "__version__",
    # Core
    "ForestAdapter",
    "MappingAdapter",
    "AttributeAdapter",
    "is_forest",
    "ForestTraverser",
    "DepthFirstPreOrderTraverser",
    "fold_forest",
    # Config
    "FilterCopyConfig",
    "MATCHED_CHILDREN_KEY",
    # Errors
    "ForestError",
    "InvalidConfigError",
    "CycleDetectedError",
    # Logging
    "get_logger",
    "configure_logging",
    # API
    "flatten",
    "get_tree_map",
    "array_to_tree",
    "get_node_path",
    "fuzzy_query_tree",
    "walk_forest",
    "operation_attr_to_nodes",
    "traversal_tree",
    "remove_empty_children",
    "get_all_leaves",
    "filter_tree",
    "dfs_filter_tree",
    "count_nodes",
    "find_nodes",
    "get_tree_stats",
]
