"""High-level API for forestlib.

Stateless functions over forests (ordered sequences of root nodes) and flat
record lists. Each function documents whether it mutates its input or
returns a new structure; callers rely on that distinction.

Malformed input never raises: a value that is not a forest yields an empty
result (None for flatten). Only programmer errors (InvalidConfigError) and
cyclic node graphs (CycleDetectedError) raise.
"""

import dataclasses
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from .config import FilterCopyConfig, MATCHED_CHILDREN_KEY
from .core.adapter import ForestAdapter, MappingAdapter, as_lookup_key, is_forest
from .core.traverser import DepthFirstPreOrderTraverser, SKIP, fold_forest
from .errors import InvalidConfigError
from .log import get_logger

logger = get_logger("api")


def flatten(
    forest: Sequence[Any],
    adapter: Optional[ForestAdapter] = None
) -> Optional[List[Any]]:
    """Linearize a forest in pre-order. Reads only.

    Args:
        forest: Ordered sequence of root nodes
        adapter: Node adapter (default: MappingAdapter())

    Returns:
        Every node exactly once, each before all of its descendants, or None
        if ``forest`` is not a sequence

    Example:
        >>> forest = [{"id": 1, "children": [{"id": 2}]}, {"id": 3}]
        >>> [node["id"] for node in flatten(forest)]
        [1, 2, 3]
    """
    if not is_forest(forest):
        logger.debug("flatten: expected a forest, got %s", type(forest).__name__)
        return None

    adapter = _resolve_adapter(adapter)
    return [node for node, _ in DepthFirstPreOrderTraverser(adapter).traverse(forest)]


def array_to_tree(
    records: Sequence[Any],
    adapter: Optional[ForestAdapter] = None
) -> List[Any]:
    """Build a forest from a flat list of parent-referencing records.

    MUTATES INPUT: children sequences are created on, and appended to, the
    given records.

    A record whose parent identifier is missing, None, or not the identifier
    of any record becomes a root. Parents may appear after their children in
    the input. On duplicate identifiers the last record wins as parent.

    Args:
        records: Flat ordered sequence of records
        adapter: Node adapter (default: MappingAdapter())

    Returns:
        Root records in input order, with children attached

    Example:
        >>> rows = [{"id": 2, "parentId": 1}, {"id": 1, "parentId": None}]
        >>> roots = array_to_tree(rows)
        >>> roots[0]["id"], roots[0]["children"][0]["id"]
        (1, 2)
    """
    if not is_forest(records) or not records:
        return []

    adapter = _resolve_adapter(adapter)

    lookup: Dict[Any, Any] = {}
    for record in records:
        key = as_lookup_key(adapter.get_identifier(record))
        if key is None:
            continue
        if key in lookup:
            logger.debug("array_to_tree: duplicate identifier %r, last record wins", key)
        lookup[key] = record

    roots = []
    for record in records:
        parent_key = as_lookup_key(adapter.get_parent_identifier(record))
        parent = lookup.get(parent_key) if parent_key is not None else None

        if parent is not None:
            adapter.add_child(parent, record)
        else:
            roots.append(record)

    logger.debug("array_to_tree: %d records, %d roots", len(records), len(roots))
    return roots


def get_node_path(
    forest: Sequence[Any],
    target_id: Any,
    adapter: Optional[ForestAdapter] = None
) -> List[Any]:
    """Find the identifiers on the path from a root to the target node.

    Depth-first, pre-order, left to right; the first match wins. Reads only.

    Args:
        forest: Ordered sequence of root nodes
        target_id: Identifier to look for
        adapter: Node adapter (default: MappingAdapter())

    Returns:
        Identifiers from the root down to the target, or [] if not found
    """
    if not is_forest(forest) or not forest:
        return []

    adapter = _resolve_adapter(adapter)
    path: List[Any] = []

    for node, depth in DepthFirstPreOrderTraverser(adapter).traverse(forest):
        # Backtrack: drop entries of subtrees that were exhausted
        del path[depth - 1:]
        identifier = adapter.get_identifier(node)
        path.append(identifier)
        if identifier == target_id:
            return path

    return []


def fuzzy_query_tree(
    forest: Sequence[Any],
    query: str,
    adapter: Optional[ForestAdapter] = None
) -> List[Any]:
    """Search a forest by name substring, keeping matches and their ancestors.

    RETURNS NEW STRUCTURE: every kept node is a shallow copy carrying a
    ``childrenNode`` attribute with the kept copies of its children. Its
    original children attribute is left as it was.

    A node is kept when its name contains ``query`` (case-sensitive), or
    when any descendant is kept. Subtrees without a match are dropped.

    Args:
        forest: Ordered sequence of root nodes
        query: Substring to look for in node names
        adapter: Node adapter (default: MappingAdapter())

    Returns:
        Copies of the kept roots, in order
    """
    if not is_forest(forest) or not forest:
        return []

    adapter = _resolve_adapter(adapter)
    query = str(query)

    def enter(node: Any, depth: int) -> Any:
        return None

    def leave(node: Any, depth: int, state: Any, matched_children: List[Any]) -> Any:
        name = adapter.get_name(node)
        if (isinstance(name, str) and query in name) or matched_children:
            return adapter.annotate(node, MATCHED_CHILDREN_KEY, matched_children)
        return None

    return fold_forest(forest, adapter, enter, leave)


def walk_forest(
    forest: Sequence[Any],
    visitor: Callable[..., Any],
    adapter: Optional[ForestAdapter] = None,
    depth_aware: bool = False,
    depth: int = 1
) -> Sequence[Any]:
    """Visit every node in pre-order, calling ``visitor`` on each.

    Reads only; the visitor may mutate nodes. A node's children are read
    after the visitor returns, so children the visitor adds or replaces are
    walked too.

    Args:
        forest: Ordered sequence of root nodes
        visitor: Called as visitor(node), or visitor(node, depth)
        adapter: Node adapter (default: MappingAdapter())
        depth_aware: Pass ``depth`` as a second argument to the visitor
        depth: Value handed to depth-aware visitors. It is passed unchanged
            for every node, nested or not.

    Returns:
        The same forest object
    """
    if not is_forest(forest):
        logger.debug("walk_forest: expected a forest, got %s", type(forest).__name__)
        return forest

    adapter = _resolve_adapter(adapter)
    for node, _ in DepthFirstPreOrderTraverser(adapter).traverse(forest):
        if depth_aware:
            visitor(node, depth)
        else:
            visitor(node)

    return forest


def operation_attr_to_nodes(
    forest: Sequence[Any],
    callback: Callable[[Any], Any],
    adapter: Optional[ForestAdapter] = None
) -> Sequence[Any]:
    """Apply ``callback`` to every node in pre-order. See walk_forest."""
    return walk_forest(forest, callback, adapter)


def traversal_tree(
    forest: Sequence[Any],
    callback: Callable[[Any], Any],
    adapter: Optional[ForestAdapter] = None
) -> Sequence[Any]:
    """Apply ``callback`` to every node in pre-order. See walk_forest."""
    return walk_forest(forest, callback, adapter)


def remove_empty_children(
    forest: Sequence[Any],
    adapter: Optional[ForestAdapter] = None
) -> Sequence[Any]:
    """Delete children attributes that hold an empty sequence.

    MUTATES INPUT. Non-empty children are descended into; nodes without a
    children attribute are left untouched. Idempotent.

    Args:
        forest: Ordered sequence of root nodes
        adapter: Node adapter (default: MappingAdapter())

    Returns:
        The same forest object
    """
    if not is_forest(forest):
        return forest

    adapter = _resolve_adapter(adapter)
    removed = 0
    for node, _ in DepthFirstPreOrderTraverser(adapter).traverse(forest):
        children = adapter.get_children(node)
        if children is not None and len(children) == 0:
            adapter.delete_children(node)
            removed += 1

    logger.debug("remove_empty_children: removed %d empty children attributes", removed)
    return forest


def get_all_leaves(
    forest: Sequence[Any],
    adapter: Optional[ForestAdapter] = None
) -> List[Any]:
    """Collect every node whose children are absent or empty, in pre-order.

    Reads only.
    """
    if not is_forest(forest) or not forest:
        return []

    adapter = _resolve_adapter(adapter)
    return [
        node for node, _ in DepthFirstPreOrderTraverser(adapter).traverse(forest)
        if adapter.is_leaf(node)
    ]


def filter_tree(
    forest: Sequence[Any],
    config: Optional[FilterCopyConfig] = None,
    **kwargs
) -> List[Any]:
    """Deep-copy the parts of a forest accepted by a predicate.

    RETURNS NEW STRUCTURE; the input is not modified by this function (a
    transform given as ``ope`` may still mutate what it is handed).

    Pruning is exclusive: a rejected node drops its whole subtree, even
    descendants the predicate would accept. For each accepted node, in
    pre-order, ``ope(node, depth)`` (roots at depth 1) is applied and its
    result deep-copied without the children attribute. If the original node
    has a children attribute, the copy receives the copies of its accepted
    children through ``output_adapter``; a different output adapter renames
    the children attribute.

    Args:
        forest: Ordered sequence of root nodes
        config: FilterCopyConfig; keyword arguments build one, or override
            fields of the one given
        **kwargs: FilterCopyConfig fields (filter, ope, adapter, output_adapter)

    Returns:
        Copies of the accepted roots, in order

    Raises:
        InvalidConfigError: If no configuration or no filter is given

    Example:
        >>> forest = [{"id": 1, "children": [{"id": 2}, {"id": 3}]}]
        >>> filter_tree(forest, filter=lambda node: node["id"] != 2)
        [{'id': 1, 'children': [{'id': 3}]}]
    """
    config = _build_filter_config(config, **kwargs)

    if not is_forest(forest) or not forest:
        return []

    adapter = _resolve_adapter(config.adapter)
    output_adapter = config.output_adapter or adapter
    accept = config.filter
    ope = config.ope

    def enter(node: Any, depth: int) -> Any:
        if not accept(node):
            return SKIP
        transformed = ope(node, depth) if ope is not None else None
        return adapter.detached_copy(node if transformed is None else transformed)

    def leave(node: Any, depth: int, node_copy: Any, child_copies: List[Any]) -> Any:
        if adapter.has_children(node):
            output_adapter.set_children(node_copy, child_copies)
        return node_copy

    return fold_forest(forest, adapter, enter, leave)


# Names kept for callers of the original helpers
get_tree_map = flatten
dfs_filter_tree = filter_tree


def count_nodes(
    forest: Sequence[Any],
    adapter: Optional[ForestAdapter] = None
) -> int:
    """Count every node in a forest."""
    if not is_forest(forest):
        return 0

    adapter = _resolve_adapter(adapter)
    count = 0
    for _ in DepthFirstPreOrderTraverser(adapter).traverse(forest):
        count += 1
    return count


def find_nodes(
    forest: Sequence[Any],
    predicate: Callable[[Any], bool],
    adapter: Optional[ForestAdapter] = None
) -> Iterator[Any]:
    """Find nodes that match a predicate.

    Args:
        forest: Ordered sequence of root nodes
        predicate: Function that returns True for matching nodes
        adapter: Node adapter (default: MappingAdapter())

    Yields:
        Matching nodes in pre-order

    Example:
        >>> forest = [{"id": 1, "children": [{"id": 2}]}]
        >>> [node["id"] for node in find_nodes(forest, lambda n: n["id"] > 1)]
        [2]
    """
    if not is_forest(forest):
        return

    adapter = _resolve_adapter(adapter)
    for node, _ in DepthFirstPreOrderTraverser(adapter).traverse(forest):
        if predicate(node):
            yield node


def get_tree_stats(
    forest: Sequence[Any],
    adapter: Optional[ForestAdapter] = None
) -> Dict[str, Any]:
    """Get statistics about a forest.

    Returns:
        Dictionary with total_nodes, leaf_nodes, internal_nodes, max_depth,
        depths (depth -> node count, roots at depth 1) and average_branching
    """
    stats = {
        'total_nodes': 0,
        'leaf_nodes': 0,
        'max_depth': 0,
        'depths': {}
    }

    if is_forest(forest):
        adapter = _resolve_adapter(adapter)
        for node, depth in DepthFirstPreOrderTraverser(adapter).traverse(forest):
            stats['total_nodes'] += 1

            if adapter.is_leaf(node):
                stats['leaf_nodes'] += 1

            stats['max_depth'] = max(stats['max_depth'], depth)

            if depth not in stats['depths']:
                stats['depths'][depth] = 0
            stats['depths'][depth] += 1

    stats['internal_nodes'] = stats['total_nodes'] - stats['leaf_nodes']
    stats['average_branching'] = (
        (stats['total_nodes'] - len(forest)) / stats['internal_nodes']
        if stats['internal_nodes'] > 0 else 0
    )

    return stats


# Helper functions

def _resolve_adapter(adapter: Optional[ForestAdapter]) -> ForestAdapter:
    return adapter if adapter is not None else MappingAdapter()


def _build_filter_config(config: Optional[FilterCopyConfig], **kwargs) -> FilterCopyConfig:
    """Build and validate a FilterCopyConfig.

    Raises:
        InvalidConfigError: If nothing is given or the result is invalid
    """
    if config is None and not kwargs:
        raise InvalidConfigError("filter_tree requires a configuration with a filter predicate")

    if config is None:
        config = FilterCopyConfig(**kwargs)
    elif kwargs:
        config = dataclasses.replace(config, **kwargs)

    errors = config.validate()
    if errors:
        raise InvalidConfigError(f"Invalid configuration: {'; '.join(errors)}")

    return config
