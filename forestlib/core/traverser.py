"""Forest traversal strategies for forestlib.

Traversers walk every root of a forest through a ForestAdapter. They keep
an explicit work stack instead of recursing, so very deep trees do not
exhaust the interpreter's call stack, and they track the nodes on the
current root-to-node path to turn cyclic input into CycleDetectedError
instead of an endless walk.

Depths are 1-based: roots are at depth 1.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterator, List, Optional, Sequence, Set, Tuple

from .adapter import ForestAdapter
from ..errors import CycleDetectedError

_EXHAUSTED = object()

# Returned by a fold_forest enter callback to drop a node and its subtree
SKIP = object()


class ForestTraverser(ABC):
    """Abstract base class for forest traversal strategies."""

    def __init__(self, adapter: ForestAdapter):
        """Initialize traverser with an adapter.

        Args:
            adapter: ForestAdapter for reading children
        """
        self.adapter = adapter

    @abstractmethod
    def traverse(self,
                 forest: Sequence[Any],
                 max_depth: Optional[int] = None,
                 min_depth: int = 1) -> Iterator[Tuple[Any, int]]:
        """Traverse every tree of the forest.

        Args:
            forest: Ordered sequence of root nodes
            max_depth: Maximum depth to traverse (None = unlimited)
            min_depth: Minimum depth before yielding nodes

        Yields:
            Tuples of (node, depth)
        """
        pass

    def _should_yield(self, depth: int, min_depth: int, max_depth: Optional[int]) -> bool:
        if depth < min_depth:
            return False
        if max_depth is not None and depth > max_depth:
            return False
        return True

    def _should_explore(self, depth: int, max_depth: Optional[int]) -> bool:
        if max_depth is None:
            return True
        return depth < max_depth


class DepthFirstPreOrderTraverser(ForestTraverser):
    """Depth-first pre-order traversal strategy.

    Visits a node before its children, siblings left to right, roots left
    to right. Children are read only after the consumer resumes the
    generator, so a consumer that mutates a node's children while handling
    it sees the mutation reflected in the rest of the walk.
    """

    def traverse(self,
                 forest: Sequence[Any],
                 max_depth: Optional[int] = None,
                 min_depth: int = 1) -> Iterator[Tuple[Any, int]]:
        # stack[k] iterates the children of ancestors[k - 1]; stack[0] the roots
        stack: List[Iterator[Any]] = [iter(forest)]
        ancestors: List[Any] = []
        on_path: Set[int] = set()

        while stack:
            node = next(stack[-1], _EXHAUSTED)
            if node is _EXHAUSTED:
                stack.pop()
                if ancestors:
                    on_path.discard(id(ancestors.pop()))
                continue

            depth = len(stack)
            if id(node) in on_path:
                raise CycleDetectedError(node, depth)

            if self._should_yield(depth, min_depth, max_depth):
                yield (node, depth)

            if not self._should_explore(depth, max_depth):
                continue

            children = self.adapter.get_children(node)
            if children:
                ancestors.append(node)
                on_path.add(id(node))
                stack.append(iter(children))


class _Frame:
    __slots__ = ("node", "depth", "state", "results")

    def __init__(self, node: Any, depth: int, state: Any):
        self.node = node
        self.depth = depth
        self.state = state
        self.results: List[Any] = []


def fold_forest(forest: Sequence[Any],
                adapter: ForestAdapter,
                enter: Callable[[Any, int], Any],
                leave: Callable[[Any, int, Any, List[Any]], Any]) -> List[Any]:
    """Rebuild a forest bottom-up with an explicit work stack.

    ``enter(node, depth)`` runs in pre-order. Returning SKIP drops the node
    and its whole subtree; any other value is kept as the node's state.
    ``leave(node, depth, state, child_results)`` runs once all children are
    done and receives the non-None results of its children in order. A None
    result drops the node from its parent's results.

    Args:
        forest: Ordered sequence of root nodes
        adapter: ForestAdapter for reading children
        enter: Pre-order callback
        leave: Post-order callback

    Returns:
        Non-None results of the roots, in order

    Raises:
        CycleDetectedError: If a node is reached again below itself
    """
    top_results: List[Any] = []
    iterators: List[Iterator[Any]] = [iter(forest)]
    frames: List[_Frame] = []
    on_path: Set[int] = set()

    while iterators:
        node = next(iterators[-1], _EXHAUSTED)
        if node is _EXHAUSTED:
            iterators.pop()
            if frames:
                frame = frames.pop()
                on_path.discard(id(frame.node))
                result = leave(frame.node, frame.depth, frame.state, frame.results)
                if result is not None:
                    (frames[-1].results if frames else top_results).append(result)
            continue

        depth = len(iterators)
        if id(node) in on_path:
            raise CycleDetectedError(node, depth)

        state = enter(node, depth)
        if state is SKIP:
            continue

        frames.append(_Frame(node, depth, state))
        on_path.add(id(node))
        iterators.append(iter(adapter.get_children(node) or ()))

    return top_results
