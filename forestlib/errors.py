"""Exceptions raised by forestlib.

Malformed input degrades softly (empty results); only programmer errors and
cyclic node graphs raise.
"""

from typing import Any


class ForestError(Exception):
    """Base class for all forestlib errors."""
    pass


class InvalidConfigError(ForestError, ValueError):
    """Raised when an operation is called with an unusable configuration."""
    pass


class CycleDetectedError(ForestError):
    """Raised when a node is reached again below itself.

    Attributes:
        node: The node that closed the cycle
        depth: Depth at which it was reached again (roots are depth 1)
    """

    def __init__(self, node: Any, depth: int):
        self.node = node
        self.depth = depth
        super().__init__(
            f"Cycle detected: node {node!r} is its own ancestor (reached again at depth {depth})"
        )
