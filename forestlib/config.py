"""Configuration for forestlib.

Defaults for the attribute names nodes are read through, the configuration
object for filtered deep copies, and the environment-driven log level.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, List, Optional


# Attribute names used by the default adapters
DEFAULT_ID_KEY = "id"
DEFAULT_PARENT_KEY = "parentId"
DEFAULT_CHILDREN_KEY = "children"
DEFAULT_NAME_KEY = "name"

# Attribute that fuzzy search attaches to every node it keeps
MATCHED_CHILDREN_KEY = "childrenNode"

LOG_LEVEL_ENV = "FORESTLIB_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def log_level_from_env() -> str:
    """Resolve the log level from FORESTLIB_LOG_LEVEL.

    Unknown level names fall back to DEFAULT_LOG_LEVEL.
    """
    level = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        return DEFAULT_LOG_LEVEL
    return level


@dataclass
class FilterCopyConfig:
    """Configuration for a filtered deep copy of a forest.

    The predicate is mandatory; everything else has a default. Reading and
    writing children through two different adapters renames the children
    attribute in the copy.
    """

    # Keep-predicate; a rejected node drops its whole subtree
    filter: Optional[Callable[[Any], bool]] = None

    # Transform applied to accepted nodes before copying: ope(node, depth)
    ope: Optional[Callable[[Any, int], Any]] = None

    # Adapter children are read through (None = default MappingAdapter)
    adapter: Optional[Any] = None

    # Adapter children are written through in the copy (None = adapter)
    output_adapter: Optional[Any] = None

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.filter is None:
            errors.append("filter predicate is required")
        elif not callable(self.filter):
            errors.append("filter must be callable")

        if self.ope is not None and not callable(self.ope):
            errors.append("ope must be callable")

        return errors
