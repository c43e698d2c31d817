"""ForestAdapter abstraction for forestlib.

The ForestAdapter is what lets forestlib work on any record shape. Nodes
are plain data (dicts, dataclasses, namespaces); the adapter knows HOW to
read and write the identifier, parent identifier, children and name of a
node, decoupling the node representation from the transformation code.
"""

import copy
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Hashable, List, Optional

from ..config import (
    DEFAULT_CHILDREN_KEY,
    DEFAULT_ID_KEY,
    DEFAULT_NAME_KEY,
    DEFAULT_PARENT_KEY,
)


def as_lookup_key(value: Any) -> Optional[Hashable]:
    """Return the value if it can key a dict, otherwise None."""
    try:
        hash(value)
    except TypeError:
        return None
    return value


def is_forest(value: Any) -> bool:
    """Check whether a value can be walked as an ordered sequence of nodes.

    Lists and tuples qualify. Strings and bytes are sequences too, but never
    forests.
    """
    return isinstance(value, (list, tuple))


class ForestAdapter(ABC):
    """Abstract adapter for reading and writing node records.

    Every operation in forestlib goes through an adapter instead of looking
    up attribute names at runtime. Subclass it to support a new node shape;
    MappingAdapter and AttributeAdapter cover dicts and plain objects.
    """

    @abstractmethod
    def get_identifier(self, node: Any) -> Any:
        """Return the node's identifier, or None if it has none."""
        pass

    @abstractmethod
    def get_parent_identifier(self, node: Any) -> Any:
        """Return the identifier of the node's parent, or None for roots."""
        pass

    @abstractmethod
    def get_name(self, node: Any) -> Any:
        """Return the node's display name, or None if it has none."""
        pass

    @abstractmethod
    def get_children(self, node: Any) -> Optional[List[Any]]:
        """Return the node's children sequence.

        Returns:
            The children sequence itself (not a copy) so callers can append
            to it, or None when the children attribute is absent or does not
            hold a sequence.
        """
        pass

    @abstractmethod
    def set_children(self, node: Any, children: List[Any]) -> None:
        """Store a children sequence on the node, replacing any existing one."""
        pass

    @abstractmethod
    def delete_children(self, node: Any) -> None:
        """Remove the children attribute from the node entirely."""
        pass

    @abstractmethod
    def annotate(self, node: Any, name: str, value: Any) -> Any:
        """Return a shallow copy of the node carrying one extra attribute.

        The original node is left untouched.
        """
        pass

    @abstractmethod
    def detached_copy(self, node: Any) -> Any:
        """Return a deep copy of the node without its children sequence.

        Children are never copied, so the cost does not depend on the size
        of the subtree below the node. A children attribute that does not
        hold a sequence (e.g. None) is copied like any other value.
        """
        pass

    def has_children(self, node: Any) -> bool:
        """Check if the node carries a children attribute (possibly empty)."""
        return self.get_children(node) is not None

    def is_leaf(self, node: Any) -> bool:
        """Check if the node has no children.

        Absent and empty children attributes both make a leaf.
        """
        return not self.get_children(node)

    def add_child(self, parent: Any, child: Any) -> None:
        """Append a child, creating the children sequence on first use."""
        children = self.get_children(parent)
        if not isinstance(children, list):
            children = list(children or ())
            self.set_children(parent, children)
        children.append(child)


class MappingAdapter(ForestAdapter):
    """Adapter for dict-like nodes.

    Example:
        >>> adapter = MappingAdapter(children_key="items")
        >>> adapter.get_children({"id": 1, "items": []})
        []
    """

    def __init__(self,
                 id_key: str = DEFAULT_ID_KEY,
                 parent_key: str = DEFAULT_PARENT_KEY,
                 children_key: str = DEFAULT_CHILDREN_KEY,
                 name_key: str = DEFAULT_NAME_KEY):
        self.id_key = id_key
        self.parent_key = parent_key
        self.children_key = children_key
        self.name_key = name_key

    def get_identifier(self, node: Any) -> Any:
        return self._read(node, self.id_key)

    def get_parent_identifier(self, node: Any) -> Any:
        return self._read(node, self.parent_key)

    def get_name(self, node: Any) -> Any:
        return self._read(node, self.name_key)

    def get_children(self, node: Any) -> Optional[List[Any]]:
        children = self._read(node, self.children_key)
        return children if is_forest(children) else None

    def set_children(self, node: Any, children: List[Any]) -> None:
        node[self.children_key] = children

    def delete_children(self, node: Any) -> None:
        node.pop(self.children_key, None)

    def annotate(self, node: Any, name: str, value: Any) -> Any:
        annotated = copy.copy(node)
        annotated[name] = value
        return annotated

    def detached_copy(self, node: Any) -> Any:
        shallow = copy.copy(node)
        if self.has_children(node):
            shallow.pop(self.children_key, None)
        return copy.deepcopy(shallow)

    def _read(self, node: Any, key: str) -> Any:
        # Anything that is not a mapping has no attributes at all
        if not isinstance(node, Mapping):
            return None
        return node.get(key)

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(id_key={self.id_key!r}, "
                f"parent_key={self.parent_key!r}, "
                f"children_key={self.children_key!r}, "
                f"name_key={self.name_key!r})")


class AttributeAdapter(MappingAdapter):
    """Adapter for plain objects (dataclasses, namespaces, custom classes).

    Uses the same attribute names as MappingAdapter but reads them with
    getattr/setattr/delattr instead of item access.
    """

    def get_identifier(self, node: Any) -> Any:
        return getattr(node, self.id_key, None)

    def get_parent_identifier(self, node: Any) -> Any:
        return getattr(node, self.parent_key, None)

    def get_name(self, node: Any) -> Any:
        return getattr(node, self.name_key, None)

    def get_children(self, node: Any) -> Optional[List[Any]]:
        children = getattr(node, self.children_key, None)
        return children if is_forest(children) else None

    def set_children(self, node: Any, children: List[Any]) -> None:
        setattr(node, self.children_key, children)

    def delete_children(self, node: Any) -> None:
        _drop_attribute(node, self.children_key)

    def annotate(self, node: Any, name: str, value: Any) -> Any:
        annotated = copy.copy(node)
        setattr(annotated, name, value)
        return annotated

    def detached_copy(self, node: Any) -> Any:
        shallow = copy.copy(node)
        if self.has_children(node):
            _drop_attribute(shallow, self.children_key)
        return copy.deepcopy(shallow)


def _drop_attribute(obj: Any, name: str) -> None:
    """Delete an instance attribute if the instance itself holds one.

    Class-level defaults (e.g. a dataclass field default) are left alone;
    reading the attribute afterwards falls back to that default.
    """
    if name in getattr(obj, "__dict__", {}):
        delattr(obj, name)
