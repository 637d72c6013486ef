"""Document typing and the closed node classification used by the tree engine.

A translation document is plain JSON data: keyed containers (``dict``),
indexed containers (``list``) and string leaves.  Rather than wrapping every
node in an object, the engine classifies raw values through ``node_type()``
so that the flattener and mutator handle exactly three cases.
"""

from __future__ import annotations

from enum import StrEnum, auto
from typing import Any, NamedTuple, TypeAlias

# Recursive alias; non-string scalars may appear in real files but are never leaves.
Document: TypeAlias = dict[str, Any] | list[Any] | str


class NodeType(StrEnum):
    """Enumeration of the three structural node kinds in a document.

    - OBJECT -> "object" : keyed container (dict)
    - ARRAY  -> "array"  : indexed container (list)
    - LEAF   -> "leaf"   : string value
    """

    OBJECT = auto()
    ARRAY = auto()
    LEAF = auto()


def node_type(value: Any) -> NodeType | None:
    """Classify a raw value, returning None for unsupported scalars.

    Numbers, booleans and null are not part of the document model and are
    skipped by every traversal.
    """
    if isinstance(value, str):
        return NodeType.LEAF
    if isinstance(value, dict):
        return NodeType.OBJECT
    if isinstance(value, list):
        return NodeType.ARRAY
    return None


class LeafEntry(NamedTuple):
    """A flattened (path, value) pair.

    Attributes:
        path:  Canonical dotted path, e.g. ``"items.0.label"``.
        value: The string stored at that path.
    """

    path: str
    value: str
