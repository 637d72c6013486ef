"""TreeFlattener: walks a document and yields every string leaf with its path.

Traversal is depth-first pre-order.  Keyed containers are enumerated in
insertion order and indexed containers in index order; other components
(search, diff) rely on this order being stable for identical input.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from locale_editor.tree.nodes import LeafEntry, NodeType, node_type
from locale_editor.tree.paths import SEPARATOR


@dataclass
class TreeFlattener:
    """Converts a document into an ordered list of ``LeafEntry``.

    Dispatch per child value:
        LEAF          -> emitted at the accumulated path
        OBJECT, ARRAY -> recursed into with the path extended by the key/index
        anything else -> skipped (neither emitted nor recursed into)

    A string root has no addressable path and flattens to an empty list.

    Example::
        flattener = TreeFlattener()
        flattener.flatten({"nav": {"home": "Home"}, "items": ["a", "b"]})
        # [LeafEntry("nav.home", "Home"), LeafEntry("items.0", "a"),
        #  LeafEntry("items.1", "b")]
    """

    def flatten(self, document: Any) -> list[LeafEntry]:
        """Return every string leaf of ``document`` in traversal order."""
        return list(self.iter_leaves(document))

    def paths(self, document: Any) -> list[str]:
        """Return only the leaf paths of ``document`` in traversal order."""
        return [entry.path for entry in self.iter_leaves(document)]

    def iter_leaves(self, document: Any, prefix: str = "") -> Iterator[LeafEntry]:
        """Lazily yield leaves below ``document``.

        Args:
            document: Any JSON value.
            prefix:   Path of ``document`` itself; "" for the root.
        """
        for step, child in self._children(document):
            path = f"{prefix}{SEPARATOR}{step}" if prefix else str(step)
            kind = node_type(child)
            if kind is NodeType.LEAF:
                yield LeafEntry(path, child)
            elif kind is NodeType.OBJECT or kind is NodeType.ARRAY:
                yield from self.iter_leaves(child, path)

    @staticmethod
    def _children(value: Any) -> Iterator[tuple[str | int, Any]]:
        kind = node_type(value)
        if kind is NodeType.OBJECT:
            yield from value.items()
        elif kind is NodeType.ARRAY:
            yield from enumerate(value)
