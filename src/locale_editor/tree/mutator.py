"""TreeMutator: reads and writes document leaves by path.

Writes mutate the given document in place and return the same root object;
callers should still use the returned value.  Missing intermediate containers
are created on the way down: an ``list`` when the *next* step is an index,
otherwise a ``dict``.  An intermediate step that currently holds a string (or
any other non-container) is replaced by a fresh container, which lets an
edited document restructure itself.

Arrays are padded with ``None`` when written past their end; ``None`` is
skipped by the flattener, so padding never shows up as a leaf.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from locale_editor.exceptions import PathError
from locale_editor.tree.nodes import NodeType, node_type
from locale_editor.tree.paths import PathCodec

_codec = PathCodec()

# Marker for "no value at this path" (distinct from a stored None)
_MISSING: Any = object()


@dataclass
class TreeMutator:
    """Path-addressed read/write access to a document.

    Example::
        mutator = TreeMutator()
        doc = mutator.set({}, "items.0.label", "First")
        # {"items": [{"label": "First"}]}
        mutator.get(doc, "items[0].label")   # "First"
        mutator.get(doc, "items.1.label")    # ""
    """

    def set(self, document: Any, path: str, value: str) -> Any:
        """Assign ``value`` at ``path``, creating containers as needed.

        Args:
            document: Root container (dict or list).
            path:     Dotted or bracketed path; must contain at least one step.
            value:    String to store.  Any prior leaf or subtree at the final
                      step is overwritten.

        Returns:
            The (mutated) root document.

        Raises:
            PathError: If ``path`` is empty, the root is not a container, or a
                non-index step addresses an array.
        """
        steps = _codec.split(path)
        if not steps:
            raise PathError("cannot assign to the document root", path=path)
        if node_type(document) not in (NodeType.OBJECT, NodeType.ARRAY):
            raise PathError("document root must be an object or array", path=path)

        current = document
        for i, step in enumerate(steps[:-1]):
            child = self._child(current, step)
            if node_type(child) not in (NodeType.OBJECT, NodeType.ARRAY):
                child = [] if _codec.is_index(steps[i + 1]) else {}
                self._assign(current, step, child, path)
            current = child

        self._assign(current, steps[-1], value, path)
        return document

    def get(self, document: Any, path: str) -> str:
        """Return the string at ``path``, or "" when absent or not a string."""
        value = self.resolve(document, path)
        return value if isinstance(value, str) else ""

    def has_leaf(self, document: Any, path: str) -> bool:
        """Return True if a string leaf exists at ``path``."""
        return isinstance(self.resolve(document, path), str)

    def resolve(self, document: Any, path: str) -> Any:
        """Walk ``path`` and return whatever value sits there.

        Returns a private sentinel (never equal to any JSON value) when the
        walk leaves the document; descending into a string counts as leaving.
        """
        current = document
        for step in _codec.split(path):
            current = self._child(current, step)
            if current is _MISSING:
                return _MISSING
        return current

    def blank(self, document: Any) -> Any:
        """Return a copy of ``document`` with every string leaf set to "".

        Containers (including empty ones) keep their shape; non-string
        scalars are copied unchanged.
        """
        kind = node_type(document)
        if kind is NodeType.LEAF:
            return ""
        if kind is NodeType.OBJECT:
            return {key: self.blank(child) for key, child in document.items()}
        if kind is NodeType.ARRAY:
            return [self.blank(child) for child in document]
        return document

    # ------------------------------------------------------------------
    # Container helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _child(container: Any, step: str) -> Any:
        kind = node_type(container)
        if kind is NodeType.OBJECT:
            return container.get(step, _MISSING)
        if kind is NodeType.ARRAY and _codec.is_index(step):
            index = int(step)
            if index < len(container):
                return container[index]
        return _MISSING

    @staticmethod
    def _assign(container: Any, step: str, value: Any, path: str) -> None:
        if isinstance(container, dict):
            container[step] = value
            return
        if not _codec.is_index(step):
            raise PathError(f"array step {step!r} is not an index", path=path)
        index = int(step)
        if index >= len(container):
            container.extend([None] * (index - len(container) + 1))
        container[index] = value
