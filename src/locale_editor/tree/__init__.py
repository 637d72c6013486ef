"""Tree subpackage for path-addressed document primitives.

Re-exports the public API for the tree module:
- Document / NodeType / LeafEntry: the document model
- PathCodec: dotted/bracketed path normalization and splitting
- TreeFlattener: document -> ordered (path, value) leaves
- TreeMutator: path-addressed reads and create-on-write assignment
"""

from locale_editor.tree.flattener import TreeFlattener
from locale_editor.tree.mutator import TreeMutator
from locale_editor.tree.nodes import Document, LeafEntry, NodeType, node_type
from locale_editor.tree.paths import PathCodec

__all__ = [
    "Document",
    "LeafEntry",
    "NodeType",
    "PathCodec",
    "TreeFlattener",
    "TreeMutator",
    "node_type",
]
