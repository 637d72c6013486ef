"""Public convenience functions for locale-editor.

Each call uses fresh engine objects, so there is no shared state between
calls.  Use ``TranslationSession`` for a stateful multi-language editor.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from locale_editor.algorithm.changeset import ChangeSetComputer
from locale_editor.algorithm.config import PLACEHOLDER
from locale_editor.algorithm.search import CrossDocumentIndex
from locale_editor.result import ChangeSet, SearchResult
from locale_editor.state import LanguageState
from locale_editor.tree.flattener import TreeFlattener
from locale_editor.tree.mutator import TreeMutator
from locale_editor.tree.nodes import LeafEntry

__all__ = ["diff", "flatten", "get_value", "search", "set_value"]


def flatten(document: Any) -> list[LeafEntry]:
    """Return every ``(path, value)`` string leaf of ``document`` in order."""
    return TreeFlattener().flatten(document)


def set_value(document: Any, path: str, value: str) -> Any:
    """Assign ``value`` at ``path`` in place, creating containers as needed.

    Returns:
        The root document; always use the returned value.
    """
    return TreeMutator().set(document, path, value)


def get_value(document: Any, path: str) -> str:
    """Return the string at ``path``, or "" when there is none."""
    return TreeMutator().get(document, path)


def diff(current: Any, baseline: Any, placeholder: str = PLACEHOLDER) -> ChangeSet:
    """Return the ``{path: value}`` edits of ``current`` relative to ``baseline``."""
    return ChangeSetComputer(placeholder=placeholder).diff(current, baseline)


def search(
    documents: Mapping[str, tuple[Any, Any]] | Sequence[LanguageState],
    query: str,
) -> list[SearchResult]:
    """Search several languages at once.

    Args:
        documents: Either ``LanguageState`` objects, or a mapping of
            ``language -> (current, baseline)`` in iteration order.
        query:     Case-insensitive substring; "" returns [].
    """
    if isinstance(documents, Mapping):
        states = [
            LanguageState(code=code, current=current, baseline=baseline)
            for code, (current, baseline) in documents.items()
        ]
    else:
        states = list(documents)
    return CrossDocumentIndex().search(states, query)
