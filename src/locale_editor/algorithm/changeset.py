"""ChangeSetComputer: minimal path -> value delta between two documents.

The delta is computed from the edited document's leaves only, so paths that
exist in the baseline but were removed from the edited document are not part
of the flat change set.  ``diff_detailed`` reports them separately as REMOVED.

Exclusion rules for a leaf (path, value) of the edited document:
- value equal to the baseline value at the same path ("" when absent)
- value == ""                (a cleared field is not an edit to export)
- value == placeholder       (an unselected UI value)
- path == placeholder
"""

from __future__ import annotations

from typing import Any

from locale_editor.algorithm.config import PLACEHOLDER
from locale_editor.result import Change, ChangeKind, ChangeSet
from locale_editor.tree.flattener import TreeFlattener
from locale_editor.tree.mutator import TreeMutator

__all__ = ["ChangeSetComputer"]


class ChangeSetComputer:
    """Compares an edited document against its pristine baseline.

    Example::

        computer = ChangeSetComputer()
        computer.diff({"greeting": "Hi", "bye": "Bye"},
                      {"greeting": "Hello", "bye": "Bye"})
        # {"greeting": "Hi"}
    """

    def __init__(self, placeholder: str = PLACEHOLDER) -> None:
        self._placeholder = placeholder
        self._flattener = TreeFlattener()
        self._mutator = TreeMutator()

    @property
    def placeholder(self) -> str:
        """The sentinel literal excluded from results."""
        return self._placeholder

    def diff(self, current: Any, baseline: Any) -> ChangeSet:
        """Return ``{path: value}`` for every exported edit in ``current``.

        Args:
            current:  The edited document.
            baseline: The unedited reference document; may be None.

        Returns:
            A dict in the flattener's traversal order of ``current``.
        """
        changes: ChangeSet = {}
        for path, value in self._flattener.iter_leaves(current):
            if self._is_excluded(path, value):
                continue
            if value != self._mutator.get(baseline, path):
                changes[path] = value
        return changes

    def diff_detailed(self, current: Any, baseline: Any) -> list[Change]:
        """Return tagged ADDED/CHANGED/REMOVED records.

        ADDED and CHANGED follow the same exclusion rules as ``diff`` and
        appear in ``current`` order; REMOVED records follow, in ``baseline``
        order.
        """
        changes: list[Change] = []
        for path, value in self._flattener.iter_leaves(current):
            if self._is_excluded(path, value):
                continue
            old = self._mutator.resolve(baseline, path)
            if not isinstance(old, str):
                changes.append(Change(path, ChangeKind.ADDED, "", value))
            elif old != value:
                changes.append(Change(path, ChangeKind.CHANGED, old, value))

        for path, old in self._flattener.iter_leaves(baseline):
            if path == self._placeholder:
                continue
            if not self._mutator.has_leaf(current, path):
                changes.append(Change(path, ChangeKind.REMOVED, old, ""))
        return changes

    def _is_excluded(self, path: str, value: str) -> bool:
        return value in ("", self._placeholder) or path == self._placeholder
