"""CrossDocumentIndex: case-insensitive term lookup across many languages.

A query is matched against every leaf path, edited value and baseline value
of every language at once, so a term can be located whichever language it was
typed in.  Results are grouped per path with the text of all languages.

Determinism:
- Paths are ordered by first appearance while flattening the edited
  documents language by language, in the order the states are given.
- ``first_matching_language`` is the first language, in that same order,
  whose path, edited value or baseline value contains the query.
"""

from __future__ import annotations

from collections.abc import Sequence

from locale_editor.result import SearchResult
from locale_editor.state import LanguageState
from locale_editor.tree.flattener import TreeFlattener
from locale_editor.tree.mutator import TreeMutator

__all__ = ["CrossDocumentIndex"]


class CrossDocumentIndex:
    """Builds search results over a set of language states.

    Stateless: every call flattens the given documents afresh, so results
    always reflect the documents as they are at call time.

    Example::

        index = CrossDocumentIndex()
        states = [
            LanguageState("en", {"greeting": "Hi"}, {"greeting": "Hello"}),
            LanguageState("sv", {"greeting": "Hej"}, {"greeting": "Hej"}),
        ]
        [r.path for r in index.search(states, "hej")]   # ["greeting"]
    """

    def __init__(self) -> None:
        self._flattener = TreeFlattener()
        self._mutator = TreeMutator()

    def search(self, states: Sequence[LanguageState], query: str) -> list[SearchResult]:
        """Return every path whose text matches ``query`` in any language.

        An empty query returns an empty list; search is opt-in.
        """
        if not query:
            return []

        needle = query.lower()
        results: list[SearchResult] = []
        for path in self._all_paths(states):
            current_by_language: dict[str, str] = {}
            baseline_by_language: dict[str, str] = {}
            first_match: str | None = None
            path_matches = needle in path.lower()

            for state in states:
                current = self._mutator.get(state.current, path)
                baseline = self._mutator.get(state.baseline, path)
                current_by_language[state.code] = current
                baseline_by_language[state.code] = baseline

                if first_match is None and state.loaded and (
                    path_matches
                    or needle in current.lower()
                    or needle in baseline.lower()
                ):
                    first_match = state.code

            if first_match is not None:
                results.append(
                    SearchResult(
                        path=path,
                        current_by_language=current_by_language,
                        baseline_by_language=baseline_by_language,
                        first_matching_language=first_match,
                    )
                )
        return results

    def _all_paths(self, states: Sequence[LanguageState]) -> list[str]:
        """Union of leaf paths over all edited documents, first-seen order."""
        seen: dict[str, None] = {}
        for state in states:
            for path in self._flattener.paths(state.current):
                seen.setdefault(path, None)
        return list(seen)
