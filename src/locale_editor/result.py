"""Result types produced by the diff and search engines."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto

__all__ = ["Change", "ChangeKind", "ChangeSet", "SearchResult"]

# Path -> new value, for one language
ChangeSet = dict[str, str]


class ChangeKind(StrEnum):
    """How a leaf differs between the edited document and its baseline."""

    ADDED = auto()
    CHANGED = auto()
    REMOVED = auto()


@dataclass(frozen=True, slots=True)
class Change:
    """One tagged leaf difference.

    Attributes:
        path: Canonical path of the leaf.
        kind: ADDED (absent from baseline), CHANGED, or REMOVED (absent from
            the edited document).
        old:  Baseline value; "" for ADDED.
        new:  Edited value; "" for REMOVED.
    """

    path: str
    kind: ChangeKind
    old: str
    new: str


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A path matching a search query, with its text in every language.

    Attributes:
        path: Canonical leaf path.
        current_by_language: Edited value per language code ("" if absent).
        baseline_by_language: Baseline value per language code ("" if absent).
        first_matching_language: First language (in iteration order) whose
            path, current value, or baseline value contains the query.  The
            editor opens this language by default for the path.
    """

    path: str
    current_by_language: dict[str, str]
    baseline_by_language: dict[str, str]
    first_matching_language: str
