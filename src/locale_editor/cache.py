"""SearchCache: LRU-backed caching proxy around CrossDocumentIndex.

Search is a pure function of the session's documents and the query, so a
result can be reused for as long as no document has changed.  The session
bumps a revision counter on every mutation; results are keyed by
``(revision, query)`` and entries for older revisions simply age out of the
LRU.  Eviction is silent.

Example::

    cache = SearchCache(CrossDocumentIndex(), max_size=128)
    hits = cache.search(states, "hello", revision=3)       # computed
    hits_again = cache.search(states, "hello", revision=3) # served from memory
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from cachetools import LRUCache

from locale_editor.algorithm.search import CrossDocumentIndex

if TYPE_CHECKING:
    from locale_editor.result import SearchResult
    from locale_editor.state import LanguageState


class SearchCache:
    """Memoises ``CrossDocumentIndex.search`` per document revision.

    Each instance maintains its own ``LRUCache``; two sessions never share
    cached results.

    Args:
        index:    The index to delegate cache misses to.
        max_size: Maximum number of (revision, query) results held.
    """

    def __init__(self, index: CrossDocumentIndex | None = None, max_size: int = 128) -> None:
        self._index = index if index is not None else CrossDocumentIndex()
        self._cache: LRUCache[tuple[int, str], tuple[SearchResult, ...]] = LRUCache(
            maxsize=max_size
        )
        self.misses = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        """The maximum number of entries this cache can hold."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """The current number of entries stored in the cache."""
        return int(self._cache.currsize)

    # ------------------------------------------------------------------
    # Search surface
    # ------------------------------------------------------------------

    def search(
        self,
        states: Sequence[LanguageState],
        query: str,
        revision: int,
    ) -> list[SearchResult]:
        """Return search results, computing them only on a cache miss.

        Args:
            states:   Language states to search.
            query:    Free-text query; "" always yields [] without caching.
            revision: Identifies the document contents ``states`` hold.  The
                      caller must change it whenever any document changes.
        """
        if not query:
            return []
        key = (revision, query)
        cached = self._cache.get(key)
        if cached is None:
            self.misses += 1
            cached = tuple(self._index.search(states, query))
            self._cache[key] = cached
        return list(cached)

    def clear(self) -> None:
        self._cache.clear()
