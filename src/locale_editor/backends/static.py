"""StaticSource: an in-memory DocumentSource.

Serves documents from a mapping supplied at construction.  Useful for tests,
bundled fallbacks, and offline tooling such as the CLI.  Every fetch returns a
deep copy, so callers can never mutate the source's documents.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from locale_editor.exceptions import FetchError


class StaticSource:
    """DocumentSource backed by a ``{language: document}`` mapping.

    Satisfies the ``DocumentSource`` protocol structurally.

    Args:
        documents: Documents per language code.  The mapping is copied.
    """

    def __init__(self, documents: Mapping[str, Any] | None = None) -> None:
        self._documents: dict[str, Any] = dict(documents or {})
        self.fetch_count = 0

    def __repr__(self) -> str:
        return f"StaticSource(languages={sorted(self._documents)!r})"

    def put(self, language: str, document: Any) -> None:
        """Replace the authoritative document for ``language``."""
        self._documents[language] = document

    async def fetch(self, language: str) -> Any:
        """Return a copy of the document for ``language``.

        Raises:
            FetchError: If no document is registered for ``language``.
        """
        self.fetch_count += 1
        try:
            document = self._documents[language]
        except KeyError:
            raise FetchError(language, "no document registered") from None
        return copy.deepcopy(document)
