"""Structural protocols for the session's external collaborators.

Any object with conformant methods satisfies these protocols at runtime; no
inheritance is required.

Example::

    from locale_editor.protocols import DocumentSource

    class BundledSource:
        async def fetch(self, language: str) -> dict:
            return load_bundle(language)

    assert isinstance(BundledSource(), DocumentSource)  # True
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from locale_editor.tree.nodes import Document


@runtime_checkable
class DocumentSource(Protocol):
    """Authoritative source of translation documents.

    ``fetch`` must return a well-formed string-leaf tree for ``language`` and
    raise ``FetchError`` when it cannot.
    """

    async def fetch(self, language: str) -> Document: ...


@runtime_checkable
class LocalStore(Protocol):
    """Namespaced blob store used for autosave.

    No transactional guarantees are expected.  ``get`` returns None on a miss;
    ``set`` may raise ``StoreError``.
    """

    def get(self, language: str) -> Document | None: ...

    def set(self, language: str, document: Document) -> None: ...

    def clear(self, language: str) -> None: ...
