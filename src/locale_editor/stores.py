"""Local persistent stores used for session autosave.

Both stores satisfy the ``LocalStore`` protocol structurally and namespace
their keys as ``<prefix><language>`` (``locale-edit-sv`` by default).

- ``MemoryStore``: process-local dict, deep-copies on the way in and out.
- ``JsonFileStore``: one JSON file per language in a directory.  Unreadable
  or corrupt files read as a miss; failed writes raise ``StoreError``.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from locale_editor.exceptions import StoreError
from locale_editor.logging import get_logger

if TYPE_CHECKING:
    from locale_editor.algorithm.config import EditorConfig

logger = get_logger(__name__)

DEFAULT_PREFIX = "locale-edit-"

__all__ = ["DEFAULT_PREFIX", "JsonFileStore", "MemoryStore", "store_for"]


class MemoryStore:
    """In-memory ``LocalStore``.

    Args:
        prefix: Key namespace.
    """

    def __init__(self, prefix: str = DEFAULT_PREFIX) -> None:
        self._prefix = prefix
        self._data: dict[str, Any] = {}

    def key(self, language: str) -> str:
        return f"{self._prefix}{language}"

    def keys(self) -> list[str]:
        """Return the stored keys, e.g. ``["locale-edit-en"]``."""
        return list(self._data)

    def get(self, language: str) -> Any | None:
        document = self._data.get(self.key(language))
        return copy.deepcopy(document) if document is not None else None

    def set(self, language: str, document: Any) -> None:
        self._data[self.key(language)] = copy.deepcopy(document)

    def clear(self, language: str) -> None:
        self._data.pop(self.key(language), None)


class JsonFileStore:
    """File-backed ``LocalStore`` writing ``<directory>/<prefix><language>.json``.

    Writes go to a temporary sibling file which then replaces the target, so
    a crash mid-write never leaves a truncated document behind.

    Args:
        directory: Where documents are kept.  Created on first write.
        prefix:    Key namespace, used as the file name prefix.
    """

    def __init__(self, directory: str | os.PathLike[str], prefix: str = DEFAULT_PREFIX) -> None:
        self._directory = Path(directory)
        self._prefix = prefix

    def __repr__(self) -> str:
        return f"JsonFileStore(directory={str(self._directory)!r})"

    def path_for(self, language: str) -> Path:
        return self._directory / f"{self._prefix}{language}.json"

    def get(self, language: str) -> Any | None:
        path = self.path_for(language)
        try:
            with path.open(encoding="utf-8") as fh:
                document = json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.debug("autosave_unreadable", language=language, path=str(path), error=str(exc))
            return None
        if not isinstance(document, (dict, list)):
            return None
        return document

    def set(self, language: str, document: Any) -> None:
        path = self.path_for(language)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(document, fh, ensure_ascii=False)
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as exc:
            raise StoreError(language, f"could not write {path}: {exc}") from exc

    def clear(self, language: str) -> None:
        try:
            self.path_for(language).unlink(missing_ok=True)
        except OSError as exc:
            raise StoreError(language, f"could not remove autosave: {exc}") from exc


def store_for(
    config: EditorConfig, directory: str | os.PathLike[str] | None = None
) -> MemoryStore | JsonFileStore:
    """Build the store namespaced by ``config.store_prefix``.

    A ``JsonFileStore`` when ``directory`` is given, otherwise a ``MemoryStore``.
    """
    if directory is not None:
        return JsonFileStore(directory, prefix=config.store_prefix)
    return MemoryStore(prefix=config.store_prefix)
