"""locale-editor - path-addressed editing, diffing and search for translation files."""

from __future__ import annotations

from locale_editor.algorithm.config import EditorConfig
from locale_editor.api import diff, flatten, get_value, search, set_value
from locale_editor.backends.static import StaticSource
from locale_editor.exceptions import (
    FetchError,
    LocaleEditorError,
    PathError,
    ResetInProgressError,
    SessionStateError,
    StoreError,
)
from locale_editor.result import Change, ChangeKind, SearchResult
from locale_editor.session import SessionState, TranslationSession
from locale_editor.state import LanguageState
from locale_editor.stores import JsonFileStore, MemoryStore

__version__: str = "0.1.0"
__all__: list[str] = [
    "Change",
    "ChangeKind",
    "EditorConfig",
    "FetchError",
    "JsonFileStore",
    "LanguageState",
    "LocaleEditorError",
    "MemoryStore",
    "PathError",
    "ResetInProgressError",
    "SearchResult",
    "SessionState",
    "SessionStateError",
    "StaticSource",
    "StoreError",
    "TranslationSession",
    "diff",
    "flatten",
    "get_value",
    "search",
    "set_value",
]
