"""Algorithm subpackage: configuration, change sets and cross-language search."""

from locale_editor.algorithm.changeset import ChangeSetComputer
from locale_editor.algorithm.config import DEFAULT_LANGUAGES, PLACEHOLDER, EditorConfig
from locale_editor.algorithm.search import CrossDocumentIndex

__all__ = [
    "DEFAULT_LANGUAGES",
    "PLACEHOLDER",
    "ChangeSetComputer",
    "CrossDocumentIndex",
    "EditorConfig",
]
