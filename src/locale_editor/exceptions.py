"""Exception hierarchy for locale-editor.

All custom exceptions inherit from LocaleEditorError.  Errors tied to one
language carry its code in ``language`` so the session can isolate failures
per language instead of aborting the whole editor.
"""

from __future__ import annotations

__all__ = [
    "FetchError",
    "LocaleEditorError",
    "PathError",
    "ResetInProgressError",
    "SessionStateError",
    "StoreError",
]


class LocaleEditorError(Exception):
    """Base exception for all locale-editor errors."""


class PathError(LocaleEditorError, ValueError):
    """A path cannot be used for the requested mutation."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{message} (path={path!r})" if path else message)


class FetchError(LocaleEditorError):
    """The authoritative document for a language could not be fetched."""

    def __init__(self, language: str, message: str = "Failed to load translation file") -> None:
        self.language = language
        super().__init__(f"{language}: {message}")


class StoreError(LocaleEditorError):
    """The local persistent store rejected a read or write."""

    def __init__(self, language: str, message: str = "Local store unavailable") -> None:
        self.language = language
        super().__init__(f"{language}: {message}")


class SessionStateError(LocaleEditorError):
    """An operation is not valid in the session's current state."""


class ResetInProgressError(SessionStateError):
    """An edit arrived while a reset fetch for the same language was pending."""

    def __init__(self, language: str) -> None:
        self.language = language
        super().__init__(f"{language}: reset in progress, edit rejected")
