"""EditorConfig: immutable settings for a translation editing session.

Holds the sentinel literal excluded from change sets, the configured language
list (whose order drives search), autosave namespacing and UI timings.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_LANGUAGES: tuple[str, ...] = (
    "ar", "de", "en", "es", "fr", "hi", "it", "ja", "ko", "nl",
    "pl", "pt", "ru", "sv", "th", "tr", "uk", "ur", "zh",
)  # fmt: skip

PLACEHOLDER = "Select..."


@dataclass(frozen=True, slots=True)
class EditorConfig:
    """Immutable configuration for ``TranslationSession``.

    Attributes:
        placeholder: Reserved literal representing an unselected UI value.
            Never reported as a change, neither as a value nor as a path.
        languages: Language codes to load, in search iteration order.
        base_language: Language other locales are synchronised from.
        store_prefix: Namespace prepended to language codes in the local store.
        search_debounce_seconds: Quiet period before a typed query is searched.
        saved_indicator_seconds: How long the "saved" flag stays raised after
            an autosave.
        search_cache_size: Number of (revision, query) results kept in memory.
        true_baseline_on_restore: When True, a language restored from the
            local store still fetches its authoritative document as baseline.
            Default False keeps the restored document as baseline.
    """

    placeholder: str = PLACEHOLDER
    languages: tuple[str, ...] = DEFAULT_LANGUAGES
    base_language: str = "en"
    store_prefix: str = "locale-edit-"
    search_debounce_seconds: float = 0.3
    saved_indicator_seconds: float = 1.2
    search_cache_size: int = 128
    true_baseline_on_restore: bool = False

    def __post_init__(self) -> None:
        if not self.languages:
            msg = "languages must not be empty"
            raise ValueError(msg)
        if len(set(self.languages)) != len(self.languages):
            msg = f"languages must be unique, got {self.languages}"
            raise ValueError(msg)
        if self.base_language not in self.languages:
            msg = f"base_language {self.base_language!r} is not in languages"
            raise ValueError(msg)
        if self.search_debounce_seconds < 0.0:
            msg = f"search_debounce_seconds must be >= 0.0, got {self.search_debounce_seconds}"
            raise ValueError(msg)
        if self.saved_indicator_seconds < 0.0:
            msg = f"saved_indicator_seconds must be >= 0.0, got {self.saved_indicator_seconds}"
            raise ValueError(msg)
        if self.search_cache_size < 1:
            msg = f"search_cache_size must be >= 1, got {self.search_cache_size}"
            raise ValueError(msg)
