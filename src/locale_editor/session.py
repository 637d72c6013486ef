"""TranslationSession: the per-language editing state machine.

Wires a ``DocumentSource``, a ``LocalStore`` and the tree/diff/search engines
into the editing surface the admin locale editor drives.

Lifecycle::

    IDLE --load()--> LOADING --> READY --reset()--> LOADING --> READY

Architecture:
- The session exclusively owns every language's ``current`` and ``baseline``
  document.  Documents are deep-copied whenever they cross the boundary
  (source, store, callers), so no two holders ever share a mutable node.
- Fetches are asynchronous; everything else runs synchronously.  Any error
  raised by a fetch is logged and confined to its language.  Each fetch
  takes a per-language generation number and its result is applied only if
  no newer fetch for that language started meanwhile (last write wins).
- While a language's reset fetch is in flight, edits to that language are
  rejected with ``ResetInProgressError``.
- Autosave is best effort: a ``StoreError`` is logged and recorded in
  ``store_errors`` but never raised from ``edit``; the in-memory document
  stays authoritative.
- Every mutation bumps ``revision``, which keys the search cache.
"""

from __future__ import annotations

import asyncio
import copy
import time
from collections.abc import Callable, Mapping
from enum import StrEnum, auto
from typing import TYPE_CHECKING, Any

from locale_editor.algorithm.changeset import ChangeSetComputer
from locale_editor.algorithm.config import EditorConfig
from locale_editor.cache import SearchCache
from locale_editor.exceptions import (
    FetchError,
    ResetInProgressError,
    SessionStateError,
    StoreError,
)
from locale_editor.export import build_export_document
from locale_editor.logging import get_logger
from locale_editor.state import LanguageState
from locale_editor.tree.flattener import TreeFlattener
from locale_editor.tree.mutator import TreeMutator

if TYPE_CHECKING:
    from locale_editor.protocols import DocumentSource, LocalStore
    from locale_editor.result import Change, ChangeSet, SearchResult

logger = get_logger(__name__)

__all__ = ["SessionState", "TranslationSession"]


class SessionState(StrEnum):
    """Lifecycle states of a ``TranslationSession``."""

    IDLE = auto()
    LOADING = auto()
    READY = auto()


class TranslationSession:
    """Editing session over one document per configured language.

    Example::

        session = TranslationSession(StaticSource({"en": {...}}), MemoryStore(),
                                     EditorConfig(languages=("en",)))
        await session.load()
        session.edit("en", "greeting", "Hi")
        session.export_changes()        # {"en": {"greeting": "Hi"}}
        session.search("hi")            # [SearchResult(path="greeting", ...)]
    """

    def __init__(
        self,
        source: DocumentSource,
        store: LocalStore,
        config: EditorConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialise an idle session.

        Args:
            source: Where authoritative documents are fetched from.
            store:  Where edited documents are autosaved.
            config: Session settings.  Defaults to ``EditorConfig()``.
            clock:  Monotonic time function driving the saved indicator.
        """
        self._config: EditorConfig = config if config is not None else EditorConfig()
        self._source = source
        self._store = store
        self._clock = clock

        self._state = SessionState.IDLE
        self._languages: dict[str, LanguageState] = {}
        self._failed: dict[str, str] = {}
        self._store_errors: dict[str, str] = {}
        self._generations: dict[str, int] = {}
        self._resetting: set[str] = set()
        self._pending_resets = 0
        self._revision = 0
        self._saved_at: float | None = None

        self._changes = ChangeSetComputer(placeholder=self._config.placeholder)
        self._search = SearchCache(max_size=self._config.search_cache_size)
        self._flattener = TreeFlattener()
        self._mutator = TreeMutator()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def config(self) -> EditorConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def revision(self) -> int:
        """Counter incremented by every change to any document."""
        return self._revision

    @property
    def languages(self) -> list[str]:
        """Codes of successfully loaded languages, in configured order."""
        return [state.code for state in self._loaded_states()]

    @property
    def failed_languages(self) -> dict[str, str]:
        """Languages that could not be loaded, mapped to the error message."""
        return dict(self._failed)

    @property
    def store_errors(self) -> dict[str, str]:
        """Languages whose latest autosave failed, mapped to the error message."""
        return dict(self._store_errors)

    @property
    def saved_indicator(self) -> bool:
        """True for ``saved_indicator_seconds`` after a successful edit autosave."""
        if self._saved_at is None:
            return False
        return self._clock() - self._saved_at < self._config.saved_indicator_seconds

    def is_resetting(self, language: str) -> bool:
        return language in self._resetting

    def current(self, language: str) -> Any:
        """Return a copy of the edited document for ``language``."""
        return copy.deepcopy(self._require_language(language).current)

    def baseline(self, language: str) -> Any:
        """Return a copy of the baseline document for ``language``."""
        return copy.deepcopy(self._require_language(language).baseline)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Load every configured language, from autosave or from the source.

        A language restored from the store uses the restored document as its
        baseline unless ``config.true_baseline_on_restore`` is set.  A freshly
        fetched document is snapshotted into the store immediately.  Fetch
        failures are isolated to their language.

        Raises:
            SessionStateError: If the session is not idle.
        """
        if self._state is not SessionState.IDLE:
            raise SessionStateError(f"load() requires an idle session, state is {self._state}")

        self._state = SessionState.LOADING
        try:
            await asyncio.gather(*(self._load_language(code) for code in self._config.languages))
        except BaseException:
            self._state = SessionState.IDLE
            raise
        self._state = SessionState.READY
        self._bump()
        logger.info(
            "session_loaded",
            loaded=len(self._languages),
            failed=sorted(self._failed),
        )

    async def _load_language(self, code: str) -> None:
        generation = self._begin_fetch(code)
        restored = self._restore(code)

        if restored is not None:
            baseline = restored
            if self._config.true_baseline_on_restore:
                try:
                    baseline = await self._source.fetch(code)
                except FetchError as exc:
                    logger.warning("baseline_fetch_failed", language=code, error=str(exc))
                except Exception:
                    logger.exception("baseline_fetch_failed", language=code)
            if self._is_stale(code, generation):
                return
            self._install(code, current=restored, baseline=baseline)
            return

        try:
            document = await self._source.fetch(code)
        except FetchError as exc:
            if not self._is_stale(code, generation):
                self._failed[code] = str(exc)
            logger.warning("locale_load_failed", language=code, error=str(exc))
            return
        except Exception as exc:
            if not self._is_stale(code, generation):
                self._failed[code] = f"{type(exc).__name__}: {exc}"
            logger.exception("locale_load_failed", language=code)
            return
        if self._is_stale(code, generation):
            return
        self._install(code, current=document, baseline=document)
        self._autosave(code, document, indicate=False)

    def _restore(self, code: str) -> Any | None:
        try:
            return self._store.get(code)
        except StoreError as exc:
            logger.warning("autosave_restore_failed", language=code, error=str(exc))
            return None

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def edit(self, language: str, path: str, value: str) -> Any:
        """Write ``value`` at ``path`` in ``language``'s edited document.

        The document is autosaved afterwards and the saved indicator raised.

        Returns:
            A copy of the updated document.

        Raises:
            ResetInProgressError: If a reset fetch for ``language`` is pending.
            SessionStateError: If ``language`` is not loaded.
            PathError: If ``path`` is empty or addresses an array with a key.
        """
        if not isinstance(value, str):
            raise TypeError(f"translation values must be str, got {type(value).__name__}")
        state = self._require_editable(language)
        state.current = self._mutator.set(state.current, path, value)
        self._bump()
        self._autosave(language, state.current, indicate=True)
        return copy.deepcopy(state.current)

    def clear_all(self) -> None:
        """Blank every string leaf of every edited document and persist them.

        Structure is preserved and baselines are untouched.
        """
        states = self._loaded_states()
        for state in states:
            if state.code in self._resetting:
                raise ResetInProgressError(state.code)
        for state in states:
            state.current = self._mutator.blank(state.current)
            self._autosave(state.code, state.current, indicate=False)
        self._bump()
        logger.info("session_cleared", languages=[state.code for state in states])

    def apply_changes(self, changes: Mapping[str, Any]) -> int:
        """Replay an exported change document into the edited documents.

        Each language's payload may be nested (as written by the export) or a
        flat ``{path: value}`` mapping; both flatten to the same paths.
        Languages that are not loaded are skipped.  Nothing is written unless
        every path of every language applies cleanly.

        Returns:
            Number of leaves written.

        Raises:
            PathError: If a path cannot be applied; no document is changed.
        """
        staged: dict[str, tuple[Any, int]] = {}
        for language, payload in changes.items():
            if language not in self._languages:
                logger.info("changes_skipped", language=language)
                continue
            state = self._require_editable(language)
            entries = self._flattener.flatten(payload)
            if not entries:
                continue
            document = copy.deepcopy(state.current)
            for path, value in entries:
                document = self._mutator.set(document, path, value)
            staged[language] = (document, len(entries))

        for language, (document, _) in staged.items():
            self._languages[language].current = document
            self._autosave(language, document, indicate=True)
        if staged:
            self._bump()
        return sum(count for _, count in staged.values())

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def export_changes(self) -> dict[str, ChangeSet]:
        """Return ``{language: ChangeSet}`` for every language with changes."""
        exported: dict[str, ChangeSet] = {}
        for state in self._loaded_states():
            changes = self._changes.diff(state.current, state.baseline)
            if changes:
                exported[state.code] = changes
        return exported

    def export_document(self) -> dict[str, Any]:
        """Return the nested export artifact for ``export_changes()``.

        Containers keep the shape they have in each edited document.
        """
        documents = {state.code: state.current for state in self._loaded_states()}
        return build_export_document(self.export_changes(), documents)

    def changes_detailed(self, language: str) -> list[Change]:
        """Return tagged ADDED/CHANGED/REMOVED records for ``language``."""
        state = self._require_language(language)
        return self._changes.diff_detailed(state.current, state.baseline)

    def search(self, query: str) -> list[SearchResult]:
        """Search every loaded language for ``query`` (case-insensitive)."""
        return self._search.search(self._loaded_states(), query, self._revision)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    async def reset(self) -> None:
        """Re-fetch every language and make it both current and baseline.

        Each language's autosave entry is cleared.  Languages whose fetch
        fails keep their existing documents.

        Raises:
            SessionStateError: If the session was never loaded.
        """
        if self._state is SessionState.IDLE:
            raise SessionStateError("reset() requires a loaded session")

        self._state = SessionState.LOADING
        self._pending_resets += 1
        codes = list(self._config.languages)
        self._resetting.update(codes)
        try:
            await asyncio.gather(*(self._reset_language(code) for code in codes))
        finally:
            self._pending_resets -= 1
            if self._pending_resets == 0:
                self._resetting.clear()
                self._state = SessionState.READY
        self._bump()
        logger.info("session_reset", languages=self.languages)

    async def _reset_language(self, code: str) -> None:
        generation = self._begin_fetch(code)
        try:
            document = await self._source.fetch(code)
        except FetchError as exc:
            if not self._is_stale(code, generation):
                self._resetting.discard(code)
            logger.warning("locale_reset_failed", language=code, error=str(exc))
            return
        except Exception:
            if not self._is_stale(code, generation):
                self._resetting.discard(code)
            logger.exception("locale_reset_failed", language=code)
            return
        if self._is_stale(code, generation):
            return
        self._resetting.discard(code)
        self._install(code, current=document, baseline=document)
        try:
            self._store.clear(code)
        except StoreError as exc:
            self._store_errors[code] = str(exc)
            logger.warning("autosave_clear_failed", language=code, error=str(exc))
        else:
            self._store_errors.pop(code, None)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _begin_fetch(self, code: str) -> int:
        generation = self._generations.get(code, 0) + 1
        self._generations[code] = generation
        return generation

    def _is_stale(self, code: str, generation: int) -> bool:
        stale = self._generations.get(code) != generation
        if stale:
            logger.debug("stale_fetch_discarded", language=code, generation=generation)
        return stale

    def _install(self, code: str, current: Any, baseline: Any) -> None:
        self._languages[code] = LanguageState(
            code=code,
            current=copy.deepcopy(current),
            baseline=copy.deepcopy(baseline),
        )
        self._failed.pop(code, None)
        self._bump()

    def _autosave(self, code: str, document: Any, indicate: bool) -> bool:
        try:
            self._store.set(code, copy.deepcopy(document))
        except StoreError as exc:
            self._store_errors[code] = str(exc)
            logger.warning("autosave_failed", language=code, error=str(exc))
            return False
        self._store_errors.pop(code, None)
        if indicate:
            self._saved_at = self._clock()
        return True

    def _bump(self) -> None:
        self._revision += 1

    def _loaded_states(self) -> list[LanguageState]:
        return [self._languages[c] for c in self._config.languages if c in self._languages]

    def _require_language(self, language: str) -> LanguageState:
        state = self._languages.get(language)
        if state is None:
            raise SessionStateError(f"language {language!r} is not loaded")
        return state

    def _require_editable(self, language: str) -> LanguageState:
        if language in self._resetting:
            raise ResetInProgressError(language)
        return self._require_language(language)
