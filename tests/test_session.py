"""Tests for TranslationSession: lifecycle, editing, export, clear, reset, search."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from locale_editor.algorithm.config import EditorConfig
from locale_editor.backends import StaticSource
from locale_editor.exceptions import (
    FetchError,
    PathError,
    ResetInProgressError,
    SessionStateError,
    StoreError,
)
from locale_editor.result import ChangeKind
from locale_editor.session import SessionState, TranslationSession
from locale_editor.stores import MemoryStore

CONFIG = EditorConfig(languages=("en", "sv"))

DOCUMENTS: dict[str, Any] = {
    "en": {"greeting": "Hello"},
    "sv": {"greeting": "Hej"},
}

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class _FailingStore(MemoryStore):
    """MemoryStore whose writes can be switched to fail."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False

    def set(self, language: str, document: Any) -> None:
        if self.fail_writes:
            raise StoreError(language, "quota exceeded")
        super().set(language, document)


class _GatedSource(StaticSource):
    """StaticSource whose fetches wait for an explicit release per call."""

    def __init__(self, documents: dict[str, Any]) -> None:
        super().__init__(documents)
        self.gates: list[tuple[str, asyncio.Event, Any]] = []
        self.gated = False

    def respond_with(self, language: str, document: Any) -> None:
        self.put(language, document)

    async def fetch(self, language: str) -> Any:
        document = await super().fetch(language)
        if self.gated:
            gate = asyncio.Event()
            self.gates.append((language, gate, document))
            await gate.wait()
        return document


class _BrokenSource(StaticSource):
    """StaticSource that raises an unexpected error for chosen languages."""

    def __init__(self, documents: dict[str, Any], broken: set[str]) -> None:
        super().__init__(documents)
        self.broken = broken

    async def fetch(self, language: str) -> Any:
        if language in self.broken:
            raise RuntimeError(f"malformed request for {language}")
        return await super().fetch(language)


class _ReferenceStore:
    """LocalStore that keeps whatever object it is given."""

    def __init__(self) -> None:
        self.saved: dict[str, Any] = {}

    def get(self, language: str) -> Any | None:
        return self.saved.get(language)

    def set(self, language: str, document: Any) -> None:
        self.saved[language] = document

    def clear(self, language: str) -> None:
        self.saved.pop(language, None)


async def _until(condition: Callable[[], bool]) -> None:
    while not condition():
        await asyncio.sleep(0)


def _session(
    documents: dict[str, Any] | None = None,
    store: MemoryStore | None = None,
    config: EditorConfig = CONFIG,
    clock: _Clock | None = None,
) -> TranslationSession:
    source = StaticSource(documents if documents is not None else DOCUMENTS)
    return TranslationSession(
        source,
        store if store is not None else MemoryStore(),
        config,
        clock=clock if clock is not None else _Clock(),
    )


def _loaded(**kwargs: Any) -> TranslationSession:
    session = _session(**kwargs)
    asyncio.run(session.load())
    return session


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_starts_idle(self) -> None:
        assert _session().state is SessionState.IDLE

    def test_load_reaches_ready(self) -> None:
        session = _loaded()
        assert session.state is SessionState.READY
        assert session.languages == ["en", "sv"]

    def test_load_twice_rejected(self) -> None:
        session = _loaded()
        with pytest.raises(SessionStateError):
            asyncio.run(session.load())

    def test_reset_before_load_rejected(self) -> None:
        with pytest.raises(SessionStateError):
            asyncio.run(_session().reset())

    def test_edit_before_load_rejected(self) -> None:
        with pytest.raises(SessionStateError):
            _session().edit("en", "greeting", "Hi")

    def test_languages_follow_config_order(self) -> None:
        config = EditorConfig(languages=("sv", "en"), base_language="en")
        assert _loaded(config=config).languages == ["sv", "en"]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoad:
    def test_fetched_document_is_current_and_baseline(self) -> None:
        session = _loaded()
        assert session.current("en") == {"greeting": "Hello"}
        assert session.baseline("en") == {"greeting": "Hello"}

    def test_fetched_document_snapshotted_to_store(self) -> None:
        store = MemoryStore()
        _loaded(store=store)
        assert store.get("sv") == {"greeting": "Hej"}

    def test_restored_from_store_without_fetch(self) -> None:
        store = MemoryStore()
        store.set("en", {"greeting": "Restored"})
        source = StaticSource(DOCUMENTS)
        session = TranslationSession(source, store, CONFIG)
        asyncio.run(session.load())
        assert session.current("en") == {"greeting": "Restored"}
        assert session.baseline("en") == {"greeting": "Restored"}
        assert source.fetch_count == 1  # only "sv"

    def test_restored_edit_absorbed_into_baseline_by_default(self) -> None:
        store = MemoryStore()
        store.set("en", {"greeting": "Hi"})
        session = _loaded(store=store)
        assert session.export_changes() == {}

    def test_true_baseline_on_restore(self) -> None:
        store = MemoryStore()
        store.set("en", {"greeting": "Hi"})
        config = EditorConfig(languages=("en", "sv"), true_baseline_on_restore=True)
        session = _loaded(store=store, config=config)
        assert session.current("en") == {"greeting": "Hi"}
        assert session.baseline("en") == {"greeting": "Hello"}
        assert session.export_changes() == {"en": {"greeting": "Hi"}}

    def test_true_baseline_falls_back_when_fetch_fails(self) -> None:
        store = MemoryStore()
        store.set("en", {"greeting": "Hi"})
        config = EditorConfig(languages=("en",), true_baseline_on_restore=True)
        session = _loaded(documents={}, store=store, config=config)
        assert session.baseline("en") == {"greeting": "Hi"}

    def test_unexpected_fetch_error_isolated(self) -> None:
        source = _BrokenSource(DOCUMENTS, broken={"sv"})
        session = TranslationSession(source, MemoryStore(), CONFIG)
        asyncio.run(session.load())
        assert session.state is SessionState.READY
        assert session.languages == ["en"]
        assert "RuntimeError" in session.failed_languages["sv"]

    def test_failed_language_isolated(self) -> None:
        session = _loaded(documents={"en": {"greeting": "Hello"}})
        assert session.state is SessionState.READY
        assert session.languages == ["en"]
        assert list(session.failed_languages) == ["sv"]
        with pytest.raises(SessionStateError):
            session.edit("sv", "greeting", "Hej")

    def test_failed_language_skipped_in_search_and_export(self) -> None:
        session = _loaded(documents={"en": {"greeting": "Hello"}})
        session.edit("en", "greeting", "Hi")
        assert session.export_changes() == {"en": {"greeting": "Hi"}}
        (result,) = session.search("greeting")
        assert result.current_by_language == {"en": "Hi"}

    def test_current_and_baseline_do_not_share_nodes(self) -> None:
        session = _loaded(documents={"en": {"nav": {"home": "Home"}}, "sv": {}})
        session.edit("en", "nav.home", "Start")
        assert session.baseline("en") == {"nav": {"home": "Home"}}
        assert session.export_changes() == {"en": {"nav.home": "Start"}}


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------


class TestEdit:
    def test_concrete_scenario(self) -> None:
        session = _loaded()
        session.edit("en", "greeting", "Hi")
        assert session.export_changes() == {"en": {"greeting": "Hi"}}
        assert "sv" not in session.export_changes()
        results = session.search("hi")
        assert [r.path for r in results] == ["greeting"]
        assert results[0].first_matching_language == "en"

    def test_edit_autosaves(self) -> None:
        store = MemoryStore()
        session = _loaded(store=store)
        session.edit("sv", "menu.items[0]", "Hem")
        assert store.get("sv") == {"greeting": "Hej", "menu": {"items": ["Hem"]}}

    def test_edit_returns_copy(self) -> None:
        session = _loaded()
        returned = session.edit("en", "greeting", "Hi")
        returned["greeting"] = "tampered"
        assert session.current("en") == {"greeting": "Hi"}

    def test_accessors_return_copies(self) -> None:
        session = _loaded()
        session.current("en")["greeting"] = "tampered"
        session.baseline("en")["greeting"] = "tampered"
        assert session.current("en") == {"greeting": "Hello"}
        assert session.baseline("en") == {"greeting": "Hello"}

    def test_edit_back_to_baseline_clears_change(self) -> None:
        session = _loaded()
        session.edit("en", "greeting", "Hi")
        session.edit("en", "greeting", "Hello")
        assert session.export_changes() == {}

    def test_non_string_value_rejected(self) -> None:
        session = _loaded()
        with pytest.raises(TypeError):
            session.edit("en", "greeting", 5)  # type: ignore[arg-type]

    def test_empty_path_rejected(self) -> None:
        with pytest.raises(PathError):
            _loaded().edit("en", "", "x")

    def test_unknown_language_rejected(self) -> None:
        with pytest.raises(SessionStateError):
            _loaded().edit("fr", "greeting", "Salut")

    def test_revision_bumped(self) -> None:
        session = _loaded()
        before = session.revision
        session.edit("en", "greeting", "Hi")
        assert session.revision > before


class TestSavedIndicator:
    def test_raised_after_edit_then_expires(self) -> None:
        clock = _Clock()
        session = _loaded(clock=clock)
        assert not session.saved_indicator
        session.edit("en", "greeting", "Hi")
        assert session.saved_indicator
        clock.now += 1.0
        assert session.saved_indicator
        clock.now += 0.3
        assert not session.saved_indicator

    def test_not_raised_by_load(self) -> None:
        assert not _loaded().saved_indicator


class TestAutosaveCopies:
    def test_store_never_shares_nodes_with_session(self) -> None:
        store = _ReferenceStore()
        session = TranslationSession(StaticSource(DOCUMENTS), store, CONFIG)
        asyncio.run(session.load())
        session.edit("en", "greeting", "Hi")
        snapshot = store.saved["en"]
        session.edit("en", "greeting", "Hey")
        assert snapshot == {"greeting": "Hi"}
        store.saved["en"]["greeting"] = "tampered"
        assert session.current("en") == {"greeting": "Hey"}


class TestAutosaveFailure:
    def test_edit_survives_store_failure(self) -> None:
        store = _FailingStore()
        session = _loaded(store=store)
        store.fail_writes = True
        session.edit("en", "greeting", "Hi")
        assert session.current("en") == {"greeting": "Hi"}
        assert "quota exceeded" in session.store_errors["en"]
        assert not session.saved_indicator

    def test_error_cleared_by_next_successful_save(self) -> None:
        store = _FailingStore()
        session = _loaded(store=store)
        store.fail_writes = True
        session.edit("en", "greeting", "Hi")
        store.fail_writes = False
        session.edit("en", "greeting", "Hey")
        assert session.store_errors == {}
        assert store.get("en") == {"greeting": "Hey"}


# ---------------------------------------------------------------------------
# Export / clear
# ---------------------------------------------------------------------------


class TestExport:
    def test_export_document_keeps_object_shape(self) -> None:
        session = _loaded(documents={"en": {"rating": {"1": "Poor", "label": "Rating"}}, "sv": {}})
        session.edit("en", "rating.1", "Bad")
        assert session.export_document() == {"en": {"rating": {"1": "Bad"}}}

    def test_no_changes(self) -> None:
        assert _loaded().export_changes() == {}

    def test_export_is_pure(self) -> None:
        session = _loaded()
        session.edit("en", "greeting", "Hi")
        revision = session.revision
        assert session.export_changes() == session.export_changes()
        assert session.revision == revision

    def test_placeholder_not_exported(self) -> None:
        session = _loaded()
        session.edit("en", "greeting", "Select...")
        session.edit("sv", "greeting", "")
        assert session.export_changes() == {}

    def test_changes_detailed(self) -> None:
        session = _loaded(documents={"en": {"a": "1", "b": "2"}, "sv": {}})
        session.edit("en", "a", "one")
        session.edit("en", "c", "3")
        kinds = {change.path: change.kind for change in session.changes_detailed("en")}
        assert kinds == {"a": ChangeKind.CHANGED, "c": ChangeKind.ADDED}


class TestClearAll:
    def test_leaves_blanked_structure_kept(self) -> None:
        documents = {"en": {"nav": {"home": "Home"}, "items": ["a", "b"]}, "sv": {"x": "y"}}
        store = MemoryStore()
        session = _loaded(documents=documents, store=store)
        session.clear_all()
        assert session.current("en") == {"nav": {"home": ""}, "items": ["", ""]}
        assert session.current("sv") == {"x": ""}
        assert store.get("en") == {"nav": {"home": ""}, "items": ["", ""]}

    def test_baseline_untouched_and_nothing_exported(self) -> None:
        session = _loaded()
        session.clear_all()
        assert session.baseline("en") == {"greeting": "Hello"}
        assert session.export_changes() == {}


# ---------------------------------------------------------------------------
# Reset
# ---------------------------------------------------------------------------


class TestReset:
    def test_reset_refetches_and_clears_store(self) -> None:
        store = MemoryStore()
        session = _loaded(store=store)
        session.edit("en", "greeting", "Hi")
        asyncio.run(session.reset())
        assert session.state is SessionState.READY
        assert session.current("en") == {"greeting": "Hello"}
        assert session.export_changes() == {}
        assert store.get("en") is None
        assert store.get("sv") is None

    def test_reset_picks_up_new_upstream_baseline(self) -> None:
        source = StaticSource(DOCUMENTS)
        session = TranslationSession(source, MemoryStore(), CONFIG)
        asyncio.run(session.load())
        source.put("en", {"greeting": "Howdy"})
        asyncio.run(session.reset())
        assert session.baseline("en") == {"greeting": "Howdy"}

    def test_reset_recovers_failed_language(self) -> None:
        source = StaticSource({"en": {"greeting": "Hello"}})
        session = TranslationSession(source, MemoryStore(), CONFIG)
        asyncio.run(session.load())
        source.put("sv", {"greeting": "Hej"})
        asyncio.run(session.reset())
        assert session.languages == ["en", "sv"]
        assert session.failed_languages == {}

    def test_unexpected_reset_error_keeps_existing_documents(self) -> None:
        source = _BrokenSource(DOCUMENTS, broken=set())
        session = TranslationSession(source, MemoryStore(), CONFIG)
        asyncio.run(session.load())
        session.edit("sv", "greeting", "Hallå")
        source.broken.add("sv")
        asyncio.run(session.reset())
        assert session.state is SessionState.READY
        assert session.current("sv") == {"greeting": "Hallå"}
        assert session.current("en") == {"greeting": "Hello"}
        assert not session.is_resetting("sv")

    def test_failed_reset_keeps_existing_documents(self) -> None:
        source = StaticSource(DOCUMENTS)
        session = TranslationSession(source, MemoryStore(), CONFIG)
        asyncio.run(session.load())
        session.edit("en", "greeting", "Hi")
        source._documents.pop("en")
        asyncio.run(session.reset())
        assert session.current("en") == {"greeting": "Hi"}
        assert not session.is_resetting("en")

    def test_edit_rejected_while_reset_in_flight(self) -> None:
        source = _GatedSource(DOCUMENTS)
        session = TranslationSession(source, MemoryStore(), CONFIG)

        async def scenario() -> None:
            await session.load()
            source.gated = True
            task = asyncio.create_task(session.reset())
            await _until(lambda: len(source.gates) == 2)
            assert session.state is SessionState.LOADING
            with pytest.raises(ResetInProgressError):
                session.edit("en", "greeting", "Hi")
            with pytest.raises(ResetInProgressError):
                session.clear_all()
            for _, gate, _ in source.gates:
                gate.set()
            await task

        asyncio.run(scenario())
        assert session.state is SessionState.READY
        session.edit("en", "greeting", "Hi")

    def test_superseded_fetch_discarded(self) -> None:
        source = _GatedSource(DOCUMENTS)
        session = TranslationSession(source, MemoryStore(), EditorConfig(languages=("en",)))

        async def scenario() -> None:
            await session.load()
            source.gated = True
            source.respond_with("en", {"greeting": "Old"})
            first = asyncio.create_task(session.reset())
            await _until(lambda: len(source.gates) == 1)
            source.respond_with("en", {"greeting": "New"})
            second = asyncio.create_task(session.reset())
            await _until(lambda: len(source.gates) == 2)
            (_, old_gate, _), (_, new_gate, _) = source.gates
            new_gate.set()
            await asyncio.sleep(0)
            old_gate.set()
            await asyncio.gather(first, second)

        asyncio.run(scenario())
        assert session.current("en") == {"greeting": "New"}
        assert session.state is SessionState.READY


class TestFetchErrors:
    def test_fetch_error_carries_language(self) -> None:
        error = FetchError("sv")
        assert error.language == "sv"
        assert "sv" in str(error)


# ---------------------------------------------------------------------------
# Search / re-ingest
# ---------------------------------------------------------------------------


class TestSearch:
    def test_empty_query(self) -> None:
        assert _loaded().search("") == []

    def test_cached_until_edit(self) -> None:
        session = _loaded()
        first = session.search("hello")
        assert session.search("hello") == first
        session.edit("en", "greeting", "Hi")
        results = session.search("hello")
        assert results[0].current_by_language["en"] == "Hi"
        assert results[0].baseline_by_language["en"] == "Hello"


class TestApplyChanges:
    def test_nested_and_flat_payloads(self) -> None:
        session = _loaded()
        written = session.apply_changes(
            {
                "en": {"nav": {"home": "Start"}},
                "sv": {"nav.home": "Hem"},
                "fr": {"nav": {"home": "Accueil"}},
            }
        )
        assert written == 2
        assert session.export_changes() == {
            "en": {"nav.home": "Start"},
            "sv": {"nav.home": "Hem"},
        }

    def test_failed_apply_changes_nothing(self) -> None:
        store = MemoryStore()
        session = _loaded(documents={"en": {"a": "x"}, "sv": {"a": "y"}}, store=store)
        revision = session.revision
        with pytest.raises(PathError):
            session.apply_changes(
                {
                    "sv": {"a": "z"},
                    "en": {"rating.1": "zzz", "rating.label": "y"},
                }
            )
        assert session.current("en") == {"a": "x"}
        assert session.current("sv") == {"a": "y"}
        assert store.get("sv") == {"a": "y"}
        assert session.revision == revision
        assert session.search("zzz") == []

    def test_apply_invalidates_search(self) -> None:
        session = _loaded()
        assert session.search("zzz") == []
        session.apply_changes({"en": {"farewell": "zzz"}})
        assert [result.path for result in session.search("zzz")] == ["farewell"]
