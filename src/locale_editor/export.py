"""Export surface: turns per-language change sets into a JSON artifact.

The artifact nests each language's changes into a fresh document, shaped
like the edited document they came from::

    {"en": {"nav": {"home": "Start"}}, "sv": {"items": [{"label": "Först"}]}}

Flattening an artifact language by language gives back the original change
sets, so ``read_export`` and ``TranslationSession.apply_changes`` re-ingest it
without loss.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from locale_editor.exceptions import LocaleEditorError, PathError
from locale_editor.result import ChangeSet
from locale_editor.tree.flattener import TreeFlattener
from locale_editor.tree.mutator import TreeMutator
from locale_editor.tree.nodes import NodeType, node_type
from locale_editor.tree.paths import codec

__all__ = ["build_export_document", "dumps_export", "read_export", "write_export"]

_mutator = TreeMutator()
_flattener = TreeFlattener()


def build_export_document(
    changes: Mapping[str, ChangeSet],
    documents: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Nest every language's ``{path: value}`` change set.

    Each container takes the shape it has in ``documents[language]`` (the
    edited document the changes came from) when one is given.  Otherwise a
    container becomes an array only if every step written below it is an
    index, so ``{"1": ..., "label": ...}`` stays an object.

    Languages with an empty change set are omitted.
    """
    document: dict[str, Any] = {}
    for language, change_set in changes.items():
        if not change_set:
            continue
        template = documents.get(language) if documents is not None else None
        document[language] = _nest(change_set, template)
    return document


def _nest(change_set: ChangeSet, template: Any) -> dict[str, Any]:
    split = {path: tuple(codec.split(path)) for path in change_set}

    # Steps written directly below each container prefix
    children: dict[tuple[str, ...], set[str]] = {}
    for steps in split.values():
        for depth in range(1, len(steps)):
            children.setdefault(steps[:depth], set()).add(steps[depth])

    def container_for(prefix: tuple[str, ...]) -> Any:
        if template is not None:
            kind = node_type(_mutator.resolve(template, codec.join(prefix)))
            if kind is NodeType.ARRAY:
                return []
            if kind is NodeType.OBJECT:
                return {}
        return [] if all(codec.is_index(step) for step in children[prefix]) else {}

    nested: dict[str, Any] = {}
    for path, value in change_set.items():
        steps = split[path]
        if not steps:
            continue
        current: Any = nested
        for depth, step in enumerate(steps[:-1], start=1):
            child = _child(current, step)
            if node_type(child) not in (NodeType.OBJECT, NodeType.ARRAY):
                child = container_for(steps[:depth])
                _assign(current, step, child, path)
            current = child
        _assign(current, steps[-1], value, path)
    return nested


def _child(container: Any, step: str) -> Any:
    if isinstance(container, dict):
        return container.get(step)
    if codec.is_index(step) and int(step) < len(container):
        return container[int(step)]
    return None


def _assign(container: Any, step: str, value: Any, path: str) -> None:
    if isinstance(container, dict):
        container[step] = value
        return
    if not codec.is_index(step):
        raise PathError(f"array step {step!r} is not an index", path=path)
    index = int(step)
    if index >= len(container):
        container.extend([None] * (index - len(container) + 1))
    container[index] = value


def dumps_export(
    changes: Mapping[str, ChangeSet],
    documents: Mapping[str, Any] | None = None,
) -> str:
    """Serialise the nested export document as indented JSON."""
    document = build_export_document(changes, documents)
    return json.dumps(document, indent=2, ensure_ascii=False)


def write_export(
    changes: Mapping[str, ChangeSet],
    directory: str | os.PathLike[str],
    name: str = "translation-changes",
    documents: Mapping[str, Any] | None = None,
) -> Path:
    """Write ``<name>-translation.json`` into ``directory``.

    An existing file is never overwritten: ``_1``, ``_2``... are appended to
    the stem until the name is free.  ``documents`` is passed through to
    ``build_export_document``.

    Returns:
        Path of the written file.

    Raises:
        LocaleEditorError: If there are no changes to export.
    """
    if not any(changes.values()):
        raise LocaleEditorError("No changes to export!")

    output_path = Path(directory) / f"{name}-translation.json"
    counter = 1
    original_path = output_path
    while output_path.exists():
        output_path = original_path.with_name(f"{original_path.stem}_{counter}{original_path.suffix}")
        counter += 1

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(dumps_export(changes, documents), encoding="utf-8")
    return output_path


def read_export(path: str | os.PathLike[str]) -> dict[str, ChangeSet]:
    """Load an export artifact back into ``{language: ChangeSet}``.

    Raises:
        LocaleEditorError: If the file does not hold a JSON object.
    """
    with Path(path).open(encoding="utf-8") as fh:
        document = json.load(fh)
    if not isinstance(document, dict):
        raise LocaleEditorError(f"{path}: export must be a JSON object keyed by language")
    return {
        language: dict(_flattener.flatten(payload))
        for language, payload in document.items()
    }
