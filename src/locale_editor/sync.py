"""Locale synchronisation: propagate new keys from the base language.

For every JSON file of the base language, each other language's file of the
same name receives every key it is missing, with an empty string as the value
so translators can find it.  Existing values are never overwritten.

Directory layout::

    <root>/en/translation.json
    <root>/sv/translation.json
    ...
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from locale_editor.logging import get_logger

logger = get_logger(__name__)

__all__ = ["deep_merge", "sync_locales"]


def deep_merge(base: dict[str, Any], target: dict[str, Any]) -> dict[str, Any]:
    """Add keys present in ``base`` but missing from ``target``.

    Keyed containers are merged recursively; any other missing value becomes
    "".  A target value that is not an object where the base has an object
    is replaced by the merged object.  ``target`` is modified in place and
    returned.
    """
    for key, value in base.items():
        if isinstance(value, dict):
            existing = target.get(key)
            target[key] = deep_merge(value, existing if isinstance(existing, dict) else {})
        elif key not in target:
            target[key] = ""
    return target


def sync_locales(root: str | os.PathLike[str], base_language: str = "en") -> list[Path]:
    """Synchronise every non-base language under ``root`` with the base language.

    Returns:
        Paths of the files that were written.

    Raises:
        FileNotFoundError: If ``<root>/<base_language>`` does not exist.
    """
    root_path = Path(root)
    base_dir = root_path / base_language
    if not base_dir.is_dir():
        raise FileNotFoundError(f"base language directory not found: {base_dir}")

    languages = sorted(
        entry.name for entry in root_path.iterdir() if entry.is_dir() and entry.name != base_language
    )
    written: list[Path] = []
    for base_file in sorted(base_dir.glob("*.json")):
        base_data = json.loads(base_file.read_text(encoding="utf-8"))
        for language in languages:
            target_path = root_path / language / base_file.name
            target_data: dict[str, Any] = {}
            if target_path.exists():
                target_data = json.loads(target_path.read_text(encoding="utf-8"))

            merged = deep_merge(base_data, target_data)
            target_path.write_text(
                json.dumps(merged, indent=2, ensure_ascii=False), encoding="utf-8"
            )
            written.append(target_path)
            logger.debug("locale_synced", language=language, file=base_file.name)
    return written
