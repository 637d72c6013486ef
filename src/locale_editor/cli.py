"""Command-line interface for locale-editor.

Usage:
    locale-editor diff edited/sv.json pristine/sv.json
    locale-editor search "book now" locales/en.json locales/sv.json
    locale-editor export changes.json --out dist/
    locale-editor sync public/locales --base en
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from locale_editor.algorithm.changeset import ChangeSetComputer
from locale_editor.algorithm.config import PLACEHOLDER, EditorConfig
from locale_editor.algorithm.search import CrossDocumentIndex
from locale_editor.exceptions import LocaleEditorError
from locale_editor.export import write_export
from locale_editor.logging import setup_logging
from locale_editor.state import LanguageState
from locale_editor.sync import sync_locales


def _load_json(path: str) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise LocaleEditorError(f"{path}: {exc}") from exc


def _cmd_diff(args: argparse.Namespace) -> int:
    computer = ChangeSetComputer(placeholder=args.placeholder)
    changes = computer.diff(_load_json(args.current), _load_json(args.baseline))
    print(json.dumps(changes, indent=2, ensure_ascii=False))
    return 0


def _cmd_search(args: argparse.Namespace) -> int:
    states = []
    for file in args.files:
        document = _load_json(file)
        states.append(LanguageState(code=Path(file).stem, current=document, baseline=document))
    results = CrossDocumentIndex().search(states, args.query)
    for result in results:
        language = result.first_matching_language
        print(f"{result.path}\t{language}\t{result.current_by_language[language]}")
    return 0 if results else 1


def _cmd_export(args: argparse.Namespace) -> int:
    changes = _load_json(args.changes)
    if not isinstance(changes, dict):
        raise LocaleEditorError(f"{args.changes}: expected an object keyed by language")
    path = write_export(changes, args.out, name=args.name)
    print(path)
    return 0


def _cmd_sync(args: argparse.Namespace) -> int:
    try:
        written = sync_locales(args.root, base_language=args.base)
    except (OSError, ValueError) as exc:
        raise LocaleEditorError(str(exc)) from exc
    for path in written:
        print(path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="locale-editor",
        description="Diff, search, export and synchronise translation files.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    diff_parser = subparsers.add_parser("diff", help="Print the edits of CURRENT relative to BASELINE.")
    diff_parser.add_argument("current", help="Edited translation JSON file.")
    diff_parser.add_argument("baseline", help="Pristine translation JSON file.")
    diff_parser.add_argument(
        "--placeholder",
        default=PLACEHOLDER,
        help=f"Sentinel value excluded from the diff (default: {PLACEHOLDER!r}).",
    )
    diff_parser.set_defaults(handler=_cmd_diff)

    search_parser = subparsers.add_parser(
        "search", help="Find QUERY in paths and values; the file stem is the language code."
    )
    search_parser.add_argument("query", help="Case-insensitive text to look for.")
    search_parser.add_argument("files", nargs="+", help="Translation JSON files, one per language.")
    search_parser.set_defaults(handler=_cmd_search)

    export_parser = subparsers.add_parser(
        "export", help="Write a nested export artifact from a {language: {path: value}} file."
    )
    export_parser.add_argument("changes", help="JSON file with flat change sets per language.")
    export_parser.add_argument("--out", default=".", help="Output directory (default: .).")
    export_parser.add_argument(
        "--name", default="translation-changes", help="Artifact name prefix."
    )
    export_parser.set_defaults(handler=_cmd_export)

    sync_parser = subparsers.add_parser(
        "sync", help="Add keys missing from other languages, taken from the base language."
    )
    sync_parser.add_argument("root", help="Directory holding one sub-directory per language.")
    base = EditorConfig().base_language
    sync_parser.add_argument("--base", default=base, help=f"Base language (default: {base}).")
    sync_parser.set_defaults(handler=_cmd_sync)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code: 0 on success, 1 when a search finds nothing or on error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(debug=args.verbose)

    try:
        return int(args.handler(args))
    except LocaleEditorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
