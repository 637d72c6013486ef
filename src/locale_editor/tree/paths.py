"""PathCodec: converts between dotted path strings and step lists.

Paths address a node inside a translation document.  The canonical form joins
steps with ``.`` and renders array indices as plain numbers:

- ``"nav.home"``        -> ``["nav", "home"]``
- ``"items[0].label"``  -> ``"items.0.label"`` -> ``["items", "0", "label"]``

Bracket indices are accepted on input and rewritten to the dotted form; the
rewrite is one-way, the bracket spelling is never reproduced.  Key steps are
not validated, so any string (including one containing spaces) is a valid key.

The separator itself is not escaped.  A document key containing ``.`` (for
example ``"Loading..."``) is flattened to a path that ``split`` breaks into
several steps, so the leaf cannot be addressed again: reads through that path
return "" and a diff of the document against itself reports the leaf.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

# Matches a bracketed array index, e.g. "[12]"
_BRACKET_INDEX = re.compile(r"\[(\d+)\]")

# Matches a base-10 non-negative integer step (ASCII digits only)
_INDEX_STEP = re.compile(r"\d+", re.ASCII)

SEPARATOR = "."


class PathCodec:
    """Stateless encoder/decoder for document paths.

    Example usage:
        codec = PathCodec()
        codec.normalize("items[0].label")   # "items.0.label"
        codec.split("items.0.label")        # ["items", "0", "label"]
        codec.join(["items", 0, "label"])   # "items.0.label"
    """

    def normalize(self, raw_path: str) -> str:
        """Rewrite every ``[n]`` occurrence to ``.n``.

        A leading bracket index (``"[0].x"``) becomes ``"0.x"`` so the result
        never starts with a separator.
        """
        path = _BRACKET_INDEX.sub(r".\1", raw_path)
        if path.startswith(SEPARATOR) and not raw_path.startswith(SEPARATOR):
            path = path[1:]
        return path

    def split(self, path: str) -> list[str]:
        """Split a path into its steps.

        The empty string yields an empty list, which callers treat as the
        document root.
        """
        path = self.normalize(path)
        if not path:
            return []
        return path.split(SEPARATOR)

    def join(self, steps: Iterable[str | int]) -> str:
        """Build the canonical path for a sequence of key/index steps."""
        return SEPARATOR.join(str(step) for step in steps)

    def is_index(self, step: str) -> bool:
        """Return True if ``step`` parses as a base-10 non-negative integer."""
        return _INDEX_STEP.fullmatch(step) is not None


# Module-level codec (stateless, safe to share)
codec = PathCodec()
