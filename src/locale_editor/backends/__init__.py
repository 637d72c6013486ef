"""Document sources for locale-editor.

All sources satisfy the ``DocumentSource`` protocol structurally:

- ``StaticSource``: in-memory mapping, no I/O.
- ``HttpSource``: httpx + tenacity, one JSON file per language.
"""

from locale_editor.backends.http import HttpSource
from locale_editor.backends.static import StaticSource

__all__ = ["HttpSource", "StaticSource"]
