"""LanguageState: the per-language pair of edited and pristine documents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["LanguageState"]


@dataclass(slots=True)
class LanguageState:
    """Documents for one language inside an editing session.

    Attributes:
        code:     Language code, e.g. "en".
        current:  The live document every edit is applied to.
        baseline: The document edits are measured against.  Replaced only by
                  a session reset.  None when the language failed to load.
    """

    code: str
    current: Any = None
    baseline: Any = None

    @property
    def loaded(self) -> bool:
        return self.current is not None
