"""Data models for resolve_history pipeline stage."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DiffResult:
    """Baseline changes since a translation went out of date.

    diff_text is None when the origin revision no longer resolves.
    """
    diff_text: Optional[str]
    renamed: bool = False

    @property
    def available(self) -> bool:
        return self.diff_text is not None


NO_DIFF = DiffResult(diff_text=None, renamed=False)
