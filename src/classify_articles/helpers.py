"""Helper functions for classifying articles."""

from __future__ import annotations

import re
from datetime import date
from typing import Sequence

from classify_articles.models import OutdatedEntry
from common.config import ExclusionConfig


class ExclusionMatcher:
    """Decides which baseline articles never need a translation."""

    def __init__(self, config: ExclusionConfig):
        self._patterns = [re.compile(p, re.IGNORECASE) for p in config.patterns]
        self._allow = [re.compile(p, re.IGNORECASE) for p in config.allow]

    def is_excluded(self, article_path: str) -> bool:
        if not any(p.search(article_path) for p in self._patterns):
            return False
        return not any(p.search(article_path) for p in self._allow)


def sort_by_origin_date(entries: Sequence[OutdatedEntry]) -> list[OutdatedEntry]:
    """Newest origin first; entries without a date go last. Ties keep their order."""
    return sorted(
        entries,
        key=lambda entry: (entry.origin_date is not None, entry.origin_date or date.min),
        reverse=True,
    )
