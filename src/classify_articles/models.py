"""Data models for classify_articles pipeline stage."""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from scan_articles.models import ArticleRecord, GroupInfoRecord


@dataclass(frozen=True)
class OutdatedEntry:
    """Outdated translation paired with its resolved history details."""
    record: Union[ArticleRecord, GroupInfoRecord]
    origin_date: Optional[date]
    diff_link: Optional[str]
