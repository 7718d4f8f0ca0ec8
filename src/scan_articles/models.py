"""Data models for scan_articles pipeline stage."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ArticleRecord:
    """One article file in one locale, with its front-matter flags."""
    article_path: str
    git_path: str
    locale: str
    line_count: int
    needs_cleanup: bool = False
    outdated: bool = False
    outdated_since: Optional[str] = None
    outdated_translation: bool = False
    stub: bool = False
    no_native_review: bool = False
    no_native_review_since: Optional[str] = None

    @property
    def needs_native_review(self) -> bool:
        return self.no_native_review or self.no_native_review_since is not None


@dataclass(frozen=True)
class GroupInfoRecord:
    """Translation status of a locale's group-info metadata file."""
    article_path: str
    git_path: str
    locale: str
    line_count: int
    needs_cleanup: bool = False
    outdated_since: Optional[str] = None
    outdated_translation: bool = False
