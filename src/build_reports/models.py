"""Data models for build_reports pipeline stage."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional


@dataclass
class Section:
    """One titled table of a locale report."""
    title: str
    kind: str  # "article" or "outdated"
    entries: list[dict[str, Any]]


@dataclass
class LocaleReport:
    """Everything the renderer needs for one locale page."""
    locale: str
    name: str
    flag: str
    problem_count: int
    sections: list[Section] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.sections


@dataclass
class LocaleMenuItem:
    locale: str
    name: str
    flag: str
    problem_count: int
    hidden: bool


@dataclass
class DiffPage:
    """Baseline diff shown for one outdated translation."""
    link: str
    locale: str
    article_path: str
    article_basename: str
    commit_id: str
    commit_date: Optional[date]
    diff: str
    hide_diff_headers: bool
