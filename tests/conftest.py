"""Shared fixtures for building small wiki trees on disk."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from common.config import ExclusionConfig, LocaleInfo, WikiStatusConfig
from resolve_history.models import NO_DIFF, DiffResult
from resolve_history.resolve_history import baseline_git_path, diff_link


def front_matter(**flags) -> str:
    if not flags:
        return ""
    lines = [f"{key}: {str(value).lower() if isinstance(value, bool) else value}" for key, value in flags.items()]
    return "---\n" + "\n".join(lines) + "\n---\n"


def write_article(top: Path, article_path: str, locale: str, body: str = "# Title\n", **flags) -> Path:
    path = top / "wiki" / article_path / f"{locale}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(front_matter(**flags) + body, encoding="utf-8")
    return path


def write_group_info(top: Path, locale: str, content: str = "") -> Path:
    path = top / "meta" / "group-info" / f"{locale}.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def make_config(locales=("en", "fr", "de"), **overrides) -> WikiStatusConfig:
    values = dict(
        locales={code: LocaleInfo(name=code.upper(), flag=code.upper()) for code in locales},
        exclusions=ExclusionConfig(
            patterns=[
                r"(?:^|/)legal/sctl$",
                r"(?:^|/)staff_log(?:$|/)",
                r"(?:^|/)contests/",
                r"(?:^|/)tournaments/",
            ],
            allow=[r"(?:^|/)tournaments/(?:official_support)(?:$|/)"],
        ),
    )
    values.update(overrides)
    return WikiStatusConfig(**values)


class FakeHistory:
    """Stands in for HistoryResolver with canned origin dates and diffs."""

    def __init__(self, dates: dict[str, date] | None = None, diffs: dict[str, DiffResult] | None = None):
        self.dates = dates or {}
        self.diffs = diffs or {}
        self.baseline_locale = "en"
        self.origin_calls: list[tuple[str | None, str]] = []

    async def origin_date(self, revision, git_path):
        self.origin_calls.append((revision, git_path))
        return self.dates.get(git_path)

    def diff_link_for(self, record):
        if record.outdated_since is None:
            return None
        return diff_link(record.outdated_since, baseline_git_path(record.git_path, self.baseline_locale))

    async def baseline_diff(self, record):
        return self.diffs.get(record.git_path, NO_DIFF)


@pytest.fixture
def wiki_root(tmp_path: Path) -> Path:
    (tmp_path / "wiki").mkdir()
    return tmp_path
