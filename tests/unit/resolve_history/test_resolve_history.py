"""Tests for resolve_history.resolve_history module against real git repositories."""

import os
import shutil
import subprocess
from datetime import date
from pathlib import Path

import pytest

from resolve_history.git import GitRepository
from resolve_history.models import NO_DIFF
from resolve_history.resolve_history import HistoryResolver, baseline_git_path, diff_link
from scan_articles.models import ArticleRecord, GroupInfoRecord

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")

MISSING_REVISION = "0123456789abcdef0123456789abcdef01234567"


def git(repo: Path, *args: str, when: str | None = None) -> str:
    env = {
        **os.environ,
        "GIT_AUTHOR_NAME": "Wiki Tester",
        "GIT_AUTHOR_EMAIL": "tester@example.com",
        "GIT_COMMITTER_NAME": "Wiki Tester",
        "GIT_COMMITTER_EMAIL": "tester@example.com",
        "GIT_CONFIG_NOSYSTEM": "1",
        "GIT_CONFIG_GLOBAL": os.devnull,
    }
    if when:
        env["GIT_AUTHOR_DATE"] = env["GIT_COMMITTER_DATE"] = f"{when}T12:00:00+0000"
    result = subprocess.run(["git", *args], cwd=repo, env=env, check=True, capture_output=True, text=True)
    return result.stdout.strip()


def commit(repo: Path, files: dict[str, str], message: str, when: str) -> str:
    for relative, content in files.items():
        path = repo / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", message, when=when)
    return git(repo, "rev-parse", "HEAD")


def translation(git_path: str, outdated_since: str | None = None) -> ArticleRecord:
    article_path, locale = git_path[len("wiki/"):].rsplit("/", 1)
    return ArticleRecord(
        article_path=article_path,
        git_path=git_path,
        locale=locale.removesuffix(".md"),
        line_count=1,
        outdated_translation=True,
        outdated_since=outdated_since,
    )


def make_resolver(repo: Path) -> HistoryResolver:
    return HistoryResolver(GitRepository(repo), baseline_locale="en", mainline="HEAD")


@pytest.fixture
def linear_repo(tmp_path: Path) -> tuple[Path, str]:
    """Baseline edited twice after the translation was written; returns (repo, origin sha)."""
    git(tmp_path, "init", "-q")
    commit(tmp_path, {"wiki/A/en.md": "line1\n", "wiki/A/fr.md": "ligne1\n"}, "Add A", "2024-01-01")
    origin = commit(tmp_path, {"wiki/A/en.md": "line1\nline2\n"}, "Extend A", "2024-02-01")
    commit(
        tmp_path,
        {
            "wiki/A/en.md": "line1\nline2\nline3\n",
            "wiki/A/fr.md": f"---\noutdated_translation: true\noutdated_since: {origin}\n---\nligne1\n",
        },
        "Mark fr outdated",
        "2024-03-01",
    )
    return tmp_path, origin


@pytest.fixture
def renamed_repo(tmp_path: Path) -> tuple[Path, str]:
    """Baseline moved from wiki/Old to wiki/New after the origin revision."""
    body = "".join(f"line {n}\n" for n in range(1, 21))
    git(tmp_path, "init", "-q")
    commit(tmp_path, {"wiki/Old/en.md": body}, "Add Old", "2024-01-01")
    origin = commit(tmp_path, {"wiki/Old/en.md": body.replace("line 5\n", "line five\n")}, "Edit Old", "2024-02-01")
    git(tmp_path, "mv", "wiki/Old", "wiki/New")
    commit(tmp_path, {"wiki/New/en.md": body.replace("line 5\n", "line five\n") + "line 21\n"}, "Move", "2024-03-01")
    return tmp_path, origin


class TestPathHelpers:
    def test_baseline_git_path(self) -> None:
        assert baseline_git_path("wiki/People/Team/pt-br.md") == "wiki/People/Team/en.md"
        assert baseline_git_path("meta/group-info/fr.yaml") == "meta/group-info/en.yaml"

    def test_diff_link(self) -> None:
        assert diff_link("abc1234", "wiki/A/en.md") == "diff/abc1234/wiki/A/en.md"


@requires_git
class TestOriginDate:
    @pytest.mark.asyncio
    async def test_recorded_revision(self, linear_repo) -> None:
        repo, origin = linear_repo
        assert await make_resolver(repo).origin_date(origin, "wiki/A/fr.md") == date(2024, 2, 1)

    @pytest.mark.asyncio
    async def test_searches_history_for_flag(self, linear_repo) -> None:
        repo, _ = linear_repo
        assert await make_resolver(repo).origin_date(None, "wiki/A/fr.md") == date(2024, 3, 1)

    @pytest.mark.asyncio
    async def test_unresolvable_revision_is_none(self, linear_repo) -> None:
        repo, _ = linear_repo
        assert await make_resolver(repo).origin_date(MISSING_REVISION, "wiki/A/fr.md") is None

    @pytest.mark.asyncio
    async def test_flag_never_set_is_none(self, linear_repo) -> None:
        repo, _ = linear_repo
        assert await make_resolver(repo).origin_date(None, "wiki/A/en.md") is None


@requires_git
class TestBaselineDiff:
    @pytest.mark.asyncio
    async def test_without_renames(self, linear_repo) -> None:
        repo, origin = linear_repo
        result = await make_resolver(repo).baseline_diff(translation("wiki/A/fr.md", origin))

        assert result.renamed is False
        assert "+line2" in result.diff_text
        assert "+line3" in result.diff_text

    @pytest.mark.asyncio
    async def test_follows_renames(self, renamed_repo) -> None:
        repo, origin = renamed_repo
        resolver = make_resolver(repo)
        result = await resolver.baseline_diff(translation("wiki/New/fr.md", origin))

        assert result.renamed is True
        assert result.diff_text
        assert await resolver.path_history(origin, "wiki/New/en.md") == ["wiki/New/en.md", "wiki/Old/en.md"]

    @pytest.mark.asyncio
    async def test_unresolvable_revision_degrades(self, linear_repo) -> None:
        repo, _ = linear_repo
        result = await make_resolver(repo).baseline_diff(translation("wiki/A/fr.md", MISSING_REVISION))

        assert result == NO_DIFF
        assert result.available is False

    @pytest.mark.asyncio
    async def test_undecodable_bytes_in_history(self, linear_repo) -> None:
        repo, origin = linear_repo
        (repo / "wiki" / "A" / "en.md").write_bytes(b"line1\nline2\nline3\ncaf\xe9\n")
        git(repo, "add", "-A")
        git(repo, "commit", "-q", "-m", "Add latin-1 line", when="2024-04-01")

        result = await make_resolver(repo).baseline_diff(translation("wiki/A/fr.md", origin))

        assert result.available is True
        assert "+caf\ufffd" in result.diff_text
        assert "+line3" in result.diff_text

    @pytest.mark.asyncio
    async def test_group_info_diff(self, tmp_path) -> None:
        git(tmp_path, "init", "-q")
        commit(tmp_path, {"meta/group-info/en.yaml": "a: 1\n"}, "Add", "2024-01-01")
        origin = commit(tmp_path, {"meta/group-info/en.yaml": "a: 1\nb: 2\n"}, "Edit", "2024-02-01")
        record = GroupInfoRecord(
            article_path="group-info",
            git_path="meta/group-info/fr.yaml",
            locale="fr",
            line_count=1,
            outdated_translation=True,
            outdated_since=origin,
        )

        result = await make_resolver(tmp_path).baseline_diff(record)
        assert "+b: 2" in result.diff_text
        assert result.renamed is False


class TestBaselineDiffWithoutHistory:
    @pytest.mark.asyncio
    async def test_baseline_record_has_no_diff(self, tmp_path) -> None:
        record = ArticleRecord(article_path="A", git_path="wiki/A/en.md", locale="en", line_count=1, outdated_since="abc")
        assert await make_resolver(tmp_path).baseline_diff(record) == NO_DIFF

    @pytest.mark.asyncio
    async def test_without_recorded_revision_has_no_diff(self, tmp_path) -> None:
        assert await make_resolver(tmp_path).baseline_diff(translation("wiki/A/fr.md")) == NO_DIFF

    def test_diff_link_for(self, tmp_path) -> None:
        resolver = make_resolver(tmp_path)
        assert resolver.diff_link_for(translation("wiki/A/fr.md", "abc1234")) == "diff/abc1234/wiki/A/en.md"
        assert resolver.diff_link_for(translation("wiki/A/fr.md")) is None
