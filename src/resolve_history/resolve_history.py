"""Locate the revision that made a translation outdated and diff the baseline since then."""

import logging
from datetime import date
from pathlib import PurePosixPath

from common.errors import GitCommandError
from common.memoize import QueryCache, cached_query
from resolve_history.git import GitRepository
from resolve_history.models import NO_DIFF, DiffResult
from scan_articles.models import ArticleRecord, GroupInfoRecord

logger = logging.getLogger(__name__)

# Matches the most recent commit that switched an outdated flag on
OUTDATED_FLAG_PATTERN = "^outdated(_translation)?: true"


def baseline_git_path(git_path: str, baseline_locale: str = "en") -> str:
    """Path of the baseline file next to a translated one (``.../fr.md`` -> ``.../en.md``)."""
    path = PurePosixPath(git_path)
    return path.with_name(f"{baseline_locale}{path.suffix}").as_posix()


def diff_link(revision: str, path: str) -> str:
    """Stable link identifier for the diff page of one file since one revision."""
    return f"diff/{revision}/{path}"


class HistoryResolver:
    """
    Answers history questions about outdated translations.

    Every lookup soft-fails: a revision that no longer resolves, or a search
    that finds nothing, yields None (or an empty DiffResult) and a warning
    instead of an exception. Only a git launch that keeps failing propagates.
    """

    def __init__(
        self,
        repository: GitRepository,
        baseline_locale: str = "en",
        mainline: str = "master",
        cache: QueryCache | None = None,
    ):
        self.repository = repository
        self.baseline_locale = baseline_locale
        self.mainline = mainline
        self.cache = cache or QueryCache()

    async def _query(self, *args: str) -> str | None:
        try:
            return await self.repository.run(*args)
        except GitCommandError as exc:
            logger.warning("History lookup failed: %s", exc)
            return None

    @cached_query("origin_date")
    async def origin_date(self, revision: str | None, git_path: str) -> date | None:
        """
        Commit date of the change that marked a file outdated.

        Args:
            revision: Recorded origin revision, or None to search the file's history
            git_path: Repository-relative path of the translated file

        Returns:
            Commit date, or None if it cannot be determined
        """
        if revision is not None:
            output = await self._query("log", "-1", "--pretty=%cs", revision)
        else:
            output = await self._query(
                "log",
                "-1",
                "--pickaxe-regex",
                "--pretty=%cs",
                f"-S{OUTDATED_FLAG_PATTERN}",
                "--",
                git_path,
            )

        if not output:
            return None

        try:
            return date.fromisoformat(output.splitlines()[0])
        except ValueError:
            logger.warning("Unexpected commit date %r for %s", output, git_path)
            return None

    @cached_query("path_history")
    async def path_history(self, revision: str, path: str) -> list[str]:
        """Every path the file occupied between the revision and the mainline tip."""
        output = await self._query(
            "log",
            "--follow",
            "--name-only",
            "--pretty=",
            f"{revision}^..{self.mainline}",
            "--",
            path,
        )
        if not output:
            return []
        return list(dict.fromkeys(line.strip() for line in output.splitlines() if line.strip()))

    @cached_query("baseline_diff")
    async def baseline_diff(self, record: ArticleRecord | GroupInfoRecord) -> DiffResult:
        """
        Diff of the baseline file from just before the origin revision to the mainline tip.

        Renames are followed, so the diff covers every path the baseline file
        had in that range.
        """
        if record.locale == self.baseline_locale or record.outdated_since is None:
            return NO_DIFF

        revision = record.outdated_since
        baseline_path = baseline_git_path(record.git_path, self.baseline_locale)
        paths = await self.path_history(revision, baseline_path)
        if not paths:
            logger.warning("No history for %s since %s", baseline_path, revision)
            return NO_DIFF

        diff_text = await self._query(
            "diff",
            "--find-renames=1%",
            "--minimal",
            "--no-color",
            f"{revision}^...{self.mainline}",
            "--",
            *paths,
        )
        if diff_text is None:
            return NO_DIFF

        return DiffResult(diff_text=diff_text, renamed=len(paths) > 1)

    def diff_link_for(self, record: ArticleRecord | GroupInfoRecord) -> str | None:
        if record.outdated_since is None:
            return None
        return diff_link(record.outdated_since, baseline_git_path(record.git_path, self.baseline_locale))
