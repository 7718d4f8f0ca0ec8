"""Cross-locale classification of wiki articles into problem categories."""

import asyncio
import logging
from pathlib import Path

from classify_articles.helpers import ExclusionMatcher, sort_by_origin_date
from classify_articles.models import OutdatedEntry
from common.config import WikiStatusConfig
from common.memoize import QueryCache, cached_query
from resolve_history.resolve_history import HistoryResolver
from scan_articles.models import ArticleRecord, GroupInfoRecord
from scan_articles.scan_articles import load_articles, load_group_info

logger = logging.getLogger(__name__)


class WikiStatus:
    """
    Problem categories of every locale in one wiki checkout.

    All queries are memoized for the lifetime of the instance, so a report
    build can ask for the same category from several places without
    rescanning the tree or repeating history lookups.

    Usage:
        status = WikiStatus(Path("osu-wiki"), config, resolver)
        missing = await status.missing_articles("fr")
        count = await status.total_problem_count("fr")
    """

    def __init__(
        self,
        top_directory: Path,
        config: WikiStatusConfig,
        history: HistoryResolver,
        cache: QueryCache | None = None,
    ):
        self.top_directory = top_directory
        self.config = config
        self.history = history
        self.cache = cache or QueryCache()
        self._exclusions = ExclusionMatcher(config.exclusions)

    @property
    def baseline(self) -> str:
        return self.config.baseline_locale

    def is_baseline(self, locale: str) -> bool:
        return locale == self.baseline

    @cached_query("articles")
    async def articles(self) -> list[ArticleRecord]:
        return await load_articles(self.top_directory, self.config.supported_locales)

    async def _articles_in(self, locale: str) -> list[ArticleRecord]:
        return [article for article in await self.articles() if article.locale == locale]

    @cached_query("article_count")
    async def article_count(self, locale: str) -> int:
        return len(await self._articles_in(locale))

    @cached_query("group_info")
    async def group_info(self, locale: str) -> GroupInfoRecord | None:
        return await load_group_info(self.top_directory, locale)

    @cached_query("missing")
    async def missing_articles(self, locale: str) -> list[ArticleRecord]:
        """Baseline articles with no translation in the locale, minus exclusions."""
        if self.is_baseline(locale):
            return []

        translated = {article.article_path for article in await self._articles_in(locale)}
        return [
            article
            for article in await self._articles_in(self.baseline)
            if article.article_path not in translated
            and not self._exclusions.is_excluded(article.article_path)
        ]

    @cached_query("needs_cleanup")
    async def needs_cleanup_articles(self, locale: str) -> list[ArticleRecord]:
        return [article for article in await self._articles_in(locale) if article.needs_cleanup]

    @cached_query("no_native_review")
    async def no_native_review_articles(self, locale: str) -> list[ArticleRecord]:
        if self.is_baseline(locale):
            return []
        return [article for article in await self._articles_in(locale) if article.needs_native_review]

    @cached_query("outdated")
    async def outdated_articles(self) -> list[ArticleRecord]:
        return [article for article in await self._articles_in(self.baseline) if article.outdated]

    @cached_query("stub")
    async def stub_articles(self) -> list[ArticleRecord]:
        return [article for article in await self._articles_in(self.baseline) if article.stub]

    async def _outdated_entry(self, record: ArticleRecord | GroupInfoRecord) -> OutdatedEntry:
        origin_date = await self.history.origin_date(record.outdated_since, record.git_path)
        return OutdatedEntry(
            record=record,
            origin_date=origin_date,
            diff_link=self.history.diff_link_for(record),
        )

    @cached_query("outdated_translation")
    async def outdated_translations(self, locale: str) -> list[OutdatedEntry]:
        """
        Translations flagged outdated, newest origin first.

        Origin dates are looked up concurrently; sorting happens once all of
        them are known.
        """
        if self.is_baseline(locale):
            return []

        articles = [article for article in await self._articles_in(locale) if article.outdated_translation]
        entries = await asyncio.gather(*(self._outdated_entry(article) for article in articles))
        return sort_by_origin_date(entries)

    @cached_query("outdated_group_info")
    async def outdated_group_info(self, locale: str) -> OutdatedEntry | None:
        if self.is_baseline(locale):
            return None

        group_info = await self.group_info(locale)
        if group_info is None or not group_info.outdated_translation:
            return None
        return await self._outdated_entry(group_info)

    async def group_info_needs_translation(self, locale: str) -> bool:
        """Whether the locale's group info counts as one outstanding problem."""
        group_info = await self.group_info(locale)
        if group_info is None:
            return self.config.count_missing_group_info
        return group_info.outdated_translation

    @cached_query("total_problem_count")
    async def total_problem_count(self, locale: str) -> int:
        """
        Number of problems in the locale, used to rank locales in menus.

        Sums all category sizes. Non-baseline locales get one extra problem
        when their group info is missing or outdated.
        """
        count = sum(
            len(category)
            for category in (
                await self.missing_articles(locale),
                await self.needs_cleanup_articles(locale),
                await self.no_native_review_articles(locale),
                await self.outdated_translations(locale),
            )
        )

        if self.is_baseline(locale):
            count += len(await self.outdated_articles()) + len(await self.stub_articles())
        elif await self.group_info_needs_translation(locale):
            count += 1

        return count

    # Splits used by the report sections

    async def missing_split(self, locale: str, outdated: bool, stub: bool) -> list[ArticleRecord]:
        """Missing articles whose baseline version has the given outdated and stub flags."""
        return [
            article
            for article in await self.missing_articles(locale)
            if article.outdated == outdated and article.stub == stub
        ]

    async def outdated_translation_split(self, locale: str, outdated: bool) -> list[OutdatedEntry]:
        """Outdated translations that are (or are not) also flagged outdated themselves."""
        return [
            entry
            for entry in await self.outdated_translations(locale)
            if entry.record.outdated == outdated
        ]
