"""Assemble per-locale reports, the locale menu and diff pages from classification results."""

import asyncio
import logging
from pathlib import PurePosixPath
from typing import Any, Sequence

from build_reports.models import DiffPage, LocaleMenuItem, LocaleReport, Section
from classify_articles.classify_articles import WikiStatus
from classify_articles.models import OutdatedEntry
from scan_articles.models import ArticleRecord, GroupInfoRecord

logger = logging.getLogger(__name__)


def _article_row(record: ArticleRecord | GroupInfoRecord) -> dict[str, Any]:
    return {
        "article_path": record.article_path,
        "git_path": record.git_path,
        "locale": record.locale,
        "line_count": record.line_count,
    }


def _outdated_row(entry: OutdatedEntry) -> dict[str, Any]:
    row = _article_row(entry.record)
    row.update(
        outdated_since=entry.record.outdated_since,
        origin_date=entry.origin_date,
        diff_link=entry.diff_link,
    )
    return row


def _article_section(title: str, records: Sequence[ArticleRecord | GroupInfoRecord]) -> Section | None:
    if not records:
        return None
    return Section(title=title, kind="article", entries=[_article_row(r) for r in records])


def _outdated_section(title: str, entries: Sequence[OutdatedEntry]) -> Section | None:
    if not entries:
        return None
    return Section(title=title, kind="outdated", entries=[_outdated_row(e) for e in entries])


async def _translation_sections(status: WikiStatus, locale: str) -> list[Section | None]:
    baseline = status.baseline.upper()
    outdated_group_info = await status.outdated_group_info(locale)

    missing_meta = []
    if await status.group_info(locale) is None:
        baseline_group_info = await status.group_info(status.baseline)
        if baseline_group_info is not None:
            missing_meta.append(baseline_group_info)

    return [
        _outdated_section(
            "Outdated translations of meta files",
            [outdated_group_info] if outdated_group_info else [],
        ),
        _article_section("Missing meta files", missing_meta),
        _outdated_section(
            "Outdated translations",
            await status.outdated_translation_split(locale, outdated=False),
        ),
        _article_section("Missing articles", await status.missing_split(locale, outdated=False, stub=False)),
        _article_section("Missing stubs", await status.missing_split(locale, outdated=False, stub=True)),
        _article_section("Needs cleanup", await status.needs_cleanup_articles(locale)),
        _article_section("No native review", await status.no_native_review_articles(locale)),
        _outdated_section(
            f"Outdated translations (outdated in {baseline})",
            await status.outdated_translation_split(locale, outdated=True),
        ),
        _article_section(
            f"Missing articles (outdated in {baseline})",
            await status.missing_split(locale, outdated=True, stub=False),
        ),
        _article_section(
            f"Missing stubs (outdated in {baseline})",
            await status.missing_split(locale, outdated=True, stub=True),
        ),
    ]


async def _baseline_sections(status: WikiStatus) -> list[Section | None]:
    return [
        _article_section("Outdated", await status.outdated_articles()),
        _article_section("Needs cleanup", await status.needs_cleanup_articles(status.baseline)),
        _article_section("Stubs", await status.stub_articles()),
    ]


async def build_locale_report(status: WikiStatus, locale: str) -> LocaleReport:
    """
    Build the report for one locale.

    Sections come in a fixed order and empty ones are left out, so a report
    with no sections means the locale has nothing left to do.
    """
    if status.is_baseline(locale):
        sections = await _baseline_sections(status)
    else:
        sections = await _translation_sections(status, locale)

    info = status.config.locales[locale]
    report = LocaleReport(
        locale=locale,
        name=info.name,
        flag=info.flag,
        problem_count=await status.total_problem_count(locale),
        sections=[section for section in sections if section is not None],
    )

    logger.info("Built %s report: %d problems in %d sections", locale, report.problem_count, len(report.sections))
    return report


async def build_locale_menu(status: WikiStatus) -> list[LocaleMenuItem]:
    """
    Menu entries for every configured locale.

    The baseline comes first and locales with too few articles to be worth
    listing come last; otherwise the configured order is kept.
    """
    locales = status.config.supported_locales
    counts = await asyncio.gather(*(status.article_count(locale) for locale in locales))
    problems = await asyncio.gather(*(status.total_problem_count(locale) for locale in locales))

    items = [
        LocaleMenuItem(
            locale=locale,
            name=status.config.locales[locale].name,
            flag=status.config.locales[locale].flag,
            problem_count=problem_count,
            hidden=article_count < status.config.min_visible_articles,
        )
        for locale, article_count, problem_count in zip(locales, counts, problems)
    ]

    return sorted(items, key=lambda item: (not status.is_baseline(item.locale), item.hidden))


async def build_diff_pages(status: WikiStatus, locale: str) -> list[DiffPage]:
    """Diff pages for every outdated translation (and group info) of a locale that has one."""
    if status.is_baseline(locale):
        return []

    entries = list(await status.outdated_translations(locale))
    outdated_group_info = await status.outdated_group_info(locale)
    if outdated_group_info is not None:
        entries.append(outdated_group_info)

    entries = [entry for entry in entries if entry.diff_link is not None]
    diffs = await asyncio.gather(*(status.history.baseline_diff(entry.record) for entry in entries))

    pages = []
    for entry, diff in zip(entries, diffs):
        if not diff.available:
            logger.warning("No diff available for %s since %s", entry.record.git_path, entry.record.outdated_since)
            continue

        pages.append(
            DiffPage(
                link=entry.diff_link,
                locale=status.baseline.upper(),
                article_path=entry.record.article_path,
                article_basename=PurePosixPath(entry.record.article_path).name,
                commit_id=entry.record.outdated_since[:7],
                commit_date=entry.origin_date,
                diff=diff.diff_text,
                hide_diff_headers=not diff.renamed,
            )
        )

    return pages
