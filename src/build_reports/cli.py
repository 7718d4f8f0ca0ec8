"""CLI for building wiki translation status reports."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from build_reports.build_reports import build_diff_pages, build_locale_menu, build_locale_report
from build_reports.helpers import parse_build_reports_args
from classify_articles.classify_articles import WikiStatus
from common.cli_helpers import setup_logging
from common.config import WikiStatusConfig, load_config
from common.errors import WikiStatusError
from common.local_io import save_json_local
from common.memoize import QueryCache
from resolve_history.git import GitRepository
from resolve_history.resolve_history import HistoryResolver

load_dotenv()

logger = logging.getLogger(__name__)


def create_wiki_status(top_directory: Path, config: WikiStatusConfig) -> WikiStatus:
    """Wire the git runner, history resolver and classifier around one shared cache."""
    cache = QueryCache()
    repository = GitRepository(
        top_directory,
        retry_policy=config.retry.to_policy(),
        max_concurrency=config.git_concurrency,
    )
    history = HistoryResolver(
        repository,
        baseline_locale=config.baseline_locale,
        mainline=config.mainline,
        cache=cache,
    )
    return WikiStatus(top_directory, config, history, cache=cache)


async def build_reports(
    status: WikiStatus,
    output_directory: Path,
    locales: list[str],
    include_diffs: bool = True,
) -> int:
    """Write every requested report; returns the number of diff pages written."""
    save_json_local(await build_locale_menu(status), output_directory / "locales.json")

    diff_count = 0
    for locale in locales:
        report = await build_locale_report(status, locale)
        save_json_local(report, output_directory / f"{locale}.json")

        if not include_diffs:
            continue

        for page in await build_diff_pages(status, locale):
            save_json_local(page, output_directory / f"{page.link}.json")
            diff_count += 1

    return diff_count


def main(argv: list[str] | None = None) -> None:
    args = parse_build_reports_args(argv)
    setup_logging(args.verbose)

    config = load_config(args.config)
    locales = args.locales or config.supported_locales
    unknown = [locale for locale in locales if locale not in config.locales]
    if unknown:
        logger.error("Unknown locale(s): %s", ", ".join(unknown))
        sys.exit(1)

    status = create_wiki_status(args.wiki_directory, config)
    output_directory = Path(args.output_directory)

    try:
        diff_count = asyncio.run(build_reports(status, output_directory, locales, not args.no_diffs))
    except WikiStatusError as exc:
        logger.error("Build failed: %s", exc)
        sys.exit(1)

    logger.info("Wrote %d locale reports and %d diff pages to %s", len(locales), diff_count, output_directory)


if __name__ == "__main__":
    main()
