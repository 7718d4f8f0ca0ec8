"""Discovery and parsing of per-locale article files."""

import asyncio
import logging
import os
import re
from pathlib import Path, PurePosixPath
from typing import Iterable

from common.errors import MetadataError, ScanError
from scan_articles.metadata import ArticleMetadata, count_lines, decode_yaml, parse_front_matter
from scan_articles.models import ArticleRecord, GroupInfoRecord

logger = logging.getLogger(__name__)

ARTICLE_FILENAME_PATTERN = re.compile(r"^[a-z-]{2,5}\.md$")
WIKI_DIRECTORY = "wiki"
GROUP_INFO_DIRECTORY = "meta/group-info"


def find_article_files(wiki_directory: Path) -> list[Path]:
    """
    Recursively collect article files below the wiki directory.

    Only files named like ``<locale>.md`` are kept. Errors while listing any
    directory are collected and reported together after the walk.

    Args:
        wiki_directory: Root of the article tree

    Returns:
        Unordered list of article file paths

    Raises:
        ScanError: If the root or any subdirectory cannot be listed
    """
    if not wiki_directory.is_dir():
        raise ScanError(f"Wiki directory not readable: {wiki_directory}")

    failures: list[tuple[str, OSError]] = []

    def on_error(exc: OSError) -> None:
        failures.append((exc.filename or str(wiki_directory), exc))

    files = []
    for dirpath, _dirnames, filenames in os.walk(wiki_directory, onerror=on_error):
        for filename in filenames:
            if ARTICLE_FILENAME_PATTERN.match(filename):
                files.append(Path(dirpath) / filename)

    if failures:
        listed = ", ".join(f"{path} ({exc.strerror})" for path, exc in failures)
        raise ScanError(f"Failed to scan {len(failures)} path(s): {listed}", failures)

    logger.debug("Found %d article files under %s", len(files), wiki_directory)
    return files


def build_article_record(path: Path, content: str, top_directory: Path) -> ArticleRecord:
    """
    Build the record for one article file.

    Args:
        path: Absolute path of ``wiki/<article path>/<locale>.md``
        content: File contents
        top_directory: Root of the wiki repository

    Returns:
        ArticleRecord with flags decoded from the front matter

    Raises:
        MetadataError: If the front matter is malformed
        ValueError: If the path does not sit inside an article directory
    """
    git_path = path.relative_to(top_directory).as_posix()
    relative = PurePosixPath(git_path).relative_to(WIKI_DIRECTORY)
    if relative.parent == PurePosixPath("."):
        raise ValueError(f"Not inside an article directory: {git_path}")

    metadata = parse_front_matter(content, git_path)
    return ArticleRecord(
        article_path=relative.parent.as_posix(),
        git_path=git_path,
        locale=path.stem,
        line_count=count_lines(content),
        **metadata.as_dict(),
    )


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


async def load_articles(top_directory: Path, locales: Iterable[str]) -> list[ArticleRecord]:
    """
    Scan the wiki and parse every article in a supported locale.

    Files are read concurrently; the returned list is sorted by git path so
    repeated runs over the same tree produce the same order.

    Raises:
        ScanError: If the tree cannot be scanned or a file cannot be read
        MetadataError: If any article has malformed front matter
    """
    supported = set(locales)
    wiki_directory = top_directory / WIKI_DIRECTORY
    paths = await asyncio.to_thread(find_article_files, wiki_directory)

    candidates = []
    for path in paths:
        if path.parent == wiki_directory:
            logger.warning("Skipping file outside an article directory: %s", path)
            continue
        if path.stem not in supported:
            logger.warning("Skipping article in unsupported locale %s: %s", path.stem, path)
            continue
        candidates.append(path)

    results = await asyncio.gather(
        *(asyncio.to_thread(_read_text, path) for path in candidates),
        return_exceptions=True,
    )

    failures = [
        (str(path), result)
        for path, result in zip(candidates, results)
        if isinstance(result, (OSError, UnicodeDecodeError))
    ]
    if failures:
        listed = ", ".join(f"{path} ({exc})" for path, exc in failures)
        raise ScanError(f"Failed to read {len(failures)} article(s): {listed}", failures)

    for result in results:
        if isinstance(result, BaseException):
            raise result

    articles = [
        build_article_record(path, content, top_directory)
        for path, content in zip(candidates, results)
    ]
    articles.sort(key=lambda article: article.git_path)

    logger.info("Loaded %d articles in %d locales", len(articles), len({a.locale for a in articles}))
    return articles


async def load_group_info(top_directory: Path, locale: str) -> GroupInfoRecord | None:
    """
    Load ``meta/group-info/<locale>.yaml``.

    Returns:
        GroupInfoRecord, or None when the locale has no group-info file

    Raises:
        MetadataError: If the file cannot be read or is not valid group-info YAML
    """
    path = top_directory / GROUP_INFO_DIRECTORY / f"{locale}.yaml"
    git_path = path.relative_to(top_directory).as_posix()
    try:
        content = await asyncio.to_thread(_read_text, path)
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as exc:
        raise MetadataError(git_path, f"cannot be read: {exc}") from exc

    metadata = ArticleMetadata.from_mapping(decode_yaml(content, git_path), git_path)

    return GroupInfoRecord(
        article_path=PurePosixPath(GROUP_INFO_DIRECTORY).name,
        git_path=git_path,
        locale=locale,
        line_count=count_lines(content),
        needs_cleanup=metadata.needs_cleanup,
        outdated_since=metadata.outdated_since,
        outdated_translation=metadata.outdated_translation,
    )
