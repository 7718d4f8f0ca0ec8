"""Front-matter decoding for wiki articles and group-info files."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from typing import Any, Optional

import yaml

from common.errors import MetadataError

FRONT_MATTER_PATTERN = re.compile(r"^---\n(.+?\n)---\n", re.DOTALL)

_FLAG_FIELDS = (
    "needs_cleanup",
    "outdated",
    "outdated_translation",
    "stub",
    "no_native_review",
)
_REVISION_FIELDS = ("outdated_since", "no_native_review_since")
_NUMERIC_TAGS = ("tag:yaml.org,2002:int", "tag:yaml.org,2002:float")


class FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps revision ids exactly as written.

    Plain YAML would read ``0123456`` as an octal integer and ``1_234`` as
    ``1234``, so numeric-looking revision values are re-tagged as strings
    before construction.
    """

    def construct_mapping(self, node, deep=False):
        for key_node, value_node in node.value:
            if (
                isinstance(key_node, yaml.ScalarNode)
                and key_node.value in _REVISION_FIELDS
                and isinstance(value_node, yaml.ScalarNode)
                and value_node.tag in _NUMERIC_TAGS
            ):
                value_node.tag = "tag:yaml.org,2002:str"
        return super().construct_mapping(node, deep=deep)


@dataclass(frozen=True)
class ArticleMetadata:
    """Status flags an article may declare in its front matter.

    Every flag defaults to False and every revision to None. Keys outside this
    schema (tags, legal notices, ...) are accepted and ignored.
    """
    needs_cleanup: bool = False
    outdated: bool = False
    outdated_since: Optional[str] = None
    outdated_translation: bool = False
    stub: bool = False
    no_native_review: bool = False
    no_native_review_since: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Any, path: str) -> "ArticleMetadata":
        """Validate decoded YAML against the schema.

        Raises:
            MetadataError: If the data is not a mapping or a known key has the wrong type
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise MetadataError(path, f"expected a mapping, got {type(data).__name__}")

        values: dict[str, Any] = {}
        for name in _FLAG_FIELDS:
            value = data.get(name)
            if value is None:
                continue
            if not isinstance(value, bool):
                raise MetadataError(path, f"{name} must be true or false, got {value!r}")
            values[name] = value

        for name in _REVISION_FIELDS:
            value = data.get(name)
            if value is None:
                continue
            if not isinstance(value, str):
                raise MetadataError(path, f"{name} must be a revision id, got {value!r}")
            value = value.strip()
            if not value:
                raise MetadataError(path, f"{name} must not be empty")
            values[name] = value

        return cls(**values)

    def as_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def split_front_matter(content: str) -> str | None:
    """Return the raw YAML between the leading ``---`` marker lines, if any."""
    match = FRONT_MATTER_PATTERN.match(content)
    return match.group(1) if match else None


def decode_yaml(text: str, path: str) -> Any:
    try:
        return yaml.load(text, Loader=FrontMatterLoader)
    except yaml.YAMLError as exc:
        raise MetadataError(path, str(exc).replace("\n", " ")) from exc


def parse_front_matter(content: str, path: str) -> ArticleMetadata:
    """Decode the front matter of an article, defaulting when there is none."""
    block = split_front_matter(content)
    if block is None:
        return ArticleMetadata()
    return ArticleMetadata.from_mapping(decode_yaml(block, path), path)


def count_lines(content: str) -> int:
    return content.count("\n")
