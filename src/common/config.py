"""Shared configuration utilities."""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

from common.retry import DEFAULT_RETRY_ERRNOS, RetryPolicy

# Load .env file if it exists
load_dotenv()

CONFIG_DIR = Path(__file__).parent / "configs"
CONFIG_ENV_VAR = "CONFIG_ENV"
LOCALE_PATTERN = re.compile(r"^[a-z]{2}(?:-[a-z]{2})?$")


@dataclass
class LocaleInfo:
    """Display information for one supported locale."""

    name: str
    flag: str


@dataclass
class ExclusionConfig:
    """Baseline articles that are never reported as missing.

    An article is excluded when any pattern matches its path and no allow
    pattern does. Patterns are case-insensitive regular expressions.
    """

    patterns: list[str] = field(default_factory=list)
    allow: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        for pattern in [*self.patterns, *self.allow]:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"Invalid exclusion pattern {pattern!r}: {exc}") from exc


@dataclass
class RetryConfig:
    max_attempts: int = 5
    delay_seconds: float = 5.0
    backoff: float = 1.0
    retry_errnos: list[int] = field(default_factory=lambda: list(DEFAULT_RETRY_ERRNOS))

    def to_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            delay_seconds=self.delay_seconds,
            backoff=self.backoff,
            retry_errnos=tuple(self.retry_errnos),
        )


@dataclass
class WikiStatusConfig:
    locales: dict[str, LocaleInfo]
    baseline_locale: str = "en"
    mainline: str = "master"
    min_visible_articles: int = 10
    count_missing_group_info: bool = True
    git_concurrency: int = 8
    exclusions: ExclusionConfig = field(default_factory=ExclusionConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)

    def __post_init__(self) -> None:
        if not self.locales:
            raise ValueError("At least one locale must be configured")

        for locale in self.locales:
            if not LOCALE_PATTERN.match(locale):
                raise ValueError(f"Invalid locale code: {locale}. Must look like 'en' or 'pt-br'")

        if self.baseline_locale not in self.locales:
            raise ValueError(
                f"Baseline locale {self.baseline_locale} must be one of {list(self.locales)}"
            )

        if self.git_concurrency < 1:
            raise ValueError(f"git_concurrency must be at least 1, got {self.git_concurrency}")

    @property
    def supported_locales(self) -> list[str]:
        return list(self.locales)


def find_config_path(
    config_name: str | None,
    config_dir: Path,
    default_name: str = "default",
    env_var: str | None = None,
) -> Path:
    """Find config file path, checking env var and defaults.

    Args:
        config_name: Name of config (without .yaml), a path to a config file, or None for default
        config_dir: Directory containing config files
        default_name: Default config name if config_name is None
        env_var: Environment variable to check for config name

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get(env_var, default_name) if env_var else default_name

    if "/" in config_name or config_name.endswith((".yaml", ".yml")):
        config_path = Path(config_name)
    else:
        config_path = config_dir / f"{config_name}.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _parse_config(data: dict) -> WikiStatusConfig:
    """Parse config dictionary into WikiStatusConfig object."""
    locales = {
        str(code): LocaleInfo(name=info.get("name", str(code)), flag=info.get("flag", ""))
        for code, info in (data.get("locales") or {}).items()
    }

    exclusion_data = data.get("exclusions") or {}
    exclusions = ExclusionConfig(
        patterns=exclusion_data.get("patterns") or [],
        allow=exclusion_data.get("allow") or [],
    )

    retry_data = data.get("retry") or {}
    retry = RetryConfig(
        max_attempts=retry_data.get("max_attempts", 5),
        delay_seconds=retry_data.get("delay_seconds", 5.0),
        backoff=retry_data.get("backoff", 1.0),
        retry_errnos=retry_data.get("retry_errnos", list(DEFAULT_RETRY_ERRNOS)),
    )

    return WikiStatusConfig(
        locales=locales,
        baseline_locale=data.get("baseline_locale", "en"),
        mainline=data.get("mainline", "master"),
        min_visible_articles=data.get("min_visible_articles", 10),
        count_missing_group_info=data.get("count_missing_group_info", True),
        git_concurrency=data.get("git_concurrency", 8),
        exclusions=exclusions,
        retry=retry,
    )


def load_config(config_name: str | None = None) -> WikiStatusConfig:
    """Load configuration by name (e.g. 'default') or path.

    Args:
        config_name: Name of config file (without .yaml extension) or a path.
                    If None, uses CONFIG_ENV env var or "default".

    Returns:
        Loaded WikiStatusConfig object
    """
    config_path = find_config_path(config_name, CONFIG_DIR, env_var=CONFIG_ENV_VAR)
    return _parse_config(load_yaml(config_path))

