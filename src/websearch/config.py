"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (WEBSEARCH__CACHE__CAPACITY=100)
  2. websearch.yaml         (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)


def _find_config_file() -> str | None:
    """Return the path of the first websearch.yaml found, or None."""
    candidates = [
        Path("websearch.yaml"),
        Path(platformdirs.user_config_dir("websearch")) / "websearch.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    name: str = "web-search"


class CacheSettings(BaseModel):
    capacity: int = 50
    eviction_fraction: float = 0.1
    default_ttl_seconds: int = 3600
    feed_ttl_seconds: int = 300
    profile_ttl_seconds: int = 1800
    news_ttl_seconds: int = 600
    dynamic_max_ttl_seconds: int = 600


class ConnectivitySettings(BaseModel):
    probe_url: str = "https://www.google.com"
    timeout_seconds: float = 3.0
    ttl_seconds: int = 60


class FetcherSettings(BaseModel):
    timeout_seconds: float = 10.0
    api_timeout_seconds: float = 5.0
    max_redirects: int = 5
    user_agent: str = _BROWSER_USER_AGENT


class ExtractionSettings(BaseModel):
    # Selector cascade
    min_container_chars: int = 100
    min_item_chars: int = 20
    # Density fallback; empirically chosen, kept as-is
    density_min_chars: int = 50
    density_min_score: int = 2
    density_max_blocks: int = 10

    max_headings: int = 10
    min_confidence: float = 0.5
    max_structured_data_chars: int = 1000


class ApiSettings(BaseModel):
    top_stories_limit: int = 10
    max_repositories: int = 5
    max_events: int = 3


class DomainSettings(BaseModel):
    """Static domain classification tables.

    A host matches an entry when it equals it or is a subdomain of it.
    """

    profile_domains: list[str] = ["github.com"]
    aggregator_domains: list[str] = ["news.ycombinator.com"]
    basic_scrape_domains: list[str] = [
        "wikipedia.org",
        "github.com",
        "stackoverflow.com",
        "news.ycombinator.com",
        "docs.python.org",
        "developer.mozilla.org",
        "medium.com",
        "dev.to",
    ]
    dynamic_domains: list[str] = [
        "twitter.com",
        "x.com",
        "facebook.com",
        "instagram.com",
        "linkedin.com",
        "reddit.com",
        "youtube.com",
        "tiktok.com",
    ]


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: WEBSEARCH__FETCHER__TIMEOUT_SECONDS=20
        env_prefix="WEBSEARCH__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    cache: CacheSettings = CacheSettings()
    connectivity: ConnectivitySettings = ConnectivitySettings()
    fetcher: FetcherSettings = FetcherSettings()
    extraction: ExtractionSettings = ExtractionSettings()
    api: ApiSettings = ApiSettings()
    domains: DomainSettings = DomainSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
