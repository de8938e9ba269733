"""Unit tests for configuration defaults and overrides."""

from __future__ import annotations

from typing import TYPE_CHECKING

from websearch.config import Settings

if TYPE_CHECKING:
    import pytest


class TestDefaults:
    def test_cache_defaults(self) -> None:
        settings = Settings()
        assert settings.cache.capacity == 50
        assert settings.cache.default_ttl_seconds == 3600
        assert settings.cache.dynamic_max_ttl_seconds == 600

    def test_timeouts(self) -> None:
        settings = Settings()
        assert settings.connectivity.timeout_seconds == 3.0
        assert settings.connectivity.ttl_seconds == 60
        assert settings.fetcher.api_timeout_seconds == 5.0
        assert settings.fetcher.timeout_seconds == 10.0
        assert settings.fetcher.max_redirects == 5

    def test_density_thresholds(self) -> None:
        extraction = Settings().extraction
        assert extraction.density_min_chars == 50
        assert extraction.density_min_score == 2
        assert extraction.density_max_blocks == 10


class TestEnvironmentOverrides:
    def test_nested_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WEBSEARCH__CACHE__CAPACITY", "10")
        monkeypatch.setenv("WEBSEARCH__LOGGING__FORMAT", "text")
        settings = Settings()
        assert settings.cache.capacity == 10
        assert settings.logging.format == "text"

    def test_constructor_args_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WEBSEARCH__SERVER__NAME", "from-env")
        settings = Settings(server={"name": "from-args"})
        assert settings.server.name == "from-args"
