"""Tests for environment-backed project configuration."""

from __future__ import annotations

from unittest import mock

from sitemapper.config import ProjectConfig, get_config
from sitemapper.parsing.fetcher import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from sitemapper.sitemap.config import DEFAULT_MAX_DEPTH


class TestProjectConfig:
    """Tests for ProjectConfig."""

    def test_defaults_without_environment(self) -> None:
        config = ProjectConfig(environ={})

        assert config.domain is None
        assert config.scheme == "https"
        assert config.max_depth == DEFAULT_MAX_DEPTH
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.workers == 1
        assert config.user_agent == DEFAULT_USER_AGENT

    def test_reads_prefixed_variables(self) -> None:
        config = ProjectConfig(
            environ={
                "SITEMAP_DOMAIN": "example.org",
                "SITEMAP_SCHEME": "http",
                "SITEMAP_MAX_DEPTH": "3",
                "SITEMAP_TIMEOUT": "2.5",
                "SITEMAP_WORKERS": "4",
                "SITEMAP_USER_AGENT": "TestBot/1.0",
                "UNRELATED": "ignored",
            }
        )

        assert config.domain == "example.org"
        assert config.scheme == "http"
        assert config.max_depth == 3
        assert config.timeout == 2.5
        assert config.workers == 4
        assert config.user_agent == "TestBot/1.0"
        assert config.get("unrelated") is None

    def test_empty_values_ignored(self) -> None:
        config = ProjectConfig(environ={"SITEMAP_SCHEME": ""})

        assert config.scheme == "https"

    def test_invalid_number_falls_back(self, caplog) -> None:
        config = ProjectConfig(environ={"SITEMAP_MAX_DEPTH": "deep"})

        assert config.max_depth == DEFAULT_MAX_DEPTH
        assert "SITEMAP_MAX_DEPTH" in caplog.text

    def test_crawl_config(self) -> None:
        config = ProjectConfig(environ={"SITEMAP_MAX_DEPTH": "2", "SITEMAP_WORKERS": "3"})

        crawl_config = config.crawl_config()

        assert crawl_config.max_depth == 2
        assert crawl_config.max_workers == 3

    def test_reads_process_environment(self) -> None:
        with mock.patch.dict("os.environ", {"SITEMAP_DOMAIN": "env.example.org"}):
            assert ProjectConfig().domain == "env.example.org"


def test_get_config_is_singleton() -> None:
    assert get_config() is get_config()
