"""Tests for settings resolution and configuration profiles."""

import pytest

from common.errors import ConfigError
from common.settings import load_settings, resolve_blog_api_url

ALL_VARS = [
    "APP_ENV",
    "BLOG_API_URL",
    "BLOG_API_URL_DEV",
    "BLOG_SITE_URL",
    "ASSET_STORAGE_URL",
    "ASSET_PUBLIC_URL",
    "WATCH_DEBOUNCE_MS",
    "HTTP_TIMEOUT",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every publisher variable so tests start from defaults."""
    for name in ALL_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestResolveBlogApiUrl:
    """Tests for profile-based blog URL selection."""

    def test_development_prefers_dev_url(self, clean_env):
        clean_env.setenv("BLOG_API_URL", "https://prod.example.com")
        clean_env.setenv("BLOG_API_URL_DEV", "http://localhost:3000")
        assert resolve_blog_api_url() == "http://localhost:3000"

    def test_development_falls_back_to_prod_url(self, clean_env):
        clean_env.setenv("BLOG_API_URL", "https://prod.example.com")
        assert resolve_blog_api_url() == "https://prod.example.com"

    def test_development_without_urls_fails(self, clean_env):
        with pytest.raises(ConfigError):
            resolve_blog_api_url()

    def test_production_ignores_dev_url(self, clean_env):
        clean_env.setenv("APP_ENV", "production")
        clean_env.setenv("BLOG_API_URL", "https://prod.example.com")
        clean_env.setenv("BLOG_API_URL_DEV", "http://localhost:3000")
        assert resolve_blog_api_url() == "https://prod.example.com"

    def test_production_requires_prod_url(self, clean_env):
        clean_env.setenv("APP_ENV", "production")
        clean_env.setenv("BLOG_API_URL_DEV", "http://localhost:3000")
        with pytest.raises(ConfigError, match="BLOG_API_URL"):
            resolve_blog_api_url()


class TestLoadSettings:
    """Tests for load_settings."""

    def test_loads_with_defaults(self, clean_env):
        clean_env.setenv("BLOG_API_URL_DEV", "http://localhost:3000/api/")
        clean_env.setenv("ASSET_STORAGE_URL", "https://storage.example.com/bucket/")

        settings = load_settings()

        assert settings.profile == "development"
        assert settings.blog_api_url == "http://localhost:3000/api"
        assert settings.blog_site_url == "http://localhost:3000/api"
        assert settings.asset_storage_url == "https://storage.example.com/bucket"
        assert settings.asset_public_url == "https://storage.example.com/bucket"
        assert settings.watch_debounce_ms == 250

    def test_public_urls_override(self, clean_env):
        clean_env.setenv("BLOG_API_URL", "https://api.example.com")
        clean_env.setenv("BLOG_SITE_URL", "https://example.com/blog")
        clean_env.setenv("ASSET_STORAGE_URL", "https://storage.example.com")
        clean_env.setenv("ASSET_PUBLIC_URL", "https://cdn.example.com")

        settings = load_settings()

        assert settings.blog_site_url == "https://example.com/blog"
        assert settings.asset_public_url == "https://cdn.example.com"

    def test_missing_storage_url_fails(self, clean_env):
        clean_env.setenv("BLOG_API_URL", "https://api.example.com")
        with pytest.raises(ConfigError, match="ASSET_STORAGE_URL"):
            load_settings()

    def test_unknown_profile_fails(self, clean_env):
        clean_env.setenv("APP_ENV", "staging")
        clean_env.setenv("BLOG_API_URL", "https://api.example.com")
        clean_env.setenv("ASSET_STORAGE_URL", "https://storage.example.com")
        with pytest.raises(ConfigError, match="staging"):
            load_settings()

    def test_invalid_number_fails(self, clean_env):
        clean_env.setenv("BLOG_API_URL", "https://api.example.com")
        clean_env.setenv("ASSET_STORAGE_URL", "https://storage.example.com")
        clean_env.setenv("WATCH_DEBOUNCE_MS", "soon")
        with pytest.raises(ConfigError):
            load_settings()
