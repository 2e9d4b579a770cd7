"""Environment configuration interface for the zip-drop publisher.

This module provides a clean interface for accessing environment variables,
centralizing all environment variable access in one place.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from .constants import (
    HTTP_TIMEOUT_SECONDS,
    MANIFEST_PATH,
    POSTS_DIR,
    TEMP_DIR,
    UPLOAD_DATA_DIR,
    WATCH_DEBOUNCE_MS,
)

# Load environment variables from .env file if it exists
load_dotenv()


def _get_stripped(name: str) -> str | None:
    """Return an environment variable with surrounding whitespace removed, or None if blank."""
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def app_env() -> str:
        """Get the active configuration profile.

        Returns:
            Profile name, defaults to 'development'
        """
        return (_get_stripped("APP_ENV") or "development").lower()

    @staticmethod
    def blog_api_url() -> str | None:
        """Get the production blog API base URL."""
        return _get_stripped("BLOG_API_URL")

    @staticmethod
    def blog_api_url_dev() -> str | None:
        """Get the development blog API base URL."""
        return _get_stripped("BLOG_API_URL_DEV")

    @staticmethod
    def blog_site_url() -> str | None:
        """Get the public site URL used to build fallback post links."""
        return _get_stripped("BLOG_SITE_URL")

    @staticmethod
    def blog_api_token() -> str | None:
        """Get the bearer token sent with publish requests."""
        return _get_stripped("BLOG_API_TOKEN")

    @staticmethod
    def asset_storage_url() -> str | None:
        """Get the object storage endpoint images are uploaded to."""
        return _get_stripped("ASSET_STORAGE_URL")

    @staticmethod
    def asset_public_url() -> str | None:
        """Get the public base URL uploaded images are served from."""
        return _get_stripped("ASSET_PUBLIC_URL")

    @staticmethod
    def asset_storage_token() -> str | None:
        """Get the bearer token sent with asset uploads."""
        return _get_stripped("ASSET_STORAGE_TOKEN")

    @staticmethod
    def asset_key_prefix() -> str:
        """Get the object key prefix for uploaded images.

        Returns:
            Key prefix, defaults to 'posts'
        """
        return (_get_stripped("ASSET_KEY_PREFIX") or "posts").strip("/")

    @staticmethod
    def posts_dir() -> Path:
        """Get the watched directory archives are dropped into.

        Returns:
            Path to posts directory, defaults to ./posts
        """
        return Path(os.getenv("POSTS_DIR", str(POSTS_DIR)))

    @staticmethod
    def temp_dir() -> Path:
        """Get the scratch directory archives are extracted under.

        Returns:
            Path to temp directory, defaults to ./.tmp
        """
        return Path(os.getenv("TEMP_DIR", str(TEMP_DIR)))

    @staticmethod
    def manifest_path() -> Path:
        """Get the processed-archive manifest file path.

        Returns:
            Path to manifest, defaults to ./processed-posts.json
        """
        return Path(os.getenv("MANIFEST_PATH", str(MANIFEST_PATH)))

    @staticmethod
    def upload_data_dir() -> Path:
        """Get the directory request payloads are archived to.

        Returns:
            Path to upload data directory, defaults to ./upload_data
        """
        return Path(os.getenv("UPLOAD_DATA_DIR", str(UPLOAD_DATA_DIR)))

    @staticmethod
    def watch_debounce_ms() -> int:
        """Get the quiet period before a burst of file events triggers a run.

        Returns:
            Debounce in milliseconds, defaults to 250
        """
        return int(os.getenv("WATCH_DEBOUNCE_MS", str(WATCH_DEBOUNCE_MS)))

    @staticmethod
    def http_timeout() -> float:
        """Get the timeout applied to every HTTP request.

        Returns:
            Timeout in seconds, defaults to 30
        """
        return float(os.getenv("HTTP_TIMEOUT", str(HTTP_TIMEOUT_SECONDS)))


# Singleton instance for convenient access
env = Environment()
