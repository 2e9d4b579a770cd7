"""Resolved runtime settings, built once at startup."""

from dataclasses import dataclass
from pathlib import Path

from .constants import PROFILES
from .env import Environment, env
from .errors import ConfigError


@dataclass(frozen=True)
class Settings:
    """Everything the pipeline needs from the environment."""

    profile: str
    blog_api_url: str
    blog_site_url: str
    blog_api_token: str | None
    asset_storage_url: str
    asset_public_url: str
    asset_storage_token: str | None
    asset_key_prefix: str
    posts_dir: Path
    temp_dir: Path
    manifest_path: Path
    upload_data_dir: Path
    watch_debounce_ms: int
    http_timeout: float


def resolve_blog_api_url(environment: Environment = env) -> str:
    """Pick the blog API URL for the active profile.

    Production only accepts BLOG_API_URL. Development prefers
    BLOG_API_URL_DEV and falls back to BLOG_API_URL.

    Raises:
        ConfigError: If no URL is configured for the active profile
    """
    profile = environment.app_env()
    prod_url = environment.blog_api_url()
    dev_url = environment.blog_api_url_dev()

    if profile == "production":
        if not prod_url:
            raise ConfigError("BLOG_API_URL is required in the production profile")
        return prod_url

    if dev_url:
        return dev_url
    if prod_url:
        return prod_url
    raise ConfigError("Neither BLOG_API_URL_DEV nor BLOG_API_URL is configured")


def load_settings(environment: Environment = env) -> Settings:
    """Resolve and validate configuration.

    Returns:
        Settings instance

    Raises:
        ConfigError: If the profile is unknown or a required setting is missing
    """
    profile = environment.app_env()
    if profile not in PROFILES:
        raise ConfigError(
            f"Unknown APP_ENV '{profile}', expected one of: {', '.join(sorted(PROFILES))}"
        )

    blog_api_url = resolve_blog_api_url(environment).rstrip("/")

    asset_storage_url = environment.asset_storage_url()
    if not asset_storage_url:
        raise ConfigError("ASSET_STORAGE_URL is required for image uploads")
    asset_storage_url = asset_storage_url.rstrip("/")

    try:
        watch_debounce_ms = environment.watch_debounce_ms()
        http_timeout = environment.http_timeout()
    except ValueError as e:
        raise ConfigError(f"Invalid numeric setting: {e}") from e

    return Settings(
        profile=profile,
        blog_api_url=blog_api_url,
        blog_site_url=(environment.blog_site_url() or blog_api_url).rstrip("/"),
        blog_api_token=environment.blog_api_token(),
        asset_storage_url=asset_storage_url,
        asset_public_url=(environment.asset_public_url() or asset_storage_url).rstrip("/"),
        asset_storage_token=environment.asset_storage_token(),
        asset_key_prefix=environment.asset_key_prefix(),
        posts_dir=environment.posts_dir(),
        temp_dir=environment.temp_dir(),
        manifest_path=environment.manifest_path(),
        upload_data_dir=environment.upload_data_dir(),
        watch_debounce_ms=watch_debounce_ms,
        http_timeout=http_timeout,
    )
