"""Upload every image in an article's assets directory."""

from collections.abc import Callable
from pathlib import Path

from common.constants import IMAGE_EXTENSIONS
from common.logger import get_logger

logger = get_logger(__name__)

# Uploads one local image and returns its public URL
ImageUploader = Callable[[Path], str]


def normalize_relative(path: str) -> str:
    """Use forward slashes and drop a leading './'."""
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def register_asset(asset_map: dict[str, str], relative_path: str, url: str) -> None:
    """Map both the bare and './'-prefixed forms of a path to the same URL."""
    normalized = normalize_relative(relative_path)
    asset_map[normalized] = url
    asset_map[f"./{normalized}"] = url


def collect_asset_files(assets_dir: Path) -> list[Path]:
    """Recursively list image files under a directory, in sorted walk order."""
    return sorted(
        path
        for path in assets_dir.rglob("*")
        if path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS
    )


def upload_assets(
    assets_dir: Path | None,
    markdown_dir: Path,
    upload: ImageUploader,
) -> dict[str, str]:
    """
    Upload all images under the assets directory, one at a time.

    Args:
        assets_dir: Detected assets directory, or None
        markdown_dir: Directory of the markdown file; keys are relative to it
        upload: Callable that uploads one image and returns its URL

    Returns:
        Mapping of relative path (bare and './' forms) to remote URL.
        Empty if there is no assets directory.

    Raises:
        UploadError: If any upload fails
    """
    asset_map: dict[str, str] = {}
    if assets_dir is None or not assets_dir.is_dir():
        return asset_map

    files = collect_asset_files(assets_dir)
    logger.info(f"Uploading [bold]{len(files)}[/bold] image(s) from {assets_dir.name}")

    for file_path in files:
        url = upload(file_path)
        relative = file_path.relative_to(markdown_dir).as_posix()
        register_asset(asset_map, relative, url)
        logger.debug(f"  {relative} → {url}")

    return asset_map
