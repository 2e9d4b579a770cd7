"""Locate the article and its image directory inside an extracted archive."""

from pathlib import Path

import frontmatter

from common.constants import IMAGE_EXTENSIONS, MARKDOWN_EXTENSIONS
from common.errors import LayoutError
from common.logger import get_logger

from .models import ArchiveLayout

logger = get_logger(__name__)


def detect_layout(staging_dir: Path) -> ArchiveLayout:
    """
    Find the markdown article, its title, and its assets directory.

    Args:
        staging_dir: Root of an extracted archive

    Returns:
        ArchiveLayout for the first markdown file found

    Raises:
        LayoutError: If no markdown file exists anywhere in the tree
    """
    markdown_path = find_first_markdown(staging_dir)
    if markdown_path is None:
        raise LayoutError(f"No markdown file found in {staging_dir.name}")

    post = frontmatter.loads(markdown_path.read_text(encoding="utf-8"))
    assets_dir = find_assets_dir(markdown_path)

    if assets_dir:
        logger.debug(f"Assets directory: {assets_dir.name}")

    return ArchiveLayout(
        markdown_path=markdown_path,
        assets_dir=assets_dir,
        inferred_title=resolve_title(post.metadata, markdown_path),
    )


def resolve_title(metadata: dict, markdown_path: Path) -> str:
    """Prefer a non-blank front-matter title, else the file name without extension."""
    title = metadata.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    return markdown_path.stem


def find_first_markdown(directory: Path) -> Path | None:
    """
    Depth-first search for a markdown file.

    Files at each level are checked before descending into subdirectories.
    Entries are visited in name order.
    """
    entries = sorted(directory.iterdir())

    for entry in entries:
        if entry.is_file() and entry.suffix.lower() in MARKDOWN_EXTENSIONS:
            return entry

    for entry in entries:
        if entry.is_dir():
            found = find_first_markdown(entry)
            if found:
                return found

    return None


def find_assets_dir(markdown_path: Path) -> Path | None:
    """Return the first sibling directory of the article that holds an image."""
    for entry in sorted(markdown_path.parent.iterdir()):
        if entry.is_dir() and directory_contains_images(entry):
            return entry
    return None


def directory_contains_images(directory: Path) -> bool:
    return any(
        path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS
        for path in directory.rglob("*")
    )
