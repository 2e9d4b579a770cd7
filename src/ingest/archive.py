"""Archive discovery, hashing, and extraction."""

import hashlib
import shutil
import time
import uuid
import zipfile
from pathlib import Path

from common.constants import (
    MARKDOWN_EXTENSIONS,
    MAX_NESTED_ARCHIVE_DEPTH,
    SUPPORTED_ARCHIVE_EXTENSIONS,
)
from common.errors import ExtractionError
from common.logger import get_logger

from .models import ArchiveRecord, ExtractionResult

logger = get_logger(__name__)

HASH_CHUNK_SIZE = 1024 * 1024


def is_archive(path: Path) -> bool:
    return path.suffix.lower() in SUPPORTED_ARCHIVE_EXTENSIONS


def list_archives(posts_dir: Path) -> list[ArchiveRecord]:
    """
    List archives in the watched directory.

    Args:
        posts_dir: Directory archives are dropped into (created if missing)

    Returns:
        Archive records sorted by modification time (oldest first)
    """
    posts_dir.mkdir(parents=True, exist_ok=True)

    archives = [
        ArchiveRecord(name=entry.name, path=entry, modified_time=entry.stat().st_mtime)
        for entry in posts_dir.iterdir()
        if entry.is_file() and is_archive(entry)
    ]
    archives.sort(key=lambda a: a.modified_time)
    return archives


def latest_archive(posts_dir: Path) -> ArchiveRecord | None:
    """Return the most recently modified archive, or None if there are none."""
    archives = list_archives(posts_dir)
    return archives[-1] if archives else None


def hash_file(file_path: Path) -> str:
    """Compute the SHA-256 hex digest of a file, reading it in chunks."""
    hasher = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def extract_archive(
    archive_path: Path,
    temp_dir: Path,
    content_hash: str | None = None,
) -> ExtractionResult:
    """
    Unpack an archive into a fresh staging directory.

    Nested zips sitting in the staging root are expanded in place when the
    archive holds no markdown file at the top level.

    Args:
        archive_path: Path to the zip archive
        temp_dir: Parent directory for staging directories
        content_hash: Precomputed hash of the archive (computed if None)

    Returns:
        ExtractionResult describing the staging directory

    Raises:
        ExtractionError: If the archive (or a nested archive) is corrupt
    """
    millis = int(time.time() * 1000)
    staging_dir = temp_dir / f"{archive_path.stem}-{millis}-{uuid.uuid4()}"
    staging_dir.mkdir(parents=True, exist_ok=True)

    try:
        _unzip(archive_path, staging_dir)
        expand_nested_archives(staging_dir)
    except ExtractionError:
        cleanup_staging(staging_dir)
        raise

    logger.debug(f"Extracted {archive_path.name} to {staging_dir}")

    return ExtractionResult(
        staging_dir=staging_dir,
        content_hash=content_hash or hash_file(archive_path),
        archive_name=archive_path.name,
    )


def expand_nested_archives(staging_dir: Path) -> None:
    """
    Expand zips found directly in the staging root until markdown shows up.

    Stops after MAX_NESTED_ARCHIVE_DEPTH rounds, as soon as a markdown file
    exists anywhere in the tree, or when no nested zips are left.
    """
    for depth in range(MAX_NESTED_ARCHIVE_DEPTH):
        if contains_markdown(staging_dir):
            return

        nested = list_immediate_archives(staging_dir)
        if not nested:
            return

        for nested_zip in nested:
            logger.debug(f"Expanding nested archive {nested_zip.name} (round {depth + 1})")
            _unzip(nested_zip, nested_zip.parent)
            nested_zip.unlink(missing_ok=True)


def contains_markdown(directory: Path) -> bool:
    return any(
        path.is_file() and path.suffix.lower() in MARKDOWN_EXTENSIONS
        for path in directory.rglob("*")
    )


def list_immediate_archives(directory: Path) -> list[Path]:
    return sorted(entry for entry in directory.iterdir() if entry.is_file() and is_archive(entry))


def cleanup_staging(staging_dir: Path) -> None:
    """Remove a staging directory and everything in it."""
    shutil.rmtree(staging_dir, ignore_errors=True)


def _unzip(archive_path: Path, destination: Path) -> None:
    try:
        with zipfile.ZipFile(archive_path) as zf:
            zf.extractall(destination)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as e:
        raise ExtractionError(f"Could not extract {archive_path.name}: {e}") from e
