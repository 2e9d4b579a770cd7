"""
Process dropped archives end to end.

Selects the newest archive in the posts directory, skips it when the manifest
already holds the same name and content hash, and otherwise extracts,
uploads, transforms, publishes, and records it. The staging directory is
always removed, whatever happens.
"""

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from common.logger import get_logger
from common.settings import Settings
from transform.markdown import peek_request_data, transform_markdown
from upload.assets import upload_assets
from upload.clients import AssetStorage, BlogClient, ObjectStorageClient, PostPublisher
from upload.models import PostPayload

from .archive import cleanup_staging, extract_archive, hash_file, latest_archive
from .layout import detect_layout
from .manifest import ManifestStore
from .models import ArchiveRecord, ProcessedRecord, RunOutcome

logger = get_logger(__name__)


def request_file_path(upload_data_dir: Path, slug: str) -> Path:
    """Where the request payload for a slug is archived."""
    safe_slug = re.sub(r"[^a-zA-Z0-9._-]", "-", slug)
    return upload_data_dir / f"{safe_slug}.json"


def write_request_file(file_path: Path, request_body: dict[str, Any]) -> None:
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(request_body, f, indent=2, ensure_ascii=False)


class Pipeline:
    """Wires the archive, transform, and upload steps together.

    The manifest store and remote clients are created once and shared by
    every run.
    """

    def __init__(
        self,
        posts_dir: Path,
        temp_dir: Path,
        upload_data_dir: Path,
        manifest: ManifestStore,
        storage: AssetStorage,
        publisher: PostPublisher,
    ):
        self.posts_dir = posts_dir
        self.temp_dir = temp_dir
        self.upload_data_dir = upload_data_dir
        self.manifest = manifest
        self.storage = storage
        self.publisher = publisher

    @classmethod
    def from_settings(cls, settings: Settings) -> "Pipeline":
        return cls(
            posts_dir=settings.posts_dir,
            temp_dir=settings.temp_dir,
            upload_data_dir=settings.upload_data_dir,
            manifest=ManifestStore(settings.manifest_path),
            storage=ObjectStorageClient(
                endpoint_url=settings.asset_storage_url,
                public_base_url=settings.asset_public_url,
                key_prefix=settings.asset_key_prefix,
                token=settings.asset_storage_token,
                timeout=settings.http_timeout,
            ),
            publisher=BlogClient(
                api_base_url=settings.blog_api_url,
                site_url=settings.blog_site_url,
                token=settings.blog_api_token,
                timeout=settings.http_timeout,
            ),
        )

    def process_latest_archive(self) -> RunOutcome:
        """
        Process the most recently modified archive.

        Older unseen archives are not visited unless they become the newest.

        Returns:
            RunOutcome with status "empty", "skipped", or "published"

        Raises:
            PublisherError: If any step fails; nothing is written to the manifest
        """
        latest = latest_archive(self.posts_dir)
        if latest is None:
            logger.info(f"No archives in {self.posts_dir} yet")
            return RunOutcome(status="empty")
        return self.process_archive(latest)

    def process_archive(self, archive: ArchiveRecord) -> RunOutcome:
        content_hash = hash_file(archive.path)
        if self.manifest.is_processed(archive.name, content_hash):
            logger.info(f"[dim]skip[/dim] {archive.name} already published")
            return RunOutcome(status="skipped", archive_name=archive.name)

        logger.info(f"Processing [bold]{archive.name}[/bold]")
        extraction = extract_archive(archive.path, self.temp_dir, content_hash)
        try:
            record = self._publish_extracted(extraction.staging_dir, archive.name, content_hash)
        finally:
            cleanup_staging(extraction.staging_dir)

        return RunOutcome(status="published", archive_name=archive.name, record=record)

    def _publish_extracted(
        self, staging_dir: Path, archive_name: str, content_hash: str
    ) -> ProcessedRecord:
        layout = detect_layout(staging_dir)
        markdown_dir = layout.markdown_path.parent

        slug = peek_request_data(layout.markdown_path)["slug"]

        def upload(local_path: Path) -> str:
            return self.storage.upload_image(local_path, slug)

        asset_map = upload_assets(layout.assets_dir, markdown_dir, upload)
        transformed = transform_markdown(
            layout.markdown_path, asset_map, upload=upload, root_dir=staging_dir
        )
        title = transformed.title or layout.inferred_title

        if transformed.missing_images:
            logger.warning(
                f"{len(transformed.missing_images)} image reference(s) left unresolved in {title}"
            )

        write_request_file(
            request_file_path(self.upload_data_dir, transformed.request_body["slug"]),
            transformed.request_body,
        )

        remote = self.publisher.publish(
            PostPayload(title=title, body=transformed.content, request_data=transformed.request_body)
        )

        record = ProcessedRecord(
            archive_name=archive_name,
            hash=content_hash,
            remote_id=remote.id,
            remote_url=remote.url,
            title=title,
            uploaded_at=datetime.now(timezone.utc).isoformat(),
        )
        self.manifest.mark_processed(record)

        logger.info(f"[green]✓[/green] Published [bold]{title}[/bold] at {remote.url}")
        return record
