"""Data models for archive ingestion."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal


@dataclass
class ArchiveRecord:
    """A candidate archive found in the watched directory."""

    name: str
    path: Path
    modified_time: float


@dataclass
class ExtractionResult:
    """An archive unpacked into its own staging directory."""

    staging_dir: Path
    content_hash: str
    archive_name: str


@dataclass
class ArchiveLayout:
    """Where the article and its images live inside a staging directory."""

    markdown_path: Path
    assets_dir: Path | None
    inferred_title: str


@dataclass
class ProcessedRecord:
    """Manifest entry written after an archive is published."""

    archive_name: str
    hash: str
    remote_id: str
    remote_url: str
    title: str
    uploaded_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "archiveName": self.archive_name,
            "hash": self.hash,
            "remoteId": self.remote_id,
            "remoteUrl": self.remote_url,
            "title": self.title,
            "uploadedAt": self.uploaded_at,
        }

    @classmethod
    def from_dict(cls, archive_name: str, data: dict[str, Any]) -> "ProcessedRecord":
        return cls(
            archive_name=data.get("archiveName", archive_name),
            hash=data["hash"],
            remote_id=str(data.get("remoteId", "")),
            remote_url=data.get("remoteUrl", ""),
            title=data.get("title", ""),
            uploaded_at=data.get("uploadedAt", ""),
        )


@dataclass
class RunOutcome:
    """Result of one pipeline run."""

    status: Literal["empty", "skipped", "published"]
    archive_name: str | None = None
    record: ProcessedRecord | None = None
