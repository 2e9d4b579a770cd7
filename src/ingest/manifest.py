"""Processed-archive manifest used to skip archives that were already published."""

import json
from pathlib import Path

from common.logger import get_logger

from .models import ProcessedRecord

logger = get_logger(__name__)


class ManifestStore:
    """JSON manifest keyed by archive name.

    The file is read on first use and cached for the lifetime of the store.
    Every write rewrites the whole file.

    Example:
        >>> store = ManifestStore(Path("processed-posts.json"))
        >>> store.is_processed("post.zip", "ab12...")
        False
    """

    def __init__(self, manifest_path: Path):
        self.manifest_path = manifest_path
        self._cache: dict[str, ProcessedRecord] | None = None

    def _load(self) -> dict[str, ProcessedRecord]:
        if self._cache is not None:
            return self._cache

        if not self.manifest_path.exists():
            self._cache = {}
            return self._cache

        with open(self.manifest_path, encoding="utf-8") as f:
            data = json.load(f)

        self._cache = {
            name: ProcessedRecord.from_dict(name, entry) for name, entry in data.items()
        }
        logger.debug(f"Loaded {len(self._cache)} manifest record(s) from {self.manifest_path}")
        return self._cache

    def is_processed(self, archive_name: str, content_hash: str) -> bool:
        """True when the archive was published with exactly this content hash."""
        record = self._load().get(archive_name)
        return record is not None and record.hash == content_hash

    def get(self, archive_name: str) -> ProcessedRecord | None:
        return self._load().get(archive_name)

    def records(self) -> list[ProcessedRecord]:
        return list(self._load().values())

    def mark_processed(self, record: ProcessedRecord) -> None:
        """Store a record, replacing any earlier record for the same archive name."""
        data = self._load()
        data[record.archive_name] = record
        self._write(data)

    def _write(self, data: dict[str, ProcessedRecord]) -> None:
        self.manifest_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.manifest_path, "w", encoding="utf-8") as f:
            json.dump(
                {name: record.to_dict() for name, record in data.items()},
                f,
                indent=2,
                ensure_ascii=False,
            )
