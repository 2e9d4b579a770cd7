"""Tests for the processed-archive manifest."""

import json

from ingest.manifest import ManifestStore
from ingest.models import ProcessedRecord


def make_record(name="post.zip", content_hash="hash-1", remote_id="42"):
    return ProcessedRecord(
        archive_name=name,
        hash=content_hash,
        remote_id=remote_id,
        remote_url=f"https://blog.example.com/{remote_id}",
        title="My Post",
        uploaded_at="2026-10-19T12:00:00+00:00",
    )


class TestManifestStore:
    """Tests for ManifestStore."""

    def test_missing_file_means_nothing_processed(self, tmp_path):
        store = ManifestStore(tmp_path / "processed-posts.json")
        assert not store.is_processed("post.zip", "hash-1")
        assert store.records() == []

    def test_mark_processed_persists_json(self, tmp_path):
        path = tmp_path / "state" / "processed-posts.json"
        store = ManifestStore(path)

        store.mark_processed(make_record())

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {
            "post.zip": {
                "archiveName": "post.zip",
                "hash": "hash-1",
                "remoteId": "42",
                "remoteUrl": "https://blog.example.com/42",
                "title": "My Post",
                "uploadedAt": "2026-10-19T12:00:00+00:00",
            }
        }

    def test_idempotence_is_keyed_by_name_and_hash(self, tmp_path):
        store = ManifestStore(tmp_path / "processed-posts.json")
        store.mark_processed(make_record())

        assert store.is_processed("post.zip", "hash-1")
        assert not store.is_processed("post.zip", "hash-2")
        assert not store.is_processed("other.zip", "hash-1")

    def test_one_record_per_archive_name(self, tmp_path):
        path = tmp_path / "processed-posts.json"
        store = ManifestStore(path)

        store.mark_processed(make_record(content_hash="hash-1", remote_id="1"))
        store.mark_processed(make_record(content_hash="hash-2", remote_id="2"))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert list(data) == ["post.zip"]
        assert data["post.zip"]["hash"] == "hash-2"
        assert store.get("post.zip").remote_id == "2"

    def test_loads_existing_manifest_lazily(self, tmp_path):
        path = tmp_path / "processed-posts.json"
        ManifestStore(path).mark_processed(make_record())

        store = ManifestStore(path)
        assert store._cache is None
        assert store.is_processed("post.zip", "hash-1")
        assert store._cache is not None

    def test_cache_survives_external_changes(self, tmp_path):
        path = tmp_path / "processed-posts.json"
        store = ManifestStore(path)
        store.mark_processed(make_record())

        path.write_text("{}", encoding="utf-8")

        assert store.is_processed("post.zip", "hash-1")

    def test_keeps_unicode_readable(self, tmp_path):
        path = tmp_path / "processed-posts.json"
        record = make_record()
        record.title = "我的文章"

        ManifestStore(path).mark_processed(record)

        assert "我的文章" in path.read_text(encoding="utf-8")
