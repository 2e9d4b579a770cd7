"""Tests for locating the article and assets inside an archive."""

import pytest

from common.errors import LayoutError
from ingest.layout import detect_layout, find_assets_dir, find_first_markdown


def make_tree(root, files):
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")


class TestFindFirstMarkdown:
    """Tests for depth-first markdown discovery."""

    def test_prefers_files_at_shallower_level(self, tmp_path):
        make_tree(tmp_path, {"a_dir/deep.md": "deep", "z_top.md": "top"})
        assert find_first_markdown(tmp_path) == tmp_path / "z_top.md"

    def test_descends_into_subdirectories(self, tmp_path):
        make_tree(tmp_path, {"post/article.MD": "# Hi", "post/img/a.png": b"png"})
        assert find_first_markdown(tmp_path) == tmp_path / "post" / "article.MD"

    def test_returns_none_without_markdown(self, tmp_path):
        make_tree(tmp_path, {"readme.txt": "nothing"})
        assert find_first_markdown(tmp_path) is None


class TestFindAssetsDir:
    """Tests for assets directory detection."""

    def test_finds_nested_image_directory(self, tmp_path):
        make_tree(
            tmp_path,
            {
                "article.md": "# Hi",
                "attachments/readme.txt": "no images",
                "media/2024/photo.JPG": b"jpg",
            },
        )
        assert find_assets_dir(tmp_path / "article.md") == tmp_path / "media"

    def test_first_image_directory_wins(self, tmp_path):
        make_tree(
            tmp_path,
            {"article.md": "# Hi", "b_images/b.png": b"png", "a_images/a.png": b"png"},
        )
        assert find_assets_dir(tmp_path / "article.md") == tmp_path / "a_images"

    def test_none_without_images(self, tmp_path):
        make_tree(tmp_path, {"article.md": "# Hi", "docs/notes.txt": "text"})
        assert find_assets_dir(tmp_path / "article.md") is None


class TestDetectLayout:
    """Tests for detect_layout."""

    def test_title_from_front_matter(self, tmp_path):
        make_tree(
            tmp_path,
            {"post/article.md": "---\ntitle: '  My Title  '\n---\n# Hi\n", "post/img/a.png": b"png"},
        )

        layout = detect_layout(tmp_path)

        assert layout.markdown_path == tmp_path / "post" / "article.md"
        assert layout.assets_dir == tmp_path / "post" / "img"
        assert layout.inferred_title == "My Title"

    def test_title_falls_back_to_filename(self, tmp_path):
        make_tree(tmp_path, {"我的文章.md": "---\ntitle: '   '\n---\nBody\n"})

        layout = detect_layout(tmp_path)

        assert layout.inferred_title == "我的文章"
        assert layout.assets_dir is None

    def test_missing_markdown_raises(self, tmp_path):
        make_tree(tmp_path, {"img/a.png": b"png"})
        with pytest.raises(LayoutError):
            detect_layout(tmp_path)
