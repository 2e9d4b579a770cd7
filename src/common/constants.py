"""Shared constants for the zip-drop publisher.

For environment-based configuration (endpoints, directories, etc.), use the env module:
    from common.env import env
    api_url = env.blog_api_url()
"""

from pathlib import Path

# Working directories (relative to the process working directory)
POSTS_DIR = Path("./posts")
TEMP_DIR = Path("./.tmp")
MANIFEST_PATH = Path("./processed-posts.json")
UPLOAD_DATA_DIR = Path("./upload_data")

SUPPORTED_ARCHIVE_EXTENSIONS: set[str] = {".zip"}
MARKDOWN_EXTENSIONS: set[str] = {".md"}

IMAGE_EXTENSIONS: set[str] = {
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".svg",
    ".bmp",
    ".webp",
    ".avif",
}

# Nested zip expansion stops after this many rounds
MAX_NESTED_ARCHIVE_DEPTH = 3

WATCH_DEBOUNCE_MS = 250
HTTP_TIMEOUT_SECONDS = 30.0

# Section headings with fixed meaning inside an article
INTRO_SECTION = "简介"
DATA_SECTION = "数据"

PROFILES: set[str] = {"development", "production"}
