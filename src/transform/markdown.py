"""
Turn an authored article into publishable markdown plus a request payload.

The article is split from its front matter, parsed with markdown-it, stripped
of its title/introduction/data sections, has its local image references
rewritten to uploaded URLs, and is rendered back to markdown with mdformat's
renderer so the output style is fixed (fenced code, '-' bullets, numbered
lists keep their numbers).
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import unquote

import frontmatter
from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdformat.plugins import PARSER_EXTENSIONS
from mdformat.renderer import MDRenderer

from common.logger import get_logger
from ingest.layout import resolve_title
from upload.assets import ImageUploader, normalize_relative, register_asset

from .request_body import build_request_body
from .sections import split_sections

logger = get_logger(__name__)

# mdformat parser extensions enabled for articles (GFM tables)
MARKDOWN_PARSER_EXTENSIONS = ("tables",)

_REMOTE_URL = re.compile(r"^([a-z]+:)?//", re.IGNORECASE)


@dataclass
class TransformResult:
    """Output of transform_markdown."""

    content: str
    body: str
    title: str
    request_body: dict[str, Any]
    referenced_images: list[str] = field(default_factory=list)
    missing_images: list[str] = field(default_factory=list)


def build_markdown_parser() -> MarkdownIt:
    """CommonMark parser whose renderer writes markdown instead of HTML."""
    md = MarkdownIt("commonmark", renderer_cls=MDRenderer)
    # Keep link destinations as authored instead of percent-encoding them
    md.normalizeLink = lambda url: url
    md.options["mdformat"] = {"number": True}
    md.options["store_labels"] = True
    md.options["parser_extension"] = []
    md.options["codeformatters"] = {}
    for name in MARKDOWN_PARSER_EXTENSIONS:
        extension = PARSER_EXTENSIONS[name]
        extension.update_mdit(md)
        md.options["parser_extension"].append(extension)
    return md


def is_remote_url(url: str) -> bool:
    return bool(_REMOTE_URL.match(url))


def normalize_reference(url: str) -> str:
    """Percent-decode an image reference and normalize it to a relative posix path."""
    return normalize_relative(unquote(url))


def iter_image_tokens(tokens: list[Token]):
    for token in tokens:
        for child in token.children or []:
            if child.type == "image":
                yield child


class ImageRewriter:
    """Resolves local image references to remote URLs.

    Looks the reference up in the asset map first; otherwise uploads the file
    on demand and remembers the result so repeated references share one URL.
    """

    def __init__(
        self,
        markdown_dir: Path,
        asset_map: dict[str, str],
        upload: ImageUploader | None = None,
        root_dir: Path | None = None,
    ):
        self.markdown_dir = markdown_dir
        self.asset_map = asset_map
        self.upload = upload
        self.root_dir = (root_dir or markdown_dir).resolve()

    def resolve(self, reference: str) -> str | None:
        normalized = normalize_reference(reference)
        remote_url = self.asset_map.get(normalized) or self.asset_map.get(reference)
        if remote_url:
            return remote_url
        return self._upload_from_disk(normalized)

    def _upload_from_disk(self, normalized: str) -> str | None:
        if self.upload is None or not normalized:
            return None

        absolute = (self.markdown_dir / normalized).resolve()
        if not absolute.is_relative_to(self.root_dir) or not absolute.is_file():
            return None

        remote_url = self.upload(absolute)
        relative = os.path.relpath(absolute, self.markdown_dir.resolve())
        register_asset(self.asset_map, relative, remote_url)
        logger.debug(f"Uploaded referenced image {normalized} on demand")
        return remote_url

    def rewrite(self, tokens: list[Token]) -> tuple[list[str], list[str]]:
        """
        Rewrite image URLs in place.

        Returns:
            Tuple of (remote URLs used, local references that could not be resolved)
        """
        referenced: list[str] = []
        missing: list[str] = []

        for image in iter_image_tokens(tokens):
            original = str(image.attrGet("src") or "")
            if not original or is_remote_url(original):
                continue

            remote_url = self.resolve(original)
            if remote_url is None:
                logger.warning(f"Image not found, keeping local reference: {original}")
                missing.append(original)
                continue

            image.attrSet("src", remote_url)
            # Render inline so a stale reference definition is not used
            image.meta.pop("label", None)
            referenced.append(remote_url)

        return referenced, missing


def render_markdown(md: MarkdownIt, tokens: list[Token], env: dict[str, Any]) -> str:
    env.setdefault("used_refs", set())
    return md.renderer.render(tokens, md.options, env)


def join_front_matter(metadata: dict[str, Any], body: str) -> str:
    """Prefix the body with a YAML front-matter block unless metadata is empty."""
    if not metadata:
        return body
    post = frontmatter.Post(body)
    post.metadata.update(metadata)
    return frontmatter.dumps(post) + "\n"


def transform_markdown(
    markdown_path: Path,
    asset_map: dict[str, str],
    upload: ImageUploader | None = None,
    root_dir: Path | None = None,
) -> TransformResult:
    """
    Transform an article for publishing.

    Args:
        markdown_path: Article on disk
        asset_map: Pre-uploaded images (extended with on-demand uploads)
        upload: Callable used for images missing from the asset map
        root_dir: On-demand uploads are limited to files under this directory
            (default: the article's directory)

    Returns:
        TransformResult with final markdown, body, title, and request payload

    Raises:
        DataSectionError: If the data section is missing or invalid
    """
    post = frontmatter.loads(markdown_path.read_text(encoding="utf-8"))
    md = build_markdown_parser()
    env: dict[str, Any] = {}

    split = split_sections(md.parse(post.content, env))
    tokens = split.kept_tokens()

    rewriter = ImageRewriter(markdown_path.parent, asset_map, upload, root_dir)
    referenced, missing = rewriter.rewrite(tokens)

    body = render_markdown(md, tokens, env).lstrip()
    request_body = build_request_body(split.data_section, body)

    return TransformResult(
        content=join_front_matter(post.metadata, body),
        body=body,
        title=resolve_title(post.metadata, markdown_path),
        request_body=request_body,
        referenced_images=referenced,
        missing_images=missing,
    )


def peek_request_data(markdown_path: Path) -> dict[str, Any]:
    """
    Read the data section without rewriting anything.

    Used to learn the slug before images are uploaded.

    Raises:
        DataSectionError: If the data section is missing or invalid
    """
    post = frontmatter.loads(markdown_path.read_text(encoding="utf-8"))
    split = split_sections(build_markdown_parser().parse(post.content))
    return build_request_body(split.data_section, "")
