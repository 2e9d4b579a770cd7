"""Build the outbound request payload from an article's data section."""

import json
from typing import Any

from markdown_it.tree import SyntaxTreeNode

from common.errors import DataSectionError


def find_data_block(section: list[SyntaxTreeNode] | None) -> str:
    """
    Return the raw text of the first fenced code block in the data section.

    The section's own heading (first node) is skipped.

    Raises:
        DataSectionError: If the section is missing or holds no non-empty code block
    """
    if section is None:
        raise DataSectionError("Article has no '## 数据' section")

    for node in section[1:]:
        if node.type == "fence":
            if not node.content.strip():
                break
            return node.content

    raise DataSectionError("The '数据' section has no JSON code block")


def parse_data_block(raw: str) -> tuple[dict[str, Any], str]:
    """
    Parse the data block into a JSON object and its trimmed slug.

    Raises:
        DataSectionError: On malformed JSON, non-object JSON, or a missing/blank slug
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DataSectionError(f"The '数据' code block is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DataSectionError(
            f"The '数据' code block must hold a JSON object, got {type(data).__name__}"
        )

    slug = data.get("slug")
    if not isinstance(slug, str) or not slug.strip():
        raise DataSectionError("The '数据' JSON object needs a non-empty 'slug' string")

    return data, slug.strip()


def build_request_body(section: list[SyntaxTreeNode] | None, content: str) -> dict[str, Any]:
    """
    Merge the data section's JSON object with the rendered article body.

    Example:
        data block {"slug": " my-post ", "labels": ["a"]} and content "Body\\n"
        → {"slug": "my-post", "labels": ["a"], "content": "Body\\n"}
    """
    data, slug = parse_data_block(find_data_block(section))
    return {**data, "content": content, "slug": slug}
