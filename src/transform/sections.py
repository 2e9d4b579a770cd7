"""Strip the title, introduction, and data sections from a parsed article."""

from dataclasses import dataclass, field

from markdown_it.token import Token
from markdown_it.tree import SyntaxTreeNode

from common.constants import DATA_SECTION, INTRO_SECTION


@dataclass
class SplitDocument:
    """Top-level blocks kept for publishing plus the captured data section."""

    kept: list[SyntaxTreeNode] = field(default_factory=list)
    data_section: list[SyntaxTreeNode] | None = None

    def kept_tokens(self) -> list[Token]:
        return [token for node in self.kept for token in node.to_tokens()]


def heading_depth(node: SyntaxTreeNode) -> int | None:
    """Return 1-6 for heading nodes, None for everything else."""
    if node.type != "heading":
        return None
    return int(node.tag[1:])


def heading_text(node: SyntaxTreeNode) -> str:
    """Plain text of a heading, ignoring inline markup."""
    parts: list[str] = []
    for inline in node.children:
        for child in inline.token.children or []:
            if child.type in ("text", "code_inline", "html_inline"):
                parts.append(child.content)
    return "".join(parts).strip()


def is_target_heading(node: SyntaxTreeNode, depth: int, text: str) -> bool:
    if heading_depth(node) != depth:
        return False
    return heading_text(node).strip().lower() == text.lower()


def find_section_end(nodes: list[SyntaxTreeNode], start: int, depth: int) -> int:
    """Index of the next heading at or above `depth`, or len(nodes)."""
    cursor = start
    while cursor < len(nodes):
        candidate_depth = heading_depth(nodes[cursor])
        if candidate_depth is not None and candidate_depth <= depth:
            break
        cursor += 1
    return cursor


def split_sections(tokens: list[Token]) -> SplitDocument:
    """
    Single forward pass over the top-level blocks.

    - The first h1 is dropped once.
    - Every "## 简介" section is dropped.
    - Every "## 数据" section is removed and captured; when there are
      several, the last one wins.
    """
    nodes = SyntaxTreeNode(tokens).children
    result = SplitDocument()
    removed_title = False

    i = 0
    while i < len(nodes):
        node = nodes[i]

        if not removed_title and heading_depth(node) == 1:
            removed_title = True
            i += 1
            continue

        if is_target_heading(node, 2, INTRO_SECTION):
            i = find_section_end(nodes, i + 1, 2)
            continue

        if is_target_heading(node, 2, DATA_SECTION):
            end = find_section_end(nodes, i + 1, 2)
            result.data_section = nodes[i:end]
            i = end
            continue

        result.kept.append(node)
        i += 1

    return result
