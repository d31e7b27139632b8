"""Markdown to HTML conversion, title extraction and link rewriting."""

import html
import posixpath
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

import mistune

from .errors import ParseFailure


PLUGINS = ["table", "strikethrough", "math"]
# ~~text~~ stays literal text in the document tree
TREE_PLUGINS = ["table", "math"]

_ast_parser = mistune.create_markdown(renderer="ast", plugins=TREE_PLUGINS)
_html_renderer = mistune.create_markdown(plugins=PLUGINS)

# [text](url "optional title"), but not ![alt](src); text may hold one level of [brackets]
_INLINE_LINK = re.compile(
    r"(?<!!)\[(?P<text>(?:[^\[\]]|\[[^\[\]]*\])*)\]\((?P<url>[^)\s]*)(?P<rest>[^)]*)\)"
)
_URL_SUFFIX = re.compile(r"[?#]")


class NodeKind(Enum):
    """Node variants of the document tree."""
    TEXT = "text"
    INLINE_CODE = "inline_code"
    INLINE_MATH = "inline_math"
    LINK = "link"
    PARAGRAPH = "paragraph"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    HEADING = "heading"
    OTHER = "other"


_TOKEN_KINDS = {
    "text": NodeKind.TEXT,
    "codespan": NodeKind.INLINE_CODE,
    "inline_math": NodeKind.INLINE_MATH,
    "link": NodeKind.LINK,
    "paragraph": NodeKind.PARAGRAPH,
    "emphasis": NodeKind.EMPHASIS,
    "strong": NodeKind.STRONG,
    "heading": NodeKind.HEADING,
}

_LEAF_KINDS = (NodeKind.TEXT, NodeKind.INLINE_CODE, NodeKind.INLINE_MATH)
_CONTAINER_KINDS = (
    NodeKind.LINK,
    NodeKind.PARAGRAPH,
    NodeKind.EMPHASIS,
    NodeKind.STRONG,
)


@dataclass
class Node:
    kind: NodeKind
    value: str = ""
    level: int = 0
    children: List["Node"] = field(default_factory=list)


@dataclass
class Page:
    """A converted markdown document."""
    body: str
    title: Optional[str] = None


def _to_node(token: Dict[str, Any]) -> Node:
    kind = _TOKEN_KINDS.get(token.get("type"), NodeKind.OTHER)
    value = token.get("raw", "") if kind in _LEAF_KINDS else ""
    if kind is NodeKind.TEXT:
        value = html.unescape(value)
    level = token.get("attrs", {}).get("level", 0) if kind is NodeKind.HEADING else 0
    children = [_to_node(child) for child in token.get("children", [])]
    return Node(kind=kind, value=value, level=level, children=children)


def parse_document(markdown_content: str) -> List[Node]:
    """Parse markdown into the top-level nodes of a document tree.

    Raises:
        ParseFailure: The parser could not handle the input.
    """
    try:
        tokens = _ast_parser(markdown_content)
    except RecursionError as e:
        raise ParseFailure(f"Markdown nesting too deep ({e})") from e
    return [_to_node(token) for token in tokens]


def node_text(node: Node) -> str:
    """Concatenate the text inside a node.

    Only text, code, math, links, paragraphs, emphasis and strong spans
    contribute; every other node yields an empty string.
    """
    if node.kind in _LEAF_KINDS:
        return node.value
    if node.kind in _CONTAINER_KINDS:
        return nodes_text(node.children)
    return ""


def nodes_text(nodes: List[Node]) -> str:
    return "".join(node_text(node) for node in nodes)


def extract_title(markdown_content: str) -> Optional[str]:
    """Extract the page title from the first top-level h1 heading.

    Args:
        markdown_content: Raw markdown string.

    Returns:
        Title text, or None when no top-level node is a level 1 heading.
    """
    for node in parse_document(markdown_content):
        if node.kind is NodeKind.HEADING and node.level == 1:
            return nodes_text(node.children)
    return None


def _rewrite_target(url: str) -> str:
    bracketed = url.startswith("<") and url.endswith(">")
    target = url[1:-1] if bracketed else url

    split = urlsplit(target)
    if split.scheme or split.netloc or target.startswith("/"):
        return url

    match = _URL_SUFFIX.search(target)
    cut = match.start() if match else len(target)
    path, suffix = target[:cut], target[cut:]
    stem, ext = posixpath.splitext(path)
    if ext.lower() != ".md":
        return url

    target = stem + ".html" + suffix
    return f"<{target}>" if bracketed else target


def rewrite_md_links(markdown_content: str) -> str:
    """Point relative inline links at ``.md`` files to the ``.html`` pages.

    Reference links, autolinks and images are left alone, as are absolute
    paths and URLs with a scheme or host.
    """

    def replace_link(match):
        return "[{}]({}{})".format(
            match.group("text"),
            _rewrite_target(match.group("url")),
            match.group("rest"),
        )

    return _INLINE_LINK.sub(replace_link, markdown_content)


def render_html(markdown_content: str) -> str:
    """Convert markdown to an HTML fragment using mistune.

    Raises:
        ParseFailure: The renderer could not handle the input.
    """
    try:
        return _html_renderer(markdown_content)
    except RecursionError as e:
        raise ParseFailure(f"Markdown nesting too deep ({e})") from e


def transform(markdown_content: str) -> Page:
    """Extract the title and render the link-rewritten body."""
    title = extract_title(markdown_content)
    body = render_html(rewrite_md_links(markdown_content))
    return Page(body=body, title=title)
