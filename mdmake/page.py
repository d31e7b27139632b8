"""Assemble complete HTML pages."""

from pathlib import PurePath
from typing import List

from .config import STYLESHEET_NAME, SiteConfig
from .converter import Page


def stylesheet_href(relative_output: PurePath) -> str:
    """Relative link from a page to the stylesheet in the output root.

    Args:
        relative_output: Page path relative to the output root.

    Returns:
        ``../`` once per directory level, followed by the stylesheet name.
    """
    depth = len(PurePath(relative_output).parts) - 1
    return "../" * depth + STYLESHEET_NAME


def assemble_page(
    page: Page,
    relative_output: PurePath,
    config: SiteConfig
) -> str:
    """Wrap a converted page in head and body markup.

    No doctype, charset or escaping is added; title, header and footer are
    written as they are.

    Args:
        page: Converted markdown (body fragment and optional title).
        relative_output: Page path relative to the output root.
        config: Site configuration (stylesheet, header, footer).

    Returns:
        The complete HTML document.
    """
    parts: List[str] = ["<head>\n"]
    if page.title is not None:
        parts.append(f"<title>{page.title}</title>\n")
    if config.stylesheet is not None:
        href = stylesheet_href(relative_output)
        parts.append(f'<link rel="stylesheet" href="{href}">')
    parts.append("\n</head>\n<body>\n")

    if config.header is not None:
        parts.append(config.header)
    parts.append(page.body)
    if config.footer is not None:
        parts.append(config.footer)
    parts.append("</body>")

    return "".join(parts)
