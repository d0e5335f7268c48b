"""Thin adapter over BeautifulSoup trees.

Documents are parsed with lxml, which always produces an ``html`` root
(wrapping bare fragments in ``html``/``body``), so addresses computed at
extraction time and at merge time share the same absolute coordinates.
Translation fragments are parsed with ``html.parser``, which keeps a
fragment as-is instead of wrapping it in a document.
"""

import logging

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag
from bs4.exceptions import ParserRejectedMarkup

from segmerge.errors import InvalidStructureError

logger = logging.getLogger(__name__)

DOCUMENT_PARSER = "lxml"
FRAGMENT_PARSER = "html.parser"


def parse_document(html: str) -> BeautifulSoup:
    """Parse a full HTML document (or fragment) into a fresh tree.

    Args:
        html: Source markup.

    Returns:
        The BeautifulSoup document object.

    Raises:
        InvalidStructureError: If the markup is empty or yields no element.
    """
    if not html or not html.strip():
        raise InvalidStructureError("HTML content is empty")

    try:
        soup = BeautifulSoup(html, DOCUMENT_PARSER)
    except ParserRejectedMarkup as exc:
        raise InvalidStructureError(
            "HTML format is severely malformed and cannot be parsed"
        ) from exc

    if document_root(soup) is None:
        raise InvalidStructureError("HTML content contains no elements")
    return soup


def parse_fragment(markup: str) -> list[PageElement]:
    """Parse a markup fragment into detached nodes, in order.

    Raises:
        InvalidStructureError: If the parser rejects the fragment.
    """
    # Plain text needs no parser
    if "<" not in markup and "&" not in markup:
        return [NavigableString(markup)]

    try:
        fragment = BeautifulSoup(markup, FRAGMENT_PARSER)
    except ParserRejectedMarkup as exc:
        raise InvalidStructureError(
            "Translation fragment cannot be parsed"
        ) from exc
    return [node.extract() for node in list(fragment.contents)]


def document_root(soup: BeautifulSoup) -> Tag | None:
    """Return the document element (normally ``html``)."""
    root = soup.find("html", recursive=False)
    if isinstance(root, Tag):
        return root
    children = element_children(soup)
    return children[0] if children else None


def segmentation_root(soup: BeautifulSoup) -> Tag | None:
    """Return ``body`` when present, otherwise the document element."""
    root = document_root(soup)
    if root is None:
        return None
    body = root.find("body", recursive=False)
    return body if isinstance(body, Tag) else root


def element_children(node: Tag) -> list[Tag]:
    """Return the element children of ``node``, skipping text and comments."""
    return [child for child in node.children if isinstance(child, Tag)]


def is_document(node: PageElement | None) -> bool:
    """True for the BeautifulSoup document object itself."""
    return isinstance(node, BeautifulSoup)


def replace_children(node: Tag, nodes: list[PageElement]) -> None:
    """Replace every child of ``node`` with ``nodes``."""
    node.clear()
    for child in nodes:
        node.append(child)


def serialize(soup: BeautifulSoup) -> str:
    """Render the whole document back to markup."""
    return str(soup)
