"""Segmentation engine: turns a parsed document into translatable segments."""

import copy
import logging
import re
from collections.abc import Iterator, Sequence

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag

from segmerge.engine.paths import (
    Address,
    child_addresses,
    element_address,
    encode_id,
    format_path,
)
from segmerge.engine.registry import TagClass, TagRegistry
from segmerge.engine.tree import segmentation_root
from segmerge.models.segment import Segment

logger = logging.getLogger(__name__)

# ASCII whitespace only, so non-breaking spaces survive normalization
WHITESPACE_RE = re.compile(r"[ \t\n\r\f]+")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to a single space and trim the edges."""
    return WHITESPACE_RE.sub(" ", text).strip(" ")


class Segmenter:
    """Extracts minimal container blocks from a document, in document order.

    A container is *minimal* when no visible descendant is itself a
    container; only minimal containers become segments. Excluded elements
    (by tag or by ignored class) and their subtrees are never visited for
    emission and their text never counts as translatable.

    Args:
        registry: Tag vocabulary and ignored classes for this call.
    """

    def __init__(self, registry: TagRegistry) -> None:
        self._registry = registry

    def segment(
        self,
        soup: BeautifulSoup,
        extract_attributes: Sequence[str] = (),
        preserve_whitespace: bool = False,
    ) -> list[Segment]:
        """Walk the document and emit one segment per minimal container.

        Args:
            soup: Parsed document.
            extract_attributes: Attribute names whose values are copied into
                each segment's ``attributes`` map when present.
            preserve_whitespace: Keep text nodes exactly as parsed.

        Returns:
            Segments ordered by document position.
        """
        root = segmentation_root(soup)
        if root is None:
            return []

        segments: list[Segment] = []
        seen: set[str] = set()
        # Addresses are built on the way down, one sibling pass per parent
        pending: list[tuple[Tag, Address]] = [(root, element_address(root))]

        while pending:
            element, address = pending.pop()
            if self._registry.is_excluded(element):
                continue

            if (
                self._registry.classify(element.name) is TagClass.CONTAINER
                and not self._has_container_descendant(element)
            ):
                segment = self._build_segment(
                    element, address, extract_attributes, preserve_whitespace
                )
                if segment is not None and segment.id not in seen:
                    seen.add(segment.id)
                    segments.append(segment)
                continue

            # Non-minimal containers, inline and unclassified elements: descend
            pending.extend(reversed(child_addresses(element, address)))

        logger.debug("Extracted %d segments", len(segments))
        return segments

    def _iter_visible(self, element: Tag) -> Iterator[PageElement]:
        """Yield descendants in document order, skipping excluded subtrees."""
        pending: list[PageElement] = list(reversed(element.contents))
        while pending:
            node = pending.pop()
            if isinstance(node, Tag):
                if self._registry.is_excluded(node):
                    continue
                yield node
                pending.extend(reversed(node.contents))
            else:
                yield node

    def _has_container_descendant(self, element: Tag) -> bool:
        return any(
            isinstance(node, Tag)
            and self._registry.classify(node.name) is TagClass.CONTAINER
            for node in self._iter_visible(element)
        )

    def _has_translatable_text(self, element: Tag) -> bool:
        return any(
            type(node) is NavigableString and node.strip()
            for node in self._iter_visible(element)
        )

    def _build_segment(
        self,
        element: Tag,
        address: Address,
        extract_attributes: Sequence[str],
        preserve_whitespace: bool,
    ) -> Segment | None:
        attributes = self._extract_attributes(element, extract_attributes)
        if not attributes and not self._has_translatable_text(element):
            return None

        return Segment(
            id=encode_id(address),
            path=format_path(address),
            text=self._serialize(element, preserve_whitespace),
            tag=element.name,
            attributes=attributes,
        )

    def _serialize(self, element: Tag, preserve_whitespace: bool) -> str:
        """Render the element's children as markup.

        Child elements stay literal markup. Unless ``preserve_whitespace``
        is set, text outside excluded subtrees is whitespace-collapsed on a
        copy so the source tree is left untouched.
        """
        if preserve_whitespace:
            return element.decode_contents()

        clone = copy.copy(element)
        for node in list(self._iter_visible(clone)):
            if type(node) is NavigableString:
                collapsed = WHITESPACE_RE.sub(" ", node)
                if collapsed != node:
                    node.replace_with(NavigableString(collapsed))
        return clone.decode_contents().strip(" ")

    def _extract_attributes(
        self, element: Tag, names: Sequence[str]
    ) -> dict[str, str]:
        """Collect requested attributes from the element or a nested element."""
        found: dict[str, str] = {}
        for name in names:
            value = element.get(name)
            if value is None:
                for node in self._iter_visible(element):
                    if isinstance(node, Tag) and node.has_attr(name):
                        value = node[name]
                        break
            if isinstance(value, list):
                value = " ".join(value)
            if value:
                found[name] = value
        return found
