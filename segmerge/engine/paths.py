"""Path codec: element addresses, their canonical strings and opaque ids.

An address is the sequence of ``(tag, ordinal)`` steps from the document
down to an element, where ``ordinal`` counts only preceding element
siblings with the same tag name. Its canonical string form is
``html[0].body[0].div[0].p[1]``; the transport id is the base64 encoding
of that string.
"""

import base64
import binascii
import re
from collections import Counter
from typing import NamedTuple
from urllib.parse import unquote

from bs4 import BeautifulSoup, PageElement, Tag

from segmerge.engine.tree import element_children, is_document
from segmerge.errors import InvalidPathError

STEP_SEPARATOR = "."

_STEP_RE = re.compile(r"^(?P<tag>[^\[\]]+?)(?:\[(?P<index>\d+)\])?$")
_ESCAPES = {"%": "%25", ".": "%2E", "[": "%5B", "]": "%5D"}


class PathStep(NamedTuple):
    tag: str
    index: int


Address = tuple[PathStep, ...]

# Per-call memo of element children grouped by tag, keyed by parent identity
ChildIndex = dict[int, dict[str, list[Tag]]]


def _escape_tag(tag: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in tag)


def element_address(node: PageElement) -> Address:
    """Compute the absolute address of an element.

    Args:
        node: A Tag attached to a parsed document.

    Returns:
        Steps ordered from the document element down to ``node``.

    Raises:
        InvalidPathError: If ``node`` is not an element (text nodes and the
            document object itself are not addressable).
    """
    if not isinstance(node, Tag) or is_document(node):
        raise InvalidPathError("Only elements are addressable")

    steps: list[PathStep] = []
    current: Tag | None = node
    while current is not None and not is_document(current):
        ordinal = 0
        for sibling in current.previous_siblings:
            if isinstance(sibling, Tag) and sibling.name == current.name:
                ordinal += 1
        steps.append(PathStep(current.name, ordinal))
        current = current.parent
    steps.reverse()
    return tuple(steps)


def child_addresses(
    parent: Tag, parent_address: Address
) -> list[tuple[Tag, Address]]:
    """Address every element child of ``parent`` in a single pass.

    Args:
        parent: Element whose children are addressed.
        parent_address: The already known address of ``parent``.

    Returns:
        ``(child, address)`` pairs in document order.
    """
    ordinals: Counter[str] = Counter()
    addressed: list[tuple[Tag, Address]] = []
    for child in element_children(parent):
        step = PathStep(child.name, ordinals[child.name])
        ordinals[child.name] += 1
        addressed.append((child, parent_address + (step,)))
    return addressed


def format_path(address: Address) -> str:
    """Render an address in canonical ``tag[index].tag[index]`` form."""
    return STEP_SEPARATOR.join(
        f"{_escape_tag(step.tag)}[{step.index}]" for step in address
    )


def parse_path(path: str) -> Address:
    """Parse a canonical path string back into an address.

    A step without an index (``html.body.p[0]``) means ordinal 0.

    Raises:
        InvalidPathError: If the string is empty or a step is malformed.
    """
    if not path:
        raise InvalidPathError("Path is empty")

    steps: list[PathStep] = []
    for raw in path.split(STEP_SEPARATOR):
        match = _STEP_RE.match(raw)
        if match is None:
            raise InvalidPathError(f"Malformed path step '{raw}' in '{path}'")
        index = match.group("index")
        steps.append(PathStep(unquote(match.group("tag")), int(index or 0)))
    return tuple(steps)


def encode_id(address: Address) -> str:
    """Encode an address as its opaque base64 segment id."""
    return base64.b64encode(format_path(address).encode("utf-8")).decode("ascii")


def decode_id(segment_id: str) -> Address:
    """Decode an opaque segment id into an address.

    Raises:
        InvalidPathError: If the id is not base64 of a valid path string.
    """
    try:
        path = base64.b64decode(segment_id, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise InvalidPathError(f"Segment id '{segment_id}' is not decodable") from exc
    return parse_path(path)


def id_to_path(segment_id: str) -> str:
    """Decode a segment id straight to its canonical path string."""
    return format_path(decode_id(segment_id))


def _children_by_tag(parent: Tag, index: ChildIndex | None) -> dict[str, list[Tag]]:
    if index is not None and id(parent) in index:
        return index[id(parent)]
    grouped: dict[str, list[Tag]] = {}
    for child in element_children(parent):
        grouped.setdefault(child.name, []).append(child)
    if index is not None:
        index[id(parent)] = grouped
    return grouped


def resolve(
    soup: BeautifulSoup, address: Address, index: ChildIndex | None = None
) -> Tag | None:
    """Replay an address from the document and return the element it names.

    Args:
        soup: Parsed document.
        address: Steps from the document element down.
        index: Optional memo shared across calls on the same unmodified
            tree, so each parent's children are grouped only once.

    Returns:
        The element, or None as soon as a step has no matching child.
    """
    if not address:
        return None

    current: Tag = soup
    for step in address:
        matches = _children_by_tag(current, index).get(step.tag, [])
        if step.index >= len(matches):
            return None
        current = matches[step.index]
    return current
