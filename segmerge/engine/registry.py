"""Tag classification registry.

Maps tag names to a closed set of classifications and decides which
elements are invisible to segmentation. A registry is an immutable value:
per-request variations are built with ``with_overrides`` and passed
explicitly into the engine.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from bs4 import Tag

# Block-level elements eligible to become segment boundaries
CONTAINER_TAGS: frozenset[str] = frozenset({
    "p", "div", "li", "h1", "h2", "h3", "h4", "h5", "h6",
    "section", "article", "aside", "blockquote", "dd", "dt", "dl",
    "fieldset", "figcaption", "figure", "footer", "header", "main",
    "nav", "ol", "ul", "td", "th", "tr", "tbody", "thead", "tfoot",
    "address", "caption", "legend", "summary", "details",
})

# Elements kept verbatim inside a segment's text
INLINE_TAGS: frozenset[str] = frozenset({
    "a", "b", "strong", "i", "em", "u", "span", "mark", "small",
    "sub", "sup", "time", "q", "s", "strike", "del", "ins", "abbr",
    "acronym", "cite", "dfn", "br", "img", "label", "bdi", "bdo",
    "kbd", "var",
})

# Elements whose whole subtree is never segmented
EXCLUDED_TAGS: frozenset[str] = frozenset({
    "script", "style", "pre", "code", "canvas", "svg", "noscript",
    "iframe", "video", "audio", "object", "embed", "applet", "meta",
    "link", "template", "math",
})


class TagClass(str, Enum):
    """Classification of a tag name."""

    CONTAINER = "container"
    INLINE = "inline"
    EXCLUDED = "excluded"
    UNCLASSIFIED = "unclassified"


def _normalize(names: Iterable[str]) -> frozenset[str]:
    return frozenset(n.strip().lower() for n in names if n and n.strip())


@dataclass(frozen=True)
class TagRegistry:
    """Read-only tag vocabulary plus the ignored class names for one call."""

    container_tags: frozenset[str] = CONTAINER_TAGS
    inline_tags: frozenset[str] = INLINE_TAGS
    excluded_tags: frozenset[str] = EXCLUDED_TAGS
    ignored_classes: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def default(cls) -> "TagRegistry":
        """Return the registry with the built-in vocabulary and no ignored classes."""
        return cls()

    def with_overrides(
        self,
        container_tags: Iterable[str] = (),
        inline_tags: Iterable[str] = (),
        excluded_tags: Iterable[str] = (),
        ignored_classes: Iterable[str] = (),
    ) -> "TagRegistry":
        """Return a new registry extended with the given names.

        Args:
            container_tags: Extra container tag names.
            inline_tags: Extra inline tag names.
            excluded_tags: Extra excluded tag names.
            ignored_classes: Extra class names whose elements are skipped.
                Matched exactly and case-sensitively.

        Returns:
            A new TagRegistry; ``self`` is left unchanged.
        """
        return TagRegistry(
            container_tags=self.container_tags | _normalize(container_tags),
            inline_tags=self.inline_tags | _normalize(inline_tags),
            excluded_tags=self.excluded_tags | _normalize(excluded_tags),
            ignored_classes=self.ignored_classes
            | frozenset(c for c in ignored_classes if c),
        )

    def classify(self, tag_name: str) -> TagClass:
        """Classify a tag name. Exclusion wins over container, container over inline."""
        name = tag_name.lower()
        if name in self.excluded_tags:
            return TagClass.EXCLUDED
        if name in self.container_tags:
            return TagClass.CONTAINER
        if name in self.inline_tags:
            return TagClass.INLINE
        return TagClass.UNCLASSIFIED

    def has_ignored_class(self, element: Tag) -> bool:
        """Check the element's class tokens against the ignored class names."""
        if not self.ignored_classes:
            return False
        classes = element.get("class") or []
        if isinstance(classes, str):
            classes = classes.split()
        return any(c in self.ignored_classes for c in classes)

    def is_excluded(self, element: Tag) -> bool:
        """True when the element (and so its whole subtree) must be skipped."""
        return (
            self.classify(element.name) is TagClass.EXCLUDED
            or self.has_ignored_class(element)
        )
