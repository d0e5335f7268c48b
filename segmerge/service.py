"""Core operations: extract segments from HTML and merge translations back.

Both operations are stateless. Each call parses its own tree, and a merge
only finds its targets when the caller re-submits HTML structurally
equivalent to the HTML that was extracted.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from segmerge.config import ExtractionConfig, MergeConfig
from segmerge.engine.merger import Merger
from segmerge.engine.registry import TagRegistry
from segmerge.engine.segmenter import Segmenter
from segmerge.engine.tree import parse_document, serialize
from segmerge.engine.validator import check_balance
from segmerge.errors import InvalidStructureError
from segmerge.models.options import ExtractOptions, MergeOptions
from segmerge.models.result import ExtractResult, MergeResult
from segmerge.models.segment import TranslationItem

logger = logging.getLogger(__name__)


def build_registry(config: ExtractionConfig | None = None) -> TagRegistry:
    """Build the base registry from the built-in vocabulary and config additions."""
    registry = TagRegistry.default()
    if config is None:
        return registry
    return registry.with_overrides(
        container_tags=config.extra_container_tags,
        inline_tags=config.extra_inline_tags,
        excluded_tags=config.extra_excluded_tags,
        ignored_classes=config.ignored_classes,
    )


def extract(
    html: str,
    options: ExtractOptions | None = None,
    registry: TagRegistry | None = None,
) -> ExtractResult:
    """Extract translatable segments from ``html``.

    Args:
        html: Source document or fragment.
        options: Per-call options; defaults apply when omitted.
        registry: Base tag vocabulary; the built-in one when omitted.

    Returns:
        ExtractResult with segments in document order.

    Raises:
        InvalidStructureError: If the html cannot be parsed into a tree.
    """
    options = options or ExtractOptions()
    call_registry = (registry or TagRegistry.default()).with_overrides(
        ignored_classes=options.ignored_classes
    )

    soup = parse_document(html)
    segments = Segmenter(call_registry).segment(
        soup,
        extract_attributes=options.extract_attributes,
        preserve_whitespace=options.preserve_whitespace,
    )
    logger.info("Extracted %d segments from %d characters", len(segments), len(html))
    return ExtractResult(segments=segments, count=len(segments))


def _coerce_items(
    translations: Sequence[TranslationItem | Mapping[str, Any]],
) -> list[TranslationItem]:
    return [
        item if isinstance(item, TranslationItem) else TranslationItem.model_validate(item)
        for item in translations
    ]


def validate_fragments(translations: Sequence[TranslationItem]) -> None:
    """Reject the batch if any translated fragment has unbalanced tags.

    Raises:
        InvalidStructureError: Listing every offending id and its tags.
    """
    failures = []
    for item in translations:
        report = check_balance(item.text)
        if not report.balanced:
            failures.append({"id": item.id, "unmatched_tags": report.unmatched_tags})

    if failures:
        first = failures[0]
        raise InvalidStructureError(
            f"Unclosed tags detected in translation {first['id']}: "
            f"{', '.join(first['unmatched_tags'])}",
            details=failures,
        )


def merge(
    html: str,
    translations: Sequence[TranslationItem | Mapping[str, Any]],
    options: MergeOptions | None = None,
    merge_config: MergeConfig | None = None,
) -> MergeResult:
    """Merge translated fragments into ``html``.

    Fragment validation (when ``safety_check`` is on) and id resolution
    both happen before the tree is touched, so a failing call never
    produces partially merged output.

    Args:
        html: The document the segment ids were extracted from.
        translations: Items with ``id`` and translated ``text``.
        options: Per-call options; defaults apply when omitted.
        merge_config: Bilingual wrapper settings.

    Returns:
        MergeResult with the merged document, applied count and the ids
        that did not resolve.

    Raises:
        InvalidStructureError: If the html cannot be parsed or a fragment
            is unbalanced while ``safety_check`` is enabled.
        UnresolvedSegmentsError: If ``strict`` is set and any id does not
            resolve.
    """
    options = options or MergeOptions()
    merge_config = merge_config or MergeConfig()
    items = _coerce_items(translations)

    if options.safety_check:
        validate_fragments(items)

    soup = parse_document(html)
    merger = Merger(
        bilingual_tag=merge_config.bilingual_tag,
        bilingual_class=merge_config.bilingual_class,
    )
    outcome = merger.merge(soup, items, mode=options.mode, strict=options.strict)

    logger.info(
        "Merged %d of %d translations (%s mode)",
        outcome.applied_count,
        len(items),
        options.mode.value,
    )
    return MergeResult(
        html=serialize(soup),
        applied_count=outcome.applied_count,
        unresolved_ids=outcome.unresolved_ids,
    )
