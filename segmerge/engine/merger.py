"""Merge engine: writes translated fragments back into a parsed document."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, Tag

from segmerge.engine.paths import ChildIndex, decode_id, resolve
from segmerge.engine.tree import parse_fragment, replace_children
from segmerge.errors import InvalidPathError, UnresolvedSegmentsError
from segmerge.models.options import MergeMode
from segmerge.models.segment import TranslationItem

logger = logging.getLogger(__name__)


@dataclass
class MergeOutcome:
    """Bookkeeping for one merge pass."""

    applied_count: int = 0
    unresolved_ids: list[str] = field(default_factory=list)


class Merger:
    """Resolves segment ids against a document and applies translations.

    Every id is resolved against the unmodified document before anything
    is written, so a strict-mode failure leaves the tree untouched.

    Args:
        bilingual_tag: Wrapper element name used in ``MergeMode.APPEND``.
        bilingual_class: Class set on the wrapper element.
    """

    def __init__(
        self,
        bilingual_tag: str = "span",
        bilingual_class: str = "segmerge-translation",
    ) -> None:
        self._bilingual_tag = bilingual_tag
        self._bilingual_class = bilingual_class

    def merge(
        self,
        soup: BeautifulSoup,
        translations: Sequence[TranslationItem],
        mode: MergeMode = MergeMode.REPLACE,
        strict: bool = False,
    ) -> MergeOutcome:
        """Apply translations to ``soup`` in caller order.

        Args:
            soup: Parsed document, mutated in place.
            translations: Items carrying a segment id and translated markup.
            mode: Replace the element's content or append after it.
            strict: Abort without mutating if any id does not resolve.

        Returns:
            MergeOutcome with the applied count and the unresolved ids.

        Raises:
            UnresolvedSegmentsError: In strict mode, when any id is unresolved.
        """
        outcome = MergeOutcome()
        targets: list[tuple[Tag, TranslationItem]] = []
        index: ChildIndex = {}

        for item in translations:
            element = self._resolve(soup, item.id, index)
            if element is None:
                outcome.unresolved_ids.append(item.id)
            else:
                targets.append((element, item))

        if mode is MergeMode.REPLACE:
            targets = self._drop_nested_targets(targets, outcome)

        if outcome.unresolved_ids:
            logger.warning(
                "%d of %d segment ids did not resolve",
                len(outcome.unresolved_ids),
                len(translations),
            )
            if strict:
                raise UnresolvedSegmentsError(outcome.unresolved_ids)

        for element, item in targets:
            if mode is MergeMode.APPEND:
                self._append(soup, element, item.text)
            else:
                replace_children(element, parse_fragment(item.text))
            outcome.applied_count += 1

        return outcome

    def _resolve(
        self, soup: BeautifulSoup, segment_id: str, index: ChildIndex
    ) -> Tag | None:
        try:
            address = decode_id(segment_id)
        except InvalidPathError:
            logger.debug("Undecodable segment id %r", segment_id)
            return None
        return resolve(soup, address, index)

    def _drop_nested_targets(
        self,
        targets: list[tuple[Tag, TranslationItem]],
        outcome: MergeOutcome,
    ) -> list[tuple[Tag, TranslationItem]]:
        """Mark targets inside another replaced target as unresolved.

        Replacing an element's children detaches its descendants, so such
        targets could never be written, whatever the item order.
        """
        replaced = {id(element) for element, _ in targets}
        kept: list[tuple[Tag, TranslationItem]] = []
        for element, item in targets:
            if any(id(parent) in replaced for parent in element.parents):
                outcome.unresolved_ids.append(item.id)
            else:
                kept.append((element, item))
        return kept

    def _append(self, soup: BeautifulSoup, element: Tag, text: str) -> None:
        wrapper = soup.new_tag(self._bilingual_tag)
        if self._bilingual_class:
            wrapper["class"] = [self._bilingual_class]
        wrapper.append(soup.new_tag("br"))
        for node in parse_fragment(text):
            wrapper.append(node)
        element.append(wrapper)
