"""Data models for the segmerge service."""

from segmerge.models.options import (
    ExtractableAttribute,
    ExtractOptions,
    MergeMode,
    MergeOptions,
)
from segmerge.models.result import BalanceReport, ExtractResult, MergeResult
from segmerge.models.segment import Segment, TranslationItem

__all__ = [
    "BalanceReport",
    "ExtractableAttribute",
    "ExtractOptions",
    "ExtractResult",
    "MergeMode",
    "MergeOptions",
    "MergeResult",
    "Segment",
    "TranslationItem",
]
