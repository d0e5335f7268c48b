"""Segment addressing, extraction and merge engine."""

from segmerge.engine.merger import Merger, MergeOutcome
from segmerge.engine.paths import (
    Address,
    ChildIndex,
    PathStep,
    child_addresses,
    decode_id,
    element_address,
    encode_id,
    format_path,
    parse_path,
    resolve,
)
from segmerge.engine.registry import TagClass, TagRegistry
from segmerge.engine.segmenter import Segmenter
from segmerge.engine.validator import check_balance

__all__ = [
    "Address",
    "ChildIndex",
    "MergeOutcome",
    "Merger",
    "PathStep",
    "Segmenter",
    "TagClass",
    "TagRegistry",
    "check_balance",
    "child_addresses",
    "decode_id",
    "element_address",
    "encode_id",
    "format_path",
    "parse_path",
    "resolve",
]
