"""Exception types raised by the segmentation and merge engine."""

from typing import Any


class SegmergeError(Exception):
    """Base class for all engine errors.

    Args:
        message: Human-readable description.
        details: Optional structured payload surfaced to API callers.
    """

    code = "SEGMERGE_ERROR"

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidStructureError(SegmergeError):
    """Source HTML or a translation fragment cannot be parsed or balanced."""

    code = "INVALID_STRUCTURE"


class InvalidPathError(SegmergeError, ValueError):
    """A segment id or path string is not a well-formed address."""

    code = "INVALID_PATH"


class UnresolvedSegmentsError(SegmergeError):
    """One or more segment ids do not resolve against the supplied document."""

    code = "MISSING_SEGMENTS"

    def __init__(self, segment_ids: list[str]) -> None:
        super().__init__(
            f"Segment IDs not found in HTML: {', '.join(segment_ids)}",
            details=list(segment_ids),
        )
        self.segment_ids = list(segment_ids)
