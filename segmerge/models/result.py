"""Result models returned by the core operations."""

from pydantic import BaseModel, Field

from segmerge.models.segment import Segment


class BalanceReport(BaseModel):
    """Outcome of a tag-balance check on a markup fragment."""

    balanced: bool
    unmatched_tags: list[str] = Field(default_factory=list)


class ExtractResult(BaseModel):
    """Ordered segments extracted from one document."""

    segments: list[Segment] = Field(default_factory=list)
    count: int = 0


class MergeResult(BaseModel):
    """Merged document plus per-item bookkeeping."""

    html: str
    applied_count: int = 0
    unresolved_ids: list[str] = Field(default_factory=list)
