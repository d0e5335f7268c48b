"""Segment and translation item models."""

from pydantic import BaseModel, ConfigDict, Field


class Segment(BaseModel):
    """One extracted, independently translatable unit of markup.

    ``id`` is the opaque transport form of the element's address and is the
    only value a caller should send back at merge time. ``path`` is the
    decoded canonical form (``html[0].body[0].p[2]``), surfaced for
    diagnostics.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    path: str
    text: str
    tag: str
    attributes: dict[str, str] = Field(default_factory=dict)


class TranslationItem(BaseModel):
    """Caller-supplied translated markup for a previously extracted segment."""

    id: str = Field(min_length=1)
    text: str = Field(min_length=1)
