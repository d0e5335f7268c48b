"""Per-call options for extraction and merge."""

from enum import Enum
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

ExtractableAttribute = Literal["alt", "placeholder", "title"]


class MergeMode(str, Enum):
    """How translated markup is written into a resolved element."""

    REPLACE = "replace"  # children replaced by the translation
    APPEND = "append"  # translation appended after the source, bilingual output


class ExtractOptions(BaseModel):
    """Options for a single extraction call.

    camelCase names used by earlier clients (``ignoredClasses`` etc.) are
    accepted as input aliases.
    """

    model_config = ConfigDict(extra="ignore")

    ignored_classes: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("ignored_classes", "ignoredClasses"),
    )
    extract_attributes: list[ExtractableAttribute] = Field(
        default_factory=list,
        validation_alias=AliasChoices("extract_attributes", "extractAttributes"),
    )
    preserve_whitespace: bool = Field(
        default=False,
        validation_alias=AliasChoices("preserve_whitespace", "preserveWhitespace"),
    )


class MergeOptions(BaseModel):
    """Options for a single merge call."""

    model_config = ConfigDict(extra="ignore")

    safety_check: bool = Field(
        default=True,
        validation_alias=AliasChoices("safety_check", "safetyCheck"),
    )
    mode: MergeMode = MergeMode.REPLACE
    strict: bool = Field(
        default=False,
        validation_alias=AliasChoices("strict", "strict_mode", "strictMode"),
    )
