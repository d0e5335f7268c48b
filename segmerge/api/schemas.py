"""Request and response bodies for the HTTP API."""

from pydantic import BaseModel, Field

from segmerge.models.options import ExtractOptions, MergeOptions
from segmerge.models.segment import TranslationItem

MAX_HTML_CHARS = 10 * 1024 * 1024


class ExtractRequest(BaseModel):
    html: str = Field(min_length=1, max_length=MAX_HTML_CHARS)
    options: ExtractOptions = Field(default_factory=ExtractOptions)


class MergeRequest(BaseModel):
    html: str = Field(min_length=1, max_length=MAX_HTML_CHARS)
    translations: list[TranslationItem] = Field(min_length=1)
    options: MergeOptions = Field(default_factory=MergeOptions)


class ServiceInfo(BaseModel):
    name: str
    version: str
    description: str


class HealthStatus(BaseModel):
    status: str = "ok"
    uptime: float
    timestamp: str
    version: str
