"""Data models for the Markdown import pipeline and API resource addressing"""

import datetime as dt
from dataclasses import dataclass
from typing import Any, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


API_PREFIX = "/api/v1"
REQUIRED_FIELDS = ("slug", "title", "category_slug")
RESOURCE_PLURALS: dict[str, str] = {
    "category": "categories",
    "page":     "pages",
    "post":     "posts",
    "product":  "products",
    "tag":      "tags",
}


def resource_plural(resource: str) -> str:
    """Return the collection name for a resource (e.g. 'category' -> 'categories')."""
    return RESOURCE_PLURALS.get(resource, f"{resource}s")


def endpoint_for(resource: str, slug: str = "") -> str:
    """Return the collection endpoint, or the item endpoint when slug is given."""
    base = f"{API_PREFIX}/{resource_plural(resource)}"
    return f"{base}/{slug}" if slug else base


class FrontMatter(BaseModel):
    """Metadata block at the top of an importable Markdown post."""
    model_config = ConfigDict(frozen=True)

    slug:             str = ""
    title:            str = ""
    excerpt:          str = ""
    category_slug:    str = ""
    status:           str = ""
    tags:             list[str] = Field(default_factory=list)
    meta_title:       str = ""
    meta_description: str = ""
    featured_image:   str = ""
    og_image:         str = ""
    published_at:     Optional[str] = None
    scheduled_at:     Optional[str] = None
    is_featured:      Optional[bool] = None

    @field_validator(
        "slug", "title", "excerpt", "category_slug", "status",
        "meta_title", "meta_description", "featured_image", "og_image",
        mode="before",
    )
    @classmethod
    def _text(cls, value: Any) -> Any:
        """Blank YAML values become '' and plain scalars become their text."""
        if value is None:
            return ""
        return _scalar_text(value)

    @field_validator("published_at", "scheduled_at", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Any:
        if value is None:
            return None
        text = _scalar_text(value)
        if isinstance(text, str) and not text.strip():
            return None
        return text

    @field_validator("tags", mode="before")
    @classmethod
    def _tag_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return ["" if v is None else _scalar_text(v) for v in value]
        return value

    @model_validator(mode="before")
    @classmethod
    def _default_status(cls, data: Any) -> Any:
        if isinstance(data, dict) and not str(data.get("status") or "").strip():
            data = {**data, "status": "draft"}
        return data

    @model_validator(mode="after")
    def _require_fields(self) -> "FrontMatter":
        for name in REQUIRED_FIELDS:
            if not getattr(self, name).strip():
                raise ValueError(f"front matter field '{name}' is required")
        return self


def _scalar_text(value: Any) -> Any:
    """Render numbers and dates as text; leave other values for pydantic to judge."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class ParsedDocument:
    """One parsed Markdown source file; immutable after parsing."""
    front_matter:  FrontMatter
    body_markdown: str          # body after the closing delimiter, trimmed
    body_html:     str          # rendered body; the only form sent to the API


class ResolvedReference(NamedTuple):
    """A slug mapped to its numeric server id."""
    slug:    str
    id:      int
    created: bool = False
