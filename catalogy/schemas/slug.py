# catalogy/schemas/slug.py
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

SlugReason = Literal["empty", "too_short", "too_long", "format", "taken"]


class SlugFormatResult(BaseModel):
    """Outcome of the pure format check."""

    valid: bool
    reason: SlugReason | None = None
    message: str | None = None
    normalized: str | None = None


class SlugAvailability(BaseModel):
    taken: bool


class SlugCheckRequest(BaseModel):
    """
    Slug-check request body.

    `slug` is left untyped on purpose: a missing or non-string value must
    come back as reason="empty", not as a 422.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    slug: Any = None
    exclude_store_id: str | None = None


class SlugCheckResult(BaseModel):
    """
    Response schema for slug checks.

    `slug` is the normalized slug when the format is valid, otherwise the
    raw input echoed back.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ok: bool = True
    valid: bool
    slug: str | None = None
    reason: SlugReason | None = None
    message: str | None = None


class GeneratedSlug(BaseModel):
    slug: str


class SlugSuggestions(BaseModel):
    suggestions: list[str]
