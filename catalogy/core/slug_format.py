# catalogy/core/slug_format.py
"""
Slug format rules. Pure functions, no I/O.

A valid slug:
  - 3-50 characters
  - lowercase letters, digits and hyphens only
  - cannot start or end with a hyphen
  - no consecutive hyphens
"""

import re
import unicodedata

from catalogy.schemas.slug import SlugFormatResult

SLUG_REGEX = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
MIN_LENGTH = 3
MAX_LENGTH = 50

MESSAGES = {
    "empty": "Slug is required",
    "too_short": f"Slug must be at least {MIN_LENGTH} characters",
    "too_long": f"Slug cannot exceed {MAX_LENGTH} characters",
    "format": (
        "Slug may only contain lowercase letters, numbers and hyphens "
        "(not at the start or end)"
    ),
    "taken": "Slug is already in use",
}


def normalize_slug(raw: str) -> str:
    return raw.strip().lower()


def check_format(raw) -> SlugFormatResult:
    """
    Validate slug format.

    Reasons, first match wins:
      empty -> too_short -> too_long -> format

    Lengths are measured on the trimmed input. The pattern is matched
    before lowercasing, so "My-Slug" is rejected rather than silently
    rewritten; a valid slug is already in normalized form.
    """
    if not isinstance(raw, str) or not raw.strip():
        return SlugFormatResult(valid=False, reason="empty", message=MESSAGES["empty"])

    trimmed = raw.strip()

    if len(trimmed) < MIN_LENGTH:
        reason = "too_short"
    elif len(trimmed) > MAX_LENGTH:
        reason = "too_long"
    elif not SLUG_REGEX.fullmatch(trimmed):
        reason = "format"
    else:
        return SlugFormatResult(valid=True, normalized=normalize_slug(trimmed))

    return SlugFormatResult(valid=False, reason=reason, message=MESSAGES[reason])


def generate_slug(text) -> str:
    """
    Build a slug candidate from free text, e.g. a store name.

        >>> generate_slug("Café Con Leche!")
        'cafe-con-leche'

    The result is not guaranteed to pass check_format (it may be too short
    or too long).
    """
    if not isinstance(text, str):
        return ""

    slug = text.lower().strip()
    # Decompose accented characters and drop the combining marks
    slug = unicodedata.normalize("NFD", slug)
    slug = "".join(ch for ch in slug if not unicodedata.combining(ch))
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def suggest_slugs(base, count: int = 3) -> list[str]:
    """
    Alternative slugs: "<slug>-1" .. "<slug>-<count>".

    Suggestions are NOT checked for availability; callers must run each
    one through SlugService.validate before using it.
    """
    cleaned = generate_slug(base)
    return [f"{cleaned}-{i}" for i in range(1, count + 1)]
