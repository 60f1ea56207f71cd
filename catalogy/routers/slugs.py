# catalogy/routers/slugs.py
from fastapi import APIRouter, Depends, Query

from catalogy.core.slug_format import generate_slug, suggest_slugs
from catalogy.schemas.slug import (
    GeneratedSlug,
    SlugCheckRequest,
    SlugCheckResult,
    SlugSuggestions,
)
from catalogy.services.dependencies import get_slug_service
from catalogy.services.slug_service import SlugService

router = APIRouter(prefix="/slugs", tags=["Slugs"])


@router.post("/check", response_model=SlugCheckResult, response_model_exclude_none=True)
def check_slug(
    payload: SlugCheckRequest,
    service: SlugService = Depends(get_slug_service),
):
    """
    Validate a storefront slug (format + availability).

    An invalid slug is still a successful call: ok=true, valid=false and a
    reason in {empty, too_short, too_long, format, taken}.

    Pass `excludeStoreId` when a store is renaming itself.
    """
    return service.validate(payload.slug, payload.exclude_store_id)


@router.get("/generate", response_model=GeneratedSlug)
def generate(text: str = Query(default="", max_length=200)):
    """Slug candidate from free text (e.g. the store name)."""
    return GeneratedSlug(slug=generate_slug(text))


@router.get("/suggestions", response_model=SlugSuggestions)
def suggestions(
    base: str = Query(max_length=200),
    count: int = Query(default=3, ge=1, le=10),
):
    """
    Alternative slugs "<base>-1".."<base>-<count>".

    Suggestions are not checked for availability; run them through
    /slugs/check before offering them as final.
    """
    return SlugSuggestions(suggestions=suggest_slugs(base, count))
