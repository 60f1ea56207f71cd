# catalogy/services/slug_service.py
import logging

from catalogy.core.slug_format import MESSAGES, check_format
from catalogy.models.store import Store
from catalogy.repositories.document_store import DocumentStore
from catalogy.schemas.slug import SlugAvailability, SlugCheckResult

logger = logging.getLogger(__name__)


class SlugService:
    """
    Storefront slug validation.

    Layers:
      - format (pure, see catalogy.core.slug_format)
      - availability (one lookup against enabled stores)

    Storage failures propagate as StorageError; the API turns them into
    a server-error response.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def check_availability(
        self,
        normalized_slug: str,
        exclude_store_id: str | None = None,
    ) -> SlugAvailability:
        """
        Is an enabled store already using this exact slug?

        Args:
            normalized_slug: output of check_format (trimmed + lowercased)
            exclude_store_id: a store renaming itself does not collide with
                its own current slug
        """
        # Slugs are unique among enabled stores; one more row is enough to
        # see past the excluded store.
        limit = 2 if exclude_store_id else 1
        matches = self.store.query(
            Store,
            equals={"slug": normalized_slug, "enabled": True},
            limit=limit,
        )
        taken = any(s.id != exclude_store_id for s in matches)
        return SlugAvailability(taken=taken)

    def validate(self, raw, exclude_store_id: str | None = None) -> SlugCheckResult:
        """
        Full slug check: format first, availability only for well-formed
        slugs (avoids pointless lookups).
        """
        fmt = check_format(raw)
        if not fmt.valid:
            logger.info("Slug format invalid: %s", fmt.reason)
            return SlugCheckResult(
                valid=False,
                slug=raw if isinstance(raw, str) else None,
                reason=fmt.reason,
                message=fmt.message,
            )

        slug = fmt.normalized
        if self.check_availability(slug, exclude_store_id).taken:
            logger.info("Slug already taken: %s", slug)
            return SlugCheckResult(
                valid=False,
                slug=slug,
                reason="taken",
                message=MESSAGES["taken"],
            )

        logger.info("Slug is valid and available: %s", slug)
        return SlugCheckResult(valid=True, slug=slug)
