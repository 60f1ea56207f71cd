# catalogy/services/analytics_service.py
import logging
import time
from datetime import date, datetime, timedelta, timezone
from typing import Callable

from catalogy.core.errors import CatalogyError, ConflictError, ValidationError
from catalogy.core.fingerprint import derive_fingerprint
from catalogy.models.analytics import AnalyticsRecord
from catalogy.repositories.document_store import DocumentStore
from catalogy.schemas.analytics import (
    AnalyticsDay,
    AnalyticsSummary,
    ClientSignals,
    StoreAnalytics,
    TodayAnalytics,
)

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AnalyticsService:
    """
    Daily store view counters.

    Rules:
      - one AnalyticsRecord per (store_id, UTC day), created on first view
      - total_views += 1 on every view; unique_views += 1 only for a
        fingerprint not seen today
      - at most `fingerprint_capacity` fingerprints are stored; past that,
        novel visitors still count as unique but are not remembered
      - analytics must never break the caller: storage failures are
        logged and absorbed

    Concurrency:
      The store has no increment primitive, so every update is a
      compare-and-set on the record version. On a conflict we re-read and
      reapply the view, up to `max_attempts` times with exponential backoff.
    """

    def __init__(
        self,
        store: DocumentStore,
        fingerprint_capacity: int = 5000,
        max_attempts: int = 5,
        backoff_seconds: float = 0.01,
        clock: Callable[[], datetime] = _utc_now,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.store = store
        self.fingerprint_capacity = fingerprint_capacity
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self._clock = clock
        self._sleep = sleep

    def today(self) -> date:
        return self._clock().astimezone(timezone.utc).date()

    # -------- Writes --------

    def record_view(
        self,
        store_id: str,
        fingerprint: str | None = None,
        signals: ClientSignals | None = None,
    ) -> None:
        """
        Count one view of `store_id` for today.

        Raises:
            ValidationError: if store_id is empty (caller bug). Nothing else
            ever escapes.
        """
        if not store_id or not store_id.strip():
            raise ValidationError("storeId is required")

        fp = fingerprint or derive_fingerprint(signals)
        day = self.today()

        try:
            self._record_with_retry(store_id, day, fp)
        except CatalogyError as e:
            logger.warning("Error tracking store view for %s: %s", store_id, e)
        except Exception:
            logger.exception("Unexpected error tracking store view for %s", store_id)

    def _record_with_retry(self, store_id: str, day: date, fp: str) -> None:
        for attempt in range(1, self.max_attempts + 1):
            try:
                self._apply_view(store_id, day, fp)
                return
            except ConflictError:
                if attempt == self.max_attempts:
                    logger.warning(
                        "Gave up recording view for %s on %s after %d attempts",
                        store_id,
                        day,
                        attempt,
                    )
                    raise
                self._sleep(self.backoff_seconds * 2 ** (attempt - 1))

    def _apply_view(self, store_id: str, day: date, fp: str) -> None:
        """One read-modify-write round. ConflictError means "try again"."""
        key = {"store_id": store_id, "date": day}
        record = self.store.get(AnalyticsRecord, key)

        if record is None:
            # Two first views can race here; the loser gets a ConflictError
            # and retries through the update branch.
            self.store.create(
                AnalyticsRecord(
                    store_id=store_id,
                    date=day,
                    total_views=1,
                    unique_views=1,
                    fingerprints=[fp],
                    version=1,
                )
            )
            return

        fingerprints = list(record.fingerprints or [])
        novel = fp not in set(fingerprints)
        if novel and len(fingerprints) < self.fingerprint_capacity:
            fingerprints.append(fp)

        self.store.update(
            AnalyticsRecord,
            key,
            {
                "total_views": record.total_views + 1,
                "unique_views": record.unique_views + (1 if novel else 0),
                "fingerprints": fingerprints,
            },
            expected_version=record.version,
        )

    # -------- Reads --------

    def get_store_analytics(self, store_id: str, days: int = 7) -> StoreAnalytics:
        """
        Counters for the last `days` days, today included, newest first.

        Days without views are not filled in: summary.days_with_data is the
        number of records actually found. Storage failures return an empty
        result.
        """
        if not store_id:
            raise ValidationError("storeId is required")
        if days < 1:
            raise ValidationError("days must be at least 1")

        end = self.today()
        start = end - timedelta(days=days - 1)

        try:
            records = self.store.query(
                AnalyticsRecord,
                equals={"store_id": store_id},
                gte={"date": start},
                lte={"date": end},
                order_by="date",
                descending=True,
            )
            documents = [AnalyticsDay.model_validate(r) for r in records]
        except CatalogyError as e:
            logger.warning("Error fetching store analytics for %s: %s", store_id, e)
            return StoreAnalytics()
        except Exception:
            logger.exception("Unexpected error fetching store analytics for %s", store_id)
            return StoreAnalytics()

        return StoreAnalytics(
            documents=documents,
            summary=AnalyticsSummary(
                total_views=sum(d.total_views for d in documents),
                unique_views=sum(d.unique_views for d in documents),
                days_with_data=len(documents),
            ),
        )

    def get_today_analytics(self, store_id: str) -> TodayAnalytics:
        """Today's counters; zeros when there is no record or the lookup fails."""
        if not store_id:
            return TodayAnalytics()

        try:
            record = self.store.get(
                AnalyticsRecord, {"store_id": store_id, "date": self.today()}
            )
        except CatalogyError as e:
            logger.warning("Error fetching today's analytics for %s: %s", store_id, e)
            return TodayAnalytics()
        except Exception:
            logger.exception("Unexpected error fetching today's analytics for %s", store_id)
            return TodayAnalytics()

        if record is None:
            return TodayAnalytics()
        return TodayAnalytics(
            total_views=record.total_views,
            unique_views=record.unique_views,
        )
