# catalogy/models/analytics.py
import datetime as dt

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class AnalyticsRecord(SQLModel, table=True):
    """
    Daily view counters for one store.

    Identity:
      - (store_id, date): one row per store per UTC calendar day.

    Concurrency:
      - `version` is bumped on every update; writers only update the row
        they read (compare-and-set), see AnalyticsService.record_view.

    Invariants:
      - unique_views <= total_views
      - len(fingerprints) <= FINGERPRINT_CAPACITY
    """

    __tablename__ = "store_analytics"

    store_id: str = Field(primary_key=True, max_length=64)
    date: dt.date = Field(primary_key=True, description="UTC calendar day")

    total_views: int = Field(default=0, ge=0)
    unique_views: int = Field(default=0, ge=0)

    fingerprints: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Visitor hashes seen today (bounded)",
    )

    version: int = Field(default=1, ge=1)
