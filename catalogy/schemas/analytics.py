# catalogy/schemas/analytics.py
import datetime as dt

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ClientSignals(_CamelModel):
    """
    Low-entropy browser signals used to derive a visitor fingerprint
    when the client did not send one.
    """

    user_agent: str | None = None
    language: str | None = None
    timezone_offset: int | None = None
    screen_width: int | None = None
    screen_height: int | None = None
    color_depth: int | None = None


class ViewCreate(_CamelModel):
    """Payload for recording a store view. Everything is optional."""

    fingerprint: str | None = Field(default=None, max_length=64)
    signals: ClientSignals | None = None


class ViewAccepted(_CamelModel):
    ok: bool = True


class AnalyticsDay(_CamelModel):
    """One day of counters. Fingerprints stay server-side."""

    store_id: str
    date: dt.date
    total_views: int
    unique_views: int


class AnalyticsSummary(_CamelModel):
    total_views: int = 0
    unique_views: int = 0
    days_with_data: int = 0


class StoreAnalytics(_CamelModel):
    documents: list[AnalyticsDay] = []
    summary: AnalyticsSummary = AnalyticsSummary()


class TodayAnalytics(_CamelModel):
    total_views: int = 0
    unique_views: int = 0
