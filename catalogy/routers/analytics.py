# catalogy/routers/analytics.py
from fastapi import APIRouter, Depends, Query, Request

from catalogy.schemas.analytics import (
    ClientSignals,
    StoreAnalytics,
    TodayAnalytics,
    ViewAccepted,
    ViewCreate,
)
from catalogy.services.analytics_service import AnalyticsService
from catalogy.services.dependencies import get_analytics_service

router = APIRouter(prefix="/stores/{store_id}", tags=["Analytics"])


def _signals_with_headers(request: Request, signals: ClientSignals | None) -> ClientSignals:
    """Fill user agent / language from request headers when the body omits them."""
    signals = signals or ClientSignals()
    updates = {}
    if signals.user_agent is None:
        updates["user_agent"] = request.headers.get("user-agent")
    if signals.language is None:
        accept = request.headers.get("accept-language")
        if accept:
            # "es-MX,es;q=0.9" -> "es-MX", the same tag navigator.language gives
            updates["language"] = accept.split(",", 1)[0].split(";", 1)[0].strip()
    return signals.model_copy(update=updates)


@router.post("/views", response_model=ViewAccepted)
def record_view(
    store_id: str,
    request: Request,
    payload: ViewCreate | None = None,
    service: AnalyticsService = Depends(get_analytics_service),
):
    """
    Count one storefront view.

    Always answers ok=true: analytics failures never reach the visitor.
    Only a blank store id is rejected (400).
    """
    payload = payload or ViewCreate()
    signals = None
    if not payload.fingerprint:
        signals = _signals_with_headers(request, payload.signals)

    service.record_view(store_id, payload.fingerprint, signals)
    return ViewAccepted()


@router.get("/analytics", response_model=StoreAnalytics)
def get_store_analytics(
    store_id: str,
    days: int = Query(default=7, ge=1, le=90),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """
    Daily counters for the last `days` days (today included), newest first.

    summary.daysWithData counts only the days that had views.
    """
    return service.get_store_analytics(store_id, days)


@router.get("/analytics/today", response_model=TodayAnalytics)
def get_today_analytics(
    store_id: str,
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Today's counters; zeros when nothing was recorded yet."""
    return service.get_today_analytics(store_id)
