# catalogy/services/dependencies.py
"""
Service wiring.

Settings are validated once at startup and the resulting `Services`
bundle is stored on `app.state`. Routers pull individual services through
the FastAPI dependencies below; nothing re-reads the environment per
request.
"""

from dataclasses import dataclass

from fastapi import Depends, Request

from catalogy.core.config import Settings
from catalogy.core.errors import ConfigurationError
from catalogy.core.supabase_client import supabase_admin
from catalogy.database import build_engine, create_db_and_tables
from catalogy.repositories.document_store import DocumentStore, SqlDocumentStore
from catalogy.repositories.supabase_store import SupabaseDocumentStore
from catalogy.services.analytics_service import AnalyticsService
from catalogy.services.profile_service import ProfileProvisioner
from catalogy.services.slug_service import SlugService


@dataclass
class Services:
    settings: Settings
    store: DocumentStore
    provisioner: ProfileProvisioner
    slugs: SlugService
    analytics: AnalyticsService


def build_store(settings: Settings) -> DocumentStore:
    """
    Create the document store for the configured backend.

    Raises:
        ConfigurationError: if a required setting is missing.
    """
    settings.require_store_config()

    if settings.STORE_BACKEND == "supabase":
        return SupabaseDocumentStore(supabase_admin(settings))

    engine = build_engine(settings.DATABASE_URL)
    create_db_and_tables(engine)
    return SqlDocumentStore(engine)


def build_services(settings: Settings, store: DocumentStore | None = None) -> Services:
    """Wire every service around one shared store."""
    if store is None:
        store = build_store(settings)

    return Services(
        settings=settings,
        store=store,
        provisioner=ProfileProvisioner(store, default_locale=settings.DEFAULT_LOCALE),
        slugs=SlugService(store),
        analytics=AnalyticsService(
            store,
            fingerprint_capacity=settings.FINGERPRINT_CAPACITY,
            max_attempts=settings.ANALYTICS_MAX_ATTEMPTS,
            backoff_seconds=settings.ANALYTICS_RETRY_BACKOFF_SECONDS,
        ),
    )


def get_services(request: Request) -> Services:
    """
    Return the services built at startup.

    Raises:
        ConfigurationError: if startup could not build them; the exception
        handler answers with a server-error response.
    """
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise getattr(request.app.state, "startup_error", None) or ConfigurationError(
            "Services are not initialized"
        )
    return services


def get_provisioner(services: Services = Depends(get_services)) -> ProfileProvisioner:
    return services.provisioner


def get_slug_service(services: Services = Depends(get_services)) -> SlugService:
    return services.slugs


def get_analytics_service(services: Services = Depends(get_services)) -> AnalyticsService:
    return services.analytics
