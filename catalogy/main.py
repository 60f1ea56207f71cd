# catalogy/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalogy.core.config import Settings, get_settings
from catalogy.core.errors import CatalogyError, ConfigurationError

# Routers
from catalogy.routers.analytics import router as analytics_router
from catalogy.routers.events import router as events_router
from catalogy.routers.profiles import router as profiles_router
from catalogy.routers.slugs import router as slugs_router
from catalogy.services.dependencies import Services, build_services

logger = logging.getLogger("uvicorn")


def create_app(
    settings: Settings | None = None,
    services: Services | None = None,
) -> FastAPI:
    """
    Build the API.

    Tests pass a ready `services` bundle; production builds it from
    settings during startup.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Startup:
          - Validate settings and connect the document store.
          - A configuration error does not stop the process: every request
            answers with a server-error response until it is fixed.
        """
        app.state.services = services
        app.state.startup_error = None
        if services is None:
            logger.info("🔄 Startup: building services (%s backend)...", settings.STORE_BACKEND)
            try:
                app.state.services = build_services(settings)
                logger.info("✅ Startup: document store ready.")
            except ConfigurationError as e:
                logger.error(f"❌ Startup: configuration error: {e.message}")
                app.state.startup_error = e
        yield

    app = FastAPI(
        title=settings.PROJECT_NAME or "Catalogy Backend",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CatalogyError)
    async def catalogy_error_handler(request: Request, exc: CatalogyError):
        if exc.http_status >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"ok": False, "message": "Invalid payload", "code": "validation"},
        )

    # Versioned API prefix, e.g. /api/v1
    app.include_router(events_router, prefix=settings.API_V1_STR)
    app.include_router(slugs_router, prefix=settings.API_V1_STR)
    app.include_router(analytics_router, prefix=settings.API_V1_STR)
    app.include_router(profiles_router, prefix=settings.API_V1_STR)

    @app.get("/")
    def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "catalogy-backend"}

    return app


app = create_app()
