"""
FastAPI application entry point.
Configures middleware, routers, error handling, and lifecycle events.
"""

import hmac
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Header, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text

from uom_service.core.config import get_settings
from uom_service.core.errors import register_exception_handlers
from uom_service.core.logging import configure_logging, get_logger
from uom_service.core.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from uom_service.db.session import Database
from uom_service.modules.conversions.router import convert_router
from uom_service.modules.conversions.router import router as conversions_router
from uom_service.modules.units.router import router as units_router

# Configure logging before anything else
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Opens the database handle on startup and disposes it on shutdown.
    """
    settings = get_settings()
    logger.info(
        "starting_application",
        environment=settings.environment,
        version=settings.version,
    )

    database = Database.from_settings(settings)
    app.state.database = database
    logger.info("database_initialized")

    try:
        yield
    finally:
        await database.dispose()
        app.state.database = None
        logger.info("application_shutdown_complete")


def create_application() -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application with all middleware,
    routers, and settings applied.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
        docs_url=f"{settings.api_v1_prefix}/docs",
        redoc_url=f"{settings.api_v1_prefix}/redoc",
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    # ==========================================================================
    # Middleware Configuration
    # ==========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestContextMiddleware)

    # ==========================================================================
    # Router Registration
    # ==========================================================================

    # Health check endpoint (no auth required)
    @app.get("/health", tags=["Health"])
    async def health_check(request: Request) -> dict[str, object]:
        checks: dict[str, str] = {}

        database: Database | None = getattr(request.app.state, "database", None)
        try:
            if database is None:
                raise RuntimeError("database not initialized")
            async with database.session_factory() as session:
                await session.execute(text("SELECT 1"))
            checks["db"] = "ok"
        except Exception as exc:
            logger.warning("health_check_db_failed", error=str(exc))
            checks["db"] = "unavailable"

        overall = "healthy" if all(v == "ok" for v in checks.values()) else "degraded"
        return {"status": overall, "version": settings.version, "checks": checks}

    app.include_router(
        units_router,
        prefix=f"{settings.api_v1_prefix}/uoms",
        tags=["Units of Measure"],
    )
    app.include_router(
        conversions_router,
        prefix=f"{settings.api_v1_prefix}/uom-conversions",
        tags=["UOM Conversions"],
    )
    app.include_router(
        convert_router,
        prefix=f"{settings.api_v1_prefix}/convert",
        tags=["UOM Conversions"],
    )

    # Prometheus metrics endpoint
    instrumentator = Instrumentator().instrument(app)

    if settings.environment == "development" and not settings.metrics_auth_token:
        instrumentator.expose(app, endpoint="/metrics", include_in_schema=False)
    else:

        @app.get("/metrics", include_in_schema=False)
        async def metrics_endpoint(
            authorization: str | None = Header(default=None),
        ) -> Response:
            if not settings.metrics_auth_token:
                # No token configured outside development: hide the endpoint
                return Response(status_code=404)

            if not authorization or not authorization.startswith("Bearer "):
                return Response(status_code=401)

            provided = authorization.removeprefix("Bearer ")
            if not hmac.compare_digest(provided, settings.metrics_auth_token):
                return Response(status_code=401)

            return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app


# Application instance
app = create_application()
