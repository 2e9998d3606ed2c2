# Standard library imports
from contextlib import asynccontextmanager

# Third-party imports
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sqlalchemy import text

# Local application imports
from civicpulse.core.db import async_engine, run_with_new_session
from civicpulse.core.monitoring.logging import get_logger
from civicpulse.core.monitoring.sentry import drop_expected_errors, sentry_enabled
from civicpulse.models import Base
from civicpulse.settings import settings

# Set up the main application logger
logger = get_logger("civicpulse")

APP_VERSION = "1.0.0"


def init_sentry() -> None:
    """Make sure the Sentry client carries the FastAPI integration in production."""
    if not sentry_enabled():
        return

    client = sentry_sdk.Hub.current.client
    integrations = list(client.options.get("integrations", [])) if client else []
    if any(isinstance(integration, FastApiIntegration) for integration in integrations):
        return

    logger.info(f"Initializing Sentry request tracing in {settings.ENVIRONMENT}")
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        integrations=[*integrations, FastApiIntegration()],
        environment=settings.ENVIRONMENT,
        enable_tracing=True,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        before_send=drop_expected_errors,
    )


async def create_tables() -> None:
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ---- FASTAPI APP CREATION ----
def custom_generate_unique_id(route: APIRoute) -> str:
    if route.tags and len(route.tags) > 0:
        return f"{route.tags[0]}-{route.name}"
    else:
        return route.name or "unnamed_route"


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    # Local application imports
    from civicpulse.api.internal.main import router as api_router
    from civicpulse.api.internal.utils.exceptions import register_exception_handlers

    init_sentry()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        logger.info("Starting up FastAPI application")
        await create_tables()
        yield
        logger.info("Shutting down FastAPI application")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=APP_VERSION,
        description="Report, browse, vote on and map civic issues",
        openapi_url=f"{settings.API_V1_STR}/openapi.json" if settings.ENVIRONMENT != "production" else None,
        docs_url=f"{settings.API_V1_STR}/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url=f"{settings.API_V1_STR}/redoc" if settings.ENVIRONMENT != "production" else None,
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        async def ping(db):
            return (await db.execute(text("SELECT 1"))).scalar()

        try:
            await run_with_new_session(ping)
            database = "connected"
        except Exception as e:
            logger.error(f"Health check could not reach the database: {e}")
            database = "unavailable"
        return {"status": "healthy" if database == "connected" else "degraded", "version": APP_VERSION, "database": database}

    app.include_router(api_router, prefix=settings.API_V1_STR)

    return app


# Create the app instance
app = create_app()
