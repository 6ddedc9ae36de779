"""
Main FastAPI application entry point.
"""
import asyncio
import contextlib
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import logfire
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from server.app.api.api import api_router, root_router
from server.core.config.general_config import Settings, settings as default_settings
from server.core.context import AppContext, build_context
from server.core.errors import register_exception_handlers
from server.core.jobs.expire_orders import start_expiry_sweeper

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    context: AppContext = app.state.context
    logfire.configure(
        token=context.settings.LOGFIRE_TOKEN,
        service_name="snapvault-api",
        send_to_logfire="if-token-present",
    )
    logfire.instrument_fastapi(app)
    logfire.info("Starting up FastAPI application...")
    sweeper = start_expiry_sweeper(context.orders, context.settings.ORDER_SWEEP_INTERVAL_MINUTES * 60)
    yield
    # Shutdown
    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper
    logfire.info("Shutting down FastAPI application...")


def create_application(settings: Optional[Settings] = None, context: Optional[AppContext] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or (context.settings if context else default_settings)
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=settings.DESCRIPTION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )
    app.state.context = context or build_context(settings)

    # Set all CORS enabled origins
    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.include_router(root_router)

    @app.get("/")
    def read_root():
        return {
            "message": "SnapVault Backend API is running!",
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": "development" if settings.DEBUG else "production",
        }

    return app


app = create_application()
