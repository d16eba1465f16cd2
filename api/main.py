"""
FastAPI backend for the Glow List waitlist.
Provides signup, verification, leaderboard and admin endpoints.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import async_sessionmaker

from api.routers import admin, leaderboard, verification, waitlist, webhooks
from config import Settings, settings
from database import async_session_maker, close_db, init_db
from database.kv_store import KeyValueStore, create_store
from database.redis_client import RedisClient
from waitlist.services import LoggingSmsSender, SmsSender
import structlog

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting Glow List API...")
    await init_db()
    store = app.state.store
    if isinstance(store, RedisClient):
        await store.connect()

    logger.info("Glow List API started successfully")

    yield

    # Shutdown
    logger.info("Shutting down Glow List API...")
    if isinstance(store, RedisClient):
        await store.close()
    await close_db()
    logger.info("Glow List API shutdown complete")


def create_app(
    app_settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    session_maker: Optional[async_sessionmaker] = None,
    sms_sender: Optional[SmsSender] = None
) -> FastAPI:
    """Create and configure FastAPI application."""
    app_settings = app_settings or settings

    app = FastAPI(
        title="Glow List API",
        description="Waitlist and referral contest backend",
        version="1.0.0",
        docs_url="/api/docs" if app_settings.debug else None,
        redoc_url="/api/redoc" if app_settings.debug else None,
        openapi_url="/api/openapi.json" if app_settings.debug else None,
        lifespan=lifespan
    )

    app.state.settings = app_settings
    if store is None:
        store = create_store(app_settings.store_backend, app_settings.redis_url)
    app.state.store = store
    app.state.session_maker = session_maker or async_session_maker
    app.state.sms_sender = sms_sender or LoggingSmsSender()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(waitlist.router, prefix="/api", tags=["Waitlist"])
    app.include_router(verification.router, prefix="/api", tags=["Verification"])
    app.include_router(leaderboard.router, prefix="/api", tags=["Leaderboard"])
    app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
    app.include_router(webhooks.router, prefix="/api/webhook", tags=["Webhooks"])

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


# Create app instance
app = create_app()
