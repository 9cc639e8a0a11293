"""VidTube API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map VidTubeError → envelope responses (api/error_handlers.py)
    - CORS configured from settings with credentials (auth cookies cross origin)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Stored media served by StaticFiles under media_url_prefix (LocalBlobStorage output)
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from vidtube.api.error_handlers import register_error_handlers
from vidtube.api.routes import (
    comments, dashboard, health, likes, playlists, subscriptions, tweets, users, videos,
)
from vidtube.config import get_settings
from vidtube.infrastructure import database
from vidtube.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("VidTube API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("VidTube API shutting down")


app = FastAPI(title="VidTube API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(videos.router)
app.include_router(comments.router)
app.include_router(tweets.router)
app.include_router(likes.router)
app.include_router(subscriptions.router)
app.include_router(playlists.router)
app.include_router(dashboard.router)

register_error_handlers(app)

os.makedirs(settings.media_dir, exist_ok=True)
app.mount(
    settings.media_url_prefix,
    StaticFiles(directory=settings.media_dir),
    name="media",
)
