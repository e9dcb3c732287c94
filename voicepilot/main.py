"""
Main application entry point - FastAPI app instance and configuration.
Run with: uvicorn voicepilot.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from voicepilot.core.config import settings
from voicepilot.db.session import init_db
from voicepilot.deps import build_container, get_container, set_container
from voicepilot.routers import automation, intent
from voicepilot.routers import websocket as ws_router

logger = logging.getLogger("voicepilot.main")


# ---------------------------------------------------------------------------
# LIFESPAN
# ---------------------------------------------------------------------------
# Startup creates the key-value table and builds the automation core
# (loading persisted statistics). Shutdown cancels window polling and
# closes the browser.
@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    set_container(build_container())
    logger.info(f"{settings.APP_NAME} started")
    try:
        yield
    finally:
        container = get_container()
        await container.shutdown()
        set_container(None)
        logger.info(f"{settings.APP_NAME} stopped")


# ---------------------------------------------------------------------------
# CREATE FASTAPI APPLICATION
# ---------------------------------------------------------------------------
app = FastAPI(
    title=settings.APP_NAME,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# CORS MIDDLEWARE
# ---------------------------------------------------------------------------
# The chat UI is served from a different origin during development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# REGISTER ROUTERS
# ---------------------------------------------------------------------------
# intent.router: /intent, /intent/classify
# automation.router: /automation/stats, /automation/windows
# ws_router.router: /ws/ui WebSocket for UI observers
app.include_router(intent.router)
app.include_router(automation.router)
app.include_router(ws_router.router)


# ---------------------------------------------------------------------------
# HEALTH CHECK ENDPOINT
# ---------------------------------------------------------------------------
@app.get("/health", tags=["health"])
def health_check():
    """
    Simple health check endpoint.

    Returns:
        {"status": "ok"}
    """
    return {"status": "ok"}
