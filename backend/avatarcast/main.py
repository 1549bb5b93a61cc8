from __future__ import annotations
"""avatarcast — FastAPI application entry point.

Mounts the system API and the session WebSocket, and configures logging.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from avatarcast import __version__
from avatarcast.api.router import api_router
from avatarcast.api.ws import router as ws_router
from avatarcast.config import get_settings
from avatarcast.services.credentials import get_credential_store

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: resolve the credential store on startup."""
    logger.info("%s starting up...", settings.APP_NAME)
    logger.info("Video API: %s (test mode: %s)", settings.VIDEO_API_BASE, settings.VIDEO_TEST_MODE)
    get_credential_store(settings)
    yield
    logger.info("%s shut down", settings.APP_NAME)


app = FastAPI(
    title="avatarcast API",
    description="Render avatar videos remotely and insert them into a host document",
    version=__version__,
    lifespan=lifespan,
    redirect_slashes=False,
)

# CORS — plugin iframes post from a null/opaque origin by default
_cors_origins = os.environ.get("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
app.include_router(ws_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "service": settings.APP_NAME,
        "status": "healthy",
        "version": __version__,
    }
