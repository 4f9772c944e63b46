# src/campus_hub/main.py
"""Main entry point for the Campus Hub application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from campus_hub.api.v1 import ROUTERS
from campus_hub.core.settings import settings
from campus_hub.services.hashtags import refresh_trending_scores
from campus_hub.services.scheduler import get_scheduler

logging.basicConfig(level=settings.log_level.upper())

# Configure logger for this module
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="University social network API",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
for router in ROUTERS:
    app.include_router(router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    if settings.scheduler_enabled:
        scheduler = get_scheduler()
        await scheduler.start()
        scheduler.enqueue(refresh_trending_scores)
        logger.info("Deferred job scheduler started")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    if settings.scheduler_enabled:
        await get_scheduler().stop()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "University social network API",
        "docs": "/docs",
        "redoc": "/redoc"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("campus_hub.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
