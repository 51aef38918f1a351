"""
Raster Flow - Main FastAPI Application
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.exceptions import register_exception_handlers
from api.routers import buffers, codec, compose, draw, filters, system
from config import get_settings
from core.buffer_store import BufferStore
from core.constants import SystemConstants

# Get configuration
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.system.log_level),
    format=SystemConstants.LOG_FORMAT,
)
logger = logging.getLogger(__name__)

# Suppress watchfiles debug messages
logging.getLogger("watchfiles").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    # Startup
    logger.info("Starting Raster Flow server...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.system.debug}")

    buffer_store = BufferStore(max_buffers=settings.store.max_buffers)

    # Store components in app state for access by routers
    app.state.buffer_store = buffer_store
    app.state.settings = settings
    app.state.config = settings.to_dict()

    yield

    # Shutdown
    logger.info("Shutting down Raster Flow server...")
    buffer_store.clear()
    logger.info("Server shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Raster Flow",
    description="Raster image processing: filters, scan conversion, curves, compositing, RLE",
    version="1.0.0",
    lifespan=lifespan,
)

if settings.api.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(buffers.router, prefix="/api/buffers", tags=["Buffers"])
app.include_router(filters.router, prefix="/api/filters", tags=["Filters"])
app.include_router(draw.router, prefix="/api/draw", tags=["Draw"])
app.include_router(compose.router, prefix="/api/compose", tags=["Compose"])
app.include_router(codec.router, prefix="/api/codec", tags=["Codec"])
app.include_router(system.router, prefix="/api/system", tags=["System"])


# Root endpoint
@app.get("/")
async def root():
    return {
        "name": "Raster Flow",
        "status": "running",
        "version": "1.0.0",
        "endpoints": {
            "buffers": "/api/buffers",
            "filters": "/api/filters",
            "draw": "/api/draw",
            "compose": "/api/compose",
            "codec": "/api/codec",
            "system": "/api/system",
            "docs": "/docs",
        },
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "services": {
            "buffer_store": getattr(app.state, "buffer_store", None) is not None,
        },
    }


def run():
    """Run the server with uvicorn"""
    reload_excludes = (
        ["*.log", "*.pyc", "__pycache__", ".git", ".venv", "venv"]
        if settings.system.debug
        else None
    )

    server_config = uvicorn.Config(
        "main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.system.debug,
        reload_excludes=reload_excludes,
        log_level=settings.system.log_level.lower(),
        loop="asyncio",
    )
    server = uvicorn.Server(server_config)

    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    finally:
        logger.info("Server exiting...")


if __name__ == "__main__":
    run()
