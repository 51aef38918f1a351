"""
Shared FastAPI dependencies for the Raster Flow service.
Centralizes access to app-state components.
"""

import logging
from typing import Any, Dict

from fastapi import Depends, HTTPException, Request

from config import Settings, get_settings
from core.buffer_store import BufferStore
from services.raster_service import RasterService

logger = logging.getLogger(__name__)


def get_buffer_store(request: Request) -> BufferStore:
    """
    Get BufferStore instance from app state.

    Raises:
        HTTPException: If the store is not initialized
    """
    try:
        return request.app.state.buffer_store
    except AttributeError as e:
        logger.error(f"Buffer store not initialized in app state: {e}")
        raise HTTPException(
            status_code=500, detail="Internal server error: Buffer store not initialized"
        )


def get_app_settings(request: Request) -> Settings:
    """Settings stored on the app, falling back to the process settings."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_raster_service(
    buffer_store: BufferStore = Depends(get_buffer_store),
    settings: Settings = Depends(get_app_settings),
) -> RasterService:
    """
    Get raster service instance.

    Args:
        buffer_store: Buffer store dependency
        settings: Application settings dependency

    Returns:
        RasterService instance
    """
    return RasterService(
        buffer_store=buffer_store,
        raster_config=settings.raster,
        workers=settings.system.thread_pool_size,
        max_dimension=settings.store.max_dimension,
    )


def get_config(request: Request) -> Dict[str, Any]:
    """Configuration dictionary of the running app."""
    try:
        return request.app.state.config
    except AttributeError:
        logger.warning("Config not found in app state, using defaults")
        return get_settings().to_dict()
