"""
Shared FastAPI dependencies for the Pixel Transform service.
Centralizes common dependencies to eliminate code duplication.
"""

import logging
from typing import Any, Dict

from fastapi import HTTPException, Request

from core.image.backends import SurfaceBackend
from core.image.loader import ImageLoader

logger = logging.getLogger(__name__)


def get_surface_backend(request: Request) -> SurfaceBackend:
    """
    Get the surface backend selected at startup.

    Args:
        request: FastAPI request object

    Returns:
        SurfaceBackend instance

    Raises:
        HTTPException: If the backend was not initialized
    """
    try:
        return request.app.state.backend
    except AttributeError as e:
        logger.error(f"Surface backend not initialized in app state: {e}")
        raise HTTPException(
            status_code=500, detail="Internal server error: Surface backend not initialized"
        )


def get_image_loader(request: Request) -> ImageLoader:
    """Get the shared image loader."""
    loader = getattr(request.app.state, "loader", None)
    return loader if loader is not None else ImageLoader()


def get_app_config(request: Request) -> Dict[str, Any]:
    """Get the configuration dict stored at startup."""
    return getattr(request.app.state, "config", {})
