"""
System API Router - Status and configuration
"""

import logging
import time
from datetime import datetime

import psutil
from fastapi import APIRouter, Depends

from api.dependencies import get_app_config, get_surface_backend
from api.exceptions import safe_endpoint
from schemas.system import SystemStatus

logger = logging.getLogger(__name__)

router = APIRouter()

# Track start time
START_TIME = time.time()


@router.get("/status")
@safe_endpoint
async def get_status(backend=Depends(get_surface_backend)) -> SystemStatus:
    """Get system status"""
    process = psutil.Process()
    memory_info = process.memory_info()
    virtual_memory = psutil.virtual_memory()

    return SystemStatus(
        status="healthy",
        uptime=time.time() - START_TIME,
        memory_usage={
            "process_mb": memory_info.rss / 1024 / 1024,
            "system_percent": virtual_memory.percent,
            "available_mb": virtual_memory.available / 1024 / 1024,
        },
        backend=backend.name,
        supports_smoothing=backend.supports_smoothing,
        max_dimension=backend.max_dimension,
    )


@router.get("/config")
@safe_endpoint
async def get_config(config=Depends(get_app_config)) -> dict:
    """Get current configuration"""
    return config


@router.get("/health")
async def health_check() -> dict:
    """Simple health check"""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}
