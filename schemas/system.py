"""
System API models.
"""

from typing import Dict

from pydantic import BaseModel


class SystemStatus(BaseModel):
    """System status information"""

    status: str
    uptime: float
    memory_usage: Dict[str, float]
    backend: str
    supports_smoothing: bool
    max_dimension: int
