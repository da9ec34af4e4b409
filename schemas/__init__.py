"""
Schemas Package

This package contains all Pydantic schemas for data validation and serialization,
shared across the API, service and transform layers.
"""

# Re-export enums from centralized location for convenience
from core.enums import Algorithm, CropMode, CropShapeType, DeliveryType, Gravity

# API models
from .image import TransformRequest, TransformResponse
from .system import SystemStatus

# Transform directives
from .transform import (
    CircleShape,
    CropShape,
    GravityOffset,
    RectangleShape,
    ResizeDirective,
    RoundedRectShape,
    SquareShape,
    TransformDirectives,
    circle,
    crop,
    fill,
    rectangle,
    rounded_rect,
    square,
    thumbnail,
)

__all__ = [
    "Algorithm",
    "CropMode",
    "CropShapeType",
    "DeliveryType",
    "Gravity",
    "TransformRequest",
    "TransformResponse",
    "SystemStatus",
    "CircleShape",
    "CropShape",
    "GravityOffset",
    "RectangleShape",
    "ResizeDirective",
    "RoundedRectShape",
    "SquareShape",
    "TransformDirectives",
    "circle",
    "crop",
    "fill",
    "rectangle",
    "rounded_rect",
    "square",
    "thumbnail",
]
