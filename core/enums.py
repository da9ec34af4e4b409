"""
Centralized enums for the Pixel Transform service.
"""

from enum import Enum


class Algorithm(str, Enum):
    """Resize strategies available to the resampler."""

    STANDARD = "standard"
    LANCZOS = "lanczos"
    MULTISTEP = "multistep"


class CropMode(str, Enum):
    """How a resize directive treats the target box."""

    THUMB = "thumb"
    THUMBNAIL = "thumbnail"
    FILL = "fill"
    CROP = "crop"


class Gravity(str, Enum):
    """Named anchor positions for crop offsets."""

    CENTER = "center"
    AUTO = "auto"  # No content detection; behaves like center
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"


class CropShapeType(str, Enum):
    """Clip path shapes."""

    CIRCLE = "circle"
    SQUARE = "square"
    RECTANGLE = "rectangle"
    ROUNDED_RECT = "roundedRect"


class DeliveryType(str, Enum):
    """Hint for how the source image is delivered to the loader."""

    INLINE = "inline"
    FETCH = "fetch"


class BackendType(str, Enum):
    """Available surface backends."""

    OPENCV = "opencv"
    PILLOW = "pillow"
