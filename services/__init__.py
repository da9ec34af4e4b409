"""
Service layer - pipeline orchestration and the fluent transform API.
"""

from services.image_kit import EncodedImage, ImageTransform, configure, image, process_image
from services.transform_service import TransformPipeline, TransformResult

__all__ = [
    "EncodedImage",
    "ImageTransform",
    "TransformPipeline",
    "TransformResult",
    "configure",
    "image",
    "process_image",
]
