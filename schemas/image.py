"""
Image transform API models.

This module contains the request/response models of the transform endpoint.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from core.constants import APIConstants
from core.enums import Algorithm

from .transform import CropShape, ResizeDirective


class TransformRequest(BaseModel):
    """Request to transform an inline image"""

    image_base64: str = Field(..., description="Base64 image data or data URL")
    format: Optional[str] = Field(default=None, description="Output media type, e.g. image/png")
    quality: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Encoder quality 0-1")
    resize: Optional[ResizeDirective] = None
    sharpen: Optional[int] = Field(default=None, description="Sharpen level, clamped to 0-2")
    algorithm: Optional[Algorithm] = None
    rotate: Optional[float] = Field(default=None, description="Clockwise rotation in degrees")
    crop_shape: Optional[CropShape] = None

    @field_validator("image_base64")
    @classmethod
    def validate_payload_size(cls, value: str) -> str:
        size_mb = len(value) * 3 / 4 / (1024 * 1024)
        if size_mb > APIConstants.MAX_REQUEST_IMAGE_MB:
            raise ValueError(
                f"Image payload is {size_mb:.1f} MB, limit is {APIConstants.MAX_REQUEST_IMAGE_MB} MB"
            )
        return value

    def options(self) -> Dict[str, Any]:
        """Transform options without the image payload."""
        return self.model_dump(exclude={"image_base64"}, exclude_none=True)


class TransformResponse(BaseModel):
    """Response from an image transform"""

    success: bool = True
    image_base64: str
    data_url: str
    format: str
    width: int
    height: int
    size_bytes: int
    processing_time_ms: float
