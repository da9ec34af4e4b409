"""
Transform directive models.

These frozen models describe *what* a transform should do:
- ResizeDirective: target size, aspect ratio, crop mode and gravity
- CropShape: circle / square / rectangle / rounded rectangle clip
- TransformDirectives: the full bundle consumed by the pipeline

Factory helpers mirror the fluent vocabulary callers use:
thumbnail(), fill(), crop(), circle(), square(), rectangle(), rounded_rect().
"""

import re
from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.constants import TransformConstants
from core.enums import Algorithm, CropMode, DeliveryType, Gravity
from core.utils.enum_converter import parse_enum

ORIGINAL_ASPECT = "original"

_RATIO_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*:\s*(\d+(?:\.\d+)?)\s*$")


class GravityOffset(BaseModel):
    """Explicit crop offset, used verbatim instead of a named position."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(..., description="Horizontal offset into the surface")
    y: float = Field(..., description="Vertical offset into the surface")


GravityValue = Union[Gravity, GravityOffset]


class ResizeDirective(BaseModel):
    """
    Declarative resize request.

    When exactly one of width/height is given and no aspect ratio,
    the aspect ratio defaults to "original".
    """

    model_config = ConfigDict(frozen=True)

    width: Optional[int] = Field(default=None, ge=0, description="Target width (0/None = source)")
    height: Optional[int] = Field(default=None, ge=0, description="Target height (0/None = source)")
    aspect_ratio: Optional[str] = Field(
        default=None, description='"W:H" ratio string or "original"'
    )
    crop_mode: Optional[CropMode] = Field(default=None, description="thumb, fill or crop")
    gravity: Optional[GravityValue] = Field(
        default=None, description="Named anchor or explicit {x, y} offset"
    )

    @model_validator(mode="before")
    @classmethod
    def default_aspect_ratio(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("aspect_ratio"):
            if bool(data.get("width")) != bool(data.get("height")):
                data = {**data, "aspect_ratio": ORIGINAL_ASPECT}
        return data

    @field_validator("aspect_ratio")
    @classmethod
    def validate_aspect_ratio(cls, value: Optional[str]) -> Optional[str]:
        if value is None or value == ORIGINAL_ASPECT:
            return value
        match = _RATIO_PATTERN.match(value)
        if not match or float(match.group(2)) == 0:
            raise ValueError(f'Aspect ratio must be "W:H" or "original", got {value!r}')
        return value.strip()

    @field_validator("gravity", mode="before")
    @classmethod
    def parse_gravity(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_enum(value, Gravity, Gravity.CENTER, normalize=True)
        return value

    def ratio(self) -> Optional[Tuple[float, float]]:
        """Parsed explicit ratio, or None for no ratio / "original"."""
        if not self.aspect_ratio or self.aspect_ratio == ORIGINAL_ASPECT:
            return None
        match = _RATIO_PATTERN.match(self.aspect_ratio)
        return float(match.group(1)), float(match.group(2))


class CircleShape(BaseModel):
    """Circle inscribed in the largest centered square."""

    model_config = ConfigDict(frozen=True)
    type: Literal["circle"] = "circle"


class SquareShape(BaseModel):
    """Largest square that fits the surface."""

    model_config = ConfigDict(frozen=True)
    type: Literal["square"] = "square"


class RectangleShape(BaseModel):
    """Axis-aligned rectangle; missing sides default to the surface size."""

    model_config = ConfigDict(frozen=True)
    type: Literal["rectangle"] = "rectangle"
    width: Optional[int] = Field(default=None, ge=0)
    height: Optional[int] = Field(default=None, ge=0)


class RoundedRectShape(BaseModel):
    """Rectangle with rounded corners."""

    model_config = ConfigDict(frozen=True)
    type: Literal["roundedRect"] = "roundedRect"
    width: Optional[int] = Field(default=None, ge=0)
    height: Optional[int] = Field(default=None, ge=0)
    radius: float = Field(default=TransformConstants.DEFAULT_CORNER_RADIUS, ge=0)


CropShape = Annotated[
    Union[CircleShape, SquareShape, RectangleShape, RoundedRectShape],
    Field(discriminator="type"),
]


class TransformDirectives(BaseModel):
    """
    Complete, immutable set of instructions for one transform call.

    Use with_updates() to derive a modified copy; values are re-validated
    (sharpen is clamped, rotation normalized, quality parsed).
    """

    model_config = ConfigDict(frozen=True)

    delivery: Optional[DeliveryType] = None
    format: str = Field(default=TransformConstants.DEFAULT_FORMAT, description="Output media type")
    quality: float = Field(default=TransformConstants.DEFAULT_QUALITY, ge=0.0, le=1.0)
    resize: Optional[ResizeDirective] = None
    sharpen: int = Field(default=0, ge=0, le=TransformConstants.SHARPEN_MAX_LEVEL)
    algorithm: Algorithm = Algorithm.LANCZOS
    rotate: float = Field(default=0.0, ge=0.0, lt=TransformConstants.FULL_TURN_DEGREES)
    crop_shape: Optional[CropShape] = None

    @field_validator("quality", mode="before")
    @classmethod
    def parse_quality(cls, value: Any) -> Any:
        if isinstance(value, str):
            return float(value)
        return value

    @field_validator("sharpen", mode="before")
    @classmethod
    def clamp_sharpen(cls, value: Any) -> int:
        if value is None:
            return 0
        try:
            level = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"Sharpen level must be a number, got {value!r}")
        level = max(TransformConstants.SHARPEN_MIN_LEVEL, min(TransformConstants.SHARPEN_MAX_LEVEL, level))
        return int(level)

    @field_validator("rotate", mode="before")
    @classmethod
    def normalize_rotation(cls, value: Any) -> float:
        if value is None:
            return 0.0
        try:
            degrees = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"Rotation must be a number of degrees, got {value!r}")
        turn = TransformConstants.FULL_TURN_DEGREES
        return ((degrees % turn) + turn) % turn

    def with_updates(self, **changes: Any) -> "TransformDirectives":
        """Return a validated copy with the given fields replaced."""
        data: Dict[str, Any] = {**self.model_dump(), **changes}
        return TransformDirectives.model_validate(data)


# ---------- resize helpers ----------


def thumbnail(
    width: Optional[int] = None,
    height: Optional[int] = None,
    aspect_ratio: Optional[str] = None,
    gravity: Union[str, Gravity, GravityOffset, Dict[str, float]] = Gravity.AUTO,
) -> ResizeDirective:
    """Resize that over-covers the target box so a later crop can fill it."""
    return ResizeDirective(
        width=width, height=height, aspect_ratio=aspect_ratio, crop_mode=CropMode.THUMB, gravity=gravity
    )


def fill(
    width: Optional[int] = None,
    height: Optional[int] = None,
    gravity: Union[str, Gravity, GravityOffset, Dict[str, float]] = Gravity.AUTO,
) -> ResizeDirective:
    """Resize to exactly the requested box."""
    return ResizeDirective(width=width, height=height, crop_mode=CropMode.FILL, gravity=gravity)


def crop(
    width: Optional[int] = None,
    height: Optional[int] = None,
    gravity: Union[str, Gravity, GravityOffset, Dict[str, float]] = Gravity.AUTO,
) -> ResizeDirective:
    """Resize to exactly the requested box; gravity anchors any shape crop."""
    return ResizeDirective(width=width, height=height, crop_mode=CropMode.CROP, gravity=gravity)


# ---------- crop shape helpers ----------


def circle() -> CircleShape:
    return CircleShape()


def square() -> SquareShape:
    return SquareShape()


def rectangle(width: Optional[int] = None, height: Optional[int] = None) -> RectangleShape:
    return RectangleShape(width=width, height=height)


def rounded_rect(
    width: Optional[int] = None,
    height: Optional[int] = None,
    radius: float = TransformConstants.DEFAULT_CORNER_RADIUS,
) -> RoundedRectShape:
    return RoundedRectShape(width=width, height=height, radius=radius)
