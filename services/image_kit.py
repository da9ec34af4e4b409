"""
Fluent image transform API.

Example:
    >>> data_url = await (
    ...     image(png_bytes)
    ...     .resize(thumbnail(width=200, height=200))
    ...     .crop_as(circle())
    ...     .sharpen(1)
    ...     .format("image/png")
    ...     .to_url()
    ... )

Every builder method returns a new ImageTransform; the underlying
TransformDirectives are frozen, so a configured builder can be shared and
reused across concurrent calls.
"""

import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional, Union

from config import get_settings
from core.enums import Algorithm, DeliveryType
from core.exceptions import CancelledError
from core.image.backends import SurfaceBackend, get_backend
from core.image.converters import ImageConverters
from core.image.loader import ImageLoader
from schemas.transform import CropShape, ResizeDirective, TransformDirectives
from services.transform_service import TransformPipeline, TransformResult

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def default_backend() -> SurfaceBackend:
    """Backend selected by configuration, resolved once per process."""
    settings = get_settings()
    return get_backend(settings.transform.backend, settings.transform.max_dimension)


def default_directives() -> TransformDirectives:
    """Directives seeded with the configured output defaults."""
    settings = get_settings()
    return TransformDirectives(
        format=settings.transform.default_format,
        quality=settings.transform.default_quality,
        algorithm=settings.transform.default_algorithm,
    )


@dataclass(frozen=True)
class EncodedImage:
    """Encoded output bytes together with their media type."""

    data: bytes
    media_type: str
    width: int
    height: int

    @property
    def size(self) -> int:
        return len(self.data)


class ImageTransform:
    """Immutable fluent builder around one image source."""

    def __init__(
        self,
        source: Any,
        directives: Optional[TransformDirectives] = None,
        backend: Optional[SurfaceBackend] = None,
        loader: Optional[ImageLoader] = None,
    ):
        """
        Initialize builder.

        Args:
            source: Image descriptor understood by the loader
            directives: Starting directives (default: configured defaults)
            backend: Surface backend (default: configured backend)
            loader: Image loader (default: ImageLoader())
        """
        self._source = source
        self._directives = directives if directives is not None else default_directives()
        self._backend = backend or default_backend()
        self._loader = loader or ImageLoader()

    @property
    def directives(self) -> TransformDirectives:
        return self._directives

    def _with(self, **changes: Any) -> "ImageTransform":
        return ImageTransform(
            self._source, self._directives.with_updates(**changes), self._backend, self._loader
        )

    # ---------- configuration ----------

    def delivery(self, delivery_type: Union[str, DeliveryType]) -> "ImageTransform":
        return self._with(delivery=delivery_type)

    def format(self, media_type: str) -> "ImageTransform":
        return self._with(format=media_type)

    def quality(self, quality: Union[str, float]) -> "ImageTransform":
        return self._with(quality=quality)

    def resize(self, directive: Union[ResizeDirective, Dict[str, Any]]) -> "ImageTransform":
        return self._with(resize=directive)

    def sharpen(self, level: int = 1) -> "ImageTransform":
        """Set sharpening level (0 = none, 1 = normal, 2 = high); clamped to 0..2."""
        return self._with(sharpen=level)

    def algorithm(self, algorithm: Union[str, Algorithm]) -> "ImageTransform":
        return self._with(algorithm=algorithm)

    def rotate(self, degrees: float) -> "ImageTransform":
        """Rotate clockwise by degrees; normalized to [0, 360)."""
        return self._with(rotate=degrees)

    def crop_as(self, shape: Union[CropShape, Dict[str, Any]]) -> "ImageTransform":
        return self._with(crop_shape=shape)

    # ---------- execution ----------

    async def transform(self) -> TransformResult:
        """Load the source and run the pipeline without encoding."""
        source = await self._loader.load(self._source, self._directives.delivery)
        return TransformPipeline(self._backend).run(source, self._directives)

    async def to_url(self) -> str:
        """Transform and return a data URL."""
        result = await self.transform()
        data = await asyncio.to_thread(
            self._backend.encode, result.surface, result.format, result.quality
        )
        return ImageConverters.to_data_url(data, result.format)

    async def to_blob(self, cancel_event: Optional[asyncio.Event] = None) -> EncodedImage:
        """
        Transform and encode.

        Args:
            cancel_event: Optional event; if it fires before encoding
                finishes, CancelledError is raised. It does not interrupt
                the pixel stages.

        Raises:
            LoadError, SurfaceUnavailable, EncodeUnavailable, CancelledError
        """
        result = await self.transform()
        data = await self._encode(result, cancel_event)
        return EncodedImage(data=data, media_type=result.format, width=result.width, height=result.height)

    async def to_buffer(self, cancel_event: Optional[asyncio.Event] = None) -> bytes:
        """Transform and return the raw encoded bytes."""
        blob = await self.to_blob(cancel_event)
        return blob.data

    async def _encode(self, result: TransformResult, cancel_event: Optional[asyncio.Event]) -> bytes:
        encode = asyncio.to_thread(self._backend.encode, result.surface, result.format, result.quality)
        if cancel_event is None:
            return await encode

        if cancel_event.is_set():
            encode.close()
            raise CancelledError()

        encode_task = asyncio.ensure_future(encode)
        cancel_task = asyncio.ensure_future(cancel_event.wait())
        done, _ = await asyncio.wait({encode_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)

        if encode_task in done:
            cancel_task.cancel()
            return encode_task.result()

        encode_task.cancel()
        logger.info("Transform cancelled before encoding finished")
        raise CancelledError()


def image(
    source: Any,
    backend: Optional[SurfaceBackend] = None,
    loader: Optional[ImageLoader] = None,
) -> ImageTransform:
    """
    Create an ImageTransform for a source.

    Args:
        source: Bytes, path, base64/data URL, PIL Image or NumPy array
        backend: Optional surface backend override
        loader: Optional loader override
    """
    return ImageTransform(source, backend=backend, loader=loader)


def configure(
    processor: ImageTransform,
    format: Optional[str] = None,
    quality: Optional[Union[str, float]] = None,
    resize: Optional[Union[ResizeDirective, Dict[str, Any]]] = None,
    sharpen: Optional[int] = None,
    algorithm: Optional[Union[str, Algorithm]] = None,
    rotate: Optional[float] = None,
    crop_shape: Optional[Union[CropShape, Dict[str, Any]]] = None,
) -> ImageTransform:
    """Apply every option that was supplied; None leaves the builder's value."""
    if format:
        processor = processor.format(format)
    if quality is not None:
        processor = processor.quality(quality)
    if resize:
        processor = processor.resize(resize)
    if sharpen is not None:
        processor = processor.sharpen(sharpen)
    if algorithm:
        processor = processor.algorithm(algorithm)
    if rotate is not None:
        processor = processor.rotate(rotate)
    if crop_shape:
        processor = processor.crop_as(crop_shape)
    return processor


async def process_image(
    source: Any,
    cancel_event: Optional[asyncio.Event] = None,
    backend: Optional[SurfaceBackend] = None,
    loader: Optional[ImageLoader] = None,
    **options: Any,
) -> bytes:
    """
    One-shot transform: apply options (see configure) and return encoded bytes.

    String sources are marked with the "fetch" delivery hint.
    """
    processor = image(source, backend=backend, loader=loader)
    if isinstance(source, str):
        processor = processor.delivery(DeliveryType.FETCH)

    processor = configure(processor, **options)
    return await processor.to_buffer(cancel_event=cancel_event)
