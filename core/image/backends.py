"""
Surface backends - the drawing capability used by every pipeline stage.

A backend allocates surfaces, blits (optionally scaled or affine-transformed)
one raster onto another, exposes raw pixel access, rasterizes clip paths and
encodes the final surface. Two implementations are provided:

- OpenCVBackend: cv2.resize / cv2.warpAffine / cv2.imencode
- PillowBackend: Image.resize / Image.transform / Image.save

The backend is chosen once (see get_backend) and handed to the pipeline;
capabilities such as smoothing support are class attributes, never probed
per call.
"""

import io
import logging
from abc import ABC, abstractmethod
from typing import Optional, Union

import cv2
import numpy as np
from PIL import Image, ImageDraw

from core.constants import SurfaceConstants
from core.enums import BackendType, CropShapeType
from core.exceptions import EncodeUnavailable, SurfaceUnavailable
from core.image.converters import ImageConverters
from core.image.surface import ClipPath, Drawable, PixelSurface, Rect

logger = logging.getLogger(__name__)


def extract_region(pixels: np.ndarray, x: int, y: int, width: int, height: int) -> np.ndarray:
    """
    Cut a (height, width) window out of an RGBA raster.

    Parts of the window that fall outside the raster are transparent.
    """
    img_height, img_width = pixels.shape[:2]
    if x >= 0 and y >= 0 and x + width <= img_width and y + height <= img_height:
        return pixels[y : y + height, x : x + width]

    region = np.zeros((height, width, SurfaceConstants.CHANNELS), dtype=np.uint8)
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + width, img_width), min(y + height, img_height)
    if x1 > x0 and y1 > y0:
        region[y0 - y : y1 - y, x0 - x : x1 - x] = pixels[y0:y1, x0:x1]
    return region


def premultiply(pixels: np.ndarray) -> np.ndarray:
    """Float32 copy of an RGBA raster with color scaled by alpha."""
    premul = pixels.astype(np.float32)
    premul[..., :3] *= premul[..., 3:4] / 255.0
    return premul


def unpremultiply(premul: np.ndarray) -> np.ndarray:
    """Inverse of premultiply; fully transparent pixels come out (0, 0, 0, 0)."""
    alpha = premul[..., 3:4]
    with np.errstate(divide="ignore", invalid="ignore"):
        rgb = np.where(alpha >= 0.5, premul[..., :3] * 255.0 / alpha, 0.0)
    out = np.concatenate([rgb, alpha], axis=2)
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


def to_index_space(matrix: np.ndarray) -> np.ndarray:
    """
    Convert a 2x3 canvas-space affine matrix to pixel-index space.

    Canvas coordinates put pixel centers at +0.5; OpenCV puts them on
    integer coordinates.
    """
    forward = np.vstack([np.asarray(matrix, dtype=np.float64), [0.0, 0.0, 1.0]])
    to_canvas = np.array([[1.0, 0.0, 0.5], [0.0, 1.0, 0.5], [0.0, 0.0, 1.0]])
    to_index = np.array([[1.0, 0.0, -0.5], [0.0, 1.0, -0.5], [0.0, 0.0, 1.0]])
    return (to_index @ forward @ to_canvas)[:2]


class SurfaceBackend(ABC):
    """Capability interface for surface allocation, blitting, pixel access and encoding."""

    name: str = ""
    supports_smoothing: bool = False

    def __init__(self, max_dimension: int = SurfaceConstants.MAX_DIMENSION):
        """
        Initialize backend.

        Args:
            max_dimension: Largest width or height create() will allocate
        """
        self.max_dimension = max_dimension

    # ---------- allocation ----------

    def create(self, width: Union[int, float], height: Union[int, float]) -> PixelSurface:
        """
        Allocate a transparent surface.

        Raises:
            SurfaceUnavailable: If the size is not drawable or allocation fails
        """
        width, height = int(width), int(height)
        if width < 1 or height < 1:
            raise SurfaceUnavailable(f"Cannot allocate a {width}x{height} surface")
        if width > self.max_dimension or height > self.max_dimension:
            raise SurfaceUnavailable(
                f"Surface {width}x{height} exceeds the {self.max_dimension}px limit"
            )

        try:
            pixels = np.zeros((height, width, SurfaceConstants.CHANNELS), dtype=np.uint8)
        except MemoryError as e:
            logger.error(f"Failed to allocate {width}x{height} surface: {e}")
            raise SurfaceUnavailable(f"Out of memory allocating {width}x{height} surface") from e

        return PixelSurface(pixels)

    # ---------- drawing ----------

    def draw(
        self,
        dest: PixelSurface,
        source: Drawable,
        src_rect: Optional[Rect] = None,
        dest_rect: Optional[Rect] = None,
        smoothing: bool = False,
    ) -> None:
        """
        Blit source (or a region of it) into dest, scaling to dest_rect.

        Args:
            dest: Target surface (respects its clip mask)
            source: Source image or surface
            src_rect: Region of source to sample (default: all of it)
            dest_rect: Region of dest to fill (default: src_rect size at origin)
            smoothing: Request high-quality interpolation when supported
        """
        src_rect = src_rect or Rect.of(source)
        dest_rect = dest_rect or Rect(0, 0, src_rect.width, src_rect.height)

        sx, sy, sw, sh = src_rect.rounded()
        dx, dy, dw, dh = dest_rect.rounded()
        if min(sw, sh, dw, dh) <= 0:
            return

        region = extract_region(source.pixels, sx, sy, sw, sh)
        if (sw, sh) != (dw, dh):
            region = self._resize(region, dw, dh, smoothing and self.supports_smoothing)

        self._composite(dest, region, dx, dy)

    def draw_affine(
        self, dest: PixelSurface, source: Drawable, matrix: np.ndarray
    ) -> None:
        """
        Draw source through a 2x3 affine matrix given in canvas coordinates.

        Samples that map outside the source are transparent.
        """
        warped = self._warp_affine(source.pixels, np.asarray(matrix, dtype=np.float64), dest.width, dest.height)
        self._composite(dest, warped, 0, 0)

    def clip(self, surface: PixelSurface, path: ClipPath) -> None:
        """Restrict subsequent draws on surface to the given path."""
        mask = self._render_mask(path, surface.width, surface.height)
        if surface.clip_mask is None:
            surface.clip_mask = mask
        else:
            surface.clip_mask = surface.clip_mask * mask

    # ---------- raw pixel access ----------

    def get_pixels(self, surface: Drawable, rect: Optional[Rect] = None) -> np.ndarray:
        """Return a copy of the RGBA pixels inside rect (default: whole surface)."""
        x, y, w, h = (rect or Rect.of(surface)).rounded()
        return np.array(extract_region(surface.pixels, x, y, w, h), copy=True)

    def put_pixels(self, surface: PixelSurface, pixels: np.ndarray, rect: Optional[Rect] = None) -> None:
        """Write raw RGBA pixels into surface at rect's origin, ignoring the clip mask."""
        x, y = (0, 0) if rect is None else rect.rounded()[:2]
        h, w = pixels.shape[:2]
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + w, surface.width), min(y + h, surface.height)
        if x1 <= x0 or y1 <= y0:
            return
        surface.pixels[y0:y1, x0:x1] = pixels[y0 - y : y1 - y, x0 - x : x1 - x]

    # ---------- encoding ----------

    def encode(self, surface: PixelSurface, media_type: str, quality: float) -> bytes:
        """
        Compress surface into the requested media type.

        Args:
            surface: Final surface
            media_type: e.g. "image/jpeg", "image/png", "image/webp"
            quality: 0-1, used by lossy formats

        Raises:
            EncodeUnavailable: If the format is unknown or the encoder fails
        """
        key = media_type.lower()
        if key not in SurfaceConstants.MEDIA_TYPES:
            raise EncodeUnavailable(media_type)

        opaque = key in SurfaceConstants.OPAQUE_MEDIA_TYPES
        return self._encode(surface.pixels, key, opaque, quality)

    # ---------- shared compositing ----------

    @staticmethod
    def _composite(dest: PixelSurface, region: np.ndarray, x: int, y: int) -> None:
        """Source-over blend region onto dest at (x, y), masked by dest.clip_mask."""
        h, w = region.shape[:2]
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + w, dest.width), min(y + h, dest.height)
        if x1 <= x0 or y1 <= y0:
            return

        src = region[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
        dst = dest.pixels[y0:y1, x0:x1].astype(np.float32) / 255.0

        src_a = src[..., 3:4]
        if dest.clip_mask is not None:
            src_a = src_a * dest.clip_mask[y0:y1, x0:x1, None]
        dst_a = dst[..., 3:4]

        out_a = src_a + dst_a * (1.0 - src_a)
        premul = src[..., :3] * src_a + dst[..., :3] * dst_a * (1.0 - src_a)
        with np.errstate(divide="ignore", invalid="ignore"):
            out_rgb = np.where(out_a > 0, premul / out_a, 0.0)

        out = np.concatenate([out_rgb, out_a], axis=2)
        dest.pixels[y0:y1, x0:x1] = np.clip(np.rint(out * 255.0), 0, 255).astype(np.uint8)

    # ---------- backend specific ----------

    @abstractmethod
    def _resize(self, pixels: np.ndarray, width: int, height: int, smoothing: bool) -> np.ndarray:
        """Scale an RGBA raster to (width, height)."""

    @abstractmethod
    def _warp_affine(self, pixels: np.ndarray, matrix: np.ndarray, width: int, height: int) -> np.ndarray:
        """Apply a canvas-space affine matrix, producing a (height, width) raster."""

    @abstractmethod
    def _render_mask(self, path: ClipPath, width: int, height: int) -> np.ndarray:
        """Rasterize path into a float32 coverage mask of shape (height, width)."""

    @abstractmethod
    def _encode(self, pixels: np.ndarray, media_type: str, opaque: bool, quality: float) -> bytes:
        """Encode an RGBA raster."""


class OpenCVBackend(SurfaceBackend):
    """Surface backend built on OpenCV."""

    name = BackendType.OPENCV.value
    supports_smoothing = True

    def _resize(self, pixels, width, height, smoothing):
        if smoothing:
            shrinking = width < pixels.shape[1] or height < pixels.shape[0]
            interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_CUBIC
        else:
            interpolation = cv2.INTER_LINEAR
        # interpolation runs on premultiplied color
        resized = cv2.resize(premultiply(pixels), (width, height), interpolation=interpolation)
        return unpremultiply(np.clip(resized, 0.0, 255.0))

    def _warp_affine(self, pixels, matrix, width, height):
        warped = cv2.warpAffine(
            premultiply(pixels),
            to_index_space(matrix),
            (width, height),
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=SurfaceConstants.TRANSPARENT,
        )
        return unpremultiply(warped)

    def _render_mask(self, path, width, height):
        shift = 4  # 4 fractional bits for sub-pixel centers
        scale = 1 << shift
        mask = np.zeros((height, width), dtype=np.uint8)

        if path.shape == CropShapeType.CIRCLE:
            radius = min(path.width, path.height) / 2
            center = (
                int(round((path.width / 2 - 0.5) * scale)),
                int(round((path.height / 2 - 0.5) * scale)),
            )
            cv2.circle(mask, center, int(round(radius * scale)), 255, -1, cv2.LINE_AA, shift)

        elif path.shape == CropShapeType.ROUNDED_RECT and path.radius > 0:
            w, h = int(round(path.width)), int(round(path.height))
            r = int(round(path.radius))
            cv2.rectangle(mask, (r, 0), (w - 1 - r, h - 1), 255, -1)
            cv2.rectangle(mask, (0, r), (w - 1, h - 1 - r), 255, -1)
            for cx, cy in ((r, r), (w - 1 - r, r), (r, h - 1 - r), (w - 1 - r, h - 1 - r)):
                cv2.circle(mask, (cx, cy), r, 255, -1, cv2.LINE_AA)

        else:
            w, h = int(round(path.width)), int(round(path.height))
            mask[:h, :w] = 255

        return mask.astype(np.float32) / 255.0

    def _encode(self, pixels, media_type, opaque, quality):
        extension = SurfaceConstants.MEDIA_TYPES[media_type][0]
        code = cv2.COLOR_RGBA2BGR if opaque else cv2.COLOR_RGBA2BGRA
        params = []
        if extension == ".jpg":
            params = [cv2.IMWRITE_JPEG_QUALITY, int(round(quality * 100))]
        elif extension == ".webp":
            params = [cv2.IMWRITE_WEBP_QUALITY, max(1, int(round(quality * 100)))]

        try:
            success, buffer = cv2.imencode(extension, cv2.cvtColor(pixels, code), params)
        except cv2.error as e:
            logger.error(f"OpenCV failed to encode {media_type}: {e}")
            raise EncodeUnavailable(media_type, str(e)) from e

        if not success:
            raise EncodeUnavailable(media_type)
        return buffer.tobytes()


class PillowBackend(SurfaceBackend):
    """Surface backend built on Pillow."""

    name = BackendType.PILLOW.value
    supports_smoothing = True

    def _resize(self, pixels, width, height, smoothing):
        resample = Image.Resampling.BICUBIC if smoothing else Image.Resampling.BILINEAR
        resized = ImageConverters.rgba_to_pil(pixels).resize((width, height), resample)
        return np.asarray(resized, dtype=np.uint8)

    def _warp_affine(self, pixels, matrix, width, height):
        # Pillow maps output -> input and already samples at pixel centers
        forward = np.vstack([matrix, [0.0, 0.0, 1.0]])
        inverse = np.linalg.inv(forward)[:2].flatten()
        warped = ImageConverters.rgba_to_pil(pixels).transform(
            (width, height),
            Image.Transform.AFFINE,
            data=tuple(float(v) for v in inverse),
            resample=Image.Resampling.BILINEAR,
            fillcolor=SurfaceConstants.TRANSPARENT,
        )
        return np.asarray(warped, dtype=np.uint8)

    def _render_mask(self, path, width, height):
        mask = Image.new("L", (width, height), 0)
        draw = ImageDraw.Draw(mask)
        right, bottom = path.width - 1, path.height - 1

        if path.shape == CropShapeType.CIRCLE:
            radius = min(path.width, path.height) / 2
            cx, cy = path.width / 2, path.height / 2
            draw.ellipse([cx - radius, cy - radius, cx + radius - 1, cy + radius - 1], fill=255)
        elif path.shape == CropShapeType.ROUNDED_RECT and path.radius > 0:
            draw.rounded_rectangle([0, 0, right, bottom], radius=int(round(path.radius)), fill=255)
        else:
            draw.rectangle([0, 0, right, bottom], fill=255)

        return np.asarray(mask, dtype=np.float32) / 255.0

    def _encode(self, pixels, media_type, opaque, quality):
        image_format = SurfaceConstants.MEDIA_TYPES[media_type][1]
        image = ImageConverters.rgba_to_pil(pixels)
        if opaque:
            image = image.convert("RGB")

        save_kwargs = {"format": image_format}
        if image_format in ("JPEG", "WEBP"):
            save_kwargs["quality"] = int(round(quality * 100))
        if image_format == "JPEG":
            save_kwargs["optimize"] = True

        buffer = io.BytesIO()
        try:
            image.save(buffer, **save_kwargs)
        except (KeyError, OSError, ValueError) as e:
            logger.error(f"Pillow failed to encode {media_type}: {e}")
            raise EncodeUnavailable(media_type, str(e)) from e
        return buffer.getvalue()


_BACKENDS = {
    BackendType.OPENCV: OpenCVBackend,
    BackendType.PILLOW: PillowBackend,
}


def get_backend(
    name: Union[str, BackendType] = BackendType.OPENCV,
    max_dimension: int = SurfaceConstants.MAX_DIMENSION,
) -> SurfaceBackend:
    """
    Resolve a surface backend by name.

    Raises:
        SurfaceUnavailable: If no backend with that name exists
    """
    try:
        backend_type = BackendType(name.lower() if isinstance(name, str) else name)
    except ValueError:
        raise SurfaceUnavailable(f"Unknown surface backend: {name}") from None

    backend = _BACKENDS[backend_type](max_dimension=max_dimension)
    logger.info(f"Using {backend.name} surface backend")
    return backend
