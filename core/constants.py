"""
Constants and configuration values for the Pixel Transform service.
Centralizes all magic numbers and configuration constants.
"""


# Transform Constants
class TransformConstants:
    """Constants related to the transform pipeline."""

    # Output defaults
    DEFAULT_FORMAT = "image/jpeg"
    DEFAULT_QUALITY = 0.9

    # Lanczos kernel
    LANCZOS_RADIUS = 3

    # Staged downscale
    MULTISTEP_THRESHOLD = 0.5  # Below this scale factor the shrink is staged
    MULTISTEP_REDUCTION = 0.7  # Each stage keeps 70% of the current size

    # Sharpening
    SHARPEN_MIN_LEVEL = 0
    SHARPEN_MAX_LEVEL = 2
    SHARPEN_INTENSITY_MODERATE = 0.5
    SHARPEN_INTENSITY_STRONG = 1.0

    # Crop shapes
    DEFAULT_CORNER_RADIUS = 10

    # Rotation
    FULL_TURN_DEGREES = 360


# Surface Constants
class SurfaceConstants:
    """Constants for pixel surfaces and encoders."""

    CHANNELS = 4  # RGBA
    TRANSPARENT = (0, 0, 0, 0)

    # Hard allocation limit per axis
    MAX_DIMENSION = 16384

    # Encoder media types -> (OpenCV extension, Pillow format)
    MEDIA_TYPES = {
        "image/jpeg": (".jpg", "JPEG"),
        "image/jpg": (".jpg", "JPEG"),
        "image/png": (".png", "PNG"),
        "image/webp": (".webp", "WEBP"),
        "image/bmp": (".bmp", "BMP"),
    }

    # Formats that cannot carry an alpha channel
    OPAQUE_MEDIA_TYPES = {"image/jpeg", "image/jpg", "image/bmp"}


# API Constants
class APIConstants:
    """Constants for API endpoints."""

    # Request limits
    MAX_REQUEST_IMAGE_MB = 25

    # Status code used for client-side cancellation (nginx convention)
    CLIENT_CLOSED_REQUEST = 499
