"""
Domain exceptions for the transform pipeline.

Every failure surfaced by a terminal operation derives from TransformError,
so callers can catch the whole family or a single kind.
"""

from typing import Optional


class TransformError(Exception):
    """Base class for all transform failures."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class LoadError(TransformError):
    """Source image could not be read or decoded."""


class SurfaceUnavailable(TransformError):
    """No drawable surface backend is available, or allocation failed."""


class EncodeUnavailable(TransformError):
    """The backend has no encoder for the requested output format."""

    def __init__(self, media_type: str, detail: Optional[str] = None):
        super().__init__(f"No encoder available for format: {media_type}", detail)
        self.media_type = media_type


class CancelledError(TransformError):
    """The caller aborted the operation before encoding finished."""

    def __init__(self, message: str = "Operation aborted"):
        super().__init__(message)
