"""
Transform API Router - Inline image transforms
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_image_loader, get_surface_backend
from api.exceptions import safe_endpoint
from core.image.converters import ImageConverters
from core.utils.decorators import timer
from schemas import TransformRequest, TransformResponse
from services.image_kit import configure, image

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
@safe_endpoint
async def transform_image(
    request: TransformRequest,
    backend=Depends(get_surface_backend),
    loader=Depends(get_image_loader),
) -> TransformResponse:
    """
    Transform a base64 image.

    Resizes, rotates, crops and sharpens the image according to the request
    and returns the encoded result both as base64 and as a data URL.

    Args:
        request: Image payload plus transform options
        backend: Surface backend dependency
        loader: Image loader dependency

    Returns:
        TransformResponse with the encoded image and its dimensions
    """
    processor = configure(image(request.image_base64, backend=backend, loader=loader), **request.options())

    with timer() as t:
        blob = await processor.to_blob()

    logger.info(
        f"Transform request produced {blob.width}x{blob.height} {blob.media_type} "
        f"({blob.size} bytes) in {t['ms']} ms"
    )

    return TransformResponse(
        image_base64=ImageConverters.to_base64(blob.data),
        data_url=ImageConverters.to_data_url(blob.data, blob.media_type),
        format=blob.media_type,
        width=blob.width,
        height=blob.height,
        size_bytes=blob.size,
        processing_time_ms=t["ms"],
    )
