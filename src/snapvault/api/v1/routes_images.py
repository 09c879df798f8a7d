"""Gallery API routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from snapvault.core.exceptions import StorageError
from snapvault.models.image import ImageCountResponse, ImagePage
from snapvault.services.listing import ObjectLister
from snapvault.api.v1.dependencies import get_object_lister

router = APIRouter(prefix="/api/v1/images", tags=["images"])
logger = logging.getLogger(__name__)


@router.get("", response_model=ImagePage)
async def list_images(
    cursor: Optional[str] = Query(None),
    lister: ObjectLister = Depends(get_object_lister),
) -> ImagePage:
    """Page through uploaded images for infinite scroll."""
    try:
        return await lister.list_images(cursor)
    except StorageError as e:
        logger.error(f"Failed to list images: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail="Failed to list images")


@router.get("/count", response_model=ImageCountResponse)
async def count_images(lister: ObjectLister = Depends(get_object_lister)) -> ImageCountResponse:
    try:
        return ImageCountResponse(count=await lister.count_images())
    except StorageError as e:
        logger.error(f"Failed to count images: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail="Failed to count images")
