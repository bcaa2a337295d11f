"""
Image endpoints - stand-alone photo uploads and the image registry.
"""

from typing import List, Optional
from fastapi import APIRouter, File, UploadFile

from app.core.errors import ValidationError
from app.models.base import BaseResponse
from app.models.image import ImageAsset
from app.services.image_service import get_image_service

router = APIRouter(prefix="/api", tags=["Images"])


class ImageEnvelope(BaseResponse):
    image: ImageAsset


@router.post("/upload", response_model=ImageEnvelope)
async def upload_image(image: Optional[UploadFile] = File(None)):
    if image is None:
        raise ValidationError("No file uploaded")
    data = await image.read()
    asset = get_image_service().save_image(image.filename or "", image.content_type, data)
    return ImageEnvelope(message="Image uploaded successfully", image=asset)


@router.get("/images", response_model=List[ImageAsset])
async def list_images():
    return get_image_service().list_images()


@router.delete("/images/{image_id}", response_model=BaseResponse)
async def delete_image(image_id: int):
    get_image_service().delete_image(image_id)
    return BaseResponse(message="Image deleted successfully")
