import logging
from typing import List

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile, status
from pydantic import BaseModel

from app.api.deps import get_image_uploads
from app.core.config import settings
from app.core.rate_limit import limiter
from app.core.security import get_current_user_id
from app.schemas.connection import MessageResponse
from app.services.images import ImageUploadService
from app.utils.file_handling import detect_mime_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["Upload"])


class ImageUploadResponse(BaseModel):
    url: str


class ImagesUploadResponse(BaseModel):
    urls: List[str]


async def _read(file: UploadFile):
    """File bytes and the content type sniffed from them; the client's claim is ignored."""
    data = await file.read()
    return data, detect_mime_type(data) if data else (file.content_type or "")


@router.post("/image", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
@limiter.shared_limit(settings.RATE_LIMIT_UPLOADS, scope="uploads")
async def upload_image(
    request: Request,
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    uploads: ImageUploadService = Depends(get_image_uploads)
):
    data, content_type = await _read(file)
    return {"url": await uploads.upload_image(data, content_type, user_id)}


@router.post("/images", response_model=ImagesUploadResponse, status_code=status.HTTP_201_CREATED)
@limiter.shared_limit(settings.RATE_LIMIT_UPLOADS, scope="uploads")
async def upload_images(
    request: Request,
    files: List[UploadFile] = File(...),
    user_id: str = Depends(get_current_user_id),
    uploads: ImageUploadService = Depends(get_image_uploads)
):
    batch = [await _read(file) for file in files]
    return {"urls": await uploads.upload_images(batch, user_id)}


@router.delete("/image", response_model=MessageResponse)
async def delete_image(
    url: str = Query(..., min_length=1),
    user_id: str = Depends(get_current_user_id),
    uploads: ImageUploadService = Depends(get_image_uploads)
):
    await uploads.delete_image(url, user_id)
    return {"message": "Image deleted successfully"}
