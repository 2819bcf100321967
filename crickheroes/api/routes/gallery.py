"""Photo gallery route handlers."""

import asyncio
import logging
from typing import Optional, Dict, Any

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from crickheroes.api.routes import limiter
from crickheroes.database.db import get_db_session
from crickheroes.services import gallery_service, image_service, s3_service
from crickheroes.api.auth_dependencies import get_current_user, ensure_owner_or_admin
from crickheroes.models.schemas import GalleryAddRequest, GalleryLikeRequest, MessageResponse
from crickheroes.utils.exceptions import ClubError, ValidationError, UpstreamFailure, InternalError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/gallery", response_model=Dict[str, Any])
async def list_gallery(session: AsyncSession = Depends(get_db_session)):
    """All gallery images, newest first."""
    try:
        images = await gallery_service.list_gallery(session)
        return {"images": images}
    except Exception as e:
        logger.error(f"Error loading gallery: {e}", exc_info=True)
        raise InternalError("Error loading gallery")


@router.post("/api/gallery/add", response_model=Dict[str, Any], status_code=201)
async def add_to_gallery(
    payload: GalleryAddRequest,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Add an already-hosted image (e.g. a profile photo) to a player's gallery."""
    try:
        ensure_owner_or_admin(current_user, payload.username)
        item = await gallery_service.add_gallery_item(
            session, username=payload.username, image=payload.image, name=payload.name
        )
        return {"message": "Image added to gallery successfully", "image": item}
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error adding image to gallery: {e}", exc_info=True)
        raise InternalError("Error adding image to gallery")


@router.post("/api/gallery/upload", response_model=Dict[str, Any], status_code=201)
@limiter.limit("10/minute")
async def upload_to_gallery(
    request: Request,
    file: UploadFile = File(...),
    username: str = Form(...),
    name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    title: Optional[str] = Form(None),
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Upload a new photo to the gallery.

    Accepts JPEG, PNG or WebP images up to 10MB. The image is
    re-encoded as JPEG and uploaded to S3; only the resulting URL is stored.
    """
    try:
        ensure_owner_or_admin(current_user, username)

        file_bytes = await file.read()
        is_valid, error_msg = image_service.validate_image(file_bytes, file.content_type)
        if not is_valid:
            raise ValidationError(error_msg)

        loop = asyncio.get_event_loop()
        processed_bytes = await loop.run_in_executor(None, image_service.process_image, file_bytes)

        try:
            url = await loop.run_in_executor(
                None, s3_service.upload_gallery_image, username, processed_bytes
            )
        except Exception as e:
            logger.error(f"Gallery upload to S3 failed for {username}: {e}")
            raise UpstreamFailure("Failed to upload image")

        item = await gallery_service.add_gallery_item(
            session,
            username=username,
            image=url,
            name=name,
            category=category or "upload",
            title=title,
        )
        return {"message": "Image uploaded successfully", "image": item}
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error uploading gallery image: {e}", exc_info=True)
        raise InternalError("Error uploading image")


@router.post("/api/gallery/like", response_model=Dict[str, Any])
async def like_image(
    payload: GalleryLikeRequest,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Like a gallery image. Each account can like an image once."""
    try:
        likes = await gallery_service.like_gallery_item(
            session, payload.image_id, current_user["id"]
        )
        return {"message": "Image liked successfully", "likes": likes}
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error liking image {payload.image_id}: {e}", exc_info=True)
        raise InternalError("Error liking image")


@router.delete("/api/gallery/{image_id}", response_model=MessageResponse)
async def delete_image(
    image_id: int,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Delete a gallery image (owner or admin).

    The hosted file is removed best-effort, and only once no other gallery
    item or profile photo refers to it.
    """
    try:
        item = await gallery_service.get_gallery_item(session, image_id)
        ensure_owner_or_admin(current_user, item["username"])

        deleted = await gallery_service.delete_gallery_item(session, image_id)

        if await gallery_service.image_in_use(session, deleted["image"]):
            logger.info(f"Keeping hosted file for gallery item {image_id}; still referenced")
        else:
            loop = asyncio.get_event_loop()
            await loop.run_in_executor(None, s3_service.delete_image, deleted["image"])

        return MessageResponse(message="Image deleted successfully")
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error deleting image {image_id}: {e}", exc_info=True)
        raise InternalError("Error deleting image")
