"""
Gallery service: photo listing, adding, liking and deletion.
"""

import logging
from typing import Optional, Dict, Any, List

from sqlalchemy import exists, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from crickheroes.database.models import Account, GalleryItem, GalleryLike
from crickheroes.utils.exceptions import NotFound, ValidationError

logger = logging.getLogger(__name__)

PROFILE_PHOTO_CATEGORY = "profile-photo"


def _item_to_dict(item: GalleryItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "username": item.username,
        "name": item.name,
        "image": item.image,
        "category": item.category,
        "title": item.title,
        "likes": item.likes or 0,
        "created_at": item.created_at.isoformat() if item.created_at else None,
    }


async def list_gallery(session: AsyncSession) -> List[Dict[str, Any]]:
    """All gallery items, newest first."""
    result = await session.execute(
        select(GalleryItem).order_by(GalleryItem.created_at.desc(), GalleryItem.id.desc())
    )
    return [_item_to_dict(item) for item in result.scalars().all()]


async def get_gallery_item(session: AsyncSession, image_id: int) -> Dict[str, Any]:
    item = await session.get(GalleryItem, image_id)
    if item is None:
        raise NotFound("Image not found")
    return _item_to_dict(item)


async def add_gallery_item(
    session: AsyncSession,
    username: str,
    image: str,
    name: Optional[str] = None,
    category: Optional[str] = PROFILE_PHOTO_CATEGORY,
    title: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Add an already-hosted image to the gallery.

    Raises:
        ValidationError: If the image is missing or the user already has it
    """
    if not image or not image.strip():
        raise ValidationError("Image is required")
    if not username:
        raise ValidationError("Username is required")

    existing = await session.execute(
        select(GalleryItem.id).where(GalleryItem.username == username, GalleryItem.image == image)
    )
    if existing.scalar_one_or_none() is not None:
        raise ValidationError("Image already exists in gallery")

    item = GalleryItem(
        username=username,
        name=name,
        image=image.strip(),
        category=category,
        title=title or "Untitled",
        likes=0,
    )
    session.add(item)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValidationError("Image already exists in gallery")
    await session.refresh(item)
    logger.info(f"Added gallery item {item.id} for {username}")
    return _item_to_dict(item)


async def like_gallery_item(session: AsyncSession, image_id: int, account_id: int) -> int:
    """
    Like a gallery item once per account.

    The like row and the counter increment are committed together; the
    counter is bumped with `likes = likes + 1` so concurrent likes all count.

    Returns:
        The new like count

    Raises:
        NotFound: If the item doesn't exist
        ValidationError: If this account already liked the item
    """
    if await session.get(GalleryItem, image_id) is None:
        raise NotFound("Image not found")

    session.add(GalleryLike(gallery_id=image_id, account_id=account_id))
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ValidationError("Already liked")

    await session.execute(
        update(GalleryItem)
        .where(GalleryItem.id == image_id)
        .values(likes=GalleryItem.likes + 1)
        .execution_options(synchronize_session=False)
    )
    await session.commit()

    likes = await session.execute(select(GalleryItem.likes).where(GalleryItem.id == image_id))
    return likes.scalar_one()


async def delete_gallery_item(session: AsyncSession, image_id: int) -> Dict[str, Any]:
    """
    Delete a gallery item (and its likes).

    Returns:
        The deleted item, so callers can clean up the hosted image
    """
    item = await session.get(GalleryItem, image_id)
    if item is None:
        raise NotFound("Image not found")
    data = _item_to_dict(item)
    await session.delete(item)
    await session.commit()
    logger.info(f"Deleted gallery item {image_id}")
    return data


async def image_in_use(session: AsyncSession, image_url: str) -> bool:
    """True if any gallery item or player profile still points at the image URL."""
    result = await session.execute(
        select(
            or_(
                exists().where(GalleryItem.image == image_url),
                exists().where(Account.image == image_url),
            )
        )
    )
    return bool(result.scalar())
