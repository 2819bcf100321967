"""
Tests for gallery_service: adding, liking and deleting photos.
"""
import pytest

from crickheroes.database.models import Account, GalleryItem
from crickheroes.services import gallery_service
from crickheroes.utils.exceptions import NotFound, ValidationError

IMAGE_URL = "https://crickheroes.s3.ap-south-1.amazonaws.com/gallery/alex-kumar/abc.jpg"


class TestAddGalleryItem:
    @pytest.mark.asyncio
    async def test_add_defaults(self, session):
        item = await gallery_service.add_gallery_item(session, "alex-kumar", IMAGE_URL, name="Alex Kumar")
        assert item["likes"] == 0
        assert item["title"] == "Untitled"
        assert item["category"] == "profile-photo"

    @pytest.mark.asyncio
    async def test_image_required(self, session):
        with pytest.raises(ValidationError) as exc_info:
            await gallery_service.add_gallery_item(session, "alex-kumar", "")
        assert exc_info.value.message == "Image is required"

    @pytest.mark.asyncio
    async def test_duplicate_image_for_same_user_rejected(self, session):
        await gallery_service.add_gallery_item(session, "alex-kumar", IMAGE_URL)
        with pytest.raises(ValidationError) as exc_info:
            await gallery_service.add_gallery_item(session, "alex-kumar", IMAGE_URL)
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_same_image_for_other_user_allowed(self, session):
        await gallery_service.add_gallery_item(session, "alex-kumar", IMAGE_URL)
        await gallery_service.add_gallery_item(session, "priya-sharma", IMAGE_URL)
        assert len(await gallery_service.list_gallery(session)) == 2

    @pytest.mark.asyncio
    async def test_list_newest_first(self, session):
        first = await gallery_service.add_gallery_item(session, "alex-kumar", IMAGE_URL + "?1")
        second = await gallery_service.add_gallery_item(session, "alex-kumar", IMAGE_URL + "?2")
        items = await gallery_service.list_gallery(session)
        assert [i["id"] for i in items] == [second["id"], first["id"]]


class TestLikeGalleryItem:
    @pytest.mark.asyncio
    async def test_like_once_per_account(self, session):
        item = await gallery_service.add_gallery_item(session, "alex-kumar", IMAGE_URL)

        assert await gallery_service.like_gallery_item(session, item["id"], account_id=1) == 1
        with pytest.raises(ValidationError) as exc_info:
            await gallery_service.like_gallery_item(session, item["id"], account_id=1)
        assert exc_info.value.message == "Already liked"
        assert await gallery_service.like_gallery_item(session, item["id"], account_id=2) == 2

    @pytest.mark.asyncio
    async def test_like_unknown_item(self, session):
        with pytest.raises(NotFound):
            await gallery_service.like_gallery_item(session, 999, account_id=1)

    @pytest.mark.asyncio
    async def test_likes_from_stale_sessions_are_not_lost(self, session_maker):
        async with session_maker() as setup:
            item = await gallery_service.add_gallery_item(setup, "alex-kumar", IMAGE_URL)

        async with session_maker() as first, session_maker() as second:
            # Both sessions hold a copy of the item showing zero likes
            assert (await first.get(GalleryItem, item["id"])).likes == 0
            assert (await second.get(GalleryItem, item["id"])).likes == 0

            await gallery_service.like_gallery_item(first, item["id"], account_id=1)
            likes = await gallery_service.like_gallery_item(second, item["id"], account_id=2)

        assert likes == 2


class TestDeleteGalleryItem:
    @pytest.mark.asyncio
    async def test_delete_returns_item_and_removes_likes(self, session):
        item = await gallery_service.add_gallery_item(session, "alex-kumar", IMAGE_URL)
        await gallery_service.like_gallery_item(session, item["id"], account_id=1)

        deleted = await gallery_service.delete_gallery_item(session, item["id"])

        assert deleted["image"] == IMAGE_URL
        assert await gallery_service.list_gallery(session) == []
        with pytest.raises(NotFound):
            await gallery_service.get_gallery_item(session, item["id"])


class TestImageInUse:
    @pytest.mark.asyncio
    async def test_unreferenced_image(self, session):
        assert not await gallery_service.image_in_use(session, IMAGE_URL)

    @pytest.mark.asyncio
    async def test_still_used_by_another_gallery_item(self, session):
        mine = await gallery_service.add_gallery_item(session, "alex-kumar", IMAGE_URL)
        await gallery_service.add_gallery_item(session, "priya-sharma", IMAGE_URL)

        await gallery_service.delete_gallery_item(session, mine["id"])

        assert await gallery_service.image_in_use(session, IMAGE_URL)

    @pytest.mark.asyncio
    async def test_still_used_as_profile_photo(self, session):
        session.add(
            Account(
                name="Alex Kumar",
                username="alex-kumar",
                phone="9876543210",
                password_hash="x",
                image=IMAGE_URL,
            )
        )
        await session.commit()
        item = await gallery_service.add_gallery_item(session, "alex-kumar", IMAGE_URL)

        await gallery_service.delete_gallery_item(session, item["id"])

        assert await gallery_service.image_in_use(session, IMAGE_URL)
