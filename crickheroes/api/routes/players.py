"""Player roster, moderation, likes and self-service profile route handlers."""

import logging
from typing import Optional, List, Dict, Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from crickheroes.database.db import get_db_session
from crickheroes.services import player_service
from crickheroes.api.auth_dependencies import get_current_user, require_admin, ensure_owner_or_admin
from crickheroes.models.schemas import (
    PlayerIdRequest,
    PlayerLikeRequest,
    PlayerLikeResponse,
    UpdateAgeRequest,
    UpdateImageRequest,
    MessageResponse,
)
from crickheroes.utils.exceptions import ClubError, InternalError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/players", response_model=List[Dict[str, Any]])
async def list_players(
    status: Optional[str] = None, session: AsyncSession = Depends(get_db_session)
):
    """List players, optionally filtered by status (pending / approved)."""
    try:
        return await player_service.list_players(session, status=status)
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error loading players: {e}", exc_info=True)
        raise InternalError("Error loading players")


@router.get("/api/players/by-phone/{phone}", response_model=Dict[str, Any])
async def get_player_by_phone(phone: str, session: AsyncSession = Depends(get_db_session)):
    return await player_service.get_player_by_phone(session, phone.strip())


@router.post("/api/players/approve", response_model=MessageResponse)
async def approve_player(
    payload: PlayerIdRequest,
    admin: dict = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    """Approve a pending registration (admin only)."""
    try:
        await player_service.approve_player(session, payload.player_id)
        return MessageResponse(message="Player approved successfully")
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error approving player {payload.player_id}: {e}", exc_info=True)
        raise InternalError("Error approving player")


@router.post("/api/players/reject", response_model=MessageResponse)
async def reject_player(
    payload: PlayerIdRequest,
    admin: dict = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    """Reject (delete) a registration that is still pending (admin only)."""
    try:
        await player_service.reject_player(session, payload.player_id)
        return MessageResponse(message="Player rejected successfully")
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error rejecting player {payload.player_id}: {e}", exc_info=True)
        raise InternalError("Error rejecting player")


@router.post("/api/players/update-age", response_model=Dict[str, Any])
async def update_age(
    payload: UpdateAgeRequest,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Update a player's age. Only the player themselves or an admin may do this."""
    try:
        ensure_owner_or_admin(current_user, payload.username)
        age = await player_service.update_player_age(session, payload.username, payload.age)
        return {"message": "Age updated successfully", "age": age}
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error updating age for {payload.username}: {e}", exc_info=True)
        raise InternalError("Error updating age")


@router.post("/api/players/update-image", response_model=MessageResponse)
async def update_image(
    payload: UpdateImageRequest,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        ensure_owner_or_admin(current_user, payload.username)
        await player_service.update_player_image(session, payload.username, payload.image)
        return MessageResponse(message="Profile image updated successfully")
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error updating image for {payload.username}: {e}", exc_info=True)
        raise InternalError("Error updating profile image")


@router.post("/api/players/{username}/like", response_model=PlayerLikeResponse)
async def like_player(
    username: str, payload: PlayerLikeRequest, session: AsyncSession = Depends(get_db_session)
):
    """Like (liked=true) or unlike (liked=false) a player profile."""
    try:
        likes = await player_service.update_player_likes(session, username, payload.liked)
        return PlayerLikeResponse(message="Likes updated successfully", likes=likes)
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error updating likes for {username}: {e}", exc_info=True)
        raise InternalError("Error updating likes")


@router.get("/api/players/{id_or_username}", response_model=Dict[str, Any])
async def get_player(id_or_username: str, session: AsyncSession = Depends(get_db_session)):
    """Get a player by numeric id or username."""
    return await player_service.get_player(session, id_or_username)


@router.delete("/api/players/{player_id}", response_model=MessageResponse)
async def delete_player(
    player_id: int,
    admin: dict = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    try:
        await player_service.delete_player(session, player_id)
        return MessageResponse(message="Player deleted successfully")
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error deleting player {player_id}: {e}", exc_info=True)
        raise InternalError("Error deleting player")
