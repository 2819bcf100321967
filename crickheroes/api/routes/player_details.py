"""Player career statistics route handlers."""

import logging
from typing import List, Dict, Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from crickheroes.database.db import get_db_session
from crickheroes.services import player_service
from crickheroes.api.auth_dependencies import get_current_user, ensure_owner_or_admin
from crickheroes.models.schemas import PlayerDetailsUpdate
from crickheroes.utils.exceptions import ClubError, InternalError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/player-details", response_model=List[Dict[str, Any]])
async def list_player_details(session: AsyncSession = Depends(get_db_session)):
    try:
        return await player_service.list_player_details(session)
    except Exception as e:
        logger.error(f"Error loading player stats: {e}", exc_info=True)
        raise InternalError("Error loading player stats")


@router.get("/api/player-details/{username}", response_model=Dict[str, Any])
async def get_player_details(username: str, session: AsyncSession = Depends(get_db_session)):
    """Stored statistics for a player, or zeroed defaults."""
    try:
        return await player_service.get_player_details(session, username)
    except Exception as e:
        logger.error(f"Error loading stats for {username}: {e}", exc_info=True)
        raise InternalError("Error loading player stats")


@router.put("/api/player-details/{username}", response_model=Dict[str, Any])
async def update_player_details(
    username: str,
    payload: PlayerDetailsUpdate,
    current_user: dict = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Create or update a player's statistics (owner or admin)."""
    try:
        ensure_owner_or_admin(current_user, username)
        return await player_service.upsert_player_details(
            session, username, payload.model_dump(exclude_unset=True)
        )
    except ClubError:
        raise
    except Exception as e:
        logger.error(f"Error updating stats for {username}: {e}", exc_info=True)
        raise InternalError("Error updating player stats")
